#!/usr/bin/env python3
"""
FUELPOOL API CLI Tool.

Command-line interface for administrative tasks:
- Database operations (init, seed)
- API key management (create, list, revoke)
- Banking ledger inspection
- Pool creation from current balances
- Health checks

Usage:
    python -m api.cli init-db
    python -m api.cli seed
    python -m api.cli create-api-key --name "My App"
    python -m api.cli show-ledger --ship SHIP002 --year 2024
    python -m api.cli create-sample-pool --year 2025 --member A=-150 --member B=220.8
    python -m api.cli check-health
"""
import argparse
import sys
from datetime import datetime, timedelta, timezone
from typing import List, Optional


def init_db() -> None:
    """Initialize the database."""
    from api.database import init_db as do_init

    print("Initializing database...")
    do_init()
    print("Database initialized successfully.")


def seed() -> None:
    """Insert sample routes and compliance records."""
    from api.database import get_db_context
    from api.seed import seed_database

    with get_db_context() as db:
        counts = seed_database(db)

    if counts["routes"] == 0:
        print("\nDatabase already seeded. Skipping.")
    else:
        print(f"\nInserted {counts['routes']} routes and "
              f"{counts['compliance_records']} compliance records.")


def create_api_key(name: str, expires_days: Optional[int] = None) -> None:
    """Create a new API key."""
    from api.database import get_db_context
    from api.auth import create_api_key_in_db

    expires_at = None
    if expires_days:
        expires_at = datetime.now(timezone.utc) + timedelta(days=expires_days)

    with get_db_context() as db:
        plain_key, api_key_obj = create_api_key_in_db(
            db=db,
            name=name,
            expires_at=expires_at,
        )
        key_id = api_key_obj.id

    print("\n" + "=" * 60)
    print("API KEY CREATED SUCCESSFULLY")
    print("=" * 60)
    print(f"\nName: {name}")
    print(f"Key ID: {key_id}")
    if expires_at:
        print(f"Expires: {expires_at.isoformat()}")
    else:
        print("Expires: Never")
    print(f"\n{'*' * 60}")
    print(f"API KEY: {plain_key}")
    print(f"{'*' * 60}")
    print("\nSAVE THIS KEY NOW - IT CANNOT BE RETRIEVED LATER!")
    print("=" * 60 + "\n")


def list_api_keys() -> None:
    """List all API keys."""
    from api.database import get_db_context
    from api.models import APIKey

    with get_db_context() as db:
        keys = db.query(APIKey).order_by(APIKey.created_at.desc()).all()
        rows = [
            (
                str(key.id),
                key.name[:18],
                "Yes" if key.is_active else "No",
                key.last_used_at.strftime("%Y-%m-%d %H:%M") if key.last_used_at else "Never",
            )
            for key in keys
        ]

    if not rows:
        print("\nNo API keys found.")
        return

    print("\n" + "=" * 80)
    print("API KEYS")
    print("=" * 80)
    print(f"{'ID':<36} {'Name':<20} {'Active':<8} {'Last Used':<20}")
    print("-" * 80)
    for key_id, name, active, last_used in rows:
        print(f"{key_id:<36} {name:<20} {active:<8} {last_used:<20}")
    print("=" * 80)
    print(f"Total: {len(rows)} key(s)\n")


def revoke_api_key(key_id: str) -> None:
    """Revoke an API key."""
    from api.database import get_db_context
    from api.auth import revoke_api_key as revoke_key

    with get_db_context() as db:
        success = revoke_key(db, key_id)

    if success:
        print(f"\nAPI key {key_id} has been revoked.")
    else:
        print(f"\nError: API key {key_id} not found.")
        sys.exit(1)


def show_ledger(ship_id: str, year: int) -> None:
    """Print a ship-year's balance and banking history."""
    from api.database import get_db_context
    from api.store import SqlRecordStore
    from src.compliance.banking import ComplianceLedger
    from src.compliance.errors import ComplianceError

    with get_db_context() as db:
        ledger = ComplianceLedger(SqlRecordStore(db))
        try:
            balance = ledger.get_balance(ship_id, year)
        except ComplianceError as e:
            print(f"\nError: {e.message}")
            sys.exit(1)
        entries = [
            (e.created_at.strftime("%Y-%m-%d %H:%M:%S"), e.amount_gco2eq)
            for e in ledger.get_records(ship_id, year)
        ]

    print("\n" + "=" * 60)
    print(f"LEDGER {ship_id} / {year}")
    print("=" * 60)
    print(f"Compliance balance: {balance.cb_gco2eq:>14.4f} t CO2eq")
    print(f"Banked (net):       {balance.banked_amount:>14.4f} t CO2eq")
    print(f"Adjusted balance:   {balance.adjusted_cb:>14.4f} t CO2eq")
    print("-" * 60)
    if not entries:
        print("No ledger entries.")
    for created_at, amount in entries:
        kind = "bank" if amount > 0 else "apply"
        print(f"{created_at:<22} {kind:<8} {amount:>14.4f}")
    print("=" * 60 + "\n")


def _parse_member(value: str):
    ship_id, sep, cb = value.partition("=")
    if not sep or not ship_id:
        raise argparse.ArgumentTypeError(f"Expected SHIP=CB, got {value!r}")
    try:
        return ship_id, float(cb)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid balance in {value!r}")


def create_sample_pool(year: int, members: Optional[List[tuple]] = None) -> None:
    """
    Create a pool for ``year``.

    Without explicit members, every ship with a compliance record for the
    year joins with its current adjusted balance.
    """
    from api.database import get_db_context
    from api.store import SqlRecordStore
    from src.compliance.banking import ComplianceLedger
    from src.compliance.errors import ComplianceError
    from src.compliance.pooling import PoolMemberInput, submit_pool

    with get_db_context() as db:
        store = SqlRecordStore(db)
        if members:
            proposal = [PoolMemberInput(ship_id=s, cb_before=cb) for s, cb in members]
        else:
            proposal = [
                PoolMemberInput(ship_id=b.ship_id, cb_before=b.adjusted_cb)
                for b in ComplianceLedger(store).list_balances(year)
            ]
        try:
            record = submit_pool(store, year, proposal)
        except ComplianceError as e:
            print(f"\nPool rejected ({e.kind}): {e.message}")
            if e.ship_id:
                print(f"Ship: {e.ship_id}")
            sys.exit(1)

    print("\n" + "=" * 60)
    print(f"POOL {record.pool_id} / {record.year}")
    print("=" * 60)
    print(f"{'Ship':<20} {'CB before':>16} {'CB after':>16}")
    print("-" * 60)
    for m in record.members:
        print(f"{m.ship_id:<20} {m.cb_before:>16.4f} {m.cb_after:>16.4f}")
    print("=" * 60 + "\n")


def check_health(base_url: str = "http://localhost:8000") -> None:
    """Check API health."""
    import requests

    url = f"{base_url.rstrip('/')}/api/health"
    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            data = response.json()
            print(f"\nAPI Status: {data.get('status', 'unknown')}")
            print(f"Version: {data.get('version', 'unknown')}")
            print(f"Timestamp: {data.get('timestamp', 'unknown')}")
        else:
            print(f"\nAPI returned status code: {response.status_code}")
            sys.exit(1)
    except requests.exceptions.ConnectionError:
        print("\nError: Could not connect to API. Is the server running?")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        print(f"\nError: {e}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FUELPOOL API CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Initialize and seed the database:
    python -m api.cli init-db
    python -m api.cli seed

  Create an API key that expires in 90 days:
    python -m api.cli create-api-key --name "Trial Key" --expires-days 90

  Revoke an API key:
    python -m api.cli revoke-api-key --id 12345678-1234-1234-1234-123456789abc

  Inspect a ship's banking ledger:
    python -m api.cli show-ledger --ship SHIP002 --year 2024

  Pool every ship of 2025 with its adjusted balance:
    python -m api.cli create-sample-pool --year 2025
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Initialize the database")
    subparsers.add_parser("seed", help="Insert sample routes and compliance records")

    create_parser = subparsers.add_parser("create-api-key", help="Create a new API key")
    create_parser.add_argument("--name", required=True, help="Name for the API key")
    create_parser.add_argument(
        "--expires-days",
        type=int,
        help="Number of days until expiration (default: never)"
    )

    subparsers.add_parser("list-api-keys", help="List all API keys")

    revoke_parser = subparsers.add_parser("revoke-api-key", help="Revoke an API key")
    revoke_parser.add_argument("--id", required=True, help="UUID of the API key to revoke")

    ledger_parser = subparsers.add_parser("show-ledger", help="Show a ship's banking ledger")
    ledger_parser.add_argument("--ship", required=True, help="Ship ID")
    ledger_parser.add_argument("--year", type=int, required=True, help="Reporting year")

    pool_parser = subparsers.add_parser("create-sample-pool", help="Create a pool")
    pool_parser.add_argument("--year", type=int, required=True, help="Reporting year")
    pool_parser.add_argument(
        "--member",
        type=_parse_member,
        action="append",
        help="Pool member as SHIP=CB (repeatable; default: all ships of the year)"
    )

    health_parser = subparsers.add_parser("check-health", help="Check API health")
    health_parser.add_argument("--url", default="http://localhost:8000", help="API base URL")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init-db":
        init_db()
    elif args.command == "seed":
        seed()
    elif args.command == "create-api-key":
        create_api_key(args.name, args.expires_days)
    elif args.command == "list-api-keys":
        list_api_keys()
    elif args.command == "revoke-api-key":
        revoke_api_key(args.id)
    elif args.command == "show-ledger":
        show_ledger(args.ship, args.year)
    elif args.command == "create-sample-pool":
        create_sample_pool(args.year, args.member)
    elif args.command == "check-health":
        check_health(args.url)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
