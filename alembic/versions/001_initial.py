"""Initial FUELPOOL schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

Creates api_keys, routes, ship_compliance, bank_entries, pools and
pool_members.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "api_keys",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("key_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("last_used_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
    )
    op.create_index("ix_api_keys_key_hash", "api_keys", ["key_hash"], unique=True)
    op.create_index("ix_api_keys_is_active", "api_keys", ["is_active"])

    op.create_table(
        "routes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("route_id", sa.String(50), nullable=False, unique=True),
        sa.Column("vessel_type", sa.String(100), nullable=False),
        sa.Column("fuel_type", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        # gCO2eq/MJ
        sa.Column("ghg_intensity", sa.Float(), nullable=False),
        # t, km, t
        sa.Column("fuel_consumption", sa.Float(), nullable=False),
        sa.Column("distance", sa.Float(), nullable=False),
        sa.Column("total_emissions", sa.Float(), nullable=False),
        sa.Column("is_baseline", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_routes_year", "routes", ["year"])

    op.create_table(
        "ship_compliance",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ship_id", sa.String(50), nullable=False),
        sa.Column("route_id", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("cb_gco2eq", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.UniqueConstraint("ship_id", "year", name="uq_ship_compliance_ship_year"),
    )
    op.create_index("ix_ship_compliance_year", "ship_compliance", ["year"])

    op.create_table(
        "bank_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ship_id", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        # positive=banked, negative=applied
        sa.Column("amount_gco2eq", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_bank_entries_ship_year", "bank_entries", ["ship_id", "year"])

    op.create_table(
        "pools",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_pools_year", "pools", ["year"])

    op.create_table(
        "pool_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("pool_id", sa.Integer(), sa.ForeignKey("pools.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ship_id", sa.String(50), nullable=False),
        sa.Column("cb_before", sa.Float(), nullable=False),
        sa.Column("cb_after", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_pool_members_pool_id", "pool_members", ["pool_id"])


def downgrade() -> None:
    op.drop_index("ix_pool_members_pool_id", table_name="pool_members")
    op.drop_table("pool_members")
    op.drop_index("ix_pools_year", table_name="pools")
    op.drop_table("pools")
    op.drop_index("ix_bank_entries_ship_year", table_name="bank_entries")
    op.drop_table("bank_entries")
    op.drop_index("ix_ship_compliance_year", table_name="ship_compliance")
    op.drop_table("ship_compliance")
    op.drop_index("ix_routes_year", table_name="routes")
    op.drop_table("routes")
    op.drop_index("ix_api_keys_is_active", table_name="api_keys")
    op.drop_index("ix_api_keys_key_hash", table_name="api_keys")
    op.drop_table("api_keys")
