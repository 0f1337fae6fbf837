"""
API key authentication for FUELPOOL write endpoints.

Keys are stored as bcrypt hashes; the plain key is shown once at creation.
"""
from fastapi import HTTPException, Security, status, Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional, Tuple
import bcrypt
import secrets
import logging
import uuid

from api.database import get_db
from api.models import APIKey
from api.config import settings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(
    name=settings.api_key_header,
    auto_error=False
)


def generate_api_key() -> str:
    """Random URL-safe key (32 bytes of entropy)."""
    return secrets.token_urlsafe(32)


def hash_api_key(api_key: str) -> str:
    return bcrypt.hashpw(
        api_key.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    ).decode("utf-8")


def verify_api_key(plain_key: str, hashed_key: str) -> bool:
    """Check a plain key against a stored hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(plain_key.encode("utf-8"), hashed_key.encode("utf-8"))
    except ValueError as e:
        logger.error(f"API key verification error: {e}")
        return False


async def get_api_key(
    api_key: str = Security(api_key_header),
    db: Session = Depends(get_db)
) -> Optional[APIKey]:
    """
    FastAPI dependency guarding ledger and pool writes.

    Returns None when authentication is disabled.

    Raises:
        HTTPException: 401 if the key is missing, unknown or expired
    """
    if not settings.auth_enabled:
        return None

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is required",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    active_keys = db.query(APIKey).filter(APIKey.is_active.is_(True)).all()

    for key_obj in active_keys:
        if not verify_api_key(api_key, key_obj.key_hash):
            continue
        if key_obj.expires_at and key_obj.expires_at < datetime.utcnow():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="API key has expired",
            )
        key_obj.last_used_at = datetime.utcnow()
        db.flush()
        logger.debug(f"API key authenticated: {key_obj.name}")
        return key_obj

    logger.warning("Invalid API key attempted")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
    )


def create_api_key_in_db(
    db: Session,
    name: str,
    expires_at: Optional[datetime] = None,
) -> Tuple[str, APIKey]:
    """
    Create and store a new API key.

    Returns:
        tuple: (plain_text_key, api_key_model); the plain key is not stored
    """
    plain_key = generate_api_key()
    api_key_obj = APIKey(
        key_hash=hash_api_key(plain_key),
        name=name,
        expires_at=expires_at,
        extra_metadata={},
    )

    db.add(api_key_obj)
    db.flush()

    logger.info(f"Created API key: {name}")
    return plain_key, api_key_obj


def revoke_api_key(db: Session, key_id: str) -> bool:
    """Deactivate a key; returns False when no key has that ID."""
    try:
        key_uuid = uuid.UUID(str(key_id))
    except ValueError:
        return False

    api_key = db.query(APIKey).filter(APIKey.id == key_uuid).first()
    if not api_key:
        return False

    api_key.is_active = False
    db.flush()

    logger.info(f"Revoked API key: {api_key.name}")
    return True
