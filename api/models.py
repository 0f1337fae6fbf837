"""
SQLAlchemy models for FUELPOOL database.
"""

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    JSON,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from api.database import Base


class APIKey(Base):
    """API key for authenticating write endpoints."""

    __tablename__ = "api_keys"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    key_hash = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    extra_metadata = Column("metadata", JSON, nullable=True)

    def __repr__(self):
        return f"<APIKey(name='{self.name}', active={self.is_active})>"


class Route(Base):
    """Voyage route with its attained GHG intensity."""

    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(String(50), nullable=False, unique=True)
    vessel_type = Column(String(100), nullable=False)
    fuel_type = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False, index=True)
    ghg_intensity = Column(Float, nullable=False)  # gCO2eq/MJ
    fuel_consumption = Column(Float, nullable=False)  # t
    distance = Column(Float, nullable=False)  # km
    total_emissions = Column(Float, nullable=False)  # t
    is_baseline = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Route(route_id='{self.route_id}', baseline={self.is_baseline})>"


class ShipCompliance(Base):
    """Compliance balance of a ship for one reporting year. Immutable."""

    __tablename__ = "ship_compliance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ship_id = Column(String(50), nullable=False)
    route_id = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False)
    cb_gco2eq = Column(Float, nullable=False)  # t CO2eq, positive=surplus
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("ship_id", "year", name="uq_ship_compliance_ship_year"),
        Index("ix_ship_compliance_year", "year"),
    )

    def __repr__(self):
        return f"<ShipCompliance(ship_id='{self.ship_id}', year={self.year}, cb={self.cb_gco2eq})>"


class BankEntry(Base):
    """Append-only banking ledger entry. Positive=banked, negative=applied."""

    __tablename__ = "bank_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ship_id = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False)
    amount_gco2eq = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_bank_entries_ship_year", "ship_id", "year"),
    )

    def __repr__(self):
        return f"<BankEntry(ship_id='{self.ship_id}', year={self.year}, amount={self.amount_gco2eq})>"


class Pool(Base):
    """Compliance pool for one reporting year."""

    __tablename__ = "pools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    year = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    members = relationship(
        "PoolMember",
        back_populates="pool",
        cascade="all, delete-orphan",
        order_by="PoolMember.id",
    )

    def __repr__(self):
        return f"<Pool(id={self.id}, year={self.year})>"


class PoolMember(Base):
    """Pre- and post-pooling balance of one ship in a pool."""

    __tablename__ = "pool_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pool_id = Column(
        Integer, ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ship_id = Column(String(50), nullable=False)
    cb_before = Column(Float, nullable=False)
    cb_after = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    pool = relationship("Pool", back_populates="members")

    def __repr__(self):
        return f"<PoolMember(pool_id={self.pool_id}, ship_id='{self.ship_id}')>"
