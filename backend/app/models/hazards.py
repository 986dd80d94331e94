from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Numeric, Index
from sqlalchemy.sql import func
from ..db import Base


class Hazard(Base):
    __tablename__ = "hazards"

    id = Column(BigInteger().with_variant(Integer(), "sqlite"), primary_key=True, autoincrement=True)

    # One of HAZARD_TYPES; enforced before insert, not by the column
    type = Column(String(50), nullable=False)

    # DECIMAL storage, read back as float
    latitude = Column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude = Column(Numeric(11, 8, asdecimal=False), nullable=False)

    # Report time, stamped by the store's clock on insert
    timestamp = Column(DateTime(timezone=True), nullable=False)

    reported_by = Column(String(100), nullable=False, default="anonymous")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_hazards_location", "latitude", "longitude"),
        Index("idx_hazards_timestamp", "timestamp"),
    )
