from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ushering.core.db import Base


class Church(Base):
    __tablename__ = "churches"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(150), nullable=False)
    parish = Column(String(150), nullable=True)
    # 1 means PPG is required; anything else leaves the decision to the "ppg" gate.
    require_ppg = Column(Integer, nullable=True)
    active = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    zones = relationship(
        "ChurchZone",
        back_populates="church",
        cascade="all, delete-orphan",
        order_by="ChurchZone.sequence",
    )
    masses = relationship(
        "Mass",
        back_populates="church",
        cascade="all, delete-orphan",
        order_by="Mass.sequence",
    )


class ChurchZone(Base):
    __tablename__ = "church_zones"

    id = Column(Integer, primary_key=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    sequence = Column(Integer, nullable=True)
    active = Column(Integer, nullable=False, default=1)

    church = relationship("Church", back_populates="zones")
    positions = relationship(
        "ChurchPosition",
        back_populates="zone",
        cascade="all, delete-orphan",
        order_by="ChurchPosition.sequence",
    )


class ChurchPosition(Base):
    __tablename__ = "church_positions"

    id = Column(Integer, primary_key=True)
    zone_id = Column(Integer, ForeignKey("church_zones.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    is_ppg = Column(Boolean, nullable=False, default=False)
    sequence = Column(Integer, nullable=True)
    type = Column(String(50), nullable=False, default="usher")
    active = Column(Integer, nullable=False, default=1)

    zone = relationship("ChurchZone", back_populates="positions")
