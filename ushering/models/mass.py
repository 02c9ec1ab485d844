from __future__ import annotations

from sqlalchemy import Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ushering.core.db import Base

MassDay = Enum(
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    name="mass_day",
)


class Mass(Base):
    __tablename__ = "masses"

    id = Column(Integer, primary_key=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(50), nullable=True)
    name = Column(String(150), nullable=False)
    sequence = Column(Integer, nullable=True)
    day = Column(MassDay, nullable=False, default="sunday")
    time = Column(String(10), nullable=True)
    briefing_time = Column(String(10), nullable=True)
    active = Column(Integer, nullable=False, default=1)

    church = relationship("Church", back_populates="masses")
    zones = relationship(
        "MassZone",
        back_populates="mass",
        cascade="all, delete-orphan",
        order_by="MassZone.sequence",
    )


class MassZone(Base):
    __tablename__ = "mass_zones"

    id = Column(Integer, primary_key=True)
    mass_id = Column(Integer, ForeignKey("masses.id", ondelete="CASCADE"), nullable=False, index=True)
    zone_id = Column(Integer, ForeignKey("church_zones.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False, default=0)
    active = Column(Integer, nullable=False, default=1)

    mass = relationship("Mass", back_populates="zones")
    zone = relationship("ChurchZone")
