from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ushering.core.db import Base

EventType = Enum("mass", "feast", name="event_type")


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (UniqueConstraint("church_id", "mass_id", "date", name="uq_events_church_mass_date"),)

    id = Column(Integer, primary_key=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    mass_id = Column(Integer, ForeignKey("masses.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    week_number = Column(Integer, nullable=True)
    is_complete = Column(Integer, nullable=False, default=0)
    active = Column(Integer, nullable=False, default=1)
    type = Column(EventType, nullable=False, default="mass")
    code = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    church = relationship("Church")
    mass = relationship("Mass")
    ushers = relationship(
        "EventUsher",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventUsher.created_at, EventUsher.sequence",
    )


class EventUsher(Base):
    __tablename__ = "event_ushers"
    # NULL positions do not collide, so unassigned ushers may share an event.
    __table_args__ = (UniqueConstraint("event_id", "position_id", name="uq_event_ushers_event_position"),)

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    wilayah_id = Column(Integer, ForeignKey("wilayahs.id"), nullable=False)
    lingkungan_id = Column(Integer, ForeignKey("lingkungans.id"), nullable=False, index=True)
    position_id = Column(Integer, ForeignKey("church_positions.id"), nullable=True)
    is_ppg = Column(Boolean, nullable=False, default=False)
    is_kolekte = Column(Boolean, nullable=False, default=False)
    sequence = Column(Integer, nullable=True)
    active = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    event = relationship("Event", back_populates="ushers")
    lingkungan = relationship("Lingkungan")
    wilayah = relationship("Wilayah")
    position = relationship("ChurchPosition")
