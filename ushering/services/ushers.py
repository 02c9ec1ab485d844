from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ushering.core.errors import ServiceError
from ushering.models.event import Event, EventUsher
from ushering.models.mass import Mass

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
# Friday, Saturday and Sunday are closed for submissions when the weekday window is on.
CLOSED_SUBMISSION_WEEKDAYS = {4, 5, 6}


def next_event_date(submitted_on: date, mass: Mass) -> date:
    """The first date on or after ``submitted_on`` falling on the mass weekday."""

    target = WEEKDAYS.index(mass.day)
    return submitted_on + timedelta(days=(target - submitted_on.weekday()) % 7)


def is_submission_closed(submitted_on: date) -> bool:
    return submitted_on.weekday() in CLOSED_SUBMISSION_WEEKDAYS


def find_event(db: Session, mass: Mass, event_date: date, *, lock: bool = False) -> Optional[Event]:
    query = (
        db.query(Event)
        .filter(Event.church_id == mass.church_id)
        .filter(Event.mass_id == mass.id)
        .filter(Event.date == event_date)
    )
    if lock:
        query = query.with_for_update()
    return query.first()


def confirm_event(db: Session, mass: Mass, event_date: date) -> Event:
    """
    Fetch the event of a mass on a date, creating it on first submission.

    The returned row is locked until the caller's transaction ends, so
    submissions to the same event hand out positions one at a time.
    """

    event = find_event(db, mass, event_date, lock=True)
    if event:
        if not event.active:
            raise ServiceError.validation("Jadwal misa sudah dinonaktifkan", {"event_id": event.id})
        return event

    event = Event(
        church_id=mass.church_id,
        mass_id=mass.id,
        date=event_date,
        week_number=event_date.isocalendar()[1],
    )
    try:
        with db.begin_nested():
            db.add(event)
            db.flush()
    except IntegrityError as exc:
        # Another submission created the same event first.
        existing = find_event(db, mass, event_date, lock=True)
        if existing is None:
            raise ServiceError.database("Sistem gagal membuat jadwal", {"original_error": str(exc)}) from exc
        if not existing.active:
            raise ServiceError.validation("Jadwal misa sudah dinonaktifkan", {"event_id": existing.id})
        logger.info("event created concurrently", extra={"event": existing.id, "mass": mass.id})
        return existing

    logger.info("event created", extra={"event": event.id, "mass": mass.id, "date": event_date.isoformat()})
    return event


def _field(entry: Any, name: str, default: Any = None) -> Any:
    if isinstance(entry, dict):
        return entry.get(name, default)
    return getattr(entry, name, default)


def insert_event_ushers(
    db: Session,
    event: Event,
    ushers: Sequence[Any],
    wilayah_id: int,
    lingkungan_id: int,
    *,
    no_multi_submit: bool = True,
) -> list[EventUsher]:
    """
    Record the ushers one lingkungan sends to an event.
    Rows start without a position; positions are handed out afterwards.
    """
    try:
        if no_multi_submit:
            submitted = (
                db.query(EventUsher.id)
                .filter(EventUsher.event_id == event.id, EventUsher.lingkungan_id == lingkungan_id)
                .first()
            )
            if submitted:
                logger.warning(
                    "lingkungan already submitted",
                    extra={"event": event.id, "lingkungan": lingkungan_id},
                )
                raise ServiceError.validation("Lingkungan Bapak/Ibu sudah melakukan konfirmasi tugas")

        created_at = datetime.utcnow()
        rows = [
            EventUsher(
                event_id=event.id,
                name=_field(usher, "name"),
                wilayah_id=wilayah_id,
                lingkungan_id=lingkungan_id,
                position_id=None,
                is_ppg=bool(_field(usher, "is_ppg", False)),
                is_kolekte=bool(_field(usher, "is_kolekte", False)),
                sequence=index,
                created_at=created_at,
            )
            for index, usher in enumerate(ushers, start=1)
        ]
        db.add_all(rows)
        db.flush()
    except ServiceError:
        raise
    except SQLAlchemyError as exc:
        logger.exception("failed to add ushers to event", extra={"event": event.id})
        raise ServiceError.database("Sistem gagal mencatat petugas", {"original_error": str(exc)}) from exc
    return rows


def list_events_by_range(
    db: Session,
    church_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Event]:
    query = (
        db.query(Event)
        .options(joinedload(Event.mass))
        .filter(Event.church_id == church_id, Event.active == 1)
    )
    if start:
        query = query.filter(Event.date >= start)
    if end:
        query = query.filter(Event.date <= end)
    return query.order_by(Event.date.asc(), Event.id.asc()).all()


def list_event_ushers(db: Session, event_id: int, lingkungan_id: Optional[int] = None) -> list[EventUsher]:
    query = (
        db.query(EventUsher)
        .options(joinedload(EventUsher.position), joinedload(EventUsher.lingkungan), joinedload(EventUsher.wilayah))
        .filter(EventUsher.event_id == event_id, EventUsher.active == 1)
    )
    if lingkungan_id is not None:
        query = query.filter(EventUsher.lingkungan_id == lingkungan_id)
    return query.order_by(EventUsher.created_at.asc(), EventUsher.sequence.asc()).all()
