from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ushering.auth.deps import ensure_church_access, get_current_user, require_roles
from ushering.core.db import get_db
from ushering.models.event import Event
from ushering.models.mass import Mass
from ushering.models.user import User
from ushering.routers.ushers import serialize_usher
from ushering.schemas.event import EventListResponse, EventOut
from ushering.schemas.schedule import EventCreate, PrintedSchedule
from ushering.schemas.usher import EventUsherOut
from ushering.services import schedule_admin
from ushering.services.schedule_print import build_printed_schedule
from ushering.services.ushers import list_event_ushers, list_events_by_range

router = APIRouter(prefix="/events", tags=["events"])


def _get_event(db: Session, event_id: int, user: User) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Jadwal tidak ditemukan")
    ensure_church_access(user, event.church_id)
    return event


def _serialize_event(event: Event) -> EventOut:
    return EventOut(
        id=event.id,
        church_id=event.church_id,
        mass_id=event.mass_id,
        mass=event.mass.name if event.mass else None,
        date=event.date,
        week_number=event.week_number,
        is_complete=event.is_complete,
        active=event.active,
        type=event.type,
        code=event.code,
        description=event.description,
        created_at=event.created_at,
    )


@router.get("", response_model=EventListResponse, status_code=status.HTTP_200_OK)
def list_events(
    *,
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EventListResponse:
    if start and end and start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tanggal awal harus sebelum tanggal akhir")
    events = list_events_by_range(db, current_user.church_id, start, end)
    return EventListResponse(items=[_serialize_event(event) for event in events], total=len(events))


@router.get("/{event_id:int}/ushers", response_model=list[EventUsherOut], status_code=status.HTTP_200_OK)
def list_ushers(
    event_id: int,
    lingkungan_id: int | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EventUsherOut]:
    event = _get_event(db, event_id, current_user)
    return [serialize_usher(usher) for usher in list_event_ushers(db, event.id, lingkungan_id)]


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> EventOut:
    mass = (
        db.query(Mass)
        .filter(Mass.id == payload.mass_id, Mass.church_id == current_user.church_id, Mass.active == 1)
        .first()
    )
    if not mass:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Misa tidak ditemukan")
    try:
        event = schedule_admin.create_event(db, mass, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(event)
    return _serialize_event(event)


@router.patch("/{event_id:int}/deactivate", response_model=EventOut, status_code=status.HTTP_200_OK)
def deactivate_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> EventOut:
    event = _get_event(db, event_id, current_user)
    schedule_admin.deactivate_event(db, event)
    db.commit()
    return _serialize_event(event)


@router.get("/{event_id:int}/print", response_model=PrintedSchedule, status_code=status.HTTP_200_OK)
def print_event_schedule(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> PrintedSchedule:
    event = _get_event(db, event_id, current_user)
    if not event.active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Jadwal tidak ditemukan")
    return build_printed_schedule(db, event)
