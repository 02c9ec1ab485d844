from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ushering.core.errors import ServiceError
from ushering.models.church import Church, ChurchPosition, ChurchZone
from ushering.models.event import Event
from ushering.models.mass import Mass, MassZone
from ushering.schemas.schedule import (
    EventCreate,
    MassCreate,
    MassUpdate,
    PositionCreate,
    PositionReorder,
    PositionUpdate,
    ZoneCreate,
    ZoneUpdate,
)
from ushering.services.ushers import find_event

logger = logging.getLogger(__name__)


def _ensure_zones(db: Session, church_id: int, zone_ids: Iterable[int]) -> list[int]:
    wanted = list(dict.fromkeys(zone_ids))
    if not wanted:
        return []
    found = {
        zone_id
        for (zone_id,) in db.query(ChurchZone.id)
        .filter(ChurchZone.id.in_(wanted), ChurchZone.church_id == church_id, ChurchZone.active == 1)
        .all()
    }
    missing = [zone_id for zone_id in wanted if zone_id not in found]
    if missing:
        raise ServiceError.validation("Zona tidak ditemukan", {"zone_ids": missing})
    return wanted


def _link_zones(mass: Mass, zone_ids: list[int]) -> None:
    # Replaced links are removed through the delete-orphan cascade.
    mass.zones = [MassZone(zone_id=zone_id, sequence=index) for index, zone_id in enumerate(zone_ids, start=1)]


def _name_taken(db: Session, model, name: str, *filters, exclude_id: Optional[int] = None) -> bool:
    query = db.query(model.id).filter(func.lower(model.name) == name.lower(), model.active == 1, *filters)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first() is not None


def create_mass(db: Session, church_id: int, payload: MassCreate) -> Mass:
    if _name_taken(db, Mass, payload.name, Mass.church_id == church_id):
        raise ServiceError.duplicate("Misa sudah terdaftar", {"name": payload.name})
    zone_ids = _ensure_zones(db, church_id, payload.zone_ids)
    mass = Mass(
        church_id=church_id,
        name=payload.name,
        code=payload.code,
        day=payload.day,
        time=payload.time,
        briefing_time=payload.briefing_time,
        sequence=payload.sequence,
    )
    _link_zones(mass, zone_ids)
    db.add(mass)
    db.flush()
    logger.info("mass created", extra={"mass": mass.id, "church": church_id, "zones": zone_ids})
    return mass


def update_mass(db: Session, mass: Mass, payload: MassUpdate) -> Mass:
    fields_set = payload.__fields_set__

    if "name" in fields_set and payload.name is not None:
        cleaned = payload.name.strip()
        if not cleaned:
            raise ServiceError.validation("Nama misa wajib diisi", {"field": "name"})
        if _name_taken(db, Mass, cleaned, Mass.church_id == mass.church_id, exclude_id=mass.id):
            raise ServiceError.duplicate("Misa sudah terdaftar", {"name": cleaned})
        mass.name = cleaned
    if "code" in fields_set:
        mass.code = payload.code.strip() if payload.code else None
    if "day" in fields_set and payload.day is not None:
        mass.day = payload.day
    if "time" in fields_set:
        mass.time = payload.time
    if "briefing_time" in fields_set:
        mass.briefing_time = payload.briefing_time
    if "sequence" in fields_set:
        mass.sequence = payload.sequence
    if "zone_ids" in fields_set and payload.zone_ids is not None:
        _link_zones(mass, _ensure_zones(db, mass.church_id, payload.zone_ids))

    db.flush()
    logger.info("mass updated", extra={"mass": mass.id, "fields": sorted(fields_set)})
    return mass


def deactivate_mass(db: Session, mass: Mass) -> Mass:
    mass.active = 0
    db.flush()
    logger.info("mass deactivated", extra={"mass": mass.id})
    return mass


def create_zone(db: Session, church_id: int, payload: ZoneCreate) -> ChurchZone:
    if _name_taken(db, ChurchZone, payload.name, ChurchZone.church_id == church_id):
        raise ServiceError.duplicate("Zona sudah terdaftar", {"name": payload.name})
    zone = ChurchZone(
        church_id=church_id,
        name=payload.name,
        code=payload.code,
        description=payload.description,
        sequence=payload.sequence,
    )
    db.add(zone)
    db.flush()
    logger.info("zone created", extra={"zone": zone.id, "church": church_id})
    return zone


def update_zone(db: Session, zone: ChurchZone, payload: ZoneUpdate) -> ChurchZone:
    fields_set = payload.__fields_set__

    if "name" in fields_set and payload.name is not None:
        cleaned = payload.name.strip()
        if not cleaned:
            raise ServiceError.validation("Nama zona wajib diisi", {"field": "name"})
        if _name_taken(db, ChurchZone, cleaned, ChurchZone.church_id == zone.church_id, exclude_id=zone.id):
            raise ServiceError.duplicate("Zona sudah terdaftar", {"name": cleaned})
        zone.name = cleaned
    if "code" in fields_set:
        zone.code = payload.code.strip() if payload.code else None
    if "description" in fields_set:
        zone.description = payload.description.strip() if payload.description else None
    if "sequence" in fields_set:
        zone.sequence = payload.sequence

    db.flush()
    return zone


def deactivate_zone(db: Session, zone: ChurchZone) -> ChurchZone:
    zone.active = 0
    db.flush()
    logger.info("zone deactivated", extra={"zone": zone.id})
    return zone


def _next_position_sequence(db: Session, zone_id: int) -> int:
    current = db.query(func.max(ChurchPosition.sequence)).filter(ChurchPosition.zone_id == zone_id).scalar()
    return (current or 0) + 1


def create_position(db: Session, church: Church, zone: ChurchZone, payload: PositionCreate) -> ChurchPosition:
    """
    Add a position to a zone.

    PPG positions can only be created for churches whose stored flag requires
    PPG; elsewhere the request's ``is_ppg`` is ignored.
    """
    if not zone.active:
        raise ServiceError.validation("Zona sudah dinonaktifkan", {"zone_id": zone.id})
    position = ChurchPosition(
        zone_id=zone.id,
        name=payload.name,
        type=payload.type,
        code=payload.code,
        description=payload.description,
        is_ppg=payload.is_ppg if church.require_ppg == 1 else False,
        sequence=payload.sequence if payload.sequence is not None else _next_position_sequence(db, zone.id),
    )
    db.add(position)
    db.flush()
    logger.info("position created", extra={"position": position.id, "zone": zone.id, "is_ppg": position.is_ppg})
    return position


def update_position(db: Session, church: Church, position: ChurchPosition, payload: PositionUpdate) -> ChurchPosition:
    fields_set = payload.__fields_set__
    if not fields_set:
        raise ServiceError.validation("Tidak ada perubahan posisi", {"position_id": position.id})

    if "name" in fields_set and payload.name is not None:
        cleaned = payload.name.strip()
        if not cleaned:
            raise ServiceError.validation("Nama posisi wajib diisi", {"field": "name"})
        position.name = cleaned
    if "type" in fields_set and payload.type is not None:
        position.type = payload.type
    if "code" in fields_set:
        position.code = payload.code.strip() if payload.code else None
    if "description" in fields_set:
        position.description = payload.description.strip() if payload.description else None
    if "sequence" in fields_set:
        position.sequence = payload.sequence
    if "is_ppg" in fields_set and payload.is_ppg is not None and church.require_ppg == 1:
        position.is_ppg = payload.is_ppg
    if "zone_id" in fields_set and payload.zone_id is not None and payload.zone_id != position.zone_id:
        _ensure_zones(db, church.id, [payload.zone_id])
        position.zone_id = payload.zone_id

    db.flush()
    logger.info("position updated", extra={"position": position.id, "fields": sorted(fields_set)})
    return position


def deactivate_position(db: Session, position: ChurchPosition) -> ChurchPosition:
    position.active = 0
    db.flush()
    logger.info("position deactivated", extra={"position": position.id})
    return position


def reorder_zone_positions(db: Session, zone: ChurchZone, payload: PositionReorder) -> list[ChurchPosition]:
    """Apply the given sequence to each listed position of the zone."""

    ids = [item.id for item in payload.items]
    if len(set(ids)) != len(ids):
        raise ServiceError.validation("Format daftar urutan posisi tidak valid", {"position_ids": ids})

    positions = {
        position.id: position
        for position in db.query(ChurchPosition)
        .filter(ChurchPosition.zone_id == zone.id, ChurchPosition.id.in_(ids))
        .all()
    }
    missing = [position_id for position_id in ids if position_id not in positions]
    if missing:
        raise ServiceError.validation("Posisi tidak ditemukan di zona ini", {"position_ids": missing})

    for item in payload.items:
        positions[item.id].sequence = item.sequence
    db.flush()
    logger.info("positions reordered", extra={"zone": zone.id, "count": len(ids)})
    return sorted(positions.values(), key=lambda position: (position.sequence, position.id))


def create_event(db: Session, mass: Mass, payload: EventCreate) -> Event:
    duplicate_message = (
        "Jadwal misa untuk tanggal dan jenis misa ini sudah ada. "
        "Silakan edit jadwal yang ada atau pilih tanggal/jenis misa lain."
    )
    details = {"mass_id": mass.id, "date": payload.date.isoformat()}
    if find_event(db, mass, payload.date) is not None:
        raise ServiceError.duplicate(duplicate_message, details)

    event = Event(
        church_id=mass.church_id,
        mass_id=mass.id,
        date=payload.date,
        type=payload.type,
        code=payload.code,
        description=payload.description,
        week_number=payload.week_number or payload.date.isocalendar()[1],
    )
    try:
        with db.begin_nested():
            db.add(event)
            db.flush()
    except IntegrityError as exc:
        raise ServiceError.duplicate(duplicate_message, details) from exc
    logger.info("event scheduled", extra={"event": event.id, "mass": mass.id, "date": payload.date.isoformat()})
    return event


def deactivate_event(db: Session, event: Event) -> Event:
    event.active = 0
    db.flush()
    logger.info("event deactivated", extra={"event": event.id})
    return event
