from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from ushering.auth.deps import ensure_church_access, require_roles
from ushering.core.db import get_db
from ushering.models.church import ChurchPosition, ChurchZone
from ushering.models.user import User
from ushering.schemas.schedule import (
    PositionCreate,
    PositionOut,
    PositionReorder,
    PositionUpdate,
    ZoneCreate,
    ZoneOut,
    ZoneUpdate,
)
from ushering.services import schedule_admin

router = APIRouter(prefix="/zones", tags=["zones"])
positions_router = APIRouter(prefix="/positions", tags=["zones"])


def _get_zone(db: Session, zone_id: int, user: User) -> ChurchZone:
    zone = db.query(ChurchZone).filter(ChurchZone.id == zone_id).first()
    if not zone:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Zona tidak ditemukan")
    ensure_church_access(user, zone.church_id)
    return zone


def _get_position(db: Session, position_id: int, user: User) -> ChurchPosition:
    position = db.query(ChurchPosition).filter(ChurchPosition.id == position_id).first()
    if not position:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Posisi tidak ditemukan")
    ensure_church_access(user, position.zone.church_id)
    return position


def _serialize_zone(zone: ChurchZone) -> ZoneOut:
    return ZoneOut(
        id=zone.id,
        church_id=zone.church_id,
        name=zone.name,
        code=zone.code,
        description=zone.description,
        sequence=zone.sequence,
        active=zone.active,
        positions=[PositionOut.from_orm(position) for position in zone.positions if position.active],
    )


@router.get("", response_model=list[ZoneOut], status_code=status.HTTP_200_OK)
def list_zones(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> list[ZoneOut]:
    zones = (
        db.query(ChurchZone)
        .options(selectinload(ChurchZone.positions))
        .filter(ChurchZone.church_id == current_user.church_id, ChurchZone.active == 1)
        .order_by(ChurchZone.sequence.asc(), ChurchZone.id.asc())
        .all()
    )
    return [_serialize_zone(zone) for zone in zones]


@router.post("", response_model=ZoneOut, status_code=status.HTTP_201_CREATED)
def create_zone(
    payload: ZoneCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> ZoneOut:
    try:
        zone = schedule_admin.create_zone(db, current_user.church_id, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(zone)
    return _serialize_zone(zone)


@router.patch("/{zone_id:int}", response_model=ZoneOut, status_code=status.HTTP_200_OK)
def update_zone(
    zone_id: int,
    payload: ZoneUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> ZoneOut:
    zone = _get_zone(db, zone_id, current_user)
    try:
        schedule_admin.update_zone(db, zone, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(zone)
    return _serialize_zone(zone)


@router.patch("/{zone_id:int}/deactivate", response_model=ZoneOut, status_code=status.HTTP_200_OK)
def deactivate_zone(
    zone_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> ZoneOut:
    zone = _get_zone(db, zone_id, current_user)
    schedule_admin.deactivate_zone(db, zone)
    db.commit()
    return _serialize_zone(zone)


@router.post("/{zone_id:int}/positions", response_model=PositionOut, status_code=status.HTTP_201_CREATED)
def create_position(
    zone_id: int,
    payload: PositionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> PositionOut:
    zone = _get_zone(db, zone_id, current_user)
    try:
        position = schedule_admin.create_position(db, zone.church, zone, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(position)
    return PositionOut.from_orm(position)


@router.put("/{zone_id:int}/positions/order", response_model=list[PositionOut], status_code=status.HTTP_200_OK)
def reorder_positions(
    zone_id: int,
    payload: PositionReorder,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> list[PositionOut]:
    zone = _get_zone(db, zone_id, current_user)
    try:
        positions = schedule_admin.reorder_zone_positions(db, zone, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return [PositionOut.from_orm(position) for position in positions]


@positions_router.patch("/{position_id:int}", response_model=PositionOut, status_code=status.HTTP_200_OK)
def update_position(
    position_id: int,
    payload: PositionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> PositionOut:
    position = _get_position(db, position_id, current_user)
    try:
        schedule_admin.update_position(db, position.zone.church, position, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(position)
    return PositionOut.from_orm(position)


@positions_router.patch("/{position_id:int}/deactivate", response_model=PositionOut, status_code=status.HTTP_200_OK)
def deactivate_position(
    position_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> PositionOut:
    position = _get_position(db, position_id, current_user)
    schedule_admin.deactivate_position(db, position)
    db.commit()
    return PositionOut.from_orm(position)
