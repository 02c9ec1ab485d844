from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ushering.auth.deps import ensure_church_access, get_current_user, require_roles
from ushering.core.db import get_db
from ushering.models.mass import Mass
from ushering.models.user import User
from ushering.schemas.schedule import MassCreate, MassOut, MassUpdate
from ushering.services import schedule_admin

router = APIRouter(prefix="/masses", tags=["masses"])


def _get_mass(db: Session, mass_id: int, user: User) -> Mass:
    mass = db.query(Mass).filter(Mass.id == mass_id).first()
    if not mass:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Misa tidak ditemukan")
    ensure_church_access(user, mass.church_id)
    return mass


def _serialize_mass(mass: Mass) -> MassOut:
    return MassOut(
        id=mass.id,
        church_id=mass.church_id,
        name=mass.name,
        code=mass.code,
        day=mass.day,
        time=mass.time,
        briefing_time=mass.briefing_time,
        sequence=mass.sequence,
        active=mass.active,
        zone_ids=[link.zone_id for link in mass.zones if link.active],
    )


@router.get("", response_model=list[MassOut], status_code=status.HTTP_200_OK)
def list_masses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[MassOut]:
    masses = (
        db.query(Mass)
        .filter(Mass.church_id == current_user.church_id, Mass.active == 1)
        .order_by(Mass.sequence.asc(), Mass.id.asc())
        .all()
    )
    return [_serialize_mass(mass) for mass in masses]


@router.post("", response_model=MassOut, status_code=status.HTTP_201_CREATED)
def create_mass(
    payload: MassCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> MassOut:
    try:
        mass = schedule_admin.create_mass(db, current_user.church_id, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(mass)
    return _serialize_mass(mass)


@router.patch("/{mass_id:int}", response_model=MassOut, status_code=status.HTTP_200_OK)
def update_mass(
    mass_id: int,
    payload: MassUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> MassOut:
    mass = _get_mass(db, mass_id, current_user)
    try:
        schedule_admin.update_mass(db, mass, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(mass)
    return _serialize_mass(mass)


@router.patch("/{mass_id:int}/deactivate", response_model=MassOut, status_code=status.HTTP_200_OK)
def deactivate_mass(
    mass_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> MassOut:
    mass = _get_mass(db, mass_id, current_user)
    schedule_admin.deactivate_mass(db, mass)
    db.commit()
    return _serialize_mass(mass)
