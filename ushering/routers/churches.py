from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ushering.auth.deps import ensure_church_access, get_current_user, get_feature_gates, require_roles
from ushering.core.db import get_db
from ushering.models.church import Church
from ushering.models.user import User
from ushering.schemas.church import ChurchOut, ChurchPpgUpdate, PpgRequirementOut
from ushering.services.feature_gates import FeatureGateClient, FeatureGateError
from ushering.services.ppg_policy import should_require_ppg

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/churches", tags=["churches"])


def _get_church(db: Session, church_id: int) -> Church:
    church = db.query(Church).filter(Church.id == church_id).first()
    if not church:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Gereja belum terdaftar")
    return church


@router.get("", response_model=list[ChurchOut], status_code=status.HTTP_200_OK)
def list_churches(
    db: Session = Depends(get_db),
    _: User = Depends(require_roles("admin")),
) -> list[ChurchOut]:
    churches = db.query(Church).order_by(Church.name.asc()).all()
    return [ChurchOut.from_orm(church) for church in churches]


@router.get("/{church_id:int}", response_model=ChurchOut, status_code=status.HTTP_200_OK)
def get_church(
    church_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ChurchOut:
    ensure_church_access(current_user, church_id)
    return ChurchOut.from_orm(_get_church(db, church_id))


@router.patch("/{church_id:int}/ppg", response_model=ChurchOut, status_code=status.HTTP_200_OK)
def update_church_ppg(
    church_id: int,
    payload: ChurchPpgUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
) -> ChurchOut:
    church = _get_church(db, church_id)
    church.require_ppg = payload.require_ppg
    db.commit()
    db.refresh(church)
    logger.info("church ppg updated", extra={"actor": current_user.email, "church": church.code, "require_ppg": church.require_ppg})
    return ChurchOut.from_orm(church)


@router.get("/{church_id:int}/ppg-requirement", response_model=PpgRequirementOut, status_code=status.HTTP_200_OK)
async def get_ppg_requirement(
    church_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gates: FeatureGateClient = Depends(get_feature_gates),
) -> PpgRequirementOut:
    ensure_church_access(current_user, church_id)
    church = _get_church(db, church_id)
    try:
        required = await should_require_ppg(church, gates)
    except FeatureGateError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return PpgRequirementOut(church_id=church.id, church_code=church.code, require_ppg=required)
