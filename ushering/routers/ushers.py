from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ushering.auth.deps import get_current_user, get_feature_gates
from ushering.core.config import settings
from ushering.core.db import get_db
from ushering.models.event import EventUsher
from ushering.models.mass import Mass
from ushering.models.region import Lingkungan
from ushering.models.user import User
from ushering.schemas.usher import (
    EventUsherOut,
    UsherNamesPayload,
    UsherSubmission,
    UsherSubmissionResponse,
    ValidationResultOut,
)
from ushering.services.feature_gates import FeatureGateClient, FeatureGateError
from ushering.services.position_assignment import assign_event_positions
from ushering.services.ppg_policy import should_require_ppg
from ushering.services.usher_validation import validate_usher_names, validate_usher_roles
from ushering.services.ushers import (
    confirm_event,
    insert_event_ushers,
    is_submission_closed,
    next_event_date,
)

router = APIRouter(prefix="/ushers", tags=["ushers"])


def serialize_usher(usher: EventUsher) -> EventUsherOut:
    position = usher.position
    return EventUsherOut(
        id=usher.id,
        event_id=usher.event_id,
        name=usher.name,
        wilayah_id=usher.wilayah_id,
        lingkungan_id=usher.lingkungan_id,
        position_id=usher.position_id,
        position=position.name if position else None,
        zone=position.zone.name if position and position.zone else None,
        is_ppg=bool(usher.is_ppg),
        is_kolekte=bool(usher.is_kolekte),
        sequence=usher.sequence,
        created_at=usher.created_at,
    )


@router.post("/validate", response_model=ValidationResultOut, status_code=status.HTTP_200_OK)
def validate_names(
    payload: UsherNamesPayload,
    _: User = Depends(get_current_user),
) -> ValidationResultOut:
    return ValidationResultOut.from_orm(validate_usher_names(payload.ushers))


@router.post("", response_model=UsherSubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_ushers(
    payload: UsherSubmission,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gates: FeatureGateClient = Depends(get_feature_gates),
) -> UsherSubmissionResponse:
    today = date.today()
    if settings.WEEKDAY_SUBMISSION_ONLY and is_submission_closed(today):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Batas konfirmasi tugas Senin s.d. Kamis")

    mass = (
        db.query(Mass)
        .filter(Mass.id == payload.mass_id, Mass.church_id == current_user.church_id, Mass.active == 1)
        .first()
    )
    if not mass:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Misa tidak ditemukan")

    lingkungan = (
        db.query(Lingkungan)
        .filter(
            Lingkungan.id == payload.lingkungan_id,
            Lingkungan.wilayah_id == payload.wilayah_id,
            Lingkungan.church_id == current_user.church_id,
        )
        .first()
    )
    if not lingkungan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lingkungan tidak ditemukan")

    names_result = validate_usher_names(payload.ushers)
    if not names_result.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=names_result.error)

    try:
        require_ppg = await should_require_ppg(mass.church, gates)
    except FeatureGateError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    roles_result = validate_usher_roles(
        payload.ushers,
        require_ppg,
        required_ppg=settings.USHER_REQUIRED_PPG,
        required_kolekte=settings.USHER_REQUIRED_KOLEKTE,
        min_total=settings.USHER_MIN_TOTAL,
    )
    if not roles_result.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=roles_result.error)

    try:
        event = confirm_event(db, mass, next_event_date(today, mass))
        rows = insert_event_ushers(
            db,
            event,
            payload.ushers,
            payload.wilayah_id,
            payload.lingkungan_id,
            no_multi_submit=settings.NO_MULTI_SUBMIT,
        )
        assign_event_positions(db, event, require_ppg)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return UsherSubmissionResponse(
        event_id=event.id,
        event_date=event.date,
        require_ppg=require_ppg,
        ushers=[serialize_usher(usher) for usher in rows],
    )
