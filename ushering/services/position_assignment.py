from __future__ import annotations

import logging
import sys
from typing import Iterable, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ushering.core.errors import ServiceError
from ushering.models.church import ChurchPosition, ChurchZone
from ushering.models.event import Event, EventUsher
from ushering.models.mass import MassZone
from ushering.services.ushers import list_event_ushers

logger = logging.getLogger(__name__)


def list_positions_by_mass(db: Session, mass_id: int) -> list[ChurchPosition]:
    return (
        db.query(ChurchPosition)
        .join(ChurchZone, ChurchZone.id == ChurchPosition.zone_id)
        .join(MassZone, MassZone.zone_id == ChurchZone.id)
        .filter(MassZone.mass_id == mass_id, MassZone.active == 1)
        .filter(ChurchZone.active == 1, ChurchPosition.active == 1)
        .order_by(MassZone.sequence.asc(), ChurchPosition.sequence.asc(), ChurchPosition.id.asc())
        .all()
    )


def sort_by_sequence(positions: Iterable[ChurchPosition]) -> list[ChurchPosition]:
    return sorted(positions, key=lambda position: sys.maxsize if position.sequence is None else position.sequence)


def _fill(ushers: Sequence[EventUsher], positions: Sequence[ChurchPosition], taken: set[int]) -> list[tuple[EventUsher, ChurchPosition]]:
    available = [position for position in sort_by_sequence(positions) if position.id not in taken]
    pairs = list(zip(ushers, available))
    for usher in ushers[len(pairs):]:
        logger.warning("no available position for usher", extra={"usher": usher.name, "is_ppg": usher.is_ppg})
    return pairs


def plan_positions(
    ushers: Sequence[EventUsher],
    positions: Sequence[ChurchPosition],
    require_ppg: bool,
) -> list[tuple[EventUsher, ChurchPosition]]:
    """
    Pair every usher without a position with a free position of the mass.

    When PPG is not required all positions form one pool. When it is, PPG
    ushers only take PPG positions and everybody else takes the rest. Ushers
    left over once a pool runs dry keep no position.
    """
    taken = {usher.position_id for usher in ushers if usher.position_id is not None}
    unassigned = [usher for usher in ushers if usher.position_id is None]

    if not require_ppg:
        return _fill(unassigned, positions, taken)

    ppg_positions = [position for position in positions if position.is_ppg]
    other_positions = [position for position in positions if not position.is_ppg]
    ppg_ushers = [usher for usher in unassigned if usher.is_ppg]
    other_ushers = [usher for usher in unassigned if not usher.is_ppg]
    return _fill(ppg_ushers, ppg_positions, taken) + _fill(other_ushers, other_positions, taken)


def assign_event_positions(db: Session, event: Event, require_ppg: bool) -> list[EventUsher]:
    positions = list_positions_by_mass(db, event.mass_id)
    if not positions:
        raise ServiceError.not_found(
            f"Gagal menemukan titik tugas untuk {event.mass.name}",
            {"mass_id": event.mass_id},
        )

    ushers = list_event_ushers(db, event.id)
    pairs = plan_positions(ushers, positions, require_ppg)
    for usher, position in pairs:
        usher.position_id = position.id
        usher.position = position

    taken = {usher.position_id for usher in ushers if usher.position_id is not None}
    event.is_complete = 1 if all(position.id in taken for position in positions) else 0
    try:
        db.flush()
    except IntegrityError as exc:
        logger.warning("position already taken", extra={"event": event.id})
        raise ServiceError.duplicate(
            "Titik tugas sudah terisi, mohon ulangi konfirmasi tugas",
            {"event_id": event.id},
        ) from exc

    logger.info(
        "positions assigned",
        extra={"event": event.id, "assigned": len(pairs), "require_ppg": require_ppg},
    )
    return [usher for usher, _ in pairs]
