from __future__ import annotations

import sys
from typing import Sequence

from sqlalchemy.orm import Session

from ushering.models.event import Event, EventUsher
from ushering.schemas.schedule import PrintedSchedule, PrintedSection, PrintedUsher
from ushering.services.ushers import list_event_ushers

WEEKDAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
UNZONED = "Non Zona"
KOLEKTE_SECTION = "Kolekte"
PPG_SECTION = "PPG"


def _print_order(usher: EventUsher) -> tuple:
    position = usher.position
    if position is None:
        return (1, sys.maxsize, sys.maxsize, usher.created_at, usher.sequence or 0)
    zone_sequence = position.zone.sequence if position.zone and position.zone.sequence is not None else sys.maxsize
    position_sequence = position.sequence if position.sequence is not None else sys.maxsize
    return (0, zone_sequence, position_sequence, usher.created_at, usher.sequence or 0)


def _printed_usher(usher: EventUsher) -> PrintedUsher:
    position = usher.position
    return PrintedUsher(
        position=position.name if position else "Posisi Kosong",
        sequence=(position.sequence or 0) if position else 0,
        name=usher.name or "No Name",
        wilayah=usher.wilayah.name if usher.wilayah else "Wilayah Kosong",
        lingkungan=usher.lingkungan.name if usher.lingkungan else "Lingkungan Kosong",
        is_kolekte=bool(usher.is_kolekte),
        is_ppg=bool(usher.is_ppg),
    )


def group_by_zone(ushers: Sequence[EventUsher]) -> list[PrintedSection]:
    """One section per zone, in the order the zones first appear."""

    grouped: dict[str, list[PrintedUsher]] = {}
    for usher in ushers:
        position = usher.position
        zone = position.zone.name if position is not None and position.zone is not None else UNZONED
        grouped.setdefault(zone, []).append(_printed_usher(usher))
    return [PrintedSection(zone=zone, row_span=len(rows), ushers=rows) for zone, rows in grouped.items()]


def _single_section(label: str, ushers: Sequence[EventUsher]) -> list[PrintedSection]:
    if not ushers:
        return []
    return [PrintedSection(zone=label, row_span=len(ushers), ushers=[_printed_usher(usher) for usher in ushers])]


def build_printed_schedule(db: Session, event: Event) -> PrintedSchedule:
    ushers = sorted(list_event_ushers(db, event.id), key=_print_order)
    mass = event.mass
    return PrintedSchedule(
        event_id=event.id,
        church=event.church.name if event.church else "",
        mass=mass.name if mass else "",
        date=event.date,
        weekday=WEEKDAY_NAMES[event.date.weekday()],
        time=mass.time if mass else None,
        briefing_time=mass.briefing_time if mass else None,
        ushers=group_by_zone(ushers),
        kolekte=_single_section(KOLEKTE_SECTION, [usher for usher in ushers if usher.is_kolekte]),
        ppg=_single_section(PPG_SECTION, [usher for usher in ushers if usher.is_ppg]),
    )
