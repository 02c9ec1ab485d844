from ushering.models.church import ChurchPosition
from ushering.models.event import EventUsher
from ushering.services.position_assignment import plan_positions, sort_by_sequence


def _positions():
    return [
        ChurchPosition(id=1, name="PPG Kiri", is_ppg=True, sequence=2),
        ChurchPosition(id=2, name="PPG Kanan", is_ppg=True, sequence=1),
        ChurchPosition(id=3, name="Pintu Utama", is_ppg=False, sequence=None),
        ChurchPosition(id=4, name="Lorong Tengah", is_ppg=False, sequence=3),
        ChurchPosition(id=5, name="Balkon", is_ppg=False, sequence=4),
    ]


def _usher(name, is_ppg=False, position_id=None):
    return EventUsher(name=name, is_ppg=is_ppg, is_kolekte=False, position_id=position_id)


def _plan(ushers, require_ppg):
    return [(usher.name, position.id) for usher, position in plan_positions(ushers, _positions(), require_ppg)]


def test_sort_by_sequence_puts_missing_sequence_last():
    assert [position.id for position in sort_by_sequence(_positions())] == [2, 1, 4, 5, 3]


def test_unified_pool_when_ppg_not_required():
    ushers = [_usher("Agnes", is_ppg=True), _usher("Benediktus"), _usher("Clara")]

    assert _plan(ushers, require_ppg=False) == [("Agnes", 2), ("Benediktus", 1), ("Clara", 4)]


def test_separate_pools_when_ppg_required():
    ushers = [_usher("Agnes"), _usher("Benediktus", is_ppg=True), _usher("Clara")]

    assert _plan(ushers, require_ppg=True) == [("Benediktus", 2), ("Agnes", 4), ("Clara", 5)]


def test_taken_positions_are_skipped():
    ushers = [_usher("Agnes", position_id=2), _usher("Benediktus"), _usher("Clara", position_id=4), _usher("Dewi")]

    assert _plan(ushers, require_ppg=False) == [("Benediktus", 1), ("Dewi", 5)]


def test_extra_ushers_stay_unassigned():
    ushers = [_usher("Agnes", is_ppg=True), _usher("Benediktus", is_ppg=True), _usher("Clara", is_ppg=True)]

    assert _plan(ushers, require_ppg=True) == [("Agnes", 2), ("Benediktus", 1)]
