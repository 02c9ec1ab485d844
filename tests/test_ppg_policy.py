import asyncio
from types import SimpleNamespace

import pytest

from tests.conftest import FakeGates
from ushering.services.feature_gates import FeatureGateError
from ushering.services.ppg_policy import PPG_GATE, should_require_ppg


def _church(require_ppg):
    return SimpleNamespace(code="KBR", require_ppg=require_ppg)


def test_database_flag_wins_without_consulting_gate():
    gates = FakeGates(value=False)

    assert asyncio.run(should_require_ppg(_church(1), gates)) is True
    assert gates.calls == []


@pytest.mark.parametrize("require_ppg", [0, None])
@pytest.mark.parametrize("gate_value", [True, False])
def test_gate_decides_when_database_flag_unset(require_ppg, gate_value):
    gates = FakeGates(value=gate_value)

    assert asyncio.run(should_require_ppg(_church(require_ppg), gates)) is gate_value
    assert gates.calls == [PPG_GATE]


def test_church_without_attribute_falls_back_to_gate():
    gates = FakeGates(value=True)

    assert asyncio.run(should_require_ppg(SimpleNamespace(code="KBR"), gates)) is True
    assert gates.calls == ["ppg"]


def test_gate_failure_propagates():
    gates = FakeGates(error=FeatureGateError("gate down"))

    with pytest.raises(FeatureGateError):
        asyncio.run(should_require_ppg(_church(0), gates))


def test_each_call_reads_the_church_again():
    church = _church(0)
    gates = FakeGates(value=False)

    assert asyncio.run(should_require_ppg(church, gates)) is False
    church.require_ppg = 1
    assert asyncio.run(should_require_ppg(church, gates)) is True
    assert gates.calls == ["ppg"]
