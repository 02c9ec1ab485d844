from __future__ import annotations

import logging
from typing import Any

from ushering.services.feature_gates import FeatureGateClient

logger = logging.getLogger(__name__)

PPG_GATE = "ppg"


async def should_require_ppg(church: Any, gates: FeatureGateClient) -> bool:
    """
    Decide whether PPG (Panitia Pembangunan Gereja) attendance is mandatory.

    ``church.require_ppg == 1`` always wins and the gate is not consulted.
    Otherwise the result of the ``ppg`` gate is returned as-is; a failing gate
    lookup propagates to the caller.
    """
    if getattr(church, "require_ppg", None) == 1:
        logger.debug("ppg required by church config", extra={"church": getattr(church, "code", None)})
        return True

    gate_value = await gates.check_gate(PPG_GATE)
    logger.debug("ppg decided by gate", extra={"church": getattr(church, "code", None), "gate_value": gate_value})
    return gate_value
