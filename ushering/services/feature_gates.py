from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Protocol

import httpx

from ushering.core.config import Settings

logger = logging.getLogger(__name__)


class FeatureGateError(Exception):
    pass


class FeatureGateClient(Protocol):
    async def check_gate(self, name: str) -> bool: ...


class LocalFeatureGateClient:
    """Gates switched on through the LOCAL_FEATURE_GATES setting."""

    def __init__(self, enabled: Iterable[str]) -> None:
        self.enabled = {name.strip().lower() for name in enabled if name and name.strip()}

    async def check_gate(self, name: str) -> bool:
        return name.lower() in self.enabled


class StatsigFeatureGateClient:
    """
    Evaluate gates against the Statsig server API for one user context.
    Raises FeatureGateError when the gate cannot be evaluated.
    """

    def __init__(
        self,
        server_secret: str,
        user: dict[str, Any],
        *,
        api_url: str = "https://api.statsig.com/v1",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.server_secret = server_secret
        self.user = user
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def check_gate(self, name: str) -> bool:
        headers = {"statsig-api-key": self.server_secret}
        body = {"gateName": name, "user": self.user}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(f"{self.api_url}/check_gate", json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.exception("feature gate request failed", extra={"gate": name})
            raise FeatureGateError(f"Unable to evaluate gate {name}") from exc

        if resp.status_code != 200:
            logger.error(
                "feature gate non-200 response",
                extra={"gate": name, "status_code": resp.status_code, "body": resp.text},
            )
            raise FeatureGateError(f"Unable to evaluate gate {name}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise FeatureGateError(f"Malformed response for gate {name}") from exc

        value = payload.get("value") if isinstance(payload, dict) else None
        if not isinstance(value, bool):
            logger.warning("feature gate response without value", extra={"gate": name, "payload": payload})
            raise FeatureGateError(f"Malformed response for gate {name}")
        return value


def gate_user_context(user: Any) -> dict[str, Any]:
    return {
        "userID": str(user.id),
        "email": user.email,
        "custom": {"role": user.role, "cid": str(user.church_id)},
    }


def build_feature_gate_client(config: Settings, user: Any) -> FeatureGateClient:
    if config.FEATURE_GATE_PROVIDER == "statsig":
        if not config.STATSIG_SERVER_SECRET:
            raise FeatureGateError("STATSIG_SERVER_SECRET is not configured")
        return StatsigFeatureGateClient(
            config.STATSIG_SERVER_SECRET,
            gate_user_context(user),
            api_url=config.STATSIG_API_URL,
            timeout=config.FEATURE_GATE_TIMEOUT_SECONDS,
        )
    return LocalFeatureGateClient(config.LOCAL_FEATURE_GATES)
