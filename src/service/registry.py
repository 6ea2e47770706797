from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class DvlaRegistryClient:
    """Async client for the DVLA Vehicle Enquiry Service.

    One POST per call: no retries and no caching. Non-2xx responses raise
    ``httpx.HTTPStatusError`` and connection problems ``httpx.TransportError``;
    the lookup orchestrator decides what they mean for the user.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://driver-vehicle-licensing.api.gov.uk/vehicle-enquiry/v1",
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_vehicle(self, registration: str) -> dict[str, Any]:
        url = f"{self.base_url}/vehicles"
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            resp = await client.post(
                url,
                json={"registrationNumber": registration},
                headers={"X-API-Key": self.api_key, "Accept": "application/json"},
            )
            logger.debug("DVLA lookup for %s returned HTTP %s", registration, resp.status_code)
            resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError(f"DVLA response was {type(payload).__name__}, expected an object")
        return payload
