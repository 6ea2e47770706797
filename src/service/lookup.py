from __future__ import annotations

import logging
import re
from typing import Any, Protocol

import httpx

from valuation.errors import InvalidInput, LookupErrorCategory, LookupFailed, LookupInProgress
from valuation.estimation import EstimationStrategy, HeuristicEstimator
from valuation.form_state import ValuationForm
from valuation.normalizer import normalize_registry_record

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

CATEGORY_MESSAGES: dict[LookupErrorCategory, str] = {
    "network_or_cors_blocked": (
        "The vehicle registry could not be reached from here (network failure or "
        "cross-origin block). Continuing with manual entry."
    ),
    "registration_not_found": (
        "The registry couldn't find this vehicle. Check the registration format "
        "(e.g. AB21 ABC). Continuing with manual entry."
    ),
    "authentication_or_rate_limit": (
        "There may be an issue with the registry API key or rate limits. "
        "Continuing with manual entry."
    ),
    "other": "Registry error: {detail}. Continuing with manual entry.",
}


class RegistryClient(Protocol):
    async def fetch_vehicle(self, registration: str) -> dict[str, Any]: ...


def normalize_registration(text: str) -> str:
    return _WHITESPACE.sub("", text).upper()


def classify_lookup_error(exc: BaseException) -> LookupFailed:
    category: LookupErrorCategory
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        if code == 400:
            category = "registration_not_found"
        elif code in (401, 403):
            category = "authentication_or_rate_limit"
        else:
            category = "other"
        detail = f"HTTP {code} - {exc.response.text[:200]}"
    elif isinstance(exc, httpx.TransportError):
        category = "network_or_cors_blocked"
        detail = str(exc) or type(exc).__name__
    else:
        category = "other"
        detail = str(exc) or type(exc).__name__

    message = CATEGORY_MESSAGES[category].format(detail=detail)
    return LookupFailed(category, message)


class LookupOrchestrator:
    """Drives the registration step of a valuation form.

    AwaitingRegistration -> LookupInFlight -> Resolved | Fallback. At most one
    lookup is outstanding per orchestrator, and a failed lookup always lands
    the form in manual entry rather than raising.
    """

    def __init__(self, client: RegistryClient, estimator: EstimationStrategy | None = None) -> None:
        self.client = client
        self.estimator = estimator or HeuristicEstimator()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self, form: ValuationForm, registration: str, reference_year: int | None = None) -> ValuationForm:
        if not registration or not registration.strip():
            raise InvalidInput("registration", "please enter a registration number")
        if self._in_flight or form.phase == "lookup_in_flight":
            raise LookupInProgress("a registration lookup is already in progress")

        reg = normalize_registration(registration)
        pending = form.begin_lookup(reg)
        self._in_flight = True
        try:
            logger.info("Looking up registration %s", reg)
            try:
                payload = await self.client.fetch_vehicle(reg)
                vehicle = normalize_registry_record(payload, reference_year=reference_year, estimator=self.estimator)
            except Exception as exc:
                failure = classify_lookup_error(exc)
                logger.warning(
                    "Registry lookup for %s failed (%s): %s", reg, failure.category, exc,
                    extra={"extra_data": {"registration": reg, "category": failure.category}},
                )
                return pending.fall_back(failure)

            logger.info(
                "Resolved %s as %s %s (%s)",
                reg, vehicle.attributes.make, vehicle.attributes.model, vehicle.attributes.year,
                extra={"extra_data": {"registration": reg, "original_price": vehicle.attributes.original_price}},
            )
            return pending.resolve(vehicle)
        finally:
            self._in_flight = False
