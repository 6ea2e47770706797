from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from service.logging_config import configure_logging, correlation_id, new_correlation_id
from service.lookup import LookupOrchestrator, RegistryClient
from service.reference_links import reference_links_payload
from service.registry import DvlaRegistryClient
from service.settings import ServiceSettings
from valuation.data_models import Condition, MotStatus, ServiceHistory, UserInputs, VehicleAttributes
from valuation.engine import value_vehicle
from valuation.errors import InvalidInput, LookupInProgress
from valuation.factor_tables import describe_tables
from valuation.form_state import ValuationForm

logger = logging.getLogger(__name__)


# ── Request / Response Models ───────────────────────────────────────

class LookupRequest(BaseModel):
    registration: str = Field(max_length=16)


class VehicleOut(BaseModel):
    make: str
    model: str
    year: int
    fuel_type: str
    original_price: float
    is_ulez_compliant: bool


class RegistryDetailsOut(BaseModel):
    engine_size: str
    colour: str
    tax_status: str
    mot_status: str
    co2_emissions: str
    euro_status: Optional[str] = None
    tax_due_date: Optional[str] = None
    mot_expiry_date: Optional[str] = None
    date_of_last_v5c_issued: Optional[str] = None


class LookupErrorOut(BaseModel):
    category: str
    message: str


class LookupResponse(BaseModel):
    phase: str
    registration: str
    vehicle: Optional[VehicleOut] = None
    details: Optional[RegistryDetailsOut] = None
    defaults: dict[str, Any]
    error: Optional[LookupErrorOut] = None


class ValuationRequest(BaseModel):
    make: str = Field(min_length=1)
    model: str = ""
    year: int = Field(ge=1900)
    fuel_type: str = Field(default="petrol", min_length=1)
    original_price: float = Field(gt=0)
    is_ulez_compliant: bool = True
    current_mileage: int = Field(ge=0)
    condition: Condition = "good"
    service_history: ServiceHistory = "full"
    mot_status: MotStatus = "current"


class FactorsOut(BaseModel):
    age: float
    mileage: float
    condition: float
    service_history: float
    mot: float
    market: float
    ulez: float


class BreakdownOut(BaseModel):
    base_value: float
    age: int
    mileage: int
    expected_mileage: int
    total_depreciation: float


class ValuationResponse(BaseModel):
    market_value: int
    trade_in_value: int
    factors: FactorsOut
    breakdown: BreakdownOut


class HealthResponse(BaseModel):
    status: str


def _lookup_response(form: ValuationForm) -> LookupResponse:
    vehicle = form.vehicle
    return LookupResponse(
        phase=form.phase,
        registration=form.registration,
        vehicle=VehicleOut(**asdict(vehicle.attributes)) if vehicle else None,
        details=RegistryDetailsOut(**asdict(vehicle.details)) if vehicle else None,
        defaults=asdict(form.entry),
        error=LookupErrorOut(category=form.failure.category, message=form.failure.message) if form.failure else None,
    )


# ── App Factory ─────────────────────────────────────────────────────

def create_app(registry_client: RegistryClient | None = None) -> FastAPI:
    settings = ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    client = registry_client or DvlaRegistryClient(
        api_key=settings.dvla_api_key,
        base_url=settings.dvla_base_url,
        timeout_seconds=settings.dvla_timeout_seconds,
    )
    if not settings.dvla_api_key and registry_client is None:
        logger.warning("DVLA_API_KEY is not set; registration lookups will fall back to manual entry")

    app = FastAPI(title="Car Valuation API", version="0.1.0")

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        cid = request.headers.get("X-Correlation-ID") or new_correlation_id()
        correlation_id.set(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(_: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": {"field": exc.field, "reason": exc.reason}},
        )

    @app.exception_handler(LookupInProgress)
    async def lookup_in_progress_handler(_: Request, exc: LookupInProgress) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    # ── Lookup / Valuation ──────────────────────────────────────────

    @app.post("/lookup", response_model=LookupResponse)
    async def lookup(payload: LookupRequest) -> LookupResponse:
        """The single-lookup-in-flight guard is per orchestrator, and each request builds its own."""
        orchestrator = LookupOrchestrator(client)
        form = await orchestrator.submit(ValuationForm.start(), payload.registration)
        return _lookup_response(form)

    @app.post("/valuations", response_model=ValuationResponse)
    async def valuations(payload: ValuationRequest) -> ValuationResponse:
        vehicle = VehicleAttributes(
            make=payload.make,
            model=payload.model,
            year=payload.year,
            fuel_type=payload.fuel_type,
            original_price=payload.original_price,
            is_ulez_compliant=payload.is_ulez_compliant,
        )
        inputs = UserInputs(
            current_mileage=payload.current_mileage,
            condition=payload.condition,
            service_history=payload.service_history,
            mot_status=payload.mot_status,
        )
        result = value_vehicle(vehicle, inputs)
        logger.info(
            "Valued %s %s (%s) at %s",
            payload.make, payload.model, payload.year, result.market_value,
            extra={"extra_data": {"market_value": result.market_value, "trade_in_value": result.trade_in_value}},
        )
        return ValuationResponse(**asdict(result))

    # ── Reference Data ──────────────────────────────────────────────

    @app.get("/factors")
    async def factors() -> dict[str, Any]:
        return describe_tables()

    @app.get("/reference-links")
    async def reference_links() -> dict[str, Any]:
        return {"links": reference_links_payload()}

    # ── Health ──────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    return app


app = create_app()
