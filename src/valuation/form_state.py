"""Snapshots of the multi-step valuation form.

Each step (registration, vehicle details, result) produces a new frozen
``ValuationForm``; nothing here is mutated in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Optional, Union

from valuation.data_models import RegistryVehicle, UserInputs, ValuationResult, VehicleAttributes
from valuation.engine import value_vehicle
from valuation.errors import InvalidInput, LookupFailed
from valuation.factor_tables import FACTOR_TABLES


LookupPhase = Literal["awaiting_registration", "lookup_in_flight", "resolved", "fallback"]

Number = Union[int, float, str, None]


def _parse_number(field_name: str, raw: Number) -> float:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidInput(field_name, "is required")
    if isinstance(raw, bool):
        raise InvalidInput(field_name, "must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInput(field_name, f"{raw!r} is not a number") from None
    if not math.isfinite(value):
        raise InvalidInput(field_name, "must be a finite number")
    return value


def _parse_whole(field_name: str, raw: Number) -> int:
    value = _parse_number(field_name, raw)
    if not value.is_integer():
        raise InvalidInput(field_name, "must be a whole number")
    return int(value)


@dataclass(frozen=True)
class ManualEntry:
    make: str = ""
    model: str = ""
    year: Number = None
    original_price: Number = None
    current_mileage: Number = None
    fuel_type: str = "petrol"
    is_ulez_compliant: bool = True
    condition: str = "good"
    service_history: str = "full"
    mot_status: str = "current"

    def update(self, **changes: Any) -> ManualEntry:
        return replace(self, **changes)

    def with_registry_defaults(self, vehicle: RegistryVehicle) -> ManualEntry:
        attrs = vehicle.attributes
        return replace(
            self,
            make=attrs.make,
            model=attrs.model,
            year=attrs.year,
            original_price=attrs.original_price,
            fuel_type=attrs.fuel_type,
            is_ulez_compliant=attrs.is_ulez_compliant,
        )

    def to_vehicle_attributes(self) -> VehicleAttributes:
        if not self.make.strip():
            raise InvalidInput("make", "is required")
        price = _parse_number("original_price", self.original_price)
        if price <= 0:
            raise InvalidInput("original_price", "must be greater than zero")
        return VehicleAttributes(
            make=self.make.strip(),
            model=self.model.strip(),
            year=_parse_whole("year", self.year),
            fuel_type=self.fuel_type,
            original_price=price,
            is_ulez_compliant=self.is_ulez_compliant,
        )

    def to_user_inputs(self) -> UserInputs:
        mileage = _parse_whole("current_mileage", self.current_mileage)
        if mileage < 0:
            raise InvalidInput("current_mileage", "must not be negative")
        for table, key in (
            ("condition", self.condition),
            ("service_history", self.service_history),
            ("mot", self.mot_status),
        ):
            if key not in FACTOR_TABLES[table]:
                raise InvalidInput(table, f"{key!r} is not one of {sorted(FACTOR_TABLES[table])}")
        return UserInputs(
            current_mileage=mileage,
            condition=self.condition,  # type: ignore[arg-type]
            service_history=self.service_history,  # type: ignore[arg-type]
            mot_status=self.mot_status,  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class ValuationForm:
    registration: str = ""
    phase: LookupPhase = "awaiting_registration"
    entry: ManualEntry = field(default_factory=ManualEntry)
    vehicle: Optional[RegistryVehicle] = None
    failure: Optional[LookupFailed] = None

    @classmethod
    def start(cls) -> ValuationForm:
        return cls()

    def begin_lookup(self, registration: str) -> ValuationForm:
        return replace(self, registration=registration, phase="lookup_in_flight", vehicle=None, failure=None)

    def resolve(self, vehicle: RegistryVehicle) -> ValuationForm:
        return replace(
            self,
            phase="resolved",
            vehicle=vehicle,
            entry=self.entry.with_registry_defaults(vehicle),
            failure=None,
        )

    def fall_back(self, failure: LookupFailed) -> ValuationForm:
        return replace(self, phase="fallback", vehicle=None, failure=failure)

    def edit(self, **changes: Any) -> ValuationForm:
        return replace(self, entry=self.entry.update(**changes))

    def value(self, reference_year: Optional[int] = None) -> ValuationResult:
        return value_vehicle(
            self.entry.to_vehicle_attributes(),
            self.entry.to_user_inputs(),
            reference_year=reference_year,
        )

    def reset(self) -> ValuationForm:
        return ValuationForm.start()
