from __future__ import annotations

import math
from datetime import date
from numbers import Integral, Real
from typing import Optional

from valuation.config import ValuationConfig
from valuation.data_models import (
    UserInputs,
    ValuationBreakdown,
    ValuationFactors,
    ValuationResult,
    VehicleAttributes,
)
from valuation.errors import InvalidInput
from valuation.factor_tables import condition_factor, mot_factor, service_history_factor
from valuation.rounding import as_percentage, round_currency, round_half_up

_DEFAULT_CONFIG = ValuationConfig()


def age_factor(age: int) -> float:
    """Share of the original price retained after ``age`` years."""
    if age <= 1:
        return 0.80
    if age <= 2:
        return 0.70
    if age <= 3:
        return 0.61
    if age <= 4:
        return 0.55
    if age <= 5:
        return 0.50
    if age <= 8:
        return 0.40 - (age - 5) * 0.03
    if age <= 10:
        return 0.30
    return 0.20


def mileage_factor(mileage: float, age: int, config: ValuationConfig = _DEFAULT_CONFIG) -> float:
    expected = age * config.expected_miles_per_year
    if expected <= 0:
        return 1.0
    variance = (mileage - expected) / expected
    factor = 1 - variance * config.mileage_sensitivity
    return min(config.mileage_factor_cap, max(config.mileage_factor_floor, factor))


def market_factor(make: str, fuel_type: str, config: ValuationConfig = _DEFAULT_CONFIG) -> float:
    brand = config.brand_factors.get(make.strip().upper(), config.default_brand_factor)
    fuel = config.fuel_factors.get(fuel_type.strip().lower(), config.default_fuel_factor)
    return brand * fuel


def ulez_factor(is_compliant: bool, config: ValuationConfig = _DEFAULT_CONFIG) -> float:
    return 1.0 if is_compliant else config.ulez_penalty


def _require_finite(field: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(field, f"expected a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidInput(field, "must be a finite number")
    return float(value)


def _validate(vehicle: VehicleAttributes, inputs: UserInputs, reference_year: int) -> int:
    price = _require_finite("original_price", vehicle.original_price)
    if price <= 0:
        raise InvalidInput("original_price", "must be greater than zero")
    mileage = _require_finite("current_mileage", inputs.current_mileage)
    if mileage < 0:
        raise InvalidInput("current_mileage", "must not be negative")
    if isinstance(vehicle.year, bool) or not isinstance(vehicle.year, Integral):
        raise InvalidInput("year", "expected a whole calendar year")
    age = reference_year - int(vehicle.year)
    if age < 0:
        raise InvalidInput("year", f"{vehicle.year} is later than {reference_year}")
    return age


def value_vehicle(
    vehicle: VehicleAttributes,
    inputs: UserInputs,
    reference_year: Optional[int] = None,
    config: ValuationConfig = _DEFAULT_CONFIG,
) -> ValuationResult:
    """Price a vehicle by applying the seven adjustment factors to its original price.

    Every input is validated and every factor resolved before any figure is
    produced, so a result is either complete or an exception is raised.
    """
    ref_year = reference_year or date.today().year
    age = _validate(vehicle, inputs, ref_year)

    factors = {
        "age": age_factor(age),
        "mileage": mileage_factor(inputs.current_mileage, age, config),
        "condition": condition_factor(inputs.condition).multiplier,
        "service_history": service_history_factor(inputs.service_history).multiplier,
        "mot": mot_factor(inputs.mot_status).multiplier,
        "market": market_factor(vehicle.make, vehicle.fuel_type, config),
        "ulez": ulez_factor(vehicle.is_ulez_compliant, config),
    }

    value = vehicle.original_price
    for multiplier in factors.values():
        value *= multiplier
    market_value = round_currency(value)

    return ValuationResult(
        market_value=market_value,
        trade_in_value=round_currency(market_value * config.trade_in_ratio),
        factors=ValuationFactors(**{name: as_percentage(f) for name, f in factors.items()}),
        breakdown=ValuationBreakdown(
            base_value=vehicle.original_price,
            age=age,
            mileage=inputs.current_mileage,
            expected_mileage=age * config.expected_miles_per_year,
            total_depreciation=round_half_up((1 - market_value / vehicle.original_price) * 100, 1),
        ),
    )
