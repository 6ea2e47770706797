from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional

from valuation.data_models import RegistryDetails, RegistryVehicle, VehicleAttributes
from valuation.estimation import EstimationStrategy, HeuristicEstimator

logger = logging.getLogger(__name__)

_FUEL_ALIASES = {
    "electricity": "electric",
    "heavy oil": "diesel",
    "petrol": "petrol",
}

_DEFAULT_AGE_YEARS = 5


def normalize_fuel_type(raw: Any) -> str:
    text = str(raw).strip().lower() if raw is not None else ""
    if not text:
        return "petrol"
    return _FUEL_ALIASES.get(text, text)


def _parse_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        try:
            return int(float(str(raw).strip()))
        except (ValueError, OverflowError):
            return None


def _text(raw: Any, default: str = "Unknown") -> str:
    if raw is None or raw == "":
        return default
    return str(raw)


def _optional_text(raw: Any) -> Optional[str]:
    return None if raw is None or raw == "" else str(raw)


def normalize_registry_record(
    record: Mapping[str, Any],
    reference_year: Optional[int] = None,
    estimator: Optional[EstimationStrategy] = None,
) -> RegistryVehicle:
    """Map a vehicle-enquiry payload onto the engine's vehicle attributes.

    Any field may be missing. Make and model fall back to "Unknown", the year
    to five years before ``reference_year``, and the original price is
    estimated from brand, year and engine capacity.
    """
    ref_year = reference_year or date.today().year
    strategy = estimator or HeuristicEstimator()

    make = _text(record.get("make"))
    model = _text(record.get("model"))
    year = _parse_int(record.get("yearOfManufacture"))
    if year is None:
        year = ref_year - _DEFAULT_AGE_YEARS
        logger.debug("registry record has no usable yearOfManufacture, assuming %s", year)

    fuel_type = normalize_fuel_type(record.get("fuelType"))
    engine_capacity = _parse_int(record.get("engineCapacity"))
    if engine_capacity is not None and engine_capacity <= 0:
        engine_capacity = None

    attributes = VehicleAttributes(
        make=make,
        model=model,
        year=year,
        fuel_type=fuel_type,
        original_price=strategy.estimate_original_price(make, year, engine_capacity, ref_year),
        is_ulez_compliant=strategy.is_ulez_compliant(fuel_type, year, _optional_text(record.get("euroStatus"))),
    )
    details = RegistryDetails(
        engine_size=f"{engine_capacity}cc" if engine_capacity else "Unknown",
        colour=_text(record.get("colour")),
        tax_status=_text(record.get("taxStatus")),
        mot_status=_text(record.get("motStatus")),
        co2_emissions=_text(record.get("co2Emissions")),
        euro_status=_optional_text(record.get("euroStatus")),
        tax_due_date=_optional_text(record.get("taxDueDate")),
        mot_expiry_date=_optional_text(record.get("motExpiryDate")),
        date_of_last_v5c_issued=_optional_text(record.get("dateOfLastV5CIssued")),
    )
    return RegistryVehicle(attributes=attributes, details=details)
