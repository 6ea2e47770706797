from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


FuelType = Literal["petrol", "diesel", "hybrid", "electric"]
Condition = Literal["excellent", "verygood", "good", "fair", "poor"]
ServiceHistory = Literal["full", "partial", "none"]
MotStatus = Literal["current", "advisories", "expired"]


@dataclass(frozen=True)
class VehicleAttributes:
    make: str
    model: str
    year: int
    # One of FuelType, or a lower-cased registry value outside it.
    fuel_type: str
    original_price: float
    is_ulez_compliant: bool


@dataclass(frozen=True)
class UserInputs:
    current_mileage: int
    condition: Condition
    service_history: ServiceHistory
    mot_status: MotStatus


@dataclass(frozen=True)
class FactorEntry:
    key: str
    multiplier: float
    description: str


@dataclass(frozen=True)
class RegistryDetails:
    engine_size: str = "Unknown"
    colour: str = "Unknown"
    tax_status: str = "Unknown"
    mot_status: str = "Unknown"
    co2_emissions: str = "Unknown"
    euro_status: Optional[str] = None
    tax_due_date: Optional[str] = None
    mot_expiry_date: Optional[str] = None
    date_of_last_v5c_issued: Optional[str] = None


@dataclass(frozen=True)
class RegistryVehicle:
    attributes: VehicleAttributes
    details: RegistryDetails


@dataclass(frozen=True)
class ValuationFactors:
    """Each multiplier expressed as a percentage to one decimal place."""

    age: float
    mileage: float
    condition: float
    service_history: float
    mot: float
    market: float
    ulez: float


@dataclass(frozen=True)
class ValuationBreakdown:
    base_value: float
    age: int
    mileage: int
    expected_mileage: int
    total_depreciation: float


@dataclass(frozen=True)
class ValuationResult:
    market_value: int
    trade_in_value: int
    factors: ValuationFactors
    breakdown: ValuationBreakdown
