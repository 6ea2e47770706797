"""Original-price and emissions-zone heuristics for registry-derived vehicles.

These encode market assumptions (brand list prices, Euro standard cut-off
years) that date quickly, so they sit behind ``EstimationStrategy`` and the
normalizer takes whichever implementation it is handed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from valuation.rounding import round_currency


class EstimationStrategy(Protocol):
    def estimate_original_price(
        self, make: str, year: int, engine_capacity: Optional[int], reference_year: int
    ) -> int: ...

    def is_ulez_compliant(self, fuel_type: str, year: int, euro_status: Optional[str] = None) -> bool: ...


@dataclass(frozen=True)
class HeuristicEstimator:
    default_base_price: int = 25_000
    annual_depreciation: float = 0.08
    year_factor_floor: float = 0.6
    reference_engine_cc: int = 1800
    engine_factor_min: float = 0.7
    engine_factor_max: float = 1.8
    petrol_ulez_from: int = 2005  # most cars Euro 4 by then
    diesel_ulez_from: int = 2015  # most cars Euro 6 by then
    base_prices: Dict[str, int] = field(
        default_factory=lambda: {
            "BMW": 35_000,
            "MERCEDES-BENZ": 40_000,
            "MERCEDES": 40_000,
            "AUDI": 35_000,
            "TOYOTA": 25_000,
            "HONDA": 24_000,
            "FORD": 20_000,
            "VAUXHALL": 18_000,
            "VOLKSWAGEN": 28_000,
            "NISSAN": 22_000,
            "HYUNDAI": 20_000,
            "JAGUAR": 45_000,
            "LAND ROVER": 50_000,
            "PORSCHE": 70_000,
            "TESLA": 45_000,
            "VOLVO": 35_000,
            "MINI": 25_000,
            "PEUGEOT": 22_000,
            "RENAULT": 20_000,
            "SKODA": 24_000,
            "SEAT": 22_000,
        }
    )

    def base_price(self, make: str) -> int:
        return self.base_prices.get(make.strip().upper(), self.default_base_price)

    def year_factor(self, year: int, reference_year: int) -> float:
        return max(self.year_factor_floor, 1 - (reference_year - year) * self.annual_depreciation)

    def engine_factor(self, engine_capacity: Optional[int]) -> float:
        if not engine_capacity or engine_capacity <= 0:
            return 1.0
        ratio = engine_capacity / self.reference_engine_cc
        return min(self.engine_factor_max, max(self.engine_factor_min, ratio))

    def estimate_original_price(
        self, make: str, year: int, engine_capacity: Optional[int], reference_year: int
    ) -> int:
        price = self.base_price(make) * self.year_factor(year, reference_year) * self.engine_factor(engine_capacity)
        return round_currency(price)

    def is_ulez_compliant(self, fuel_type: str, year: int, euro_status: Optional[str] = None) -> bool:
        # euro_status is accepted for implementations backed by real data; the
        # heuristic only looks at fuel and manufacture year.
        fuel = fuel_type.strip().lower()
        if fuel in {"electric", "electricity"}:
            return True
        if fuel == "petrol":
            return year >= self.petrol_ulez_from
        if fuel in {"diesel", "heavy oil"}:
            return year >= self.diesel_ulez_from
        return False
