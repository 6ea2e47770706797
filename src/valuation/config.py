from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class ValuationConfig:
    expected_miles_per_year: int = 10_000  # UK average
    mileage_sensitivity: float = 0.4
    mileage_factor_floor: float = 0.6
    mileage_factor_cap: float = 1.4
    trade_in_ratio: float = 0.85
    ulez_penalty: float = 0.85
    default_brand_factor: float = 0.98
    default_fuel_factor: float = 0.98
    # Keys are upper-case; lookups fold the make before matching.
    brand_factors: Dict[str, float] = field(
        default_factory=lambda: {
            "BMW": 1.02,
            "MERCEDES": 1.05,
            "MERCEDES-BENZ": 1.05,
            "AUDI": 1.01,
            "TOYOTA": 1.08,
            "HONDA": 1.06,
            "FORD": 0.98,
            "VAUXHALL": 0.95,
            "TESLA": 0.85,
            "DS": 0.75,
            "POLESTAR": 0.80,
        }
    )
    fuel_factors: Dict[str, float] = field(
        default_factory=lambda: {
            "electric": 1.00,
            "hybrid": 1.02,
            "diesel": 1.00,
            "petrol": 0.98,
        }
    )
