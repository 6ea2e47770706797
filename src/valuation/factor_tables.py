from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from valuation.data_models import FactorEntry
from valuation.errors import UnknownFactorKey


def _table(*rows: tuple[str, float, str]) -> Mapping[str, FactorEntry]:
    return MappingProxyType({key: FactorEntry(key, multiplier, desc) for key, multiplier, desc in rows})


CONDITION_FACTORS = _table(
    ("excellent", 1.08, "Like new, no visible wear"),
    ("verygood", 1.03, "Minor wear, well maintained"),
    ("good", 0.98, "Normal wear, good condition"),
    ("fair", 0.85, "Noticeable issues, some repairs needed"),
    ("poor", 0.70, "Significant issues, major repairs needed"),
)

SERVICE_HISTORY_FACTORS = _table(
    ("full", 1.05, "Complete service record"),
    ("partial", 1.00, "Some service records"),
    ("none", 0.90, "No service records"),
)

MOT_FACTORS = _table(
    ("current", 1.03, "Current MOT with no advisories"),
    ("advisories", 1.00, "Current MOT with minor advisories"),
    ("expired", 0.85, "Expired or significant issues"),
)

FACTOR_TABLES: Mapping[str, Mapping[str, FactorEntry]] = MappingProxyType(
    {
        "condition": CONDITION_FACTORS,
        "service_history": SERVICE_HISTORY_FACTORS,
        "mot": MOT_FACTORS,
    }
)


def lookup_factor(table: str, key: str) -> FactorEntry:
    entries = FACTOR_TABLES.get(table)
    if entries is None or key not in entries:
        raise UnknownFactorKey(table, key)
    return entries[key]


def condition_factor(key: str) -> FactorEntry:
    return lookup_factor("condition", key)


def service_history_factor(key: str) -> FactorEntry:
    return lookup_factor("service_history", key)


def mot_factor(key: str) -> FactorEntry:
    return lookup_factor("mot", key)


def describe_tables() -> dict[str, list[dict[str, Any]]]:
    return {
        name: [
            {"key": e.key, "multiplier": e.multiplier, "description": e.description}
            for e in entries.values()
        ]
        for name, entries in FACTOR_TABLES.items()
    }
