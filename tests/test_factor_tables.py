import pytest

from valuation.errors import UnknownFactorKey
from valuation.factor_tables import (
    CONDITION_FACTORS,
    condition_factor,
    describe_tables,
    mot_factor,
    service_history_factor,
)


@pytest.mark.parametrize(
    "key,expected",
    [("excellent", 1.08), ("verygood", 1.03), ("good", 0.98), ("fair", 0.85), ("poor", 0.70)],
)
def test_condition_factors(key, expected):
    assert condition_factor(key).multiplier == expected


@pytest.mark.parametrize("key,expected", [("full", 1.05), ("partial", 1.00), ("none", 0.90)])
def test_service_history_factors(key, expected):
    assert service_history_factor(key).multiplier == expected


@pytest.mark.parametrize("key,expected", [("current", 1.03), ("advisories", 1.00), ("expired", 0.85)])
def test_mot_factors(key, expected):
    assert mot_factor(key).multiplier == expected


def test_unknown_key_raises():
    with pytest.raises(UnknownFactorKey) as exc_info:
        condition_factor("mint")
    assert exc_info.value.table == "condition"
    assert exc_info.value.key == "mint"

    with pytest.raises(UnknownFactorKey):
        mot_factor("")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        CONDITION_FACTORS["mint"] = None  # type: ignore[index]


def test_describe_tables():
    tables = describe_tables()
    assert set(tables) == {"condition", "service_history", "mot"}
    assert [row["key"] for row in tables["service_history"]] == ["full", "partial", "none"]
    assert tables["mot"][2] == {
        "key": "expired",
        "multiplier": 0.85,
        "description": "Expired or significant issues",
    }
