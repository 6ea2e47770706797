import pytest

from valuation.data_models import UserInputs
from valuation.engine import value_vehicle
from valuation.estimation import HeuristicEstimator
from valuation.normalizer import normalize_fuel_type, normalize_registry_record

REF_YEAR = 2025

DVLA_RECORD = {
    "registrationNumber": "AB21ABC",
    "make": "BMW",
    "model": "320D M SPORT",
    "yearOfManufacture": REF_YEAR - 3,
    "fuelType": "HEAVY OIL",
    "engineCapacity": 1995,
    "colour": "BLUE",
    "taxStatus": "Taxed",
    "motStatus": "Valid",
    "co2Emissions": 124,
    "euroStatus": "EURO 6",
    "taxDueDate": "2026-03-01",
    "motExpiryDate": "2026-05-14",
    "dateOfLastV5CIssued": "2022-06-10",
}


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("ELECTRICITY", "electric"),
        ("Heavy Oil", "diesel"),
        ("PETROL", "petrol"),
        ("DIESEL", "diesel"),
        ("HYBRID ELECTRIC", "hybrid electric"),
        (None, "petrol"),
        ("", "petrol"),
    ],
)
def test_normalize_fuel_type(raw, expected):
    assert normalize_fuel_type(raw) == expected


def test_full_record():
    vehicle = normalize_registry_record(DVLA_RECORD, reference_year=REF_YEAR)
    attrs = vehicle.attributes
    assert attrs.make == "BMW"
    assert attrs.model == "320D M SPORT"
    assert attrs.year == REF_YEAR - 3
    assert attrs.fuel_type == "diesel"
    # 35000 * (1 - 3 * 0.08) * (1995 / 1800)
    assert attrs.original_price == 29482
    assert attrs.is_ulez_compliant is True

    details = vehicle.details
    assert details.engine_size == "1995cc"
    assert details.colour == "BLUE"
    assert details.co2_emissions == "124"
    assert details.euro_status == "EURO 6"
    assert details.mot_expiry_date == "2026-05-14"
    assert details.date_of_last_v5c_issued == "2022-06-10"


def test_empty_record_gets_defaults():
    vehicle = normalize_registry_record({}, reference_year=REF_YEAR)
    attrs = vehicle.attributes
    assert attrs.make == "Unknown"
    assert attrs.model == "Unknown"
    assert attrs.year == REF_YEAR - 5
    assert attrs.fuel_type == "petrol"
    assert attrs.original_price == 15000
    assert attrs.is_ulez_compliant is True
    assert vehicle.details.engine_size == "Unknown"
    assert vehicle.details.tax_status == "Unknown"
    assert vehicle.details.tax_due_date is None


def test_numeric_strings_are_parsed():
    vehicle = normalize_registry_record(
        {"make": "ford", "yearOfManufacture": "2019", "engineCapacity": "999", "fuelType": "petrol"},
        reference_year=REF_YEAR,
    )
    assert vehicle.attributes.year == 2019
    assert vehicle.details.engine_size == "999cc"
    # 20000 * max(0.6, 0.52) * 0.7 (engine factor floor)
    assert vehicle.attributes.original_price == 8400


def test_unparseable_year_defaults():
    vehicle = normalize_registry_record({"yearOfManufacture": "n/a"}, reference_year=REF_YEAR)
    assert vehicle.attributes.year == REF_YEAR - 5


@pytest.mark.parametrize("raw_year", ["Infinity", "-inf", "nan", float("inf")])
def test_non_finite_year_defaults(raw_year):
    vehicle = normalize_registry_record({"yearOfManufacture": raw_year}, reference_year=REF_YEAR)
    assert vehicle.attributes.year == REF_YEAR - 5
    assert vehicle.attributes.original_price == 15000


def test_zero_engine_capacity_counts_as_unknown():
    vehicle = normalize_registry_record({"make": "TESLA", "engineCapacity": 0, "fuelType": "ELECTRICITY"}, reference_year=REF_YEAR)
    assert vehicle.details.engine_size == "Unknown"
    assert vehicle.attributes.original_price == 27000


class _FixedEstimator:
    def estimate_original_price(self, make, year, engine_capacity, reference_year):
        return 12345

    def is_ulez_compliant(self, fuel_type, year, euro_status=None):
        return euro_status == "EURO 6"


def test_estimator_is_swappable():
    vehicle = normalize_registry_record(DVLA_RECORD, reference_year=REF_YEAR, estimator=_FixedEstimator())
    assert vehicle.attributes.original_price == 12345
    assert vehicle.attributes.is_ulez_compliant is True


@pytest.mark.parametrize(
    "record",
    [
        DVLA_RECORD,
        {},
        {"make": "PORSCHE", "yearOfManufacture": REF_YEAR, "fuelType": "PETROL", "engineCapacity": 3996},
        {"make": "DACIA", "yearOfManufacture": 1998, "fuelType": "GAS BI-FUEL"},
    ],
)
def test_normalized_record_values_with_default_inputs(record):
    vehicle = normalize_registry_record(record, reference_year=REF_YEAR)
    inputs = UserInputs(current_mileage=0, condition="good", service_history="full", mot_status="current")
    result = value_vehicle(vehicle.attributes, inputs, reference_year=REF_YEAR)
    assert result.market_value > 0


class TestHeuristicEstimator:
    def setup_method(self):
        self.estimator = HeuristicEstimator()

    def test_brand_lookup_is_case_insensitive(self):
        assert self.estimator.base_price("land rover") == 50000
        assert self.estimator.base_price("Mercedes-Benz") == 40000
        assert self.estimator.base_price("Lada") == 25000

    def test_year_factor_floor(self):
        assert self.estimator.year_factor(REF_YEAR, REF_YEAR) == 1.0
        assert self.estimator.year_factor(REF_YEAR - 20, REF_YEAR) == 0.6

    def test_engine_factor_clamp(self):
        assert self.estimator.engine_factor(None) == 1.0
        assert self.estimator.engine_factor(1800) == 1.0
        assert self.estimator.engine_factor(600) == 0.7
        assert self.estimator.engine_factor(6000) == 1.8

    @pytest.mark.parametrize(
        "fuel,year,expected",
        [
            ("electric", 1999, True),
            ("ELECTRICITY", 2003, True),
            ("petrol", 2005, True),
            ("petrol", 2004, False),
            ("diesel", 2015, True),
            ("diesel", 2014, False),
            ("HEAVY OIL", 2016, True),
            ("hybrid electric", 2022, False),
        ],
    )
    def test_ulez_heuristic(self, fuel, year, expected):
        assert self.estimator.is_ulez_compliant(fuel, year) is expected
