import pytest

from rental_engine.adapters.io.exports import serialize_breakdown
from rental_engine.core.config import PricingConfig
from rental_engine.core.errors import ValidationError
from rental_engine.core.models import AddOn, InsuranceTier, PriceBreakdown
from rental_engine.modules.pricing.engine import quote, rental_days, require_quote

from conftest import make_request


def test_worked_example_three_days_standard_with_gps():
    result = quote(make_request())

    assert isinstance(result, PriceBreakdown)
    assert result.days == 3
    assert result.vehicle_subtotal == pytest.approx(360)
    assert result.insurance_subtotal == pytest.approx(75)
    assert result.add_ons_subtotal == pytest.approx(15)
    assert result.subtotal == pytest.approx(450)
    assert result.tax == pytest.approx(81.0)
    assert result.total == pytest.approx(531.0)

    shown = serialize_breakdown(result)
    assert shown["tax"] == 81.0
    assert shown["total"] == 531.0
    assert shown["add_ons"] == [{"add_on": "gps_unit", "subtotal": 15.0}]


def test_same_day_rental_bills_one_day():
    result = quote(make_request(return_date="2025-06-01", return_time="18:00"))
    assert result.days == 1
    assert result.vehicle_subtotal == pytest.approx(120)


@pytest.mark.parametrize(
    "pickup, returned, days",
    [
        ("2025-06-01", "2025-06-01", 1),
        ("2025-06-01", "2025-06-02", 1),
        ("2025-06-01", "2025-06-08", 7),
        ("2024-02-28", "2024-03-01", 2),
        ("2025-12-31", "2026-01-02", 2),
    ],
)
def test_rental_days_never_below_one(pickup, returned, days):
    result = quote(make_request(pickup_date=pickup, return_date=returned))
    assert result.days == days


@pytest.mark.parametrize(
    "tier, daily",
    [(InsuranceTier.ESSENTIAL, 15), (InsuranceTier.STANDARD, 25), (InsuranceTier.ELITE, 40)],
)
def test_insurance_tiers(tier, daily):
    result = quote(make_request(insurance_tier=tier, add_ons=set()))
    assert result.insurance_daily_rate == daily
    assert result.insurance_subtotal == pytest.approx(daily * 3)


def test_all_add_ons():
    result = quote(make_request(add_ons={AddOn.GPS_UNIT, AddOn.CHILD_SEAT, AddOn.SECOND_DRIVER}))
    assert result.add_on_subtotals == pytest.approx(
        {AddOn.CHILD_SEAT: 24, AddOn.GPS_UNIT: 15, AddOn.SECOND_DRIVER: 30}
    )
    assert result.add_ons_subtotal == pytest.approx(69)


@pytest.mark.parametrize("rate", [0, 0.01, 49.99, 120, 333.33])
@pytest.mark.parametrize("returned", ["2025-06-01", "2025-06-05", "2025-07-15"])
@pytest.mark.parametrize("tier", list(InsuranceTier))
def test_totals_are_internally_consistent(rate, returned, tier):
    result = quote(make_request(daily_rate=rate, return_date=returned, insurance_tier=tier))
    assert result.days >= 1
    assert result.subtotal == pytest.approx(
        result.vehicle_subtotal + result.insurance_subtotal + result.add_ons_subtotal
    )
    assert result.total == pytest.approx(result.subtotal + result.tax)
    assert result.tax == pytest.approx(result.subtotal * 0.18)


def test_quote_is_idempotent():
    request = make_request(add_ons={AddOn.CHILD_SEAT, AddOn.SECOND_DRIVER})
    assert quote(request) == quote(request)


def test_no_rounding_before_presentation():
    result = quote(make_request(daily_rate=33.333, add_ons=set(), insurance_tier=InsuranceTier.ESSENTIAL))
    assert result.vehicle_subtotal == pytest.approx(99.999)
    assert serialize_breakdown(result)["vehicle_subtotal"] == 100.0


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"pickup_date": ""}, "pickup_date"),
        ({"return_date": ""}, "return_date"),
        ({"pickup_date": "06/01/2025"}, "pickup_date"),
        ({"return_date": "not-a-date"}, "return_date"),
        ({"return_date": "2025-05-30"}, "return_date"),
        ({"daily_rate": None}, "daily_rate"),
        ({"daily_rate": -1}, "daily_rate"),
        ({"insurance_tier": "platinum"}, "insurance_tier"),
        ({"add_ons": {"jetpack"}}, "add_ons"),
    ],
)
def test_invalid_input_is_returned_as_validation_error(overrides, field):
    result = quote(make_request(**overrides))
    assert isinstance(result, ValidationError)
    assert result.field == field


def test_require_quote_raises():
    with pytest.raises(ValidationError) as info:
        require_quote(make_request(pickup_date=""))
    assert info.value.field == "pickup_date"


def test_custom_pricing_config():
    config = PricingConfig(tax_rate=0.0, currency="AZN")
    result = quote(make_request(), config)
    assert result.tax == 0
    assert result.total == pytest.approx(450)
    assert result.currency == "AZN"


def test_rental_days_helper():
    from datetime import date

    assert rental_days(date(2025, 1, 1), date(2025, 1, 1)) == 1
    assert rental_days(date(2025, 1, 1), date(2025, 1, 11)) == 10
