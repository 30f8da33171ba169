import pytest

from rental_engine.core.errors import DependencyUnavailable, ValidationError
from rental_engine.core.models import AddOn, InsuranceTier, PaymentMethod, ReservationStatus, Vehicle, WizardStep
from rental_engine.modules.catalog.provider import InMemoryCatalog
from rental_engine.modules.wizard.controller import WizardController

JOURNEY = dict(pickup_date="2025-06-01", pickup_time="10:00", return_date="2025-06-04", return_time="10:00")
PROFILE = dict(first_name="Aysel", last_name="Huseynova", email="aysel@example.com", phone="+994500000000")


class FailingLifecycle:
    def __init__(self):
        self.calls = 0

    def create(self, request, quote):
        self.calls += 1
        raise DependencyUnavailable("reservation store")


@pytest.fixture
def wizard(lifecycle):
    controller = WizardController(lifecycle)
    controller.select_vehicle(InMemoryCatalog().get(1))
    return controller


def walk_to_settlement(wizard):
    wizard.update(**JOURNEY)
    assert wizard.advance().ok
    wizard.update(**PROFILE)
    assert wizard.advance().ok
    wizard.update(insurance_tier="prestige", add_ons=["gps"])
    assert wizard.advance().ok


def test_starts_on_journey(wizard):
    assert wizard.step == WizardStep.JOURNEY
    assert wizard.current_step == 0


def test_advance_blocked_reports_missing_fields(wizard):
    wizard.update(pickup_date="2025-06-01")
    report = wizard.advance()
    assert not report.ok
    assert report.missing == ["pickup_time", "return_date", "return_time"]
    assert wizard.current_step == 0


def test_advance_moves_exactly_one_step(wizard):
    wizard.update(**JOURNEY)
    report = wizard.advance()
    assert report.ok
    assert wizard.current_step == 1
    assert wizard.step == WizardStep.PROFILE


def test_journey_rejects_return_before_pickup(wizard):
    wizard.update(**dict(JOURNEY, return_date="2025-05-31"))
    report = wizard.advance()
    assert not report.ok
    assert report.missing == ["return_date"]
    assert wizard.current_step == 0


def test_same_day_return_later_time_is_allowed(wizard):
    wizard.update(**dict(JOURNEY, return_date="2025-06-01", return_time="18:00"))
    assert wizard.advance().ok
    assert wizard.quote().days == 1


def test_profile_requires_identity_but_not_formats(wizard):
    wizard.update(**JOURNEY)
    wizard.advance()
    wizard.update(first_name="A", last_name="B", email="not-an-email", phone="")
    report = wizard.advance()
    assert report.missing == ["phone"]
    wizard.update(phone="x")
    assert wizard.advance().ok
    assert wizard.step == WizardStep.PRIVILEGES


def test_retreat_never_validates(wizard):
    wizard.update(**JOURNEY)
    wizard.advance()
    wizard.update(pickup_date="")
    assert wizard.retreat() is True
    assert wizard.current_step == 0
    assert wizard.retreat() is False
    assert wizard.current_step == 0


def test_update_coerces_aliases(wizard):
    wizard.update(insurance_tier="premium", add_ons=["childSeat", "additionalDriver"], payment_method="cash")
    assert wizard.draft.insurance_tier == InsuranceTier.ELITE
    assert wizard.draft.add_ons == {AddOn.CHILD_SEAT, AddOn.SECOND_DRIVER}
    assert wizard.draft.payment_method == PaymentMethod.CASH


def test_update_rejects_unknown_values_without_partial_write(wizard):
    with pytest.raises(ValueError):
        wizard.update(first_name="Kept?", insurance_tier="platinum")
    assert wizard.draft.first_name == ""
    with pytest.raises(ValueError):
        wizard.update(favourite_colour="red")


def test_live_quote_reports_missing_dates(wizard):
    result = wizard.quote()
    assert isinstance(result, ValidationError)
    assert result.field == "pickup_date"


def test_quote_uses_rate_copied_at_selection(lifecycle):
    catalog = InMemoryCatalog()
    wizard = WizardController(lifecycle)
    wizard.select_vehicle(catalog.get(1))
    wizard.update(**JOURNEY)
    catalog.upsert(Vehicle(id=1, name="BMW 5 Series", daily_rate=999.0))
    assert wizard.quote().vehicle_subtotal == pytest.approx(360)


def test_submit_only_from_last_step(wizard, store):
    wizard.update(**JOURNEY)
    result = wizard.submit()
    assert not result.ok
    assert store.list() == []


def test_advance_at_last_step_does_not_move(wizard):
    walk_to_settlement(wizard)
    report = wizard.advance()
    assert not report.ok
    assert wizard.step == WizardStep.SETTLEMENT


def test_submit_creates_pending_reservation(wizard, sink):
    walk_to_settlement(wizard)
    result = wizard.submit()
    assert result.ok
    reservation = result.reservation
    assert reservation.id is not None
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.total_price == pytest.approx(531.0)
    assert reservation.request.insurance_tier == InsuranceTier.STANDARD
    assert [message.event for message in sink.sent] == ["created"]


def test_submitted_request_is_frozen(wizard, store):
    walk_to_settlement(wizard)
    reservation = wizard.submit().reservation
    wizard.draft.first_name = "Changed"
    assert store.get(reservation.id).request.first_name == "Aysel"


def test_double_submit_is_rejected(wizard, store):
    walk_to_settlement(wizard)
    assert wizard.submit().ok
    second = wizard.submit()
    assert not second.ok
    assert len(store.list()) == 1


def test_store_failure_keeps_draft_for_retry(lifecycle):
    failing = FailingLifecycle()
    wizard = WizardController(failing)
    wizard.select_vehicle(InMemoryCatalog().get(1))
    walk_to_settlement(wizard)

    result = wizard.submit()
    assert not result.ok
    assert isinstance(result.error, DependencyUnavailable)
    assert wizard.step == WizardStep.SETTLEMENT
    assert wizard.draft.first_name == "Aysel"
    assert wizard.reservation is None

    wizard.lifecycle = lifecycle
    retry = wizard.submit()
    assert retry.ok
    assert failing.calls == 1
