import pytest

from rental_engine.adapters.notify.sinks import LoggingNotificationSink
from rental_engine.adapters.storage.repositories import InMemoryReservationStore
from rental_engine.core.config import Settings
from rental_engine.core.models import AddOn, InsuranceTier, PaymentMethod, RentalRequest
from rental_engine.modules.lifecycle.manager import ReservationLifecycle
from rental_engine.modules.pricing.engine import require_quote


def make_request(**overrides):
    values = dict(
        vehicle_id=1,
        vehicle_name="BMW 5 Series",
        daily_rate=120.0,
        pickup_date="2025-06-01",
        pickup_time="10:00",
        return_date="2025-06-04",
        return_time="10:00",
        insurance_tier=InsuranceTier.STANDARD,
        add_ons={AddOn.GPS_UNIT},
        first_name="Aysel",
        last_name="Huseynova",
        email="aysel@example.com",
        phone="+994 50 000 00 00",
        payment_method=PaymentMethod.CARD,
    )
    values.update(overrides)
    return RentalRequest(**values)


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def store():
    return InMemoryReservationStore()


@pytest.fixture
def sink():
    return LoggingNotificationSink()


@pytest.fixture
def lifecycle(store, sink):
    manager = ReservationLifecycle(store, sink, settings=Settings(store_timeout=2.0, notify_timeout=0.5))
    yield manager
    manager.close()


@pytest.fixture
def reservation(lifecycle):
    request = make_request()
    return lifecycle.create(request, require_quote(request))
