import re

import pytest

from rental_engine.core.errors import ValidationError
from rental_engine.core.models import Actor, PaymentMethod
from rental_engine.modules.lifecycle.tracking import build_timeline
from rental_engine.modules.payments.mock import acknowledge_payment


def completed_labels(reservation):
    return [item["label"] for item in build_timeline(reservation) if item["completed"]]


def test_timeline_follows_status(lifecycle, reservation):
    assert completed_labels(reservation) == ["Booking Received"]

    lifecycle.set_status(reservation.id, "confirmed", Actor.ADMIN)
    lifecycle.assign_driver(reservation.id, "Elchin Aliyev", Actor.ADMIN)
    current = lifecycle.set_status(reservation.id, "in_transit", Actor.ADMIN)
    assert completed_labels(current) == [
        "Booking Received",
        "Booking Confirmed",
        "Driver Assigned",
        "Picked Up",
        "In Transit",
    ]

    done = lifecycle.set_status(reservation.id, "completed", Actor.ADMIN)
    assert completed_labels(done)[-1] == "Arrival"


def test_timeline_marks_cancellation(lifecycle, reservation):
    cancelled = lifecycle.set_status(reservation.id, "cancelled", Actor.ADMIN)
    assert build_timeline(cancelled)[-1] == {"label": "Cancelled", "completed": True}


def test_payment_acknowledgement(reservation):
    receipt = acknowledge_payment(reservation)
    assert receipt.success
    assert re.fullmatch(r"TXN-[A-Z0-9]{9}", receipt.transaction_id)
    assert receipt.amount == 531.0
    assert receipt.method == PaymentMethod.CARD
    assert acknowledge_payment(reservation, "cash", 531.0).method == PaymentMethod.CASH


def test_payment_amount_must_match(reservation):
    with pytest.raises(ValidationError) as info:
        acknowledge_payment(reservation, amount=100)
    assert info.value.field == "amount"


def test_payment_rejected_for_cancelled(lifecycle, reservation):
    cancelled = lifecycle.set_status(reservation.id, "cancelled", Actor.ADMIN)
    with pytest.raises(ValidationError):
        acknowledge_payment(cancelled)


def test_payment_unknown_method(reservation):
    with pytest.raises(ValidationError) as info:
        acknowledge_payment(reservation, "bitcoin")
    assert info.value.field == "method"
