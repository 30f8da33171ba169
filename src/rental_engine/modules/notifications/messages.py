"""Customer-facing messages sent on reservation events."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Dict, Optional

from rental_engine.core.models import Reservation, ReservationStatus
from rental_engine.core.normalization import round_money

BRAND = "CityCars.az"

_HEADLINES = {
    "created": "Booking Received",
    "confirmed": "Booking Confirmed",
    "cancelled": "Booking Cancelled",
    "completed": "Rental Completed",
}


@dataclass(frozen=True)
class NotificationMessage:
    to: str
    subject: str
    text: str
    html: str
    event: str
    reservation_id: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "to": self.to,
            "subject": self.subject,
            "text": self.text,
            "html": self.html,
            "event": self.event,
            "reservation_id": self.reservation_id,
        }


def event_for_status(status: ReservationStatus) -> Optional[str]:
    """Status changes that the customer hears about; others stay silent."""
    if status in (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, ReservationStatus.COMPLETED):
        return status.value
    return None


def build_message(reservation: Reservation, event: str) -> NotificationMessage:
    if event not in _HEADLINES:
        raise ValueError(f"Unknown notification event: {event}")
    request = reservation.request
    headline = _HEADLINES[event]
    vehicle = request.vehicle_name or f"vehicle #{request.vehicle_id}"
    total = f"{round_money(reservation.total_price):.2f} {reservation.price.currency}"
    if event == "created":
        body = "your booking #{id} for {vehicle} has been received."
    else:
        body = "your booking #{id} for {vehicle} is now {event}."
    text = (
        f"Hello {request.first_name}, {body.format(id=reservation.id, vehicle=vehicle, event=event)} "
        f"Pickup {request.pickup_date} {request.pickup_time} at {request.pickup_location}. "
        f"Total {total}."
    )
    html = (
        f"<h1>{headline}</h1>"
        f"<p>Dear {escape(request.first_name)}, {body.format(id=reservation.id, vehicle=escape(vehicle), event=event)}</p>"
        f"<p>Pickup: {escape(request.pickup_date)} {escape(request.pickup_time)}, {escape(request.pickup_location)}</p>"
        f"<p>Return: {escape(request.return_date)} {escape(request.return_time)}, {escape(request.return_location)}</p>"
        f"<p>Total: {total}</p>"
    )
    return NotificationMessage(
        to=request.email,
        subject=f"{headline} - {BRAND}",
        text=text,
        html=html,
        event=event,
        reservation_id=reservation.id,
    )
