"""Customer tracking view of a reservation."""

from __future__ import annotations

from typing import Any, Dict, List

from rental_engine.core.models import Reservation, ReservationStatus

_CONFIRMED_OR_LATER = {ReservationStatus.CONFIRMED, ReservationStatus.IN_TRANSIT, ReservationStatus.COMPLETED}
_ON_THE_ROAD = {ReservationStatus.IN_TRANSIT, ReservationStatus.COMPLETED}


def build_timeline(reservation: Reservation) -> List[Dict[str, Any]]:
    status = reservation.status
    timeline = [
        {"label": "Booking Received", "completed": True},
        {"label": "Booking Confirmed", "completed": status in _CONFIRMED_OR_LATER},
        {"label": "Driver Assigned", "completed": reservation.driver_name is not None},
        {"label": "Picked Up", "completed": status in _ON_THE_ROAD},
        {"label": "In Transit", "completed": status in _ON_THE_ROAD},
        {"label": "Arrival", "completed": status == ReservationStatus.COMPLETED},
    ]
    if status == ReservationStatus.CANCELLED:
        timeline.append({"label": "Cancelled", "completed": True})
    return timeline
