"""Admin dashboard figures over the reservation book."""

from __future__ import annotations

from typing import Any, Dict, Iterable

from rental_engine.core.models import Reservation, ReservationStatus
from rental_engine.core.normalization import round_money


def summarize(reservations: Iterable[Reservation]) -> Dict[str, Any]:
    by_status = {status.value: 0 for status in ReservationStatus}
    total = 0
    revenue = 0.0
    for reservation in reservations:
        total += 1
        by_status[reservation.status.value] += 1
        if reservation.status != ReservationStatus.CANCELLED:
            revenue += reservation.total_price
    return {
        "total": total,
        "by_status": by_status,
        "active": by_status["pending"] + by_status["confirmed"] + by_status["in_transit"],
        "booked_revenue": round_money(revenue),
    }
