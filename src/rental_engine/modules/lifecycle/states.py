"""Reservation status transition table."""

from __future__ import annotations

from typing import Dict, FrozenSet

from rental_engine.core.errors import InvalidTransition
from rental_engine.core.models import ReservationStatus

_ALLOWED_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.IN_TRANSIT, ReservationStatus.CANCELLED}),
    ReservationStatus.IN_TRANSIT: frozenset({ReservationStatus.COMPLETED}),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


def allowed_transitions(status: ReservationStatus) -> FrozenSet[ReservationStatus]:
    return _ALLOWED_TRANSITIONS[status]


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in _ALLOWED_TRANSITIONS[current]


def is_terminal(status: ReservationStatus) -> bool:
    return not _ALLOWED_TRANSITIONS[status]


def validate_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(current, target)
