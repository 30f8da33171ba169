"""Reservation lifecycle module."""

from rental_engine.modules.lifecycle.manager import ReservationLifecycle
from rental_engine.modules.lifecycle.states import allowed_transitions, can_transition, is_terminal, validate_transition
from rental_engine.modules.lifecycle.tracking import build_timeline

__all__ = [
    "ReservationLifecycle",
    "allowed_transitions",
    "build_timeline",
    "can_transition",
    "is_terminal",
    "validate_transition",
]
