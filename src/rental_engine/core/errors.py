"""Custom exceptions for the rental engine."""

from __future__ import annotations

from typing import Any, Optional


class RentalEngineError(Exception):
    """Base error for booking and lifecycle failures."""


class ValidationError(RentalEngineError):
    """Raised (or returned) when an input field is missing or malformed."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        self.message = message or f"{field} is required"
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class InvalidTransition(RentalEngineError):
    """Raised when a lifecycle change is not permitted from the current status."""

    def __init__(self, current: Any, target: Any, message: Optional[str] = None) -> None:
        self.current = getattr(current, "value", current)
        self.target = getattr(target, "value", target)
        super().__init__(message or f"Invalid reservation transition: {self.current} -> {self.target}")


class NotFound(RentalEngineError):
    """Raised when a reservation id is absent from the store."""

    def __init__(self, reservation_id: Any) -> None:
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")


class PermissionDenied(RentalEngineError):
    """Raised when the calling actor may not perform an operation."""

    def __init__(self, actor: Any, operation: str) -> None:
        self.actor = getattr(actor, "value", actor)
        self.operation = operation
        super().__init__(f"{self.actor} may not {operation}")


class DependencyUnavailable(RentalEngineError):
    """Raised when the reservation store or notification sink cannot be reached."""

    def __init__(self, dependency: str, message: Optional[str] = None) -> None:
        self.dependency = dependency
        super().__init__(message or f"{dependency} unavailable")
