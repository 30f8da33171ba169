"""Reservation lifecycle manager: creation, transitions and fulfillment progress."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from rental_engine.core.config import Settings
from rental_engine.core.errors import (
    DependencyUnavailable,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rental_engine.core.models import Actor, PriceBreakdown, RentalRequest, Reservation, ReservationStatus
from rental_engine.core.normalization import parse_status
from rental_engine.modules.lifecycle.reports import summarize
from rental_engine.modules.lifecycle.states import is_terminal, validate_transition
from rental_engine.modules.notifications.messages import build_message, event_for_status

LOG = logging.getLogger(__name__)

MAX_WRITE_ATTEMPTS = 5


def _require(actor: Actor, allowed: Iterable[Actor], operation: str) -> None:
    if actor not in allowed:
        raise PermissionDenied(actor, operation)


class ReservationLifecycle:
    """
    Owns every mutation of a persisted reservation.

    Store calls are bounded by ``settings.store_timeout`` and surface as
    DependencyUnavailable. Notifications are best effort: bounded by
    ``settings.notify_timeout`` and never propagated to the caller.
    """

    def __init__(self, store: Any, notifier: Any = None, *, settings: Optional[Settings] = None) -> None:
        self.store = store
        self.notifier = notifier
        self.settings = settings or Settings()
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="rental-store")
        # Sends that outlive notify_timeout keep their worker; they must not starve store calls.
        self._notify_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="rental-notify")

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self._notify_executor.shutdown(wait=False)

    def _call_store(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self.settings.store_timeout)
        except FutureTimeout as exc:
            future.cancel()
            LOG.warning("Reservation store timed out during %s", operation)
            raise DependencyUnavailable("reservation store", f"reservation store timed out during {operation}") from exc
        except (ConnectionError, OSError) as exc:
            LOG.warning("Reservation store failed during %s: %s", operation, exc)
            raise DependencyUnavailable("reservation store", f"reservation store failed during {operation}") from exc

    def _notify(self, reservation: Reservation, event: str) -> None:
        if self.notifier is None:
            return
        try:
            message = build_message(reservation, event)
            future = self._notify_executor.submit(self.notifier.send, message)
            future.result(timeout=self.settings.notify_timeout)
        except FutureTimeout:
            future.cancel()
            LOG.warning("Notification %s for reservation %s timed out", event, reservation.id)
        except Exception as exc:
            LOG.warning("Notification %s for reservation %s failed: %s", event, reservation.id, exc)

    def create(
        self,
        request: RentalRequest,
        quote: Union[PriceBreakdown, ValidationError],
        actor: Actor = Actor.CUSTOMER,
    ) -> Reservation:
        if isinstance(quote, ValidationError):
            raise quote
        reservation = Reservation(
            request=request.snapshot(),
            price=quote,
            total_price=quote.total,
            status=ReservationStatus.PENDING,
            progress=0,
        )
        stored = self._call_store("create", self.store.add, reservation)
        LOG.info("Reservation %s created by %s, total %.2f", stored.id, actor.value, stored.total_price)
        self._notify(stored, "created")
        return stored

    def get(self, reservation_id: int) -> Reservation:
        reservation = self._call_store("get", self.store.get, reservation_id)
        if reservation is None:
            raise NotFound(reservation_id)
        return reservation

    def _write(self, reservation_id: int, mutate: Callable[[Reservation], Reservation]) -> Reservation:
        for _ in range(MAX_WRITE_ATTEMPTS):
            current = self.get(reservation_id)
            updated = mutate(current)
            stored = self._call_store(
                "update", self.store.compare_and_set, reservation_id, current.version, updated
            )
            if stored is not None:
                return stored
            LOG.info("Reservation %s changed during update, re-reading", reservation_id)
        raise DependencyUnavailable("reservation store", f"reservation {reservation_id} is under concurrent update")

    def set_status(
        self,
        reservation_id: int,
        new_status: Union[str, ReservationStatus],
        actor: Actor,
        *,
        expected_status: Union[str, ReservationStatus, None] = None,
    ) -> Reservation:
        """Apply one lifecycle transition.

        The status observed on the first read (or ``expected_status`` when the
        caller supplies the status it was looking at) must still be current
        when the write lands; otherwise the call fails with InvalidTransition.
        """
        _require(actor, (Actor.ADMIN,), "change reservation status")
        try:
            target = parse_status(new_status)
            observed = parse_status(expected_status) if expected_status is not None else None
        except ValueError as exc:
            raise ValidationError("status", str(exc)) from exc

        def mutate(current: Reservation) -> Reservation:
            nonlocal observed
            if observed is None:
                observed = current.status
            if current.status != observed:
                raise InvalidTransition(
                    current.status,
                    target,
                    f"Reservation {reservation_id} is {current.status.value}, not {observed.value}",
                )
            validate_transition(current.status, target)
            return replace(current, status=target)

        stored = self._write(reservation_id, mutate)
        LOG.info("Reservation %s moved %s -> %s", reservation_id, observed.value, target.value)
        event = event_for_status(target)
        if event:
            self._notify(stored, event)
        return stored

    def set_progress(self, reservation_id: int, percent: int, actor: Actor) -> Reservation:
        _require(actor, (Actor.ADMIN, Actor.OPERATOR), "update reservation progress")
        if isinstance(percent, bool) or not isinstance(percent, int):
            raise ValidationError("progress", "progress must be an integer")
        if percent < 0 or percent > 100:
            raise ValidationError("progress", "progress must be between 0 and 100")
        stored = self._write(reservation_id, lambda current: replace(current, progress=percent))
        LOG.info("Reservation %s progress set to %d%%", reservation_id, percent)
        return stored

    def assign_driver(self, reservation_id: int, driver_name: str, actor: Actor) -> Reservation:
        _require(actor, (Actor.ADMIN,), "assign a driver")
        name = (driver_name or "").strip()
        if not name:
            raise ValidationError("driver_name")

        def mutate(current: Reservation) -> Reservation:
            if is_terminal(current.status):
                raise InvalidTransition(
                    current.status,
                    current.status,
                    f"Cannot assign a driver to a {current.status.value} reservation",
                )
            return replace(current, driver_name=name)

        return self._write(reservation_id, mutate)

    def list(
        self,
        actor: Actor,
        *,
        search: Optional[str] = None,
        status: Union[str, ReservationStatus, None] = None,
    ) -> List[Reservation]:
        _require(actor, (Actor.ADMIN,), "list reservations")
        items: List[Reservation] = self._call_store("list", self.store.list)
        if status is not None:
            try:
                wanted = parse_status(status)
            except ValueError as exc:
                raise ValidationError("status", str(exc)) from exc
            items = [item for item in items if item.status == wanted]
        term = (search or "").strip().lower()
        if term:
            items = [
                item
                for item in items
                if term in item.request.first_name.lower()
                or term in item.request.last_name.lower()
                or term in item.request.email.lower()
            ]
        return sorted(items, key=lambda item: (item.created_at is not None, item.created_at, item.id or 0), reverse=True)

    def stats(self, actor: Actor) -> Dict[str, Any]:
        _require(actor, (Actor.ADMIN,), "view reservation stats")
        return summarize(self._call_store("list", self.store.list))
