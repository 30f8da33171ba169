"""FastAPI entrypoint for booking, pricing and reservation administration."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Header, HTTPException

from rental_engine.adapters.io.exports import (
    serialize_breakdown,
    serialize_reservation,
    serialize_reservations,
)
from rental_engine.adapters.notify.sinks import LoggingNotificationSink, SmtpNotificationSink
from rental_engine.adapters.storage.repositories import InMemoryReservationStore, JsonFileReservationStore
from rental_engine.api.schemas import (
    DraftUpdatePayload,
    DriverPayload,
    PaymentPayload,
    ProgressPayload,
    RentalRequestPayload,
    StatusPayload,
    VehicleSelectionPayload,
)
from rental_engine.api.sessions import WizardSession, WizardSessions
from rental_engine.core.config import DEFAULT_PRICING, PricingConfig, Settings, load_settings
from rental_engine.core.errors import (
    DependencyUnavailable,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    RentalEngineError,
    ValidationError,
)
from rental_engine.core.models import Actor, RentalRequest, Vehicle
from rental_engine.core.normalization import build_meta, parse_add_ons, parse_insurance_tier, parse_payment_method
from rental_engine.modules.catalog.provider import InMemoryCatalog
from rental_engine.modules.lifecycle.manager import ReservationLifecycle
from rental_engine.modules.lifecycle.tracking import build_timeline
from rental_engine.modules.payments.mock import acknowledge_payment
from rental_engine.modules.pricing.engine import quote
from rental_engine.modules.wizard.steps import check_all

LOG = logging.getLogger(__name__)


def build_store(settings: Settings) -> Any:
    if settings.store_backend == "file":
        return JsonFileReservationStore(settings.store_path)
    if settings.store_backend == "redis":
        try:
            from rental_engine.adapters.storage.redis_store import RedisReservationStore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "Redis store requested but optional dependencies are missing. "
                "Install extras with `pip install .[queue]`."
            ) from exc
        return RedisReservationStore(settings.redis_url)
    return InMemoryReservationStore()


def build_notifier(settings: Settings) -> Any:
    if settings.notify_backend == "smtp" and settings.smtp_host:
        return SmtpNotificationSink(settings.smtp_host, settings.smtp_port, settings.smtp_sender)
    if settings.notify_backend == "celery":
        try:
            from rental_engine.adapters.notify.celery_sink import CeleryNotificationSink
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "Celery notifications requested but optional dependencies are missing. "
                "Install extras with `pip install .[queue]`."
            ) from exc
        return CeleryNotificationSink()
    return LoggingNotificationSink()


def _http_error(exc: RentalEngineError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=exc.to_dict())
    if isinstance(exc, InvalidTransition):
        return HTTPException(
            status_code=409,
            detail={"message": str(exc), "current": exc.current, "target": exc.target},
        )
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail="Reservation not found")
    if isinstance(exc, PermissionDenied):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, DependencyUnavailable):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _actor(value: Optional[str]) -> Actor:
    try:
        return Actor((value or "customer").strip().lower())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown actor role: {value}") from exc


def _serialize_vehicle(vehicle: Vehicle) -> Dict[str, object]:
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "daily_rate": vehicle.daily_rate,
        "type": vehicle.type,
        "seats": vehicle.seats,
        "fuel": vehicle.fuel,
        "transmission": vehicle.transmission,
        "rating": vehicle.rating,
    }


def create_app(
    lifecycle: Optional[ReservationLifecycle] = None,
    *,
    catalog: Optional[InMemoryCatalog] = None,
    pricing: Optional[PricingConfig] = None,
) -> FastAPI:
    if lifecycle is None:
        settings = load_settings()
        lifecycle = ReservationLifecycle(build_store(settings), build_notifier(settings), settings=settings)
        pricing = pricing or replace(DEFAULT_PRICING, currency=settings.currency)
    pricing = pricing or DEFAULT_PRICING
    catalog = catalog or InMemoryCatalog()
    sessions = WizardSessions(lifecycle, pricing=pricing)

    app = FastAPI(title="Rental Engine API")

    def to_request(payload: RentalRequestPayload) -> RentalRequest:
        values = payload.model_dump()
        try:
            values["insurance_tier"] = parse_insurance_tier(values["insurance_tier"])
        except ValueError as exc:
            raise _http_error(ValidationError("insurance_tier", str(exc))) from exc
        try:
            values["add_ons"] = parse_add_ons(values["add_ons"])
        except ValueError as exc:
            raise _http_error(ValidationError("add_ons", str(exc))) from exc
        try:
            values["payment_method"] = parse_payment_method(values["payment_method"])
        except ValueError as exc:
            raise _http_error(ValidationError("payment_method", str(exc))) from exc
        request = RentalRequest(**values)
        if request.vehicle_id is not None:
            vehicle = catalog.get(request.vehicle_id)
            if vehicle is None:
                raise HTTPException(status_code=404, detail="Vehicle not found")
            # Catalog values win over anything the client sent.
            request.vehicle_name = vehicle.name
            request.daily_rate = vehicle.daily_rate
        return request

    def get_session(session_id: str) -> WizardSession:
        session = sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Draft not found")
        return session

    @app.get("/api/health")
    def health() -> Dict[str, object]:
        return {"status": "ok", "meta": build_meta(pricing.currency)}

    @app.get("/api/vehicles")
    def list_vehicles() -> Dict[str, List[Dict[str, object]]]:
        return {"items": [_serialize_vehicle(vehicle) for vehicle in catalog.list()]}

    @app.get("/api/vehicles/{vehicle_id}")
    def get_vehicle(vehicle_id: int) -> Dict[str, object]:
        vehicle = catalog.get(vehicle_id)
        if not vehicle:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return _serialize_vehicle(vehicle)

    @app.post("/api/quote")
    def quote_rental(payload: RentalRequestPayload) -> Dict[str, object]:
        result = quote(to_request(payload), pricing)
        if isinstance(result, ValidationError):
            raise _http_error(result)
        return serialize_breakdown(result)

    @app.post("/api/reservations", status_code=201)
    def create_reservation(payload: RentalRequestPayload) -> Dict[str, object]:
        request = to_request(payload)
        for report in check_all(request):
            if not report.ok:
                raise HTTPException(status_code=422, detail=report.to_dict())
        try:
            reservation = lifecycle.create(request, quote(request, pricing))
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        return serialize_reservation(reservation)

    @app.get("/api/reservations")
    def list_reservations(
        search: Optional[str] = None,
        status: Optional[str] = None,
        x_actor_role: Optional[str] = Header(None),
    ) -> Dict[str, List[Dict[str, object]]]:
        try:
            items = lifecycle.list(_actor(x_actor_role), search=search, status=status)
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        return {"items": serialize_reservations(items)}

    @app.get("/api/reservations/{reservation_id}")
    def get_reservation(reservation_id: int) -> Dict[str, object]:
        try:
            return serialize_reservation(lifecycle.get(reservation_id))
        except RentalEngineError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/reservations/{reservation_id}/tracking")
    def track_reservation(reservation_id: int) -> Dict[str, object]:
        try:
            reservation = lifecycle.get(reservation_id)
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        payload = serialize_reservation(reservation)
        payload["timeline"] = build_timeline(reservation)
        return payload

    @app.patch("/api/reservations/{reservation_id}/status")
    def set_status(
        reservation_id: int,
        payload: StatusPayload,
        x_actor_role: Optional[str] = Header(None),
    ) -> Dict[str, object]:
        try:
            reservation = lifecycle.set_status(
                reservation_id,
                payload.status,
                _actor(x_actor_role),
                expected_status=payload.expected_status,
            )
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        return serialize_reservation(reservation)

    @app.patch("/api/reservations/{reservation_id}/progress")
    def set_progress(
        reservation_id: int,
        payload: ProgressPayload,
        x_actor_role: Optional[str] = Header(None),
    ) -> Dict[str, object]:
        try:
            reservation = lifecycle.set_progress(reservation_id, payload.progress, _actor(x_actor_role))
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        return serialize_reservation(reservation)

    @app.patch("/api/reservations/{reservation_id}/driver")
    def assign_driver(
        reservation_id: int,
        payload: DriverPayload,
        x_actor_role: Optional[str] = Header(None),
    ) -> Dict[str, object]:
        try:
            reservation = lifecycle.assign_driver(reservation_id, payload.driver_name, _actor(x_actor_role))
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        return serialize_reservation(reservation)

    @app.post("/api/reservations/{reservation_id}/payment")
    def pay_reservation(reservation_id: int, payload: PaymentPayload) -> Dict[str, object]:
        try:
            receipt = acknowledge_payment(lifecycle.get(reservation_id), payload.method, payload.amount)
        except RentalEngineError as exc:
            raise _http_error(exc) from exc
        LOG.info("Mock payment %s acknowledged for reservation %s", receipt.transaction_id, reservation_id)
        return receipt.to_dict()

    @app.get("/api/admin/stats")
    def admin_stats(x_actor_role: Optional[str] = Header(None)) -> Dict[str, object]:
        try:
            return lifecycle.stats(_actor(x_actor_role))
        except RentalEngineError as exc:
            raise _http_error(exc) from exc

    @app.post("/api/wizard", status_code=201)
    def create_draft() -> Dict[str, object]:
        return sessions.create().to_dict()

    @app.get("/api/wizard/{session_id}")
    def get_draft(session_id: str) -> Dict[str, object]:
        return get_session(session_id).to_dict()

    @app.patch("/api/wizard/{session_id}")
    def update_draft(session_id: str, payload: DraftUpdatePayload) -> Dict[str, object]:
        session = get_session(session_id)
        with session.lock:
            try:
                session.controller.update(**payload.model_dump(exclude_unset=True))
            except ValueError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            session.touch()
            return session.to_dict()

    @app.post("/api/wizard/{session_id}/vehicle")
    def select_vehicle(session_id: str, payload: VehicleSelectionPayload) -> Dict[str, object]:
        session = get_session(session_id)
        vehicle = catalog.get(payload.vehicle_id)
        if not vehicle:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        with session.lock:
            session.controller.select_vehicle(vehicle)
            session.touch()
            return session.to_dict()

    @app.post("/api/wizard/{session_id}/advance")
    def advance_draft(session_id: str) -> Dict[str, object]:
        session = get_session(session_id)
        with session.lock:
            report = session.controller.advance()
            session.touch()
            payload = session.to_dict()
        payload["report"] = report.to_dict()
        return payload

    @app.post("/api/wizard/{session_id}/retreat")
    def retreat_draft(session_id: str) -> Dict[str, object]:
        session = get_session(session_id)
        with session.lock:
            moved = session.controller.retreat()
            session.touch()
            payload = session.to_dict()
        payload["moved"] = moved
        return payload

    @app.post("/api/wizard/{session_id}/submit")
    def submit_draft(session_id: str) -> Dict[str, object]:
        session = get_session(session_id)
        with session.lock:
            result = session.controller.submit()
            session.touch()
            payload = session.to_dict()
        payload["ok"] = result.ok
        payload["message"] = result.message
        payload["report"] = result.report.to_dict() if result.report else None
        payload["reservation"] = serialize_reservation(result.reservation) if result.ok else None
        if isinstance(result.error, DependencyUnavailable):
            raise HTTPException(status_code=503, detail=payload)
        return payload

    return app


app = create_app()
