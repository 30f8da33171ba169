"""Serialization helpers for quotes, drafts and reservations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from rental_engine.core.models import (
    AddOn,
    InsuranceTier,
    PaymentMethod,
    PriceBreakdown,
    RentalRequest,
    Reservation,
    ReservationStatus,
)
from rental_engine.core.normalization import round_money


def serialize_request(request: RentalRequest) -> Dict[str, Any]:
    return {
        "vehicle_id": request.vehicle_id,
        "vehicle_name": request.vehicle_name,
        "daily_rate": request.daily_rate,
        "pickup_date": request.pickup_date,
        "pickup_time": request.pickup_time,
        "return_date": request.return_date,
        "return_time": request.return_time,
        "pickup_location": request.pickup_location,
        "return_location": request.return_location,
        "insurance_tier": request.insurance_tier.value,
        "add_ons": sorted(add_on.value for add_on in request.add_ons),
        "first_name": request.first_name,
        "last_name": request.last_name,
        "email": request.email,
        "phone": request.phone,
        "payment_method": request.payment_method.value,
    }


def serialize_breakdown(breakdown: PriceBreakdown, *, rounded: bool = True) -> Dict[str, Any]:
    """Render a quote; amounts are rounded to cents unless ``rounded`` is False."""

    def money(value: float) -> float:
        return round_money(value) if rounded else value

    return {
        "days": breakdown.days,
        "daily_rate": money(breakdown.daily_rate),
        "vehicle_subtotal": money(breakdown.vehicle_subtotal),
        "insurance_tier": breakdown.insurance_tier.value,
        "insurance_daily_rate": money(breakdown.insurance_daily_rate),
        "insurance_subtotal": money(breakdown.insurance_subtotal),
        "add_ons": [
            {"add_on": add_on.value, "subtotal": money(amount)}
            for add_on, amount in breakdown.add_on_subtotals.items()
        ],
        "add_ons_subtotal": money(breakdown.add_ons_subtotal),
        "subtotal": money(breakdown.subtotal),
        "tax_rate": breakdown.tax_rate,
        "tax": money(breakdown.tax),
        "total": money(breakdown.total),
        "currency": breakdown.currency,
    }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_reservation(reservation: Reservation, *, rounded: bool = True) -> Dict[str, Any]:
    payload = serialize_request(reservation.request)
    payload.update(
        {
            "id": reservation.id,
            "status": reservation.status.value,
            "progress": reservation.progress,
            "driver_name": reservation.driver_name,
            "total_price": round_money(reservation.total_price) if rounded else reservation.total_price,
            "price": serialize_breakdown(reservation.price, rounded=rounded),
            "created_at": _iso(reservation.created_at),
            "updated_at": _iso(reservation.updated_at),
            "version": reservation.version,
        }
    )
    return payload


def serialize_reservations(reservations: List[Reservation]) -> List[Dict[str, Any]]:
    return [serialize_reservation(item) for item in reservations]


def request_from_dict(payload: Dict[str, Any]) -> RentalRequest:
    names = set(RentalRequest.field_names())
    values = {key: value for key, value in payload.items() if key in names}
    if "insurance_tier" in values:
        values["insurance_tier"] = InsuranceTier(values["insurance_tier"])
    if "add_ons" in values:
        values["add_ons"] = {AddOn(item) for item in values["add_ons"]}
    if "payment_method" in values:
        values["payment_method"] = PaymentMethod(values["payment_method"])
    return RentalRequest(**values)


def breakdown_from_dict(payload: Dict[str, Any]) -> PriceBreakdown:
    return PriceBreakdown(
        days=int(payload["days"]),
        daily_rate=float(payload["daily_rate"]),
        vehicle_subtotal=float(payload["vehicle_subtotal"]),
        insurance_tier=InsuranceTier(payload["insurance_tier"]),
        insurance_daily_rate=float(payload["insurance_daily_rate"]),
        insurance_subtotal=float(payload["insurance_subtotal"]),
        add_on_subtotals={AddOn(item["add_on"]): float(item["subtotal"]) for item in payload.get("add_ons", [])},
        add_ons_subtotal=float(payload["add_ons_subtotal"]),
        subtotal=float(payload["subtotal"]),
        tax_rate=float(payload["tax_rate"]),
        tax=float(payload["tax"]),
        total=float(payload["total"]),
        currency=payload.get("currency", "USD"),
    )


def reservation_from_dict(payload: Dict[str, Any]) -> Reservation:
    created_at = payload.get("created_at")
    updated_at = payload.get("updated_at")
    return Reservation(
        id=payload.get("id"),
        request=request_from_dict(payload),
        price=breakdown_from_dict(payload["price"]),
        total_price=float(payload["total_price"]),
        status=ReservationStatus(payload.get("status", ReservationStatus.PENDING.value)),
        progress=int(payload.get("progress", 0)),
        driver_name=payload.get("driver_name"),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
        updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        version=int(payload.get("version", 0)),
    )
