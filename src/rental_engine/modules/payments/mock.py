"""Mock payment acknowledgement; no money moves."""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import Optional, Union

from rental_engine.core.errors import ValidationError
from rental_engine.core.models import PaymentMethod, Reservation, ReservationStatus
from rental_engine.core.normalization import parse_payment_method, round_money

_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class PaymentReceipt:
    success: bool
    transaction_id: str
    reservation_id: Optional[int]
    amount: float
    method: PaymentMethod
    message: str = "Payment processed successfully"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "transaction_id": self.transaction_id,
            "reservation_id": self.reservation_id,
            "amount": self.amount,
            "method": self.method.value,
            "message": self.message,
        }


def new_transaction_id() -> str:
    return "TXN-" + "".join(secrets.choice(_ALPHABET) for _ in range(9))


def acknowledge_payment(
    reservation: Reservation,
    method: Union[str, PaymentMethod, None] = None,
    amount: Optional[float] = None,
) -> PaymentReceipt:
    if reservation.status == ReservationStatus.CANCELLED:
        raise ValidationError("reservation", "Cannot pay for a cancelled reservation")
    try:
        chosen = parse_payment_method(method) if method is not None else reservation.request.payment_method
    except ValueError as exc:
        raise ValidationError("method", str(exc)) from exc
    due = round_money(reservation.total_price)
    paid = due if amount is None else round_money(amount)
    if abs(paid - due) > 0.01:
        raise ValidationError("amount", f"Amount {paid:.2f} does not match total {due:.2f}")
    return PaymentReceipt(
        success=True,
        transaction_id=new_transaction_id(),
        reservation_id=reservation.id,
        amount=paid,
        method=chosen,
    )
