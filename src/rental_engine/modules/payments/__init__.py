"""Payments module."""

from rental_engine.modules.payments.mock import PaymentReceipt, acknowledge_payment

__all__ = ["PaymentReceipt", "acknowledge_payment"]
