"""Normalization helpers for dates, enum aliases, currencies and money display."""

from __future__ import annotations

import os
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional, Set, Union

from rental_engine.core.models import AddOn, InsuranceTier, PaymentMethod, ReservationStatus

DEFAULT_CURRENCY = os.getenv("RENTAL_ENGINE_CURRENCY", "USD")
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
CENT = Decimal("0.01")

_TIER_ALIASES = {
    "basic": InsuranceTier.ESSENTIAL,
    "essential": InsuranceTier.ESSENTIAL,
    "standard": InsuranceTier.STANDARD,
    "prestige": InsuranceTier.STANDARD,
    "premium": InsuranceTier.ELITE,
    "elite": InsuranceTier.ELITE,
}

_ADD_ON_ALIASES = {
    "gps": AddOn.GPS_UNIT,
    "gps_unit": AddOn.GPS_UNIT,
    "gpsunit": AddOn.GPS_UNIT,
    "child_seat": AddOn.CHILD_SEAT,
    "childseat": AddOn.CHILD_SEAT,
    "second_driver": AddOn.SECOND_DRIVER,
    "seconddriver": AddOn.SECOND_DRIVER,
    "additional_driver": AddOn.SECOND_DRIVER,
    "additionaldriver": AddOn.SECOND_DRIVER,
}


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_time(value: Union[str, time, None]) -> Optional[time]:
    if isinstance(value, time):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except ValueError:
        return None


def combine(day: Optional[str], moment: Optional[str]) -> Optional[datetime]:
    parsed_day = parse_date(day)
    parsed_time = parse_time(moment)
    if parsed_day is None or parsed_time is None:
        return None
    return datetime.combine(parsed_day, parsed_time)


def _key(value: str) -> str:
    return value.strip().replace("-", "_").lower()


def parse_insurance_tier(value: Union[str, InsuranceTier]) -> InsuranceTier:
    if isinstance(value, InsuranceTier):
        return value
    tier = _TIER_ALIASES.get(_key(str(value)))
    if tier is None:
        raise ValueError(f"Unknown insurance tier: {value}")
    return tier


def parse_add_on(value: Union[str, AddOn]) -> AddOn:
    if isinstance(value, AddOn):
        return value
    add_on = _ADD_ON_ALIASES.get(_key(str(value)))
    if add_on is None:
        raise ValueError(f"Unknown add-on: {value}")
    return add_on


def parse_add_ons(values: Iterable[Union[str, AddOn]]) -> Set[AddOn]:
    return {parse_add_on(value) for value in values}


def parse_payment_method(value: Union[str, PaymentMethod]) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(_key(str(value)))
    except ValueError as exc:
        raise ValueError(f"Unknown payment method: {value}") from exc


def parse_status(value: Union[str, ReservationStatus]) -> ReservationStatus:
    if isinstance(value, ReservationStatus):
        return value
    try:
        return ReservationStatus(_key(str(value)))
    except ValueError as exc:
        raise ValueError(f"Unknown reservation status: {value}") from exc


def normalize_currency(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_CURRENCY
    return value.strip().upper()


def round_money(value: float) -> float:
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def build_meta(currency: Optional[str] = None) -> Dict[str, str]:
    return {
        "currency": normalize_currency(currency),
        "date_format": "YYYY-MM-DD",
        "time_format": "HH:mm",
        "datetime_format": "YYYY-MM-DDTHH:mm:ssZ",
    }
