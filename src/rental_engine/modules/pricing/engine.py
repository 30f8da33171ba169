"""Pricing engine: turns a rental request into an itemized quote."""

from __future__ import annotations

import math
from datetime import date
from typing import Dict, Union

from rental_engine.core.config import DEFAULT_PRICING, PricingConfig
from rental_engine.core.errors import ValidationError
from rental_engine.core.models import AddOn, InsuranceTier, PriceBreakdown, RentalRequest
from rental_engine.core.normalization import parse_date

QuoteResult = Union[PriceBreakdown, ValidationError]


def rental_days(pickup: date, return_: date) -> int:
    """Billable days between two calendar dates, never less than one."""
    delta = (return_ - pickup).total_seconds() / 86400
    return max(1, math.ceil(delta))


def _check(request: RentalRequest, config: PricingConfig) -> Union[ValidationError, None]:
    if not request.pickup_date:
        return ValidationError("pickup_date")
    if parse_date(request.pickup_date) is None:
        return ValidationError("pickup_date", "pickup_date must be a YYYY-MM-DD date")
    if not request.return_date:
        return ValidationError("return_date")
    if parse_date(request.return_date) is None:
        return ValidationError("return_date", "return_date must be a YYYY-MM-DD date")
    if parse_date(request.return_date) < parse_date(request.pickup_date):
        return ValidationError("return_date", "return_date cannot be before pickup_date")
    rate = request.daily_rate
    if rate is None or isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return ValidationError("daily_rate", "daily_rate must be a number")
    if not math.isfinite(rate) or rate < 0:
        return ValidationError("daily_rate", "daily_rate must be zero or more")
    if not isinstance(request.insurance_tier, InsuranceTier) or request.insurance_tier not in config.insurance_daily:
        return ValidationError("insurance_tier", f"Unknown insurance tier: {request.insurance_tier}")
    for add_on in request.add_ons:
        if not isinstance(add_on, AddOn) or add_on not in config.add_on_daily:
            return ValidationError("add_ons", f"Unknown add-on: {add_on}")
    return None


def quote(request: RentalRequest, config: PricingConfig = DEFAULT_PRICING) -> QuoteResult:
    """Price a request.

    Returns a PriceBreakdown, or the ValidationError describing the first
    offending field. Amounts are left unrounded; callers round for display.
    """
    error = _check(request, config)
    if error is not None:
        return error

    days = rental_days(parse_date(request.pickup_date), parse_date(request.return_date))
    daily_rate = float(request.daily_rate)
    vehicle_subtotal = daily_rate * days

    insurance_daily_rate = config.insurance_daily[request.insurance_tier]
    insurance_subtotal = insurance_daily_rate * days

    add_on_subtotals: Dict[AddOn, float] = {}
    for add_on in sorted(request.add_ons, key=lambda item: item.value):
        add_on_subtotals[add_on] = config.add_on_daily[add_on] * days
    add_ons_subtotal = sum(add_on_subtotals.values(), 0.0)

    subtotal = vehicle_subtotal + insurance_subtotal + add_ons_subtotal
    tax = subtotal * config.tax_rate
    return PriceBreakdown(
        days=days,
        daily_rate=daily_rate,
        vehicle_subtotal=vehicle_subtotal,
        insurance_tier=request.insurance_tier,
        insurance_daily_rate=insurance_daily_rate,
        insurance_subtotal=insurance_subtotal,
        add_on_subtotals=add_on_subtotals,
        add_ons_subtotal=add_ons_subtotal,
        subtotal=subtotal,
        tax_rate=config.tax_rate,
        tax=tax,
        total=subtotal + tax,
        currency=config.currency,
    )


def require_quote(request: RentalRequest, config: PricingConfig = DEFAULT_PRICING) -> PriceBreakdown:
    result = quote(request, config)
    if isinstance(result, ValidationError):
        raise result
    return result
