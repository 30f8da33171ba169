"""Booking wizard: Journey -> Profile -> Privileges -> Settlement."""

from __future__ import annotations

import logging
from typing import Any, Optional

from rental_engine.core.config import DEFAULT_PRICING, PricingConfig
from rental_engine.core.errors import DependencyUnavailable, RentalEngineError, ValidationError
from rental_engine.core.models import WIZARD_STEPS, RentalRequest, Vehicle, WizardStep
from rental_engine.core.normalization import parse_add_ons, parse_insurance_tier, parse_payment_method
from rental_engine.modules.pricing.engine import QuoteResult, quote
from rental_engine.modules.wizard.results import StepReport, SubmissionResult
from rental_engine.modules.wizard.steps import check_step

LOG = logging.getLogger(__name__)

_COERCE = {
    "insurance_tier": parse_insurance_tier,
    "add_ons": parse_add_ons,
    "payment_method": parse_payment_method,
}


class WizardController:
    def __init__(
        self,
        lifecycle: Any,
        *,
        pricing: PricingConfig = DEFAULT_PRICING,
        draft: Optional[RentalRequest] = None,
    ) -> None:
        self.lifecycle = lifecycle
        self.pricing = pricing
        self.draft = draft or RentalRequest()
        self.current_step = 0
        self.reservation = None

    @property
    def step(self) -> WizardStep:
        return WIZARD_STEPS[self.current_step]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(WIZARD_STEPS) - 1

    def select_vehicle(self, vehicle: Vehicle) -> None:
        self.draft.vehicle_id = vehicle.id
        self.draft.vehicle_name = vehicle.name
        self.draft.daily_rate = vehicle.daily_rate

    def update(self, **changes: Any) -> None:
        """Write draft fields; enum fields accept their string aliases.

        All values are coerced before any is applied, so a bad value leaves
        the draft unchanged.
        """
        known = set(RentalRequest.field_names())
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(unknown)}")
        coerced = {}
        for name, value in changes.items():
            coerce = _COERCE.get(name)
            coerced[name] = coerce(value) if coerce else value
        for name, value in coerced.items():
            setattr(self.draft, name, value)

    def validate_step(self, step: Optional[WizardStep] = None) -> StepReport:
        return check_step(step or self.step, self.draft)

    def advance(self) -> StepReport:
        report = self.validate_step()
        if not report.ok:
            return report
        if self.is_last_step:
            return StepReport(self.step, False, [], "Already at the final step; submit the booking")
        self.current_step += 1
        return report

    def retreat(self) -> bool:
        if self.current_step == 0:
            return False
        self.current_step -= 1
        return True

    def quote(self) -> QuoteResult:
        return quote(self.draft, self.pricing)

    def submit(self) -> SubmissionResult:
        if self.reservation is not None:
            return SubmissionResult(
                ok=False,
                reservation=self.reservation,
                error=RentalEngineError(f"Booking already submitted as reservation {self.reservation.id}"),
            )
        if not self.is_last_step:
            report = StepReport(self.step, False, [], "Complete every step before submitting")
            return SubmissionResult(ok=False, report=report)
        report = self.validate_step()
        if not report.ok:
            return SubmissionResult(ok=False, report=report)
        final_quote = self.quote()
        if isinstance(final_quote, ValidationError):
            return SubmissionResult(ok=False, report=report, error=final_quote)
        try:
            reservation = self.lifecycle.create(self.draft.snapshot(), final_quote)
        except DependencyUnavailable as exc:
            LOG.warning("Booking submission failed, draft kept for retry: %s", exc)
            return SubmissionResult(ok=False, report=report, error=exc)
        self.reservation = reservation
        return SubmissionResult(ok=True, reservation=reservation, report=report)
