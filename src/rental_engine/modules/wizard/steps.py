"""Per-step completeness checks for the booking wizard."""

from __future__ import annotations

from typing import Callable, Dict, List

from rental_engine.core.models import AddOn, InsuranceTier, PaymentMethod, RentalRequest, WizardStep
from rental_engine.core.normalization import combine
from rental_engine.modules.wizard.results import StepReport

JOURNEY_FIELDS = ["pickup_date", "pickup_time", "return_date", "return_time"]
PROFILE_FIELDS = ["first_name", "last_name", "email", "phone"]


def _blank(request: RentalRequest, names: List[str]) -> List[str]:
    return [name for name in names if not str(getattr(request, name) or "").strip()]


def check_journey(request: RentalRequest) -> StepReport:
    missing = _blank(request, JOURNEY_FIELDS)
    if missing:
        return StepReport(
            WizardStep.JOURNEY, False, missing, "Please specify your pickup and return schedule"
        )
    pickup = combine(request.pickup_date, request.pickup_time)
    returned = combine(request.return_date, request.return_time)
    if pickup is None:
        return StepReport(WizardStep.JOURNEY, False, ["pickup_date"], "Pickup date or time is not valid")
    if returned is None:
        return StepReport(WizardStep.JOURNEY, False, ["return_date"], "Return date or time is not valid")
    if returned <= pickup:
        return StepReport(WizardStep.JOURNEY, False, ["return_date"], "Return must be after pickup")
    return StepReport(WizardStep.JOURNEY, True)


def check_profile(request: RentalRequest) -> StepReport:
    missing = _blank(request, PROFILE_FIELDS)
    if missing:
        return StepReport(WizardStep.PROFILE, False, missing, "Please complete your personal profile")
    return StepReport(WizardStep.PROFILE, True)


def check_privileges(request: RentalRequest) -> StepReport:
    if not isinstance(request.insurance_tier, InsuranceTier):
        return StepReport(WizardStep.PRIVILEGES, False, ["insurance_tier"], "Choose an insurance tier")
    if any(not isinstance(add_on, AddOn) for add_on in request.add_ons):
        return StepReport(WizardStep.PRIVILEGES, False, ["add_ons"], "Unknown add-on selected")
    return StepReport(WizardStep.PRIVILEGES, True)


def check_settlement(request: RentalRequest) -> StepReport:
    if not isinstance(request.payment_method, PaymentMethod):
        return StepReport(WizardStep.SETTLEMENT, False, ["payment_method"], "Choose a payment method")
    return StepReport(WizardStep.SETTLEMENT, True)


STEP_CHECKS: Dict[WizardStep, Callable[[RentalRequest], StepReport]] = {
    WizardStep.JOURNEY: check_journey,
    WizardStep.PROFILE: check_profile,
    WizardStep.PRIVILEGES: check_privileges,
    WizardStep.SETTLEMENT: check_settlement,
}


def check_step(step: WizardStep, request: RentalRequest) -> StepReport:
    return STEP_CHECKS[step](request)


def check_all(request: RentalRequest) -> List[StepReport]:
    """Run every step check in order; used where the draft arrives whole."""
    return [check(request) for check in STEP_CHECKS.values()]
