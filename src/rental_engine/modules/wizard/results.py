"""Wizard step reports and submission outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from rental_engine.core.errors import RentalEngineError
from rental_engine.core.models import Reservation, WizardStep


@dataclass
class StepReport:
    step: WizardStep
    ok: bool
    missing: List[str] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "step": self.step.value,
            "ok": self.ok,
            "missing": list(self.missing),
            "message": self.message,
        }


@dataclass
class SubmissionResult:
    ok: bool
    reservation: Optional[Reservation] = None
    report: Optional[StepReport] = None
    error: Optional[RentalEngineError] = None

    @property
    def message(self) -> Optional[str]:
        if self.error is not None:
            return str(self.error)
        if self.report is not None and not self.report.ok:
            return self.report.message
        return None
