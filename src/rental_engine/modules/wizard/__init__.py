"""Booking wizard module."""

from rental_engine.modules.wizard.controller import WizardController
from rental_engine.modules.wizard.results import StepReport, SubmissionResult
from rental_engine.modules.wizard.steps import check_all, check_step

__all__ = ["StepReport", "SubmissionResult", "WizardController", "check_all", "check_step"]
