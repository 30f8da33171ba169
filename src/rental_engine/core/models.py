"""Shared domain models for the rental booking engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set

DEFAULT_LOCATION = "Baku International Airport"


class InsuranceTier(Enum):
    ESSENTIAL = "essential"
    STANDARD = "standard"
    ELITE = "elite"


class AddOn(Enum):
    GPS_UNIT = "gps_unit"
    CHILD_SEAT = "child_seat"
    SECOND_DRIVER = "second_driver"


class PaymentMethod(Enum):
    CARD = "card"
    CASH = "cash"


class ReservationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    IN_TRANSIT = "in_transit"
    COMPLETED = "completed"


class Actor(Enum):
    CUSTOMER = "customer"
    OPERATOR = "operator"
    ADMIN = "admin"


class WizardStep(Enum):
    JOURNEY = "journey"
    PROFILE = "profile"
    PRIVILEGES = "privileges"
    SETTLEMENT = "settlement"


WIZARD_STEPS: List[WizardStep] = [
    WizardStep.JOURNEY,
    WizardStep.PROFILE,
    WizardStep.PRIVILEGES,
    WizardStep.SETTLEMENT,
]


@dataclass(frozen=True)
class Vehicle:
    id: int
    name: str
    daily_rate: float
    type: Optional[str] = None
    seats: int = 5
    fuel: str = "Petrol"
    transmission: str = "Automatic"
    rating: float = 5.0


@dataclass
class RentalRequest:
    vehicle_id: Optional[int] = None
    vehicle_name: Optional[str] = None
    daily_rate: Optional[float] = None
    pickup_date: str = ""
    pickup_time: str = ""
    return_date: str = ""
    return_time: str = ""
    pickup_location: str = DEFAULT_LOCATION
    return_location: str = DEFAULT_LOCATION
    insurance_tier: InsuranceTier = InsuranceTier.ESSENTIAL
    add_ons: Set[AddOn] = field(default_factory=set)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    payment_method: PaymentMethod = PaymentMethod.CARD

    @classmethod
    def field_names(cls) -> List[str]:
        return [item.name for item in fields(cls)]

    def snapshot(self) -> "RentalRequest":
        return copy.deepcopy(self)


@dataclass(frozen=True)
class PriceBreakdown:
    days: int
    daily_rate: float
    vehicle_subtotal: float
    insurance_tier: InsuranceTier
    insurance_daily_rate: float
    insurance_subtotal: float
    add_on_subtotals: Dict[AddOn, float]
    add_ons_subtotal: float
    subtotal: float
    tax_rate: float
    tax: float
    total: float
    currency: str = "USD"


@dataclass
class Reservation:
    request: RentalRequest
    price: PriceBreakdown
    total_price: float
    status: ReservationStatus = ReservationStatus.PENDING
    progress: int = 0
    driver_name: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 0

    @property
    def customer_name(self) -> str:
        return f"{self.request.first_name} {self.request.last_name}".strip()
