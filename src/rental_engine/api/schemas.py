"""Request schemas for the rental engine API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from rental_engine.core.models import DEFAULT_LOCATION


class RentalRequestPayload(BaseModel):
    vehicle_id: Optional[int] = None
    vehicle_name: Optional[str] = None
    daily_rate: Optional[float] = Field(None, ge=0)
    pickup_date: str = ""
    pickup_time: str = ""
    return_date: str = ""
    return_time: str = ""
    pickup_location: str = DEFAULT_LOCATION
    return_location: str = DEFAULT_LOCATION
    insurance_tier: str = "essential"
    add_ons: List[str] = Field(default_factory=list)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    payment_method: str = "card"


class DraftUpdatePayload(BaseModel):
    pickup_date: Optional[str] = None
    pickup_time: Optional[str] = None
    return_date: Optional[str] = None
    return_time: Optional[str] = None
    pickup_location: Optional[str] = None
    return_location: Optional[str] = None
    insurance_tier: Optional[str] = None
    add_ons: Optional[List[str]] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    payment_method: Optional[str] = None


class VehicleSelectionPayload(BaseModel):
    vehicle_id: int


class StatusPayload(BaseModel):
    status: str
    expected_status: Optional[str] = None


class ProgressPayload(BaseModel):
    progress: int


class DriverPayload(BaseModel):
    driver_name: str = Field(..., min_length=1)


class PaymentPayload(BaseModel):
    method: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
