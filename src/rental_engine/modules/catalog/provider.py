"""Read-only vehicle catalog used to seed booking drafts."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol

from rental_engine.core.models import Vehicle

SEED_VEHICLES = [
    Vehicle(id=1, name="BMW 5 Series", daily_rate=120.0, type="Limousine", rating=4.9, fuel="Petrol"),
    Vehicle(id=2, name="Mercedes E-Class", daily_rate=140.0, type="Sedan", rating=4.8, fuel="Diesel"),
    Vehicle(id=3, name="Audi Q7", daily_rate=180.0, type="SUV", rating=4.9, fuel="Hybrid", seats=7),
]


class CatalogProvider(Protocol):
    def list(self) -> List[Vehicle]:
        ...

    def get(self, vehicle_id: int) -> Optional[Vehicle]:
        ...


class InMemoryCatalog:
    def __init__(self, vehicles: Optional[Iterable[Vehicle]] = None) -> None:
        source = SEED_VEHICLES if vehicles is None else vehicles
        self._vehicles: Dict[int, Vehicle] = {vehicle.id: vehicle for vehicle in source}

    def list(self) -> List[Vehicle]:
        return sorted(self._vehicles.values(), key=lambda item: item.id)

    def get(self, vehicle_id: int) -> Optional[Vehicle]:
        return self._vehicles.get(vehicle_id)

    def upsert(self, vehicle: Vehicle) -> None:
        self._vehicles[vehicle.id] = vehicle
