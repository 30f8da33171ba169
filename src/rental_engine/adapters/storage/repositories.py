"""Reservation repositories: in-memory and JSON file backed."""

from __future__ import annotations

import copy
import json
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from rental_engine.adapters.io.exports import reservation_from_dict, serialize_reservation
from rental_engine.core.models import Reservation

LOG = logging.getLogger(__name__)


class ReservationStore(Protocol):
    """
    Durable record of submitted reservations.
    Writes after creation go through compare_and_set on the record version.
    """

    def add(self, reservation: Reservation) -> Reservation:
        ...

    def get(self, reservation_id: int) -> Optional[Reservation]:
        ...

    def list(self) -> List[Reservation]:
        ...

    def compare_and_set(
        self,
        reservation_id: int,
        expected_version: int,
        reservation: Reservation,
    ) -> Optional[Reservation]:
        ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, payload: Any) -> None:
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=True, indent=2, default=str)
    tmp_path.replace(path)


class InMemoryReservationStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[int, Reservation] = {}
        self._next_id = 1

    def add(self, reservation: Reservation) -> Reservation:
        with self._lock:
            now = utcnow()
            stored = replace(
                copy.deepcopy(reservation),
                id=self._next_id,
                created_at=now,
                updated_at=now,
                version=1,
            )
            self._persist({**self._records, stored.id: stored}, self._next_id + 1)
            self._records[stored.id] = stored
            self._next_id += 1
            return copy.deepcopy(stored)

    def _persist(self, records: Dict[int, Reservation], next_id: int) -> None:
        """Called under the lock with the state a write is about to commit."""

    def get(self, reservation_id: int) -> Optional[Reservation]:
        with self._lock:
            record = self._records.get(reservation_id)
            return copy.deepcopy(record) if record else None

    def list(self) -> List[Reservation]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._records.values()]

    def compare_and_set(
        self,
        reservation_id: int,
        expected_version: int,
        reservation: Reservation,
    ) -> Optional[Reservation]:
        with self._lock:
            current = self._records.get(reservation_id)
            if current is None or current.version != expected_version:
                return None
            stored = replace(
                copy.deepcopy(reservation),
                id=reservation_id,
                created_at=current.created_at,
                updated_at=utcnow(),
                version=current.version + 1,
            )
            self._persist({**self._records, reservation_id: stored}, self._next_id)
            self._records[reservation_id] = stored
            return copy.deepcopy(stored)


class JsonFileReservationStore(InMemoryReservationStore):
    """In-memory store mirrored to a single JSON document; a write commits only once it is on disk."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        for item in payload.get("reservations", []):
            reservation = reservation_from_dict(item)
            self._records[reservation.id] = reservation
        self._next_id = int(payload.get("next_id", max(self._records, default=0) + 1))
        LOG.info("Loaded %d reservations from %s", len(self._records), self.path)

    def _persist(self, records: Dict[int, Reservation], next_id: int) -> None:
        payload = {
            "next_id": next_id,
            "reservations": [
                serialize_reservation(record, rounded=False)
                for _, record in sorted(records.items())
            ],
        }
        write_json(self.path, payload)
