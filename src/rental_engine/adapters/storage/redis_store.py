"""Redis-backed reservation store with optimistic WATCH/MULTI writes."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, List, Optional

from redis import Redis
from redis.exceptions import RedisError, WatchError

from rental_engine.adapters.io.exports import reservation_from_dict, serialize_reservation
from rental_engine.adapters.storage.repositories import utcnow
from rental_engine.core.errors import DependencyUnavailable
from rental_engine.core.models import Reservation

LOG = logging.getLogger(__name__)


@contextmanager
def _guard(operation: str) -> Iterator[None]:
    try:
        yield
    except WatchError:
        raise
    except RedisError as exc:
        LOG.warning("Redis %s failed: %s", operation, exc)
        raise DependencyUnavailable("reservation store", f"redis {operation} failed: {exc}") from exc


class RedisReservationStore:
    def __init__(self, redis_url: str, *, prefix: str = "rental_engine") -> None:
        self._redis = Redis.from_url(redis_url, decode_responses=True)
        self._prefix = prefix

    def _key(self, reservation_id: int) -> str:
        return f"{self._prefix}:reservation:{reservation_id}"

    @property
    def _seq_key(self) -> str:
        return f"{self._prefix}:reservation_seq"

    @property
    def _index_key(self) -> str:
        return f"{self._prefix}:reservations"

    @staticmethod
    def _dump(reservation: Reservation) -> str:
        return json.dumps(serialize_reservation(reservation, rounded=False), ensure_ascii=True)

    def add(self, reservation: Reservation) -> Reservation:
        with _guard("add"):
            reservation_id = int(self._redis.incr(self._seq_key))
            now = utcnow()
            stored = replace(reservation, id=reservation_id, created_at=now, updated_at=now, version=1)
            pipe = self._redis.pipeline()
            pipe.set(self._key(reservation_id), self._dump(stored))
            pipe.sadd(self._index_key, reservation_id)
            pipe.execute()
        return stored

    def get(self, reservation_id: int) -> Optional[Reservation]:
        with _guard("get"):
            raw = self._redis.get(self._key(reservation_id))
        if raw is None:
            return None
        return reservation_from_dict(json.loads(raw))

    def list(self) -> List[Reservation]:
        with _guard("list"):
            ids = sorted(int(item) for item in self._redis.smembers(self._index_key))
            if not ids:
                return []
            raws = self._redis.mget([self._key(item) for item in ids])
        return [reservation_from_dict(json.loads(raw)) for raw in raws if raw is not None]

    def compare_and_set(
        self,
        reservation_id: int,
        expected_version: int,
        reservation: Reservation,
    ) -> Optional[Reservation]:
        key = self._key(reservation_id)
        with _guard("compare_and_set"), self._redis.pipeline() as pipe:
            try:
                pipe.watch(key)
                raw = pipe.get(key)
                if raw is None:
                    return None
                current = reservation_from_dict(json.loads(raw))
                if current.version != expected_version:
                    return None
                stored = replace(
                    reservation,
                    id=reservation_id,
                    created_at=current.created_at,
                    updated_at=utcnow(),
                    version=current.version + 1,
                )
                pipe.multi()
                pipe.set(key, self._dump(stored))
                pipe.execute()
                return stored
            except WatchError:
                LOG.info("Concurrent write on reservation %s, rejecting stale update", reservation_id)
                return None
