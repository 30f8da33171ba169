"""In-memory registry of booking wizard drafts served over the API."""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from rental_engine.adapters.io.exports import serialize_breakdown, serialize_request
from rental_engine.core.config import DEFAULT_PRICING, PricingConfig
from rental_engine.core.errors import ValidationError
from rental_engine.modules.wizard.controller import WizardController


@dataclass
class WizardSession:
    id: str
    controller: WizardController
    created_at: float
    updated_at: float
    lock: threading.RLock = field(default_factory=threading.RLock)

    def touch(self) -> None:
        self.updated_at = time.time()

    def to_dict(self) -> Dict[str, Any]:
        controller = self.controller
        live_quote = controller.quote()
        payload: Dict[str, Any] = {
            "id": self.id,
            "step": controller.step.value,
            "step_index": controller.current_step,
            "draft": serialize_request(controller.draft),
            "quote": None if isinstance(live_quote, ValidationError) else serialize_breakdown(live_quote),
            "quote_error": live_quote.to_dict() if isinstance(live_quote, ValidationError) else None,
            "reservation_id": controller.reservation.id if controller.reservation else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        return payload


class WizardSessions:
    def __init__(self, lifecycle: Any, *, pricing: PricingConfig = DEFAULT_PRICING, max_sessions: int = 1000) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[str, WizardSession] = {}
        self._lifecycle = lifecycle
        self._pricing = pricing
        self._max_sessions = max_sessions

    def create(self) -> WizardSession:
        now = time.time()
        session = WizardSession(
            id=uuid.uuid4().hex,
            controller=WizardController(self._lifecycle, pricing=self._pricing),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._sessions[session.id] = session
            if len(self._sessions) > self._max_sessions:
                oldest = min(self._sessions.values(), key=lambda item: item.updated_at)
                self._sessions.pop(oldest.id, None)
        return session

    def get(self, session_id: str) -> Optional[WizardSession]:
        with self._lock:
            return self._sessions.get(session_id)
