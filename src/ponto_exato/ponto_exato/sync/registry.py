from __future__ import annotations

import logging
import threading
from typing import Callable

from .feed import SnapshotFeed
from .live_state import CompanyLiveState

logger = logging.getLogger(__name__)


class LiveStateRegistry:
    """One live state per company code shared by every session of that company.

    ``acquire`` at login and ``release`` at logout; the state is detached
    when the last session releases it.
    """

    def __init__(self, feed_factory: Callable[[], SnapshotFeed]):
        self._feed_factory = feed_factory
        self._lock = threading.Lock()
        self._states: dict[str, CompanyLiveState] = {}
        self._refs: dict[str, int] = {}

    def _ensure(self, company_code: str) -> CompanyLiveState:
        state = self._states.get(company_code)
        if state is None:
            state = CompanyLiveState(self._feed_factory())
            state.attach(company_code)
            self._states[company_code] = state
            self._refs.setdefault(company_code, 0)
            logger.info("live state attached for company %s", company_code)
        return state

    def acquire(self, company_code: str) -> CompanyLiveState:
        with self._lock:
            state = self._ensure(company_code)
            self._refs[company_code] += 1
            return state

    def get(self, company_code: str) -> CompanyLiveState:
        """Live state for the code, attaching it on demand (e.g. after a restart)."""

        with self._lock:
            return self._ensure(company_code)

    def release(self, company_code: str) -> None:
        with self._lock:
            if company_code not in self._states:
                return
            self._refs[company_code] = self._refs.get(company_code, 0) - 1
            if self._refs[company_code] > 0:
                return
            state = self._states.pop(company_code)
            self._refs.pop(company_code, None)
        state.detach()
        logger.info("live state detached for company %s", company_code)

    def active_codes(self) -> list[str]:
        with self._lock:
            return sorted(self._states)

    def shutdown(self) -> None:
        with self._lock:
            states = list(self._states.values())
            self._states.clear()
            self._refs.clear()
        for state in states:
            state.detach()
