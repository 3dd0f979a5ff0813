# telemetry/runtime/_internal/pending_registration.py
from __future__ import annotations

import time
from concurrent.futures import Future, InvalidStateError, TimeoutError as FutureTimeout
from typing import Optional

from telemetry.facade.kinds import INVALID_METRIC_ID, MetricId


class PendingRegistration:
    """One-shot reply slot for a Register command."""

    def __init__(self, name: str):
        self.name = str(name)
        self.created_at = time.perf_counter()
        self.future: Future = Future()

    def done(self) -> bool:
        return self.future.done()

    def set_result(self, metric_id: MetricId) -> bool:
        """Deliver the identifier. Returns False if the slot was already resolved."""
        if self.future.done():
            return False
        try:
            self.future.set_result(int(metric_id))
        except InvalidStateError:
            # lost a race with another resolver
            return False
        return True

    def abandon(self) -> bool:
        """Resolve with the sentinel (writer gone before replying)."""
        return self.set_result(INVALID_METRIC_ID)

    def wait(self, timeout: Optional[float] = None) -> MetricId:
        """Blocking wait for the identifier; the sentinel on timeout."""
        try:
            return self.future.result(timeout=timeout)
        except FutureTimeout:
            return INVALID_METRIC_ID
