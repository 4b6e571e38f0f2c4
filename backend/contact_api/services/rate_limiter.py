import logging
import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allowed:
    pass


@dataclass(frozen=True)
class Throttled:
    retry_after_seconds: int


RateDecision = Union[Allowed, Throttled]


class SubmissionRateLimiter:
    """
    One accepted submission per client per window.

    Keeps a single timestamp per client id. Entries older than twice the
    window are swept on every accepted submission, so the table only holds
    clients seen within the retention period.
    """

    def __init__(
        self,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.retention_seconds = window_seconds * 2
        self._clock = clock
        self._last_submission: Dict[str, float] = {}
        self._lock = Lock()

    def _decide_locked(self, client_id: str, now: float) -> RateDecision:
        last = self._last_submission.get(client_id)
        if last is not None:
            elapsed = now - last
            if elapsed < self.window_seconds:
                return Throttled(retry_after_seconds=math.ceil(self.window_seconds - elapsed))
        return Allowed()

    def check(self, client_id: str, now: Optional[float] = None) -> RateDecision:
        """Decide whether client_id may submit without recording anything."""
        if now is None:
            now = self._clock()
        with self._lock:
            return self._decide_locked(client_id, now)

    def check_and_record(
        self, client_id: str, now: Optional[float] = None
    ) -> RateDecision:
        """
        Atomically decide whether client_id may submit, recording the
        submission time when it may.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            decision = self._decide_locked(client_id, now)
            if isinstance(decision, Throttled):
                return decision

            self._last_submission[client_id] = now
            self._sweep_locked(now)
            return Allowed()

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop records older than the retention period. Returns the count removed."""
        if now is None:
            now = self._clock()
        with self._lock:
            return self._sweep_locked(now)

    def _sweep_locked(self, now: float) -> int:
        cutoff = now - self.retention_seconds
        stale = [cid for cid, ts in self._last_submission.items() if ts < cutoff]
        for client_id in stale:
            del self._last_submission[client_id]
        if stale:
            logger.debug(f"Swept {len(stale)} stale rate-limit entries")
        return len(stale)

    def close(self) -> None:
        with self._lock:
            self._last_submission.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_submission)

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            return client_id in self._last_submission
