from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict


class RequestGate:
    """
    Sliding-window rate limiter keyed by client identity (usually the source address).
    """

    def __init__(
        self,
        max_requests: int = 30,
        window: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be > 0")
        if window <= 0:
            raise ValueError("window must be > 0")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def admit(self, identity: str) -> bool:
        """Record a hit and return True, or return False if the identity is over its limit."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window:
                self._sweep(now)
            hits = self._prune(identity, now)
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            self._hits[identity] = hits
            return True

    def retry_after(self, identity: str) -> float:
        """Seconds until the identity's oldest hit leaves the window (0 if it may retry now)."""
        now = self._clock()
        with self._lock:
            hits = self._prune(identity, now)
            if len(hits) < self.max_requests:
                return 0.0
            return max(0.0, hits[0] + self.window - now)

    def _prune(self, identity: str, now: float) -> Deque[float]:
        hits = self._hits.get(identity)
        if hits is None:
            return deque()
        while hits and (now - hits[0]) >= self.window:
            hits.popleft()
        if not hits:
            del self._hits[identity]
        return hits

    def _sweep(self, now: float) -> None:
        # Once per window, drop every identity whose newest hit has left the window.
        idle = [k for k, hits in self._hits.items() if not hits or (now - hits[-1]) >= self.window]
        for k in idle:
            del self._hits[k]
        self._last_sweep = now

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)
