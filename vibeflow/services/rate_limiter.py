"""Per-client admission control in front of the external AI calls.

Two limits per client identity: a sliding 60-second window and a daily
counter whose 24-hour window starts at the client's first request (not at
midnight). Client state lives in memory and is swept periodically.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from vibeflow.config import get_settings

logger = logging.getLogger(__name__)

MINUTE_WINDOW_SECONDS = 60.0
DAY_WINDOW_SECONDS = 24 * 60 * 60.0

DEFAULT_PER_MINUTE = 10
DEFAULT_PER_DAY = 500

_governor: RateGovernor | None = None
_governor_lock = threading.Lock()


@dataclass
class RateLimitState:
    daily_reset_at: float
    recent_requests: list[float] = field(default_factory=list)
    daily_count: int = 0

    def is_idle(self, now: float) -> bool:
        """True when evicting this state could not change any future decision."""
        return now > self.daily_reset_at and all(
            t <= now - MINUTE_WINDOW_SECONDS for t in self.recent_requests
        )


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    reason: str | None = None
    retry_after: int | None = None  # seconds


class RateGovernor:
    """Thread-safe per-client request limiter."""

    def __init__(
        self,
        per_minute: int = DEFAULT_PER_MINUTE,
        per_day: int = DEFAULT_PER_DAY,
        sweep_interval: float = 300.0,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.time,
    ):
        self.per_minute = per_minute
        self.per_day = per_day
        self._sweep_interval = sweep_interval
        self._max_clients = max_clients
        self._clock = clock
        self._states: OrderedDict[str, RateLimitState] = OrderedDict()
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check(self, client_id: str, now: float | None = None) -> RateDecision:
        """Admit or deny one request from ``client_id``, recording it if admitted."""
        now = self._clock() if now is None else now
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)

            state = self._states.get(client_id)
            if state is None:
                state = RateLimitState(daily_reset_at=now + DAY_WINDOW_SECONDS)
                self._states[client_id] = state
                self._evict_overflow(client_id, now)
            else:
                self._states.move_to_end(client_id)

            if now > state.daily_reset_at:
                state.daily_count = 0
                state.daily_reset_at = now + DAY_WINDOW_SECONDS

            if state.daily_count >= self.per_day:
                logger.warning(f"Daily limit reached for {client_id}")
                return RateDecision(
                    allowed=False,
                    reason=f"Daily limit reached ({self.per_day} requests)",
                    retry_after=max(1, math.ceil(state.daily_reset_at - now)),
                )

            window_start = now - MINUTE_WINDOW_SECONDS
            state.recent_requests = [t for t in state.recent_requests if t > window_start]

            if len(state.recent_requests) >= self.per_minute:
                logger.warning(f"Per-minute limit reached for {client_id}")
                oldest = state.recent_requests[0]
                return RateDecision(
                    allowed=False,
                    reason=f"Rate limit exceeded ({self.per_minute} requests per minute)",
                    retry_after=max(1, math.ceil(oldest + MINUTE_WINDOW_SECONDS - now)),
                )

            state.recent_requests.append(now)
            state.daily_count += 1
            return RateDecision(allowed=True)

    def state_for(self, client_id: str) -> RateLimitState | None:
        with self._lock:
            return self._states.get(client_id)

    def client_count(self) -> int:
        with self._lock:
            return len(self._states)

    def sweep(self, now: float | None = None) -> int:
        """Drop idle client states. Returns how many were removed."""
        now = self._clock() if now is None else now
        with self._lock:
            return self._sweep(now)

    def _sweep(self, now: float) -> int:
        idle = [cid for cid, state in self._states.items() if state.is_idle(now)]
        for cid in idle:
            del self._states[cid]
        self._last_sweep = now
        if idle:
            logger.debug(f"Swept {len(idle)} idle rate-limit entries")
        return len(idle)

    def _is_limited(self, state: RateLimitState, now: float) -> bool:
        if now <= state.daily_reset_at and state.daily_count >= self.per_day:
            return True
        window_start = now - MINUTE_WINDOW_SECONDS
        return sum(1 for t in state.recent_requests if t > window_start) >= self.per_minute

    def _evict_overflow(self, keep: str, now: float) -> None:
        """Trim the map to ``max_clients``.

        Idle states go first, then the least recently used clients that are not
        currently limited, and only then limited ones.
        """
        overflow = len(self._states) - self._max_clients
        if overflow <= 0:
            return
        idle: list[str] = []
        unlimited: list[str] = []
        limited: list[str] = []
        for cid, state in self._states.items():
            if cid == keep:
                continue
            if state.is_idle(now):
                idle.append(cid)
            elif self._is_limited(state, now):
                limited.append(cid)
            else:
                unlimited.append(cid)

        for cid in (idle + unlimited + limited)[:overflow]:
            if not self._states[cid].is_idle(now):
                logger.warning(f"Evicted active rate-limit entry for {cid}")
            del self._states[cid]


def get_rate_governor() -> RateGovernor:
    """Get or create the process-wide governor."""
    global _governor
    if _governor is None:
        with _governor_lock:
            if _governor is None:
                settings = get_settings()
                _governor = RateGovernor(
                    per_minute=settings.rate_per_minute, per_day=settings.rate_per_day
                )
    return _governor
