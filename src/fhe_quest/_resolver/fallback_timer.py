# Area: Resolver
"""
fhe_quest._resolver.fallback_timer — Oracle fallback deadline
=============================================================

Single wall-clock deadline armed when a search transaction is confirmed.
It has no on-chain effect: the runner loop polls ``expired`` and the
resolver synthesizes a best-effort outcome when it fires first.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

logger = logging.getLogger("fhe_quest.resolver.fallback")

DEFAULT_FALLBACK_SECONDS = 10.0


class FallbackTimer:
    """One-shot monotonic deadline."""

    def __init__(self) -> None:
        self._expires_at: Optional[float] = None

    @property
    def is_armed(self) -> bool:
        return self._expires_at is not None

    def arm(self, seconds: float) -> None:
        """Arm (or re-arm) the timer ``seconds`` from now."""
        self._expires_at = time.monotonic() + seconds
        logger.debug("Fallback armed (%.1fs)", seconds)

    def expired(self) -> bool:
        """True once the armed deadline has passed. Disarmed timers never expire."""
        if self._expires_at is None:
            return False
        return time.monotonic() >= self._expires_at

    def remaining(self) -> float:
        """Seconds until expiry, 0 when expired or disarmed."""
        if self._expires_at is None:
            return 0.0
        return max(0.0, self._expires_at - time.monotonic())

    def cancel(self) -> None:
        """Disarm the timer. No-op if not armed."""
        if self._expires_at is not None:
            logger.debug("Fallback cancelled")
        self._expires_at = None
