"""NotificationChannel - ephemeral, auto-expiring user messages (toasts)"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from sgrvias.domain.models import Severity, Toast

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 3000
DEFAULT_ERROR_TTL_MS = 5000


class NotificationChannel:
    """
    Insertion-ordered collection of toasts.

    A toast expires after its severity's TTL or on explicit dismissal.
    Expiry is evaluated lazily against `clock` whenever the channel is read,
    so no timer thread is needed.
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        error_ttl_ms: int = DEFAULT_ERROR_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            ttl_ms: lifetime of success/info toasts
            error_ttl_ms: lifetime of error toasts
            clock: monotonic clock in seconds (injectable for tests)
        """
        self._ttl_ms = ttl_ms
        self._error_ttl_ms = error_ttl_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._toasts: tuple[Toast, ...] = ()

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Toast:
        """Append a new toast and return it"""
        ttl_ms = self._error_ttl_ms if severity is Severity.ERROR else self._ttl_ms
        toast = Toast(
            message=message,
            severity=severity,
            expires_at=self._clock() + ttl_ms / 1000.0,
        )
        with self._lock:
            self._toasts = (*self._live(), toast)
        logger.debug("Toast queued: severity=%s, message=%s", severity.value, message)
        return toast

    def dismiss(self, toast_id: str) -> bool:
        """Remove a toast immediately. Returns False if it was already gone"""
        with self._lock:
            live = self._live()
            remaining = tuple(t for t in live if t.id != toast_id)
            removed = len(remaining) != len(live)
            self._toasts = remaining
        return removed

    def active(self) -> list[Toast]:
        """Unexpired toasts, oldest first"""
        with self._lock:
            self._toasts = self._live()
            return list(self._toasts)

    def _live(self) -> tuple[Toast, ...]:
        now = self._clock()
        return tuple(t for t in self._toasts if t.expires_at > now)
