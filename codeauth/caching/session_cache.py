"""
In-process session cache for the CodeAuth client.

The cache is a single generation of entries sharing one expiry clock. When
the generation's window has elapsed the whole map is dropped and a new
generation starts; there is no per-entry TTL. Every public method starts by
checking the epoch, under the same lock that guards the map, so a stale
generation is never observed.

The lock only covers in-memory work. Callers that pair a ``get`` with a
network call and a ``put`` do so in separate critical sections, so the last
writer wins: a ``put`` racing a ``remove`` or an epoch reset can bring an
entry back until the next expiry.
"""

import threading
import time
from typing import Callable, Dict, Optional

from ..models import SessionRecord
from ..shared.logging import get_logger, redact_token
from ..shared.metrics import MetricsCollector


class SessionCache:
    """Thread-safe, whole-generation cache of session records keyed by token."""

    def __init__(self, window_duration: float, enabled: bool = True,
                 clock: Callable[[], float] = time.monotonic,
                 metrics: Optional[MetricsCollector] = None):
        self.window_duration = window_duration
        self.enabled = enabled
        self.logger = get_logger("codeauth.session_cache")
        self.metrics = metrics
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, SessionRecord] = {}
        self._epoch_start = clock()

    @property
    def epoch_start(self) -> float:
        return self._epoch_start

    def _check_epoch_locked(self) -> None:
        now = self._clock()
        if now - self._epoch_start < self.window_duration:
            return

        evicted = len(self._entries)
        self._epoch_start = now
        self._entries = {}
        if evicted:
            self.logger.debug("Session cache generation expired", evicted=evicted)
            if self.metrics:
                self.metrics.record_cache_eviction("expired", evicted)

    def check_epoch(self) -> None:
        """Start a new, empty generation if the current one has expired."""
        if not self.enabled:
            return
        with self._lock:
            self._check_epoch_locked()

    def get(self, token: str) -> Optional[SessionRecord]:
        """Get a cached record, or None on a miss."""
        if not self.enabled:
            return None

        with self._lock:
            self._check_epoch_locked()
            record = self._entries.get(token)

        if self.metrics:
            if record is None:
                self.metrics.record_cache_miss()
            else:
                self.metrics.record_cache_hit()
        return record

    def put(self, token: str, record: SessionRecord) -> None:
        """Cache a record. Only successful records may be cached."""
        if not record.ok:
            raise ValueError(f"refusing to cache a failed result ({record.error_code})")
        if not self.enabled:
            return

        with self._lock:
            self._check_epoch_locked()
            self._entries[token] = record

    def remove(self, token: str) -> None:
        """Drop a token's record; absent tokens are ignored."""
        if not self.enabled:
            return

        with self._lock:
            self._check_epoch_locked()
            removed = self._entries.pop(token, None)

        if removed is not None:
            self.logger.debug("Session removed from cache", session_token=redact_token(token))
            if self.metrics:
                self.metrics.record_cache_eviction("invalidated")

    def replace(self, old_token: str, new_token: str, record: SessionRecord) -> None:
        """Swap a refreshed session in for the token it replaced, atomically."""
        if not record.ok:
            raise ValueError(f"refusing to cache a failed result ({record.error_code})")
        if not self.enabled:
            return

        with self._lock:
            self._check_epoch_locked()
            removed = self._entries.pop(old_token, None)
            self._entries[new_token] = record

        if removed is not None and self.metrics:
            self.metrics.record_cache_eviction("refreshed")

    def clear(self) -> None:
        """Drop every entry and start a new generation now."""
        with self._lock:
            evicted = len(self._entries)
            self._entries = {}
            self._epoch_start = self._clock()

        self.logger.info("Session cache cleared", evicted=evicted)
        if self.metrics:
            self.metrics.record_cache_eviction("cleared", evicted)

    def __len__(self) -> int:
        with self._lock:
            self._check_epoch_locked()
            return len(self._entries)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            self._check_epoch_locked()
            return token in self._entries
