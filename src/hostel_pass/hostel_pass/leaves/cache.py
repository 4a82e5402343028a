from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.constants import DEFAULT_CACHE_MAX_SIZE, DEFAULT_CACHE_TTL_SECONDS
from .model import LeaveRequest


@dataclass
class CacheEntry:
    request: LeaveRequest
    created_at: float

    def is_expired(self, ttl_seconds: float) -> bool:
        return time.monotonic() - self.created_at > ttl_seconds


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    invalidations: int = 0


class LeaveRequestCache:
    """Read-through LRU cache of leave requests keyed by id.

    The service calls ``invalidate`` after every successful mutation, so a
    read that follows a write always goes back to the store. Missing ids are
    not cached.
    """

    def __init__(self, *, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS, max_size: int = DEFAULT_CACHE_MAX_SIZE):
        self._ttl_seconds = float(ttl_seconds)
        self._max_size = int(max_size)
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._generation = 0
        self.stats = CacheStats()

    def get(self, request_id: str, loader: Callable[[str], Optional[LeaveRequest]]) -> Optional[LeaveRequest]:
        with self._lock:
            entry = self._entries.get(request_id)
            if entry is not None and not entry.is_expired(self._ttl_seconds):
                self._entries.move_to_end(request_id)
                self.stats.hits += 1
                return entry.request
            self._entries.pop(request_id, None)
            self.stats.misses += 1
            generation = self._generation

        request = loader(request_id)
        if request is not None and self._max_size > 0:
            with self._lock:
                # Skip the fill if an invalidation raced with the load.
                if generation != self._generation:
                    return request
                self._entries[request_id] = CacheEntry(request=request, created_at=time.monotonic())
                self._entries.move_to_end(request_id)
                while len(self._entries) > self._max_size:
                    self._entries.popitem(last=False)
        return request

    def invalidate(self, request_id: str) -> None:
        with self._lock:
            self._entries.pop(request_id, None)
            self._generation += 1
            self.stats.invalidations += 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
