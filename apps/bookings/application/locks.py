"""Per-room mutual exclusion for the booking write path."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator

from apps.bookings.domain.errors import StorageFailure

logger = logging.getLogger(__name__)


class RoomLockRegistry:
    """
    One lock per room, created on first use

    Serialises "load bookings -> check -> write" for a room inside this
    process. Requests for different rooms never wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}

    def _lock_for(self, room_id: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, room_id: Hashable, timeout: float) -> Iterator[None]:
        """
        Hold the room's lock for the duration of the block

        Raises:
            StorageFailure: the lock was not acquired within ``timeout`` seconds.
        """
        lock = self._lock_for(room_id)
        if not lock.acquire(timeout=timeout):
            logger.warning(f"Timed out after {timeout}s waiting for room {room_id}")
            raise StorageFailure(f"Room {room_id} is busy, retry the request")
        try:
            yield
        finally:
            lock.release()
