"""Short-lived in-memory cache for read endpoints"""
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

class TTLCache:
    """
    Named single-slot cache with a fixed lifetime.

    Slots refresh lazily on the first read after expiry. Writes to storage
    never invalidate a slot, so readers may see data up to ttl seconds old.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._slots: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Cached value, None when absent or expired"""
        with self._lock:
            entry = self._slots.get(key)
            if not entry:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._slots[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._slots[key] = (value, self._clock() + self.ttl)

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Tuple[Any, bool]:
        """
        Cached value or a freshly loaded one.

        Returns:
            Tuple of (value, whether it came from the cache)
        """
        value = self.get(key)
        if value is not None:
            return value, True
        value = loader()
        self.set(key, value)
        return value, False

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()
