import threading
import time
from collections import OrderedDict

from catalog_search.config import SEARCH_CACHE_MAX_ITEMS, SEARCH_CACHE_TTL_SECONDS

DEFAULT_TTL = SEARCH_CACHE_TTL_SECONDS


class Cache:
    """
    A thread-safe caching class that stores key-value pairs for a specified duration.

    Expired entries are dropped when a lookup finds them stale; nothing sweeps
    the cache in the background.

    Attributes:
        ttl (int): Lifetime of an entry in seconds, counted from insertion.
        max_items (int | None): Optional size bound; the least recently used
            entry is evicted when it is exceeded.
    """

    ttl = DEFAULT_TTL

    def __init__(self, ttl: int = None, max_items: int = None, clock=time.time):
        """
        Initializes the Cache object.

        Args:
            ttl (int, optional): The TTL for cache entries. If not provided, uses the class-level ttl.
                A ttl of 0 makes every lookup a miss.
            max_items (int, optional): Maximum number of entries; None or 0 means unbounded.
            clock (callable, optional): Returns the current time in seconds.
        """
        if ttl is not None:
            self.ttl = ttl
        self.max_items = max_items or None
        self.clock = clock
        self.cache = OrderedDict()
        self.lock = threading.Lock()

    def _expired(self, created_at, now):
        return now - created_at >= self.ttl

    def set(self, key, value):
        """
        Adds a key-value pair to the cache, replacing any previous entry.

        Args:
            key: The key for the cache entry.
            value: The value to be stored.
        """
        with self.lock:
            self.cache[key] = (value, self.clock())
            self.cache.move_to_end(key)
            if self.max_items:
                while len(self.cache) > self.max_items:
                    self.cache.popitem(last=False)

    def get(self, key):
        """
        Retrieves the value associated with the given key from the cache.

        Args:
            key: The key for the cache entry.

        Returns:
            The value associated with the key if it exists and hasn't expired, otherwise None.
        """
        with self.lock:
            entry = self.cache.get(key)
            if entry is None:
                return None
            value, created_at = entry
            if self._expired(created_at, self.clock()):
                del self.cache[key]
                return None
            self.cache.move_to_end(key)
            return value

    def delete(self, key):
        with self.lock:
            self.cache.pop(key, None)

    def clear(self):
        with self.lock:
            self.cache.clear()

    def dump(self):
        """Snapshot of live entries with their remaining lifetime, for inspection pages."""
        now = self.clock()
        with self.lock:
            items = list(self.cache.items())
        entries = []
        for key, (value, created_at) in items:
            if self._expired(created_at, now):
                continue
            expires_at = created_at + self.ttl
            entries.append({
                "key": key,
                "value": value,
                "created_at": created_at,
                "expires_at": expires_at,
                "expires_in": int(expires_at - now),
            })
        return entries

    def __len__(self):
        with self.lock:
            return len(self.cache)

    def __str__(self):
        return str(self.cache)


search_cache = Cache(SEARCH_CACHE_TTL_SECONDS, max_items=SEARCH_CACHE_MAX_ITEMS)
