# navigation/cache.py
"""
NAVIGATION CACHE LAYER
======================

In-process caches for resolved navigation and lookup data.

- ``TTLCache``: expiry checked lazily on read, LRU eviction at ``max_size``.
- ``RequestCache``: get-or-fetch on top of a ``TTLCache`` that allows at most
  one in-flight fetch per key. Concurrent callers for the same key wait on
  that fetch and receive its result (or its exception).
- ``NavigationCacheManager``: the navigation-specific caches and their
  invalidation rules.

Caches are plain objects. Build one per process (see
``navigation.services``) and pass it to whoever needs it.
"""
import fnmatch
import hashlib
import logging
import threading
import time
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    value: Any
    created_at: float
    expires_at: float
    hits: int = 0


class TTLCache:
    """Thread-safe TTL + LRU map. ``clock`` returns seconds as a float."""

    def __init__(self, max_size: int = 100, default_ttl: float = 300, clock: Callable[[], float] = None):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.clock = clock or time.monotonic
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._misses = 0

    def get(self, key: str, default=None):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return default

            if self.clock() >= entry.expires_at:
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Cache entry expired: {key}")
                return default

            entry.hits += 1
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value, ttl: Optional[float] = None):
        ttl = self.default_ttl if ttl is None else ttl
        now = self.clock()
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted least recently used entry: {evicted}")
            self._entries[key] = CacheEntry(value=value, created_at=now, expires_at=now + ttl)

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    __contains__ = has

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._misses = 0

    def keys(self) -> List[str]:
        """Keys of entries that have not expired yet, least recently used first."""
        now = self.clock()
        with self._lock:
            return [key for key, entry in self._entries.items() if now < entry.expires_at]

    def prune(self) -> int:
        """Drop every expired entry now; returns how many were removed."""
        now = self.clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict:
        with self._lock:
            entries = list(self._entries.values())
            misses = self._misses
        total_hits = sum(entry.hits for entry in entries)
        lookups = total_hits + misses
        created = [entry.created_at for entry in entries]
        return {
            'size': len(entries),
            'max_size': self.max_size,
            'total_hits': total_hits,
            'misses': misses,
            'hit_rate': total_hits / lookups if lookups else 0.0,
            'oldest_entry': min(created) if created else None,
            'newest_entry': max(created) if created else None,
        }


class RequestCache:
    """
    ``execute(key, fetch)`` returns the cached value or runs ``fetch`` once.

    While a fetch for ``key`` is running, other callers block on the same
    ``Future`` instead of fetching again. ``invalidate*`` drops both the
    cached value and the pending record, so later callers start a fresh
    fetch; a fetch whose record was invalidated does not write its result.
    """

    def __init__(self, max_size: int = 100, default_ttl: float = 300,
                 clock: Callable[[], float] = None, cache: TTLCache = None):
        self.cache = cache or TTLCache(max_size=max_size, default_ttl=default_ttl, clock=clock)
        self._pending = {}
        self._lock = threading.Lock()
        self._fetches = 0
        self._deduplicated = 0

    def execute(self, key: str, fetch: Callable[[], Any], ttl: Optional[float] = None):
        with self._lock:
            cached = self.cache.get(key, _MISSING)
            if cached is not _MISSING:
                logger.debug(f"Cache hit: {key}")
                return cached

            future = self._pending.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._pending[key] = future
                self._fetches += 1
            else:
                self._deduplicated += 1

        if not owner:
            logger.debug(f"Waiting on in-flight fetch: {key}")
            return future.result()

        logger.debug(f"Cache miss, fetching: {key}")
        try:
            value = fetch()
        except Exception as exc:
            with self._lock:
                if self._pending.get(key) is future:
                    del self._pending[key]
            future.set_exception(exc)
            raise

        with self._lock:
            if self._pending.get(key) is future:
                del self._pending[key]
                self.cache.set(key, value, ttl)
            else:
                logger.debug(f"Fetch for {key} finished after invalidation, result not cached")
        future.set_result(value)
        return value

    def get(self, key: str, default=None):
        return self.cache.get(key, default)

    def set(self, key: str, value, ttl: Optional[float] = None):
        self.cache.set(key, value, ttl)

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._pending

    def invalidate(self, key: str):
        with self._lock:
            self.cache.delete(key)
            self._pending.pop(key, None)

    def invalidate_pattern(self, pattern: str) -> int:
        """Invalidate every cached or pending key matching a glob ``pattern``."""
        with self._lock:
            keys = set(self.cache.keys()) | set(self._pending)
            matched = [key for key in keys if fnmatch.fnmatchcase(key, pattern)]
            for key in matched:
                self.cache.delete(key)
                self._pending.pop(key, None)
        if matched:
            logger.debug(f"Invalidated {len(matched)} cache entries matching {pattern!r}")
        return len(matched)

    def clear(self):
        with self._lock:
            self.cache.clear()
            self._pending.clear()

    def get_stats(self) -> dict:
        with self._lock:
            pending = len(self._pending)
            fetches, deduplicated = self._fetches, self._deduplicated
        stats = self.cache.get_stats()
        stats.update({
            'pending_requests': pending,
            'fetches': fetches,
            'deduplicated_requests': deduplicated,
        })
        return stats


# ============================================================================
# NAVIGATION CACHES
# ============================================================================

def permissions_hash(permissions: Iterable[str]) -> str:
    """Order-independent digest of a permission set."""
    joined = ','.join(sorted(set(permissions or ())))
    return hashlib.sha1(joined.encode('utf-8')).hexdigest()[:12]


class CacheKeys:
    PREFIX_NAVIGATION = 'nav'
    PREFIX_LOOKUP = 'lookup'

    @staticmethod
    def role_config(role) -> str:
        return f"nav:role:{role}"

    @staticmethod
    def filtered_items(role, permissions) -> str:
        return f"nav:items:{role}:{permissions_hash(permissions)}"

    @staticmethod
    def grouped_navigation(role, permissions) -> str:
        return f"nav:grouped:{role}:{permissions_hash(permissions)}"

    @staticmethod
    def permission_check(user_id, role, item_id, permissions) -> str:
        return f"nav:perm:{user_id or 'anonymous'}:{role}:{item_id}:{permissions_hash(permissions)}"

    @staticmethod
    def lookup_categories() -> str:
        return "lookup:categories"

    @staticmethod
    def lookup_category(code) -> str:
        return f"lookup:category:{code}"

    @staticmethod
    def lookup_values(code) -> str:
        return f"lookup:values:{code}"

    @staticmethod
    def lookup_value(category_code, value_code) -> str:
        return f"lookup:value:{category_code}:{value_code}"


class NavigationCacheManager:
    """
    Role config, filtered item, grouped navigation and permission-check caches.

    Navigation entries share the main TTL; permission checks
    use a shorter one. With caching disabled every call goes straight to
    the supplied builder.
    """

    def __init__(self, ttl: float = 300, permission_ttl: float = 120, max_entries: int = 100,
                 enabled: bool = True, clock: Callable[[], float] = None):
        self.enabled = enabled
        self.navigation = RequestCache(max_size=max_entries, default_ttl=ttl, clock=clock)
        self.permissions = TTLCache(max_size=max_entries * 5, default_ttl=permission_ttl, clock=clock)

    def set_enabled(self, enabled: bool):
        self.enabled = enabled
        if not enabled:
            self.clear_all()
        logger.info(f"Navigation cache {'enabled' if enabled else 'disabled'}")

    def get_role_config(self, role, build: Callable[[], Any]):
        if not self.enabled:
            return build()
        return self.navigation.execute(CacheKeys.role_config(role), build)

    def get_filtered_items(self, role, permissions, build: Callable[[], Any]):
        if not self.enabled:
            return build()
        return self.navigation.execute(CacheKeys.filtered_items(role, permissions), build)

    def get_grouped_navigation(self, role, permissions, build: Callable[[], Any]):
        if not self.enabled:
            return build()
        return self.navigation.execute(CacheKeys.grouped_navigation(role, permissions), build)

    def get_permission_check(self, user_id, role, item_id, permissions, check: Callable[[], Any]):
        if not self.enabled:
            return check()
        key = CacheKeys.permission_check(user_id, role, item_id, permissions)
        result = self.permissions.get(key, _MISSING)
        if result is _MISSING:
            result = check()
            self.permissions.set(key, result)
        return result

    def invalidate_role(self, role):
        removed = self.navigation.invalidate_pattern(f"nav:*:{role}")
        removed += self.navigation.invalidate_pattern(f"nav:*:{role}:*")
        logger.info(f"Invalidated {removed} navigation cache entries for role {role}")

    def invalidate_user(self, user_id):
        prefix = f"nav:perm:{user_id}:"
        for key in self.permissions.keys():
            if key.startswith(prefix):
                self.permissions.delete(key)

    def clear_all(self):
        self.navigation.clear()
        self.permissions.clear()

    def get_stats(self) -> dict:
        return {
            'enabled': self.enabled,
            'navigation': self.navigation.get_stats(),
            'permissions': self.permissions.get_stats(),
        }
