"""
Backing stores for serialized MSAL token caches.

Every store exposes get/set/remove on opaque blobs keyed by string, and
carries the ReadWriteLock that the SynchronizedStoreAccessor takes around
those calls. By default all instances of one store type share a single
process-wide lock; tests and callers may inject their own.
"""
import hashlib
import logging
import os
import re
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from django.core.cache import caches
from django.utils import timezone
from msal_extensions import CrossPlatLock, FilePersistence
from msal_extensions.persistence import PersistenceNotFound

from msal_token_cache.locking import ReadWriteLock
from msal_token_cache.msal_config import TOKEN_CACHE_ALIAS, TOKEN_CACHE_DIR, TOKEN_CACHE_TTL_HOURS

logger = logging.getLogger(__name__)

SESSION_STORE_LOCK = ReadWriteLock()
MEMORY_STORE_LOCK = ReadWriteLock()
FILE_STORE_LOCK = ReadWriteLock()

DEFAULT_TTL = timedelta(hours=TOKEN_CACHE_TTL_HOURS)


class TokenCacheStore:
    """Interface of a token cache backing store."""

    def __init__(self, lock: Optional[ReadWriteLock] = None):
        self.lock = lock if lock is not None else ReadWriteLock()

    def get(self, key: str) -> Optional[Any]:  # pragma: no cover - interface
        raise NotImplementedError

    def set(self, key: str, blob: Any, ttl: Optional[timedelta] = None) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def remove(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class SessionTokenCacheStore(TokenCacheStore):
    """
    One blob per key inside the current request's Django session.

    The session is already single-writer per request; the shared lock covers
    concurrent requests of the same user hitting the same session data.
    """

    def __init__(self, session, lock: Optional[ReadWriteLock] = None):
        super().__init__(lock if lock is not None else SESSION_STORE_LOCK)
        self.session = session

    def get(self, key):
        return self.session.get(key)

    def set(self, key, blob, ttl=None):
        self.session[key] = blob

    def remove(self, key):
        self.session.pop(key, None)


@dataclass
class CachedBlob:
    """
    A blob with its absolute expiry.

    Attributes:
        blob: The serialized token cache
        expires_at: Timestamp after which the entry reads as absent
    """

    blob: Any
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


def _as_timedelta(ttl: Union[timedelta, int, float, None], default: timedelta) -> timedelta:
    if ttl is None:
        return default
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=ttl)


class MemoryTokenCacheStore(TokenCacheStore):
    """
    Process-wide blobs in a Django cache (LocMemCache by default), with expiry.

    The expiry is recorded next to the blob at write time and checked on every
    read, so an expired entry is a miss even before the cache backend evicts it.
    Every write refreshes the expiry.
    """

    def __init__(self, cache_alias=None, ttl=None, clock=None, lock: Optional[ReadWriteLock] = None):
        super().__init__(lock if lock is not None else MEMORY_STORE_LOCK)
        self.cache_alias = cache_alias or TOKEN_CACHE_ALIAS
        self.ttl = _as_timedelta(ttl, DEFAULT_TTL)
        self.clock = clock or timezone.now

    @property
    def cache(self):
        return caches[self.cache_alias]

    def get(self, key):
        entry = self.cache.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            logger.debug(f"Token cache entry {key} expired at {entry.expires_at.isoformat()}")
            return None
        return entry.blob

    def set(self, key, blob, ttl=None):
        ttl = _as_timedelta(ttl, self.ttl)
        entry = CachedBlob(blob=blob, expires_at=self.clock() + ttl)
        self.cache.set(key, entry, timeout=max(ttl.total_seconds(), 0))

    def remove(self, key):
        self.cache.delete(key)


_SAFE_FILENAME = re.compile(r'[^A-Za-z0-9._-]')


class FileTokenCacheStore(TokenCacheStore):
    """
    One file per key on disk, written through msal_extensions.

    Writes also hold a CrossPlatLock on a sibling lock file so that several
    worker processes sharing the directory do not corrupt each other's
    blobs. Blobs must be text, which is what MSAL serializes to.
    """

    def __init__(self, directory=None, lock: Optional[ReadWriteLock] = None):
        super().__init__(lock if lock is not None else FILE_STORE_LOCK)
        self.directory = Path(directory) if directory else TOKEN_CACHE_DIR

    def _filename(self, key):
        safe = _SAFE_FILENAME.sub('_', key)
        if safe != key:
            safe = f"{safe}-{hashlib.sha256(key.encode('utf-8')).hexdigest()[:12]}"
        return f"{safe}.json"

    def _persistence(self, key):
        return FilePersistence(str(self.directory / self._filename(key)))

    def get(self, key):
        try:
            return self._persistence(key).load()
        except PersistenceNotFound:
            return None

    def set(self, key, blob, ttl=None):
        if not isinstance(blob, str):
            raise TypeError(f"FileTokenCacheStore stores text blobs, got {type(blob).__name__}")
        self.directory.mkdir(parents=True, exist_ok=True)
        persistence = self._persistence(key)
        with CrossPlatLock(persistence.get_location() + ".lockfile"):
            persistence.save(blob)

    def remove(self, key):
        if not self.directory.exists():
            return
        location = self._persistence(key).get_location()
        with CrossPlatLock(location + ".lockfile"):
            with suppress(FileNotFoundError):
                os.remove(location)
