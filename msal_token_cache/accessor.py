"""
Synchronized load/persist/clear against one token cache backing store.

Loads share the store's read lock, persists and clears take it exclusively.
A missing key (nobody signed in yet) turns every operation into a no-op.
Store failures are re-raised as BackingStoreUnavailable, chained to the cause.
"""
import logging

from msal_token_cache.exceptions import BackingStoreUnavailable, TokenCacheError

logger = logging.getLogger(__name__)


class SynchronizedStoreAccessor:
    """Serializes access to a TokenCacheStore through its ReadWriteLock."""

    def __init__(self, store):
        self.store = store

    @property
    def lock(self):
        return self.store.lock

    def load(self, key):
        """
        Read the blob stored under key.

        Args:
            key: Cache key, or None when no identity is available

        Returns:
            The stored blob, or None if there is no (unexpired) entry

        Raises:
            BackingStoreUnavailable: If the store raised
        """
        if not key:
            return None

        with self.lock.read_locked():
            blob = self._call("load", key, self.store.get, key)

        logger.debug(f"Loaded token cache {key} ({'hit' if blob is not None else 'miss'})")
        return blob

    def persist(self, key, blob, ttl=None):
        """Replace the blob stored under key. No-op without a key."""
        if not key:
            return

        with self.lock.write_locked():
            self._call("persist", key, self.store.set, key, blob, ttl)

        logger.debug(f"Persisted token cache {key}")

    def clear(self, key):
        """Remove the entry stored under key. No-op without a key."""
        if not key:
            return

        with self.lock.write_locked():
            self._call("clear", key, self.store.remove, key)

        logger.info(f"Cleared token cache {key}")

    def _call(self, operation, key, func, *args):
        try:
            return func(*args)
        except TokenCacheError:
            raise
        except Exception as e:
            logger.error(f"Token cache {operation} failed for {key}: {e}")
            raise BackingStoreUnavailable(
                f"Token cache {operation} failed for {key}: {e}", key=key
            ) from e
