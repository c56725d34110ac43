"""
MSAL token cache adapters.

An adapter hooks a NotifyingTokenCache to a backing store: it reloads the
stored blob before each access and writes it back after an access that
changed the cache. The logic lives once in TokenCacheAdapter; the variants
only choose a store and a cache key.

    PerUserSessionTokenCache  user tokens, in the user's Django session
    AppSessionTokenCache      app tokens, in the Django session
    AppMemoryTokenCache       app tokens, in the process-wide Django cache
    AppFileTokenCache         app tokens, on disk through msal_extensions
"""
import logging

from msal_token_cache.accessor import SynchronizedStoreAccessor
from msal_token_cache.identity import app_cache_key, get_msal_account_id
from msal_token_cache.notifications import TokenCacheNotificationArgs
from msal_token_cache.stores import FileTokenCacheStore, MemoryTokenCacheStore, SessionTokenCacheStore

logger = logging.getLogger(__name__)


class TokenCacheAdapter:
    """
    Relays a token cache's notifications to a SynchronizedStoreAccessor.

    Subclasses implement get_cache_key(). A None key means no identity is
    available yet; the adapter then leaves the in-memory cache alone.
    """

    def __init__(self, token_cache, store):
        self.token_cache = token_cache
        self.accessor = SynchronizedStoreAccessor(store)

        token_cache.set_before_access(self.on_before_access)
        token_cache.set_after_access(self.on_after_access)
        token_cache.set_before_write(self.on_before_write)

    @property
    def store(self):
        return self.accessor.store

    def get_cache_key(self, args=None):
        raise NotImplementedError

    def on_before_access(self, args):
        """Reload the cache from the store in case it changed since the last access."""
        key = self.get_cache_key(args)
        if not key:
            return
        # An absent entry deserializes to an empty cache
        args.token_cache.deserialize(self.accessor.load(key))

    def on_after_access(self, args):
        """Persist the cache if the access changed it."""
        if not args.has_state_changed:
            return
        key = self.get_cache_key(args)
        if not key:
            logger.debug("No cache key available yet; token cache changes kept in memory only")
            return
        self.accessor.persist(key, args.token_cache.serialize())
        args.token_cache.has_state_changed = False

    def on_before_write(self, args):
        # persist() takes the store's write lock itself
        pass

    def clear(self):
        """Evict this adapter's entry from the store, e.g. on sign-out."""
        self.accessor.clear(self.get_cache_key())


class PerUserSessionTokenCache(TokenCacheAdapter):
    """
    Token cache of one signed-in user, kept in that user's session.

    The principal can be passed explicitly because the authorization code is
    redeemed before the framework has populated the signed-in user.
    """

    def __init__(self, token_cache, session, principal=None, lock=None):
        super().__init__(token_cache, SessionTokenCacheStore(session, lock=lock))
        self.signed_in_user = principal

    def get_cache_key(self, args=None):
        principal = self.signed_in_user
        if principal is None and args is not None:
            principal = args.principal
        if principal is None:
            principal = getattr(self.token_cache, 'principal', None)
        return get_msal_account_id(principal)

    def bind_principal(self, principal):
        """
        Attach the signed-in user and persist anything acquired before it was known.

        Returns:
            The user's cache key, or None if the principal lacks the needed claims
        """
        self.signed_in_user = principal
        key = self.get_cache_key()
        if key and self.token_cache.has_state_changed:
            self.on_after_access(TokenCacheNotificationArgs(
                token_cache=self.token_cache,
                has_state_changed=True,
                principal=principal,
            ))
        return key


class AppTokenCacheAdapter(TokenCacheAdapter):
    """Token cache of the application itself, keyed by its client id."""

    def __init__(self, token_cache, client_id, store):
        self.app_cache_id = app_cache_key(client_id)
        super().__init__(token_cache, store)

    def get_cache_key(self, args=None):
        return self.app_cache_id


class AppSessionTokenCache(AppTokenCacheAdapter):
    def __init__(self, token_cache, client_id, session, lock=None):
        super().__init__(token_cache, client_id, SessionTokenCacheStore(session, lock=lock))


class AppMemoryTokenCache(AppTokenCacheAdapter):
    """
    App token cache in process memory, for API scenarios without a session.

    Entries expire ttl after their last write (48 hours unless configured).
    """

    def __init__(self, token_cache, client_id, ttl=None, cache_alias=None, clock=None, lock=None):
        store = MemoryTokenCacheStore(cache_alias=cache_alias, ttl=ttl, clock=clock, lock=lock)
        super().__init__(token_cache, client_id, store)


class AppFileTokenCache(AppTokenCacheAdapter):
    def __init__(self, token_cache, client_id, directory=None, lock=None):
        super().__init__(token_cache, client_id, FileTokenCacheStore(directory, lock=lock))
