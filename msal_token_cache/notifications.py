"""
Lifecycle notifications for MSAL's serializable token cache.

MSAL for Python hands its cache to the host as a SerializableTokenCache but
has no before/after access hooks. NotifyingTokenCache adds them:

    before-access   fired before every read (search) and write (add/modify)
    before-write    fired after before-access, ahead of every write
    after-access    fired once the read or write has completed

Each outermost access holds a per-cache RLock from before-access to
after-access, so a cache shared by request threads (the app cache) runs one
load, mutate, persist sequence at a time. Nested accesses do not fire
again; an add() that internally calls modify() produces a single sequence.
If the wrapped call raises, after-access is skipped so a half-applied
change is never persisted.
"""
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Optional

import msal


@dataclass
class TokenCacheNotificationArgs:
    """
    Parameters of a cache notification.

    Attributes:
        token_cache: The NotifyingTokenCache being accessed
        has_state_changed: Whether the in-memory cache changed since it was last loaded or persisted
        principal: The signed-in principal in effect at access time, if known
    """

    token_cache: "NotifyingTokenCache"
    has_state_changed: bool
    principal: Any = None


Notification = Callable[[TokenCacheNotificationArgs], None]


class NotifyingTokenCache(msal.SerializableTokenCache):
    """SerializableTokenCache that calls registered hooks around each access."""

    def __init__(self, principal=None):
        super().__init__()
        self.principal = principal
        self._before_access: Optional[Notification] = None
        self._after_access: Optional[Notification] = None
        self._before_write: Optional[Notification] = None
        self._access_lock = threading.RLock()
        self._depth = 0

    def set_before_access(self, callback: Optional[Notification]) -> None:
        self._before_access = callback

    def set_after_access(self, callback: Optional[Notification]) -> None:
        self._after_access = callback

    def set_before_write(self, callback: Optional[Notification]) -> None:
        self._before_write = callback

    def _args(self) -> TokenCacheNotificationArgs:
        return TokenCacheNotificationArgs(
            token_cache=self,
            has_state_changed=self.has_state_changed,
            principal=self.principal,
        )

    def _fire(self, callback):
        if callback is not None:
            callback(self._args())

    @contextmanager
    def _access(self, write=False):
        with self._access_lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                if outermost:
                    self._fire(self._before_access)
                    if write:
                        self._fire(self._before_write)
                yield
                if outermost:
                    self._fire(self._after_access)
            finally:
                self._depth -= 1

    def search(self, credential_type, target=None, query=None, **kwargs):
        with self._access():
            return list(super().search(credential_type, target=target, query=query, **kwargs))

    def add(self, event, **kwargs):
        with self._access(write=True):
            return super().add(event, **kwargs)

    def modify(self, credential_type, old_entry, new_key_value_pairs=None):
        with self._access(write=True):
            return super().modify(credential_type, old_entry, new_key_value_pairs)
