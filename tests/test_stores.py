"""
Tests for the token cache backing stores.

Test Coverage:
    - Session store get/set/remove
    - Memory store expiry via an injected clock
    - Expiry refresh on every write
    - Process-wide default locks
    - File store through msal_extensions
"""

from datetime import timedelta

import pytest
from django.core.cache import caches

from msal_token_cache.stores import (
    FILE_STORE_LOCK,
    MEMORY_STORE_LOCK,
    SESSION_STORE_LOCK,
    CachedBlob,
    FileTokenCacheStore,
    MemoryTokenCacheStore,
    SessionTokenCacheStore,
)


class TestSessionTokenCacheStore:
    """Tests for SessionTokenCacheStore."""

    def test_get_missing(self, session):
        assert SessionTokenCacheStore(session).get("abc.def") is None

    def test_set_and_get(self, session):
        store = SessionTokenCacheStore(session)
        store.set("abc.def", b"\x01\x02")
        assert store.get("abc.def") == b"\x01\x02"
        assert session["abc.def"] == b"\x01\x02"

    def test_overwrite(self, session):
        store = SessionTokenCacheStore(session)
        store.set("abc.def", "old")
        store.set("abc.def", "new")
        assert store.get("abc.def") == "new"

    def test_remove(self, session):
        store = SessionTokenCacheStore(session)
        store.set("abc.def", "blob")
        store.remove("abc.def")
        assert store.get("abc.def") is None

    def test_remove_missing(self, session):
        SessionTokenCacheStore(session).remove("never-set")  # Should not raise

    def test_instances_share_process_lock(self, session):
        assert SessionTokenCacheStore(session).lock is SESSION_STORE_LOCK
        assert SessionTokenCacheStore({}).lock is SESSION_STORE_LOCK

    def test_injected_lock(self, session, lock):
        assert SessionTokenCacheStore(session, lock=lock).lock is lock


class TestCachedBlob:
    """Tests for CachedBlob."""

    def test_not_expired(self, clock):
        entry = CachedBlob("blob", clock() + timedelta(hours=1))
        assert not entry.is_expired(clock())

    def test_expired_at_boundary(self, clock):
        entry = CachedBlob("blob", clock())
        assert entry.is_expired(clock())


class TestMemoryTokenCacheStore:
    """Tests for MemoryTokenCacheStore."""

    @pytest.fixture
    def store(self, clock, lock):
        return MemoryTokenCacheStore(ttl=timedelta(hours=48), clock=clock, lock=lock)

    def test_set_and_get(self, store):
        store.set("client_AppTokenCache", b"\x03")
        assert store.get("client_AppTokenCache") == b"\x03"

    def test_get_missing(self, store):
        assert store.get("client_AppTokenCache") is None

    def test_entry_expires(self, store, clock):
        store.set("client_AppTokenCache", "blob", ttl=timedelta(minutes=10))
        clock.advance(minutes=9)
        assert store.get("client_AppTokenCache") == "blob"
        clock.advance(minutes=2)
        assert store.get("client_AppTokenCache") is None

    def test_default_ttl(self, store, clock):
        store.set("client_AppTokenCache", "blob")
        clock.advance(hours=47)
        assert store.get("client_AppTokenCache") == "blob"
        clock.advance(hours=2)
        assert store.get("client_AppTokenCache") is None

    def test_ttl_in_seconds(self, clock, lock):
        store = MemoryTokenCacheStore(ttl=60, clock=clock, lock=lock)
        store.set("k", "blob")
        clock.advance(seconds=61)
        assert store.get("k") is None

    def test_write_refreshes_expiry(self, store, clock):
        store.set("k", "v1", ttl=timedelta(minutes=10))
        clock.advance(minutes=8)
        store.set("k", "v2", ttl=timedelta(minutes=10))
        clock.advance(minutes=8)
        assert store.get("k") == "v2"

    def test_expiry_recorded_with_blob(self, store, clock):
        store.set("k", "blob", ttl=timedelta(hours=1))
        entry = caches["token_cache"].get("k")
        assert entry.expires_at == clock() + timedelta(hours=1)

    def test_remove(self, store):
        store.set("k", "blob")
        store.remove("k")
        assert store.get("k") is None

    def test_shared_across_instances(self, clock):
        MemoryTokenCacheStore(clock=clock).set("k", "blob")
        assert MemoryTokenCacheStore(clock=clock).get("k") == "blob"

    def test_default_lock_is_process_wide(self):
        assert MemoryTokenCacheStore().lock is MEMORY_STORE_LOCK


class TestFileTokenCacheStore:
    """Tests for FileTokenCacheStore."""

    @pytest.fixture
    def store(self, tmp_path, lock):
        return FileTokenCacheStore(tmp_path / "caches", lock=lock)

    def test_get_missing(self, store):
        assert store.get("client_AppTokenCache") is None

    def test_set_and_get(self, store):
        store.set("client_AppTokenCache", '{"AccessToken": {}}')
        assert store.get("client_AppTokenCache") == '{"AccessToken": {}}'

    def test_creates_directory(self, store):
        store.set("k", "blob")
        assert store.directory.is_dir()

    def test_remove(self, store):
        store.set("k", "blob")
        store.remove("k")
        assert store.get("k") is None

    def test_remove_without_directory(self, store):
        store.remove("k")  # Should not raise

    def test_unsafe_keys_do_not_collide(self, store):
        store.set("a/b", "first")
        store.set("a_b", "second")
        assert store.get("a/b") == "first"
        assert store.get("a_b") == "second"

    def test_rejects_bytes(self, store):
        with pytest.raises(TypeError):
            store.set("k", b"\x01")

    def test_default_lock_is_process_wide(self, tmp_path):
        assert FileTokenCacheStore(tmp_path).lock is FILE_STORE_LOCK
