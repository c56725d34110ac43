"""
pytest configuration for the token cache tests.

Sets up a test environment and bootstraps Django before any app module is imported.
"""

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Set test environment variables BEFORE any imports
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "token_cache_site.settings")
os.environ.setdefault("TOKEN_CACHE_LOGS_DIR", os.path.join(tempfile.gettempdir(), "msal_token_cache_logs"))
os.environ.setdefault("AZURE_CLIENT_ID", "11111111-2222-3333-4444-555555555555")
os.environ.setdefault("AZURE_TENANT_ID", "contoso-tenant")
os.environ.setdefault("AZURE_CLIENT_SECRET", "test-secret")
os.environ.setdefault("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver")

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import django

django.setup()

from django.contrib.sessions.backends.cache import SessionStore
from django.core.cache import caches

from msal_token_cache.locking import ReadWriteLock
from msal_token_cache.stores import TokenCacheStore


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class SpyStore(TokenCacheStore):
    """Dict-backed store that records every call."""

    def __init__(self, lock=None):
        super().__init__(lock)
        self.data = {}
        self.calls = []

    def get(self, key):
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key, blob, ttl=None):
        self.calls.append(("set", key))
        self.data[key] = blob

    def remove(self, key):
        self.calls.append(("remove", key))
        self.data.pop(key, None)

    @property
    def writes(self):
        return [call for call in self.calls if call[0] in ("set", "remove")]


@pytest.fixture
def session():
    """Fresh cache-backed Django session."""
    return SessionStore()


@pytest.fixture
def lock():
    """Isolated lock so tests do not contend on the process-wide ones."""
    return ReadWriteLock()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def spy_store(lock):
    return SpyStore(lock=lock)


@pytest.fixture(autouse=True)
def clear_caches():
    """Empty the Django caches between tests."""
    caches["default"].clear()
    caches["token_cache"].clear()
    yield
    caches["default"].clear()
    caches["token_cache"].clear()
