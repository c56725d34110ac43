"""
Reader/writer lock guarding a token cache backing store.

Any number of readers may hold the lock together; a writer holds it alone.
A waiting writer blocks new readers so a steady stream of loads cannot
starve a persist. The lock is not re-entrant.
"""
import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Shared/exclusive lock built on a threading.Condition."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a held read lock")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without a held write lock")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield self
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield self
        finally:
            self.release_write()

    @property
    def readers(self):
        """Number of readers currently holding the lock (diagnostics)."""
        with self._cond:
            return self._readers

    @property
    def write_held(self):
        with self._cond:
            return self._writer
