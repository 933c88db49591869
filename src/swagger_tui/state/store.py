"""Reader/writer lock and the store that guards the shared AppState."""

import threading
from contextlib import contextmanager
from typing import Iterator

from swagger_tui.actions import Action, apply_action

from .app_state import AppState


class RWLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers, so a steady stream of render reads
    cannot starve a background commit.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class StateStore:
    """Owns the single AppState; every access goes through read() or write()."""

    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._lock = RWLock()

    @contextmanager
    def read(self) -> Iterator[AppState]:
        with self._lock.read_locked():
            yield self._state

    @contextmanager
    def write(self) -> Iterator[AppState]:
        with self._lock.write_locked():
            yield self._state

    def apply(self, *actions: Action) -> None:
        """Apply actions in order under a single write section."""
        with self.write() as state:
            for action in actions:
                apply_action(action, state)
