"""Terminal-independent key events and input sources.

The state machine only ever sees KeyEvent values, so it can be driven by a
QueueInput in tests and by the curses adapter in the real terminal.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class KeyCode(Enum):
    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    DELETE = "delete"
    TAB = "tab"
    BACKTAB = "backtab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyEvent:
    code: KeyCode
    char: str = ""
    ctrl: bool = False

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.CHAR, char)

    @classmethod
    def ctrl_of(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.CHAR, char, ctrl=True)

    @property
    def is_plain_char(self) -> bool:
        return self.code is KeyCode.CHAR and not self.ctrl

    def is_ctrl(self, char: str) -> bool:
        return self.code is KeyCode.CHAR and self.ctrl and self.char == char


class InputSource(Protocol):
    def poll(self, timeout: float) -> bool:
        """Return True if an event can be read without blocking longer than ``timeout``."""

    def read(self) -> KeyEvent | None:
        """Return the next queued event, or None if nothing is queued."""

    def unread(self, key: KeyEvent) -> None:
        """Push an event back so the next read returns it."""


class QueueInput:
    """In-memory input source for tests and scripted sessions."""

    def __init__(self, keys: list[KeyEvent] | None = None):
        self._queue: deque[KeyEvent] = deque(keys or [])

    def feed(self, *keys: KeyEvent) -> None:
        self._queue.extend(keys)

    def feed_text(self, text: str) -> None:
        self._queue.extend(KeyEvent.of(c) for c in text)

    def poll(self, timeout: float) -> bool:
        return bool(self._queue)

    def read(self) -> KeyEvent | None:
        return self._queue.popleft() if self._queue else None

    def unread(self, key: KeyEvent) -> None:
        self._queue.appendleft(key)

    def __len__(self) -> int:
        return len(self._queue)


def collect_paste_batch(first_char: str, source: InputSource) -> str:
    """Concatenate ``first_char`` with every plain character already queued.

    Terminal pastes arrive as a burst of key events; draining them here turns
    the burst into one edit. The first non-character event is pushed back.
    """
    chars = [first_char]
    while source.poll(0):
        key = source.read()
        if key is None:
            break
        if not key.is_plain_char:
            source.unread(key)
            break
        chars.append(key.char)
    return "".join(chars)
