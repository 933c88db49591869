"""curses adapter: turns terminal key codes into KeyEvent values."""

import curses
import os
from collections import deque
from typing import Callable, TypeVar

from swagger_tui.events.keys import KeyCode, KeyEvent

T = TypeVar("T")

ESC_DELAY_MS = "25"

_SPECIAL_KEYS = {
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_HOME: KeyCode.HOME,
    curses.KEY_END: KeyCode.END,
    curses.KEY_PPAGE: KeyCode.PAGE_UP,
    curses.KEY_NPAGE: KeyCode.PAGE_DOWN,
    curses.KEY_BACKSPACE: KeyCode.BACKSPACE,
    curses.KEY_DC: KeyCode.DELETE,
    curses.KEY_BTAB: KeyCode.BACKTAB,
    curses.KEY_ENTER: KeyCode.ENTER,
}

_CONTROL_CHARS = {
    "\x1b": KeyCode.ESC,
    "\n": KeyCode.ENTER,
    "\r": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}


def translate_key(ch: int | str) -> KeyEvent:
    """Map a get_wch() result to a KeyEvent."""
    if isinstance(ch, int):
        return KeyEvent(_SPECIAL_KEYS.get(ch, KeyCode.UNKNOWN))
    if ch in _CONTROL_CHARS:
        return KeyEvent(_CONTROL_CHARS[ch])
    code = ord(ch)
    if 1 <= code <= 26:
        # Ctrl+A .. Ctrl+Z arrive as 0x01 .. 0x1a
        return KeyEvent.ctrl_of(chr(code + ord("a") - 1))
    if code < 32:
        return KeyEvent(KeyCode.UNKNOWN)
    return KeyEvent.of(ch)


class CursesInput:
    """InputSource over a curses window."""

    def __init__(self, window: "curses.window"):
        self.window = window
        self._pending: deque[KeyEvent] = deque()

    def poll(self, timeout: float) -> bool:
        if self._pending:
            return True
        self.window.timeout(max(int(timeout * 1000), 0))
        try:
            ch = self.window.get_wch()
        except curses.error:
            return False
        if ch == curses.KEY_RESIZE:
            return False
        self._pending.append(translate_key(ch))
        return True

    def read(self) -> KeyEvent | None:
        if self._pending or self.poll(0):
            return self._pending.popleft()
        return None

    def unread(self, key: KeyEvent) -> None:
        self._pending.appendleft(key)


def run_curses(main: Callable[["curses.window"], T]) -> T:
    """Run ``main`` inside curses.wrapper with a short Esc delay."""
    os.environ.setdefault("ESCDELAY", ESC_DELAY_MS)
    return curses.wrapper(main)
