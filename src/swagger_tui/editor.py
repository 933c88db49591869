"""Multi-line text editor used for authoring request bodies.

Content is held as a list of lines; the cursor is a (row, col) pair counted
in characters, so multi-byte text never splits a code point.
"""

import json

from swagger_tui.events.keys import InputSource, KeyCode, KeyEvent, collect_paste_batch

SMART_QUOTES = str.maketrans({
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
})


def normalize_quotes(text: str) -> str:
    """Replace typographic quotes (common in terminal pastes) with ASCII ones."""
    return text.translate(SMART_QUOTES)


class BodyEditor:
    """A small line-based editor for JSON request bodies."""

    def __init__(self, content: str = ""):
        self.lines: list[str] = [""]
        self.row = 0
        self.col = 0
        self.dirty = False
        if content:
            self.set_content(content)
            self.dirty = False

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    @property
    def cursor(self) -> tuple[int, int]:
        return (self.row, self.col)

    def is_empty(self) -> bool:
        return not self.content.strip()

    def set_content(self, content: str) -> None:
        """Replace everything and put the cursor at the end."""
        self.lines = _split_lines(content)
        self.row = len(self.lines) - 1
        self.col = len(self.lines[-1])
        self.dirty = True

    def clear(self) -> None:
        self.lines = [""]
        self.row = self.col = 0
        self.dirty = True

    def mark_saved(self) -> None:
        self.dirty = False

    # -- insertion ---------------------------------------------------------

    def insert(self, text: str) -> None:
        """Insert text at the cursor; the cursor ends after the inserted text."""
        if not text:
            return
        parts = _split_lines(text)
        line = self.lines[self.row]
        before, after = line[:self.col], line[self.col:]
        if len(parts) == 1:
            self.lines[self.row] = before + text + after
            self.col += len(text)
        else:
            new_lines = [before + parts[0], *parts[1:-1], parts[-1] + after]
            self.lines[self.row:self.row + 1] = new_lines
            self.row += len(parts) - 1
            self.col = len(parts[-1])
        self.dirty = True

    def insert_normalized(self, text: str) -> None:
        self.insert(normalize_quotes(text))

    def insert_newline(self) -> None:
        self.insert("\n")

    def paste_batch(self, first_char: str, source: InputSource) -> int:
        """Insert ``first_char`` plus any queued plain characters as one edit.

        Returns the number of characters inserted.
        """
        batch = collect_paste_batch(first_char, source)
        self.insert_normalized(batch)
        return len(batch)

    # -- deletion ----------------------------------------------------------

    def delete_before(self) -> bool:
        """Backspace. Joins with the previous line at column 0."""
        if self.col > 0:
            line = self.lines[self.row]
            self.lines[self.row] = line[:self.col - 1] + line[self.col:]
            self.col -= 1
        elif self.row > 0:
            previous = self.lines[self.row - 1]
            self.lines[self.row - 1] = previous + self.lines.pop(self.row)
            self.row -= 1
            self.col = len(previous)
        else:
            return False
        self.dirty = True
        return True

    def delete_after(self) -> bool:
        """Delete key. Joins with the next line at end of line."""
        line = self.lines[self.row]
        if self.col < len(line):
            self.lines[self.row] = line[:self.col] + line[self.col + 1:]
        elif self.row < len(self.lines) - 1:
            self.lines[self.row] = line + self.lines.pop(self.row + 1)
        else:
            return False
        self.dirty = True
        return True

    # -- movement ----------------------------------------------------------

    def move_left(self) -> bool:
        if self.col > 0:
            self.col -= 1
        elif self.row > 0:
            self.row -= 1
            self.col = len(self.lines[self.row])
        else:
            return False
        return True

    def move_right(self) -> bool:
        if self.col < len(self.lines[self.row]):
            self.col += 1
        elif self.row < len(self.lines) - 1:
            self.row += 1
            self.col = 0
        else:
            return False
        return True

    def move_up(self) -> bool:
        if self.row == 0:
            return False
        self.row -= 1
        self.col = min(self.col, len(self.lines[self.row]))
        return True

    def move_down(self) -> bool:
        if self.row >= len(self.lines) - 1:
            return False
        self.row += 1
        self.col = min(self.col, len(self.lines[self.row]))
        return True

    def move_home(self) -> bool:
        self.col = 0
        return True

    def move_end(self) -> bool:
        self.col = len(self.lines[self.row])
        return True

    def move_to_start(self) -> None:
        self.row = self.col = 0

    def move_to_end(self) -> None:
        self.row = len(self.lines) - 1
        self.col = len(self.lines[-1])

    # -- JSON --------------------------------------------------------------

    def validate_json(self) -> str | None:
        """Return None if the content is valid JSON, else the error message."""
        try:
            json.loads(self.content)
        except json.JSONDecodeError as e:
            return f"Invalid JSON: {e}"
        return None

    def format_json(self) -> str | None:
        """Pretty-print the content in place.

        Returns None on success. On failure the content is left untouched and
        the parse error is returned.
        """
        try:
            value = json.loads(self.content)
        except json.JSONDecodeError as e:
            return f"Invalid JSON: {e}"
        self.set_content(json.dumps(value, indent=2, ensure_ascii=False))
        return None

    # -- key handling ------------------------------------------------------

    def handle_key(self, key: KeyEvent) -> bool:
        """Apply a non-character editing key. Returns True if it was consumed."""
        if key.code is KeyCode.CHAR:
            if key.is_ctrl("a"):
                return self.move_home()
            if key.is_ctrl("e"):
                return self.move_end()
            if key.is_ctrl("l"):
                self.clear()
                return True
            if key.is_plain_char:
                self.insert(key.char)
                return True
            return False

        handlers = {
            KeyCode.BACKSPACE: self.delete_before,
            KeyCode.DELETE: self.delete_after,
            KeyCode.LEFT: self.move_left,
            KeyCode.RIGHT: self.move_right,
            KeyCode.UP: self.move_up,
            KeyCode.DOWN: self.move_down,
            KeyCode.HOME: self.move_home,
            KeyCode.END: self.move_end,
        }
        handler = handlers.get(key.code)
        return handler() if handler else False


def _split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
