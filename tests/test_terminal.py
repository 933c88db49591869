import curses
from unittest.mock import MagicMock

from swagger_tui.events.keys import KeyCode, KeyEvent
from swagger_tui.ui.terminal import CursesInput, translate_key


class TestTranslateKey:
    def test_printable_characters(self):
        assert translate_key("a") == KeyEvent.of("a")
        assert translate_key("é") == KeyEvent.of("é")
        assert translate_key(" ") == KeyEvent.of(" ")

    def test_control_characters(self):
        assert translate_key("\n") == KeyEvent(KeyCode.ENTER)
        assert translate_key("\t") == KeyEvent(KeyCode.TAB)
        assert translate_key("\x1b") == KeyEvent(KeyCode.ESC)
        assert translate_key("\x7f") == KeyEvent(KeyCode.BACKSPACE)

    def test_ctrl_letters(self):
        assert translate_key("\x12") == KeyEvent.ctrl_of("r")
        assert translate_key("\x0e") == KeyEvent.ctrl_of("n")
        assert translate_key("\x17") == KeyEvent.ctrl_of("w")

    def test_special_keys(self):
        assert translate_key(curses.KEY_UP) == KeyEvent(KeyCode.UP)
        assert translate_key(curses.KEY_BTAB) == KeyEvent(KeyCode.BACKTAB)
        assert translate_key(curses.KEY_F1) == KeyEvent(KeyCode.UNKNOWN)


class TestCursesInput:
    def test_poll_reads_and_translates(self):
        window = MagicMock()
        window.get_wch.return_value = "x"
        source = CursesInput(window)

        assert source.poll(0.05)
        window.timeout.assert_called_with(50)
        assert source.read() == KeyEvent.of("x")

    def test_poll_timeout(self):
        window = MagicMock()
        window.get_wch.side_effect = curses.error("no input")
        source = CursesInput(window)
        assert not source.poll(0)
        assert source.read() is None

    def test_resize_is_ignored(self):
        window = MagicMock()
        window.get_wch.return_value = curses.KEY_RESIZE
        assert not CursesInput(window).poll(0)

    def test_unread_is_read_first(self):
        window = MagicMock()
        window.get_wch.side_effect = curses.error("no input")
        source = CursesInput(window)
        source.unread(KeyEvent(KeyCode.ENTER))
        assert source.poll(0)
        assert source.read() == KeyEvent(KeyCode.ENTER)
