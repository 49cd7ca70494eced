"""Tests for the picker window, key classification and process shutdown.

The window runs on Qt's offscreen platform. Skipped when PyQt6 cannot be
imported (no Qt system libraries).
"""

import os
import unittest
from contextlib import redirect_stderr
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtCore import QEvent, Qt  # noqa: E402
from PyQt6.QtGui import QCloseEvent, QKeyEvent  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from event_funnel import EventFunnel, FunnelToken  # noqa: E402
from formatting import format_item_text  # noqa: E402
from gui import ClipboardGUI, classify_key  # noqa: E402
from history_manager import HistoryManager  # noqa: E402
from selection import HIDDEN, Digit, Key, visible_at  # noqa: E402


def key_event(code):
    return QKeyEvent(QEvent.Type.KeyPress, code.value, Qt.KeyboardModifier.NoModifier)


class TestClassifyKey(unittest.TestCase):

    def test_escape(self):
        """Escape is classified as ESCAPE."""
        self.assertIs(classify_key(Qt.Key.Key_Escape.value), Key.ESCAPE)

    def test_enter_and_return(self):
        """Both Return and keypad Enter confirm."""
        self.assertIs(classify_key(Qt.Key.Key_Return.value), Key.ENTER)
        self.assertIs(classify_key(Qt.Key.Key_Enter.value), Key.ENTER)

    def test_digits(self):
        """Number keys carry their digit."""
        self.assertEqual(classify_key(Qt.Key.Key_0.value), Digit(0))
        self.assertEqual(classify_key(Qt.Key.Key_7.value), Digit(7))

    def test_other(self):
        """Everything else is OTHER."""
        self.assertIs(classify_key(Qt.Key.Key_A.value), Key.OTHER)
        self.assertIs(classify_key(Qt.Key.Key_Space.value), Key.OTHER)


class TestClipboardGUI(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.history = HistoryManager(10)
        self.clipboard = MagicMock()
        self.clipboard.read_text.return_value = "alpha"
        self.funnel = EventFunnel()
        self.sender = self.funnel.sender()
        self.gui = ClipboardGUI(self.history, {
            "funnel": self.funnel,
            "clipboard": self.clipboard,
        })
        self.coordinator = self.gui.coordinator

    def tearDown(self):
        self.gui.queue_timer.stop()
        self.coordinator.close()
        self.sender.close()
        self.gui.deleteLater()

    def show_picker(self):
        self.coordinator.handle_token(FunnelToken.SHOW_REQUESTED)
        self.assertTrue(self.coordinator.settle(5))

    # ---------------- refresh_view ----------------

    def test_hidden_clears_label(self):
        """While hidden the preview label is empty."""
        self.history.record("alpha")
        self.gui.refresh_view(visible_at(0), self.history.get_copy())
        self.gui.refresh_view(HIDDEN, self.history.get_copy())
        self.assertEqual(self.gui.preview_label.text(), "")

    def test_visible_shows_selected_entry(self):
        """While visible the label shows the formatted selection."""
        self.history.record("beta")
        self.history.record("alpha")
        entries = self.history.get_copy()
        self.gui.refresh_view(visible_at(1), entries)
        self.assertEqual(self.gui.preview_label.text(), format_item_text(entries, 1))

    def test_unchanged_view_is_not_redrawn(self):
        """Same state and history version skip the redraw."""
        self.history.record("alpha")
        self.gui.refresh_view(visible_at(0), self.history.get_copy())
        self.gui.preview_label.setText("untouched")

        self.gui.refresh_view(visible_at(0), self.history.get_copy())
        self.assertEqual(self.gui.preview_label.text(), "untouched")

        self.history.record("beta")
        self.gui.refresh_view(visible_at(0), self.history.get_copy())
        self.assertEqual(self.gui.preview_label.text(), "[1]\nbeta")

    # ---------------- keys and close ----------------

    def test_show_requested_displays_window(self):
        """SHOW_REQUESTED shows the window with the newest entry."""
        self.show_picker()
        self.assertTrue(self.gui.isVisible())
        self.assertEqual(self.gui.preview_label.text(), "[1]\nalpha")

    def test_digit_key_changes_selection(self):
        """A digit key press is forwarded and accepted."""
        self.show_picker()
        event = key_event(Qt.Key.Key_3)
        self.gui.keyPressEvent(event)
        self.assertTrue(event.isAccepted())
        self.assertEqual(self.coordinator.state, visible_at(2))

    def test_escape_key_hides(self):
        """Escape hides the window."""
        self.show_picker()
        self.gui.keyPressEvent(key_event(Qt.Key.Key_Escape))
        self.assertEqual(self.coordinator.state, HIDDEN)
        self.assertFalse(self.gui.isVisible())

    def test_enter_key_writes_and_hides(self):
        """Enter writes the selection and hides the window."""
        self.show_picker()
        self.gui.keyPressEvent(key_event(Qt.Key.Key_Return))
        self.assertTrue(self.coordinator.settle(5))
        self.clipboard.write_text.assert_called_once_with("alpha")
        self.assertFalse(self.gui.isVisible())

    def test_other_keys_go_to_base_class(self):
        """Unclassified keys are not forwarded and stay unhandled."""
        self.show_picker()
        with patch.object(self.coordinator, "handle_key") as handle_key:
            event = key_event(Qt.Key.Key_A)
            self.gui.keyPressEvent(event)
        handle_key.assert_not_called()
        self.assertFalse(event.isAccepted())
        self.assertEqual(self.coordinator.state, visible_at(0))

    def test_close_acts_as_escape(self):
        """Closing the window hides the picker instead of closing it."""
        self.show_picker()
        event = QCloseEvent()
        self.gui.closeEvent(event)
        self.assertFalse(event.isAccepted())
        self.assertEqual(self.coordinator.state, HIDDEN)
        self.assertFalse(self.gui.isVisible())

    # ---------------- poll_queue ----------------

    def test_poll_queue_handles_tokens(self):
        """poll_queue() feeds funnel tokens to the coordinator."""
        self.sender.send(FunnelToken.SHOW_REQUESTED)
        self.gui.poll_queue()
        self.assertEqual(self.coordinator.state, visible_at(0))
        self.assertTrue(self.gui.queue_timer.isActive())

    def test_poll_queue_quits_when_funnel_ends(self):
        """poll_queue() stops the timer and quits once producers are gone."""
        self.sender.close()
        with patch("gui.QApplication") as mock_app, redirect_stderr(StringIO()):
            self.gui.poll_queue()
        self.assertFalse(self.gui.queue_timer.isActive())
        mock_app.quit.assert_called_once_with()


class TestMain(unittest.TestCase):

    def test_passes_qt_arguments_through(self):
        """Unknown arguments are left for QApplication."""
        from main import parse_args

        _, rest = parse_args(["clipzero", "-platform", "offscreen"])
        self.assertEqual(rest, ["-platform", "offscreen"])

    def test_version(self):
        """--version prints the version and exits."""
        from main import parse_args

        with self.assertRaises(SystemExit) as ctx, redirect_stderr(StringIO()):
            parse_args(["clipzero", "--version"])
        self.assertEqual(ctx.exception.code, 0)

    def test_shutdown_waits_for_worker(self):
        """shutdown() stops and joins the watcher before closing everything."""
        from main import POLL_INTERVAL, shutdown

        hotkey_listener, worker, funnel, coordinator = (MagicMock() for _ in range(4))
        worker.is_alive.return_value = False

        shutdown(hotkey_listener, worker, funnel, coordinator)

        hotkey_listener.stop.assert_called_once_with()
        worker.stop.assert_called_once_with()
        worker.join.assert_called_once_with(POLL_INTERVAL * 4)
        funnel.close.assert_called_once_with()
        coordinator.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
