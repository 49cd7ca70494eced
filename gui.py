import sys

from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget, QVBoxLayout, QLabel
from PyQt6.QtGui import QFont
from PyQt6.QtCore import Qt, QTimer

from coordinator import Coordinator
from formatting import format_item_text
from selection import Digit, Key


def classify_key(code):
    """把 Qt 键码归类为 Escape / Enter / 数字键 / 其他"""
    if code == Qt.Key.Key_Escape.value:
        return Key.ESCAPE
    if code in (Qt.Key.Key_Return.value, Qt.Key.Key_Enter.value):
        return Key.ENTER
    if Qt.Key.Key_0.value <= code <= Qt.Key.Key_9.value:
        return Digit(code - Qt.Key.Key_0.value)
    return Key.OTHER


class ClipboardGUI(QMainWindow):
    """选择器窗口：显示当前选中的历史条目，并把按键转发给协调器"""

    def __init__(self, history_manager, config):
        super().__init__()
        self.config = config
        self.history_manager = history_manager
        self.displayed = None  # 上次显示的 (状态, 历史版本)
        self.funnel = config["funnel"]
        self.coordinator = Coordinator(history_manager, config["clipboard"], self)

        # === 窗口设置 ===
        self.setWindowTitle(config.get("window_title", "clipzero"))
        self.resize(*[int(x) for x in config.get("window_size", "400x200").split("x")])
        self.move(*config.get("window_position", (0, 0)))
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)

        self.preview_label = QLabel("")
        self.preview_label.setObjectName("previewLabel")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setWordWrap(True)
        family, size = config.get("font_setting", ("Monospace", 20))
        font = QFont(family, size)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.preview_label.setFont(font)
        layout.addWidget(self.preview_label)

        # === 定时器轮询事件漏斗 ===
        self.queue_timer = QTimer()
        self.queue_timer.timeout.connect(self.poll_queue)
        self.queue_timer.start(config.get("queue_poll_ms", 50))

    # ---------------- 协调器回调 ----------------

    def show_picker(self):
        self.show()
        self.raise_()
        self.activateWindow()

    def hide_picker(self):
        self.hide()

    def refresh_view(self, state, entries):
        # 状态与历史版本都未变化时不重绘
        shown = (state, self.history_manager.version)
        if shown == self.displayed:
            return
        self.displayed = shown

        if not state.visible:
            self.preview_label.setText("")
            return
        self.preview_label.setText(format_item_text(entries, state.selected_index))

    # ---------------- Qt 事件 ----------------

    def keyPressEvent(self, event):
        key = classify_key(event.key())
        if key is Key.OTHER:
            super().keyPressEvent(event)
            return
        event.accept()
        self.coordinator.handle_key(key)

    def closeEvent(self, event):
        # 关闭窗口等同于按 Escape，只隐藏不退出
        event.ignore()
        self.coordinator.handle_key(Key.ESCAPE)

    def poll_queue(self):
        if not self.coordinator.poll(self.funnel):
            print("[INFO] 事件流已结束，退出程序", file=sys.stderr)
            self.queue_timer.stop()
            QApplication.quit()
