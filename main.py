import sys
import argparse
from pathlib import Path
from PyQt6.QtWidgets import QApplication

from config import (
    VERSION,
    MAX_ITEMS,
    POLL_INTERVAL,
    QUEUE_POLL_MS,
    HOTKEY,
    WINDOW_TITLE,
    WINDOW_SIZE,
    WINDOW_POSITION,
    FONT_SETTING,
)
from history_manager import HistoryManager
from event_funnel import EventFunnel
from clipboard_service import ClipboardService
from clipboard_worker import ClipboardWorker
from hotkey_listener import HotkeyListener
from gui import ClipboardGUI


STYLE_FILE = Path(__file__).with_name("style.qss")


def parse_args(argv):
    """解析自身参数，其余参数交给 Qt"""
    parser = argparse.ArgumentParser(prog="clipzero", description="A simple clipboard manager")
    parser.add_argument("--version", action="version", version=f"clipzero version {VERSION}")
    return parser.parse_known_args(argv[1:])


def load_stylesheet(app):
    try:
        with open(STYLE_FILE, "r", encoding="utf-8") as f:
            app.setStyleSheet(f.read())
    except OSError as e:
        print(f"[ERROR] 加载样式失败: {e}", file=sys.stderr)


def shutdown(hotkey_listener, worker, funnel, coordinator):
    """注销热键，停止并等待剪贴板监听线程，关闭剪贴板线程池"""
    hotkey_listener.stop()
    worker.stop()
    worker.join(POLL_INTERVAL * 4)
    if worker.is_alive():
        print("[ERROR] 剪贴板监听线程未能按时退出", file=sys.stderr)
    funnel.close()
    coordinator.close()


def main():
    _, qt_args = parse_args(sys.argv)

    # 初始化组件
    funnel = EventFunnel()
    history_manager = HistoryManager(MAX_ITEMS)
    clipboard = ClipboardService()

    # 配置参数
    config = {
        "window_title": WINDOW_TITLE,
        "window_size": WINDOW_SIZE,
        "window_position": WINDOW_POSITION,
        "font_setting": FONT_SETTING,
        "queue_poll_ms": QUEUE_POLL_MS,
        "funnel": funnel,
        "clipboard": clipboard,
    }

    # 两个生产者各持有一个发送端
    worker = ClipboardWorker(ClipboardService(), funnel.sender(), POLL_INTERVAL)
    hotkey_listener = HotkeyListener(HOTKEY, funnel.sender())

    # 启动 Qt 应用（窗口默认隐藏，由热键唤出）
    app = QApplication(sys.argv[:1] + qt_args)
    app.setQuitOnLastWindowClosed(False)
    load_stylesheet(app)
    gui = ClipboardGUI(history_manager, config)

    try:
        hotkey_listener.start()
    except (ImportError, OSError) as e:
        # Linux 下 keyboard 需要 root 权限
        print(f"[ERROR] 注册全局热键失败: {e}", file=sys.stderr)
        sys.exit(1)
    worker.start()

    try:
        code = app.exec()
    except KeyboardInterrupt:
        code = 0
        print("退出中...")
    finally:
        shutdown(hotkey_listener, worker, funnel, gui.coordinator)
    sys.exit(code)


if __name__ == "__main__":
    main()
