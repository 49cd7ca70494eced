import sys
import threading

from clipboard_service import ClipboardError
from event_funnel import FunnelClosed, FunnelToken


class ClipboardWorker(threading.Thread):
    """后台轮询剪贴板，内容变化时向事件漏斗发送 CLIPBOARD_CHANGED。

    只负责发信号，读取到的内容不共享给其他线程，由协调器自行重新读取。
    第一次轮询总会发送一次信号，用于启动时载入当前剪贴板。
    """

    def __init__(self, clipboard, sender, poll_interval, daemon=True):
        super().__init__(daemon=daemon, name="ClipboardWorker")
        self.clipboard = clipboard
        self.sender = sender
        self.poll_interval = poll_interval
        self.last_data = None
        self._stop_event = threading.Event()

    def poll_once(self):
        """读取一次剪贴板，有变化时发送信号"""
        try:
            text = self.clipboard.read_text()
        except ClipboardError as e:
            print(f"[ERROR] 剪贴板读取失败: {e}", file=sys.stderr)
            return

        if text != self.last_data:
            self.last_data = text
            self.sender.send(FunnelToken.CLIPBOARD_CHANGED)

    def run(self):
        """后台轮询剪贴板"""
        try:
            while not self._stop_event.is_set():
                try:
                    self.poll_once()
                except FunnelClosed:
                    print("[INFO] 事件漏斗已关闭，剪贴板监听退出", file=sys.stderr)
                    return
                self._stop_event.wait(self.poll_interval)
        finally:
            self.sender.close()

    def stop(self):
        """停止工作线程"""
        self._stop_event.set()
