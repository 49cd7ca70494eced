import sys

import keyboard

from event_funnel import FunnelClosed, FunnelToken


class HotkeyListener:
    """注册全局热键，每按一次向事件漏斗发送一个 SHOW_REQUESTED。

    回调运行在 keyboard 库自己的监听线程中。
    """

    def __init__(self, hotkey, sender):
        self.hotkey = hotkey
        self.sender = sender
        self._handle = None

    def start(self):
        self._handle = keyboard.add_hotkey(self.hotkey, self.on_hotkey)

    def on_hotkey(self):
        try:
            self.sender.send(FunnelToken.SHOW_REQUESTED)
        except FunnelClosed:
            print("[INFO] 事件漏斗已关闭，注销热键", file=sys.stderr)
            self.stop()

    def stop(self):
        """注销热键并释放发送端"""
        if self._handle is not None:
            try:
                keyboard.remove_hotkey(self._handle)
            except (KeyError, ValueError) as e:
                print(f"[ERROR] 注销热键失败: {e}", file=sys.stderr)
            self._handle = None
        self.sender.close()
