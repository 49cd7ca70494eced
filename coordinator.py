import sys
import queue
from collections import deque, namedtuple
from concurrent.futures import ThreadPoolExecutor, wait

from clipboard_service import ClipboardError
from config import CLIPBOARD_WORKERS, QUEUE_POLL_MS
from selection import HIDDEN, Effect, WriteSelection, step


# 剪贴板调用完成后回到事件循环的事件
ClipboardRead = namedtuple("ClipboardRead", ["text"])
ClipboardFailed = namedtuple("ClipboardFailed", ["error"])

_READ = "read"
_WRITE = "write"


class Coordinator:
    """持有历史记录与选择状态，按顺序处理事件流。

    所有事件（漏斗信号、按键、剪贴板调用结果）都先进入 pending 队列，
    再逐个交给 step() 处理，副作用产生的新事件排在队尾，不做递归分发。

    剪贴板读写提交到线程池执行，不阻塞事件循环；调用完成后由 poll()
    在循环线程中取回结果，转成 ClipboardRead / ClipboardFailed 事件。
    某个调用卡住时只影响它自己的结果。
    """

    def __init__(self, history_manager, clipboard, presenter=None, executor=None):
        self.history_manager = history_manager
        self.clipboard = clipboard
        self.presenter = presenter
        self.state = HIDDEN
        self.executor = executor or ThreadPoolExecutor(
            max_workers=CLIPBOARD_WORKERS, thread_name_prefix="clipboard"
        )
        self._pending = deque()
        self._in_flight = []  # (类型, future)，按提交顺序

    def handle_token(self, token):
        self.dispatch(token)

    def handle_key(self, key):
        self.dispatch(key)

    def refresh(self):
        """不改变选择状态，只读取一次剪贴板"""
        self._apply(Effect.READ_CLIPBOARD)

    def dispatch(self, event):
        self._pending.append(event)
        self._drain()

    def collect(self):
        """把已完成的剪贴板调用结果送回事件循环"""
        finished, running = [], []
        for kind, future in self._in_flight:
            (finished if future.done() else running).append((kind, future))
        self._in_flight = running
        for kind, future in finished:
            try:
                result = future.result()
            except ClipboardError as e:
                self._pending.append(ClipboardFailed(e))
            else:
                if kind == _READ:
                    self._pending.append(ClipboardRead(result))
        self._drain()

    def settle(self, timeout=None):
        """等待进行中的剪贴板调用完成并处理结果；返回是否全部完成"""
        futures = [future for _, future in self._in_flight]
        _, not_done = wait(futures, timeout=timeout)
        self.collect()
        return not not_done

    def poll(self, funnel):
        """处理漏斗中已到达的信号和已完成的剪贴板调用；事件流结束后返回 False"""
        self.collect()
        for token in funnel.drain():
            self.handle_token(token)
        return not funnel.closed

    def run(self, funnel):
        """阻塞运行，直到所有生产者退出"""
        interval = QUEUE_POLL_MS / 1000
        while True:
            try:
                token = funnel.get(timeout=interval)
            except queue.Empty:
                self.collect()
                continue
            if token is None:
                break
            self.handle_token(token)
            self.collect()
        self.collect()
        print("[INFO] 事件流已结束，退出事件循环", file=sys.stderr)

    def close(self):
        """关闭线程池，不等待卡住的剪贴板调用"""
        self.executor.shutdown(wait=False, cancel_futures=True)

    # ---------------- 内部处理 ----------------

    def _drain(self):
        while self._pending:
            self._process(self._pending.popleft())

    def _process(self, event):
        if isinstance(event, ClipboardRead):
            # 隐藏后才到达的读取结果也照常记录，不影响选择状态
            if event.text:
                self.history_manager.record(event.text)
        elif isinstance(event, ClipboardFailed):
            print(f"[ERROR] {event.error}", file=sys.stderr)
            return
        else:
            self.state, effects = step(self.state, event)
            for effect in effects:
                self._apply(effect)
        self._refresh_view()

    def _apply(self, effect):
        if effect is Effect.READ_CLIPBOARD:
            self._submit(_READ, self.clipboard.read_text)
        elif isinstance(effect, WriteSelection):
            content = self.history_manager.get(effect.index)
            if content is None:
                return
            self._submit(_WRITE, self.clipboard.write_text, content)
        elif effect is Effect.SHOW:
            if self.presenter is not None:
                self.presenter.show_picker()
        elif effect is Effect.HIDE:
            if self.presenter is not None:
                self.presenter.hide_picker()

    def _submit(self, kind, fn, *args):
        self._in_flight.append((kind, self.executor.submit(fn, *args)))

    def _refresh_view(self):
        if self.presenter is not None:
            self.presenter.refresh_view(self.state, self.history_manager.get_copy())
