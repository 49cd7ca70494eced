import queue
import threading
from enum import Enum


class FunnelToken(Enum):
    """后台线程投递的信号，不携带内容"""
    SHOW_REQUESTED = 0
    CLIPBOARD_CHANGED = 1


class FunnelClosed(Exception):
    """接收端已关闭，或所有生产者都已退出"""


_END = object()  # 流结束标记


class FunnelSender:
    """单个生产者持有的发送端"""

    def __init__(self, funnel):
        self._funnel = funnel
        self._closed = False

    def send(self, token):
        """非阻塞发送；接收端关闭时抛出 FunnelClosed"""
        if self._closed:
            raise FunnelClosed("sender already closed")
        self._funnel._put(token)

    def close(self):
        """释放发送端；可在多个线程中重复调用，只生效一次"""
        with self._funnel._lock:
            if self._closed:
                return
            self._closed = True
        self._funnel._release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class EventFunnel:
    """把多个生产者线程的信号合并成一个有序的事件流。

    底层是一个无界的 queue.Queue：各线程的 put 按先后顺序排队，
    消费端按发送顺序逐个取出，不合并也不去重。最后一个生产者释放后，
    在已发送的信号之后放入结束标记，消费端读到它时事件流结束。
    """

    def __init__(self):
        self._queue = queue.Queue()
        self._lock = threading.Lock()
        self._producers = 0
        self._sealed = False           # 最后一个生产者已释放
        self._receiver_closed = False
        self._ended = False            # 消费端已读到结束标记

    # ---------------- 生产端 ----------------

    def sender(self):
        """注册一个生产者并返回其发送端"""
        with self._lock:
            if self._sealed or self._receiver_closed:
                raise FunnelClosed("funnel is closed")
            self._producers += 1
        return FunnelSender(self)

    def _put(self, token):
        if self._receiver_closed:
            raise FunnelClosed("receiver is gone")
        self._queue.put_nowait(token)

    def _release(self):
        with self._lock:
            self._producers -= 1
            if self._producers > 0:
                return
            self._sealed = True
        self._queue.put_nowait(_END)

    # ---------------- 消费端 ----------------

    @property
    def closed(self):
        return self._ended

    def close(self):
        """消费端放弃接收，之后的 send 会抛出 FunnelClosed"""
        self._receiver_closed = True

    def get(self, timeout=None):
        """阻塞取出下一个信号；事件流结束时返回 None。

        超时未取到时抛出 queue.Empty。
        """
        if self._ended:
            return None
        item = self._queue.get(timeout=timeout)
        if item is _END:
            self._ended = True
            return None
        return item

    def drain(self):
        """不阻塞地取出当前已到达的全部信号"""
        tokens = []
        while not self._ended:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _END:
                self._ended = True
            else:
                tokens.append(item)
        return tokens

    def __iter__(self):
        while True:
            token = self.get()
            if token is None:
                return
            yield token
