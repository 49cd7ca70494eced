class HistoryManager:
    """剪贴板历史，最新的在前，容量固定。

    重复记录已存在的内容时，将其移到最前面而不是再存一份。
    只有协调器在事件循环线程中修改历史，因此这里不加锁。
    """

    def __init__(self, max_items):
        self.max_items = max_items
        self.history = []
        self.version = 0  # 用于检测更新

    def record(self, content):
        """记录新内容：已存在则提前，已满则淘汰最旧的一条"""
        for i, entry in enumerate(self.history):
            if entry == content:
                del self.history[i]
                break
        else:
            if len(self.history) >= self.max_items:
                self.history.pop()

        self.history.insert(0, content)
        self.version += 1

    def get(self, index):
        """按位置取条目（0 为最新），越界返回 None"""
        if 0 <= index < len(self.history):
            return self.history[index]
        return None

    def get_copy(self):
        """获取历史记录副本"""
        return self.history.copy()

    def is_empty(self):
        return not self.history

    def __len__(self):
        return len(self.history)
