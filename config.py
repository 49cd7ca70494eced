# 配置与常量定义
VERSION = "0.1.0"
MAX_ITEMS = 10              # 历史最大条数 (数字键 1-9,0 对应 10 个槽位)
POLL_INTERVAL = 0.25        # 剪贴板轮询间隔（秒）
QUEUE_POLL_MS = 50          # Qt 定时器轮询事件队列间隔（毫秒）
CLIPBOARD_WORKERS = 2       # 剪贴板读写线程数
HOTKEY = "windows+0"        # 全局热键 (Super+0)
WINDOW_TITLE = "clipzero"   # 窗口标题
WINDOW_SIZE = "400x200"     # 窗口大小
WINDOW_POSITION = (0, 0)    # 窗口位置
FONT_SETTING = ("Monospace", 20)  # 预览字体设置
PREVIEW_CHARS = 100         # 预览最多显示的字符数
