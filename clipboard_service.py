import pyperclip


class ClipboardError(Exception):
    """剪贴板读写失败"""


class ClipboardReadError(ClipboardError):
    pass


class ClipboardWriteError(ClipboardError):
    pass


class ClipboardService:
    """系统剪贴板的文本读写"""

    def read_text(self):
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise ClipboardReadError(f"读取剪贴板失败: {e}") from e

        if not isinstance(text, str):
            raise ClipboardReadError("剪贴板中没有文本内容")
        return text

    def write_text(self, text):
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardWriteError(f"写入剪贴板失败: {e}") from e
