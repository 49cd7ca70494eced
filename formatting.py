from config import PREVIEW_CHARS
from selection import index_to_digit


EMPTY_HISTORY_TEXT = "No clipboard history yet"
OUT_OF_RANGE_TEXT = "Out of range of stored history."


def truncate(text, limit=PREVIEW_CHARS):
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_item_text(entries, index, limit=PREVIEW_CHARS):
    """选择器中显示的文字：槽位编号 + 选中条目的预览"""
    lines = [f"[{index_to_digit(index)}]"]
    if not entries:
        lines.append(EMPTY_HISTORY_TEXT)

    text = entries[index] if index < len(entries) else ""
    if not text:
        lines.append(OUT_OF_RANGE_TEXT)
    else:
        lines.append(truncate(text, limit))
    return "\n".join(lines)
