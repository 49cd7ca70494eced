from collections import namedtuple
from enum import Enum

from event_funnel import FunnelToken


SelectionState = namedtuple("SelectionState", ["visible", "selected_index"])

HIDDEN = SelectionState(False, None)


def visible_at(index):
    return SelectionState(True, index)


class Key(Enum):
    """界面层转发的按键（数字键用 Digit 表示）"""
    ESCAPE = "escape"
    ENTER = "enter"
    OTHER = "other"


Digit = namedtuple("Digit", ["digit"])


class Effect(Enum):
    READ_CLIPBOARD = "read_clipboard"
    SHOW = "show"
    HIDE = "hide"


WriteSelection = namedtuple("WriteSelection", ["index"])


def digit_to_index(digit):
    """数字键到槽位：1-9 对应 0-8，0 对应 9"""
    if not 0 <= digit <= 9:
        raise ValueError(f"not a digit key: {digit!r}")
    return (digit - 1) % 10


def index_to_digit(index):
    if not 0 <= index <= 9:
        raise ValueError(f"no digit key for slot {index!r}")
    return (index + 1) % 10


def step(state, event):
    """单步状态转移，返回 (新状态, 副作用列表)。

    隐藏状态下只有 SHOW_REQUESTED 能让选择器显示，所有按键都被忽略。
    选中的槽位与历史长度无关，越界由界面层显示提示，确认时由协调器跳过写入。
    """
    if event is FunnelToken.SHOW_REQUESTED:
        return visible_at(0), [Effect.READ_CLIPBOARD, Effect.SHOW]

    if event is FunnelToken.CLIPBOARD_CHANGED:
        if state.visible:
            state = visible_at(0)
        return state, [Effect.READ_CLIPBOARD]

    if not state.visible:
        return state, []

    if isinstance(event, Digit):
        return visible_at(digit_to_index(event.digit)), []
    if event is Key.ESCAPE:
        return HIDDEN, [Effect.HIDE]
    if event is Key.ENTER:
        return HIDDEN, [WriteSelection(state.selected_index), Effect.HIDE]
    return state, []
