"""Runtime values of the Cobalt language and the rules for mixing them.

A value is always one of None (nil), bool, float or str. Note that bool is a subclass of int in Python, so numbers are
recognised with is_number rather than isinstance(value, (int, float)).
"""

import math
from typing import Union

Value = Union[None, bool, float, str]

MAX_REPEAT_LENGTH = 2 ** 28  # longest string a repetition may build


def is_number(value):
    return isinstance(value, float)


def is_string(value):
    return isinstance(value, str)


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """nil only equals nil, and values of different types are never equal (no coercion: true != 1)."""
    if left is None or right is None:
        return left is None and right is None
    if type(left) is not type(right):
        return False
    return left == right


def render_number(number):
    """Default textual rendering of a number, with a trailing ".0" stripped: 1.0 -> "1", 1.5 -> "1.5"."""
    text = repr(number)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def stringify(value: Value) -> str:
    """Renders value the way print shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return render_number(value)
    return value


def as_text(value):
    """value as a string operand: strings as is, numbers rendered. Only called with a str or a float."""
    if is_string(value):
        return value
    return render_number(value)


def repeat(text, count):
    """text repeated floor(count) times. count must already be known to be non-negative."""
    return text * math.floor(count)
