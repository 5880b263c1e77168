from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

OPERATORS = (">", "<", "==", "!=")


def is_number_text(text: str) -> bool:
    return bool(NUMBER_PATTERN.match(text.strip()))


def to_number(value: Any) -> int | float:
    """Coerce a block parameter or script value to a number.

    Numbers pass through unchanged. Strings holding numeric text are parsed,
    integral text yielding an ``int`` so printed values stay free of ``.0``.
    Blank strings count as zero. Anything else raises ``ValueError``.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        if NUMBER_PATTERN.match(text):
            try:
                return int(text)
            except ValueError:
                return float(text)
    raise ValueError(f"Expected a number, got {value!r}.")


def format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def compare(lhs: Any, operator: str, rhs: Any) -> bool:
    if operator not in OPERATORS:
        return False
    if isinstance(lhs, str) and isinstance(rhs, str):
        left, right = lhs, rhs
    else:
        try:
            left, right = to_number(lhs), to_number(rhs)
        except ValueError:
            # An operand that is not a number never orders or equals.
            return operator == "!="
    if operator == ">":
        return left > right
    if operator == "<":
        return left < right
    if operator == "==":
        return left == right
    return left != right


def evaluate_condition(variable: str, operator: str, literal: Any, bindings: Mapping[str, Any]) -> bool:
    return compare(bindings.get(variable, 0), operator, literal)
