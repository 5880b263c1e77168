from __future__ import annotations

import re
from dataclasses import dataclass

from conditions import is_number_text, to_number


class LexerError(ValueError):
    """Raised when a script line cannot be tokenized."""


@dataclass(frozen=True)
class NumberLiteral:
    value: int | float


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NameRef:
    name: str


Operand = NumberLiteral | StringLiteral | NameRef


@dataclass(frozen=True)
class Statement:
    pass


@dataclass(frozen=True)
class AssignStmt(Statement):
    name: str
    value: Operand


@dataclass(frozen=True)
class AugAssignStmt(Statement):
    name: str
    value: Operand


@dataclass(frozen=True)
class PrintStmt(Statement):
    args: tuple[Operand, ...]


@dataclass(frozen=True)
class TraceStmt(Statement):
    text: str


@dataclass(frozen=True)
class ForRangeStmt(Statement):
    count: Operand
    inline_body: str


@dataclass(frozen=True)
class IfStmt(Statement):
    subject: Operand
    operator: str
    value: Operand
    inline_body: str


@dataclass(frozen=True)
class InertStmt(Statement):
    text: str


ASSIGN_PATTERN = re.compile(r"^(?P<name>\w+)\s*=(?!=)\s*(?P<expr>.*)$")
AUG_ASSIGN_PATTERN = re.compile(r"^(?P<name>\w+)\s*\+=\s*(?P<expr>.*)$")
TRACE_PREFIXES = ("time.sleep", "avatar.move")
FOR_RANGE_PATTERN = re.compile(r"^for\s.*?range\((?P<count>.+?)\)\s*:(?P<inline>.*)$")
IF_PATTERN = re.compile(r"^if\s+(?P<subject>\w+)\s*(?P<op>[<>=!]+)\s*(?P<value>.+?)\s*:(?P<inline>.*)$")


def split_lines(source: str) -> list[str]:
    return source.split("\n")


def is_skippable(raw: str) -> bool:
    stripped = raw.strip()
    return stripped == "" or stripped.startswith("#")


def indent_of(raw: str) -> int:
    return len(raw) - len(raw.lstrip())


def parse_operand(token: str) -> Operand:
    """Classify a single token: number, then quoted string, then name."""
    text = token.strip()
    if text == "" or is_number_text(text):
        return NumberLiteral(to_number(text))
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {'"', "'"}:
        return StringLiteral(text[1:-1])
    return NameRef(text)


def classify(text: str) -> Statement:
    """Match one stripped line against the statement forms, first match wins."""
    match = ASSIGN_PATTERN.match(text)
    if match:
        return AssignStmt(name=match.group("name"), value=parse_operand(match.group("expr")))
    match = AUG_ASSIGN_PATTERN.match(text)
    if match:
        return AugAssignStmt(name=match.group("name"), value=parse_operand(match.group("expr")))
    if text.startswith("print("):
        return PrintStmt(args=_print_args(text))
    if text.startswith(TRACE_PREFIXES):
        return TraceStmt(text=text)
    if text.startswith("for "):
        match = FOR_RANGE_PATTERN.match(text)
        if match:
            return ForRangeStmt(count=parse_operand(match.group("count")), inline_body=_inline_body(match))
    if text.startswith("if "):
        match = IF_PATTERN.match(text)
        if match:
            return IfStmt(
                subject=parse_operand(match.group("subject")),
                operator=match.group("op"),
                value=parse_operand(match.group("value")),
                inline_body=_inline_body(match),
            )
    return InertStmt(text=text)


def _inline_body(match: re.Match[str]) -> str:
    inline = match.group("inline").strip()
    if inline and isinstance(classify(inline), (ForRangeStmt, IfStmt)):
        raise LexerError(f"Expected a simple statement after ':', got block header: {inline}")
    return inline


def _print_args(text: str) -> tuple[Operand, ...]:
    if not text.endswith(")"):
        raise LexerError(f"Expected ')' to close print call: {text}")
    content = text[len("print(") : -1]
    if "," in content:
        return tuple(parse_operand(part) for part in content.split(","))
    return (parse_operand(content),)
