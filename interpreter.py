from __future__ import annotations

"""
Line-oriented interpreter for the small script language the block editor
generates: assignment, ``+=``, ``print(...)``, ``for ... in range(N):`` and
``if <name> <op> <value>:``. Indentation delimits bodies. Anything else is
inert, and ``time.sleep``/``avatar.move`` calls are echoed as traces.

Usage:
    output = run_script(source_text)
"""

import logging
from typing import Any

from conditions import compare, format_value, to_number
from lexer import (
    AssignStmt,
    AugAssignStmt,
    ForRangeStmt,
    IfStmt,
    InertStmt,
    NameRef,
    NumberLiteral,
    Operand,
    PrintStmt,
    Statement,
    StringLiteral,
    TraceStmt,
    classify,
    indent_of,
    is_skippable,
    split_lines,
)

logger = logging.getLogger(__name__)

MAX_STEPS = 2000

START_MARKER = "> Starting execution..."
FINISH_MARKER = "> Execution finished."


class ScriptError(ValueError):
    """Base class for failures raised while running a script."""


class ScriptLineError(ScriptError):
    """Raised when a single script line fails."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.message = message


class RunawayScriptError(ScriptError):
    """Raised when a script dispatches more lines than the step budget allows."""


class ScriptInterpreter:
    def __init__(self, max_steps: int = MAX_STEPS) -> None:
        self.max_steps = max_steps
        self._lines: list[str] = []
        self._variables: dict[str, Any] = {}
        self._output: list[str] = []
        self._steps = 0

    @property
    def variables(self) -> dict[str, Any]:
        return dict(self._variables)

    def run(self, source: str) -> list[str]:
        self._lines = split_lines(source)
        self._variables = {}
        self._output = [START_MARKER]
        self._steps = 0
        try:
            self._execute_block(0, 0)
        except RunawayScriptError as exc:
            logger.warning("Script stopped after %d steps: %s", self._steps, exc)
            self._output.append(f"Runtime Error: {exc}")
            return list(self._output)
        except ScriptLineError as exc:
            logger.warning("Script aborted on line %d: %s", exc.line_number, exc.message)
            self._output.append(f"Error on line {exc.line_number}: {exc.message}")
        self._output.append(FINISH_MARKER)
        return list(self._output)

    def _execute_block(self, start: int, min_indent: int) -> int:
        """Run lines from ``start`` until one is indented less than ``min_indent``.

        Returns the index of that line, or the line count at end of input.
        """
        index = start
        while index < len(self._lines):
            raw = self._lines[index]
            if is_skippable(raw):
                index += 1
                continue
            indent = indent_of(raw)
            if indent < min_indent:
                return index
            self._count_step()
            index = self._execute_line(raw.strip(), index, indent)
        return index

    def _execute_line(self, text: str, index: int, indent: int) -> int:
        logger.debug("line %d: %s", index + 1, text)
        try:
            statement = classify(text)
            if isinstance(statement, ForRangeStmt):
                return self._execute_for(statement, index, indent)
            if isinstance(statement, IfStmt):
                return self._execute_if(statement, index, indent)
            self._execute_simple(statement)
        except ScriptError:
            raise
        except Exception as exc:
            raise ScriptLineError(index + 1, str(exc)) from exc
        return index + 1

    def _execute_simple(self, statement: Statement) -> None:
        if isinstance(statement, AssignStmt):
            self._variables[statement.name] = self._resolve(statement.value)
        elif isinstance(statement, AugAssignStmt):
            current = self._variables.get(statement.name, 0)
            self._variables[statement.name] = _add(current, self._resolve(statement.value))
        elif isinstance(statement, PrintStmt):
            values = [format_value(self._resolve(arg)) for arg in statement.args]
            self._output.append(f"> {' '.join(values)}")
        elif isinstance(statement, TraceStmt):
            self._output.append(f"> Executing: {statement.text}")
        elif not isinstance(statement, InertStmt):
            raise TypeError(f"Unsupported statement {type(statement).__name__}.")

    def _execute_for(self, statement: ForRangeStmt, index: int, indent: int) -> int:
        count = to_number(self._resolve(statement.count))
        body_end = index + 1 if statement.inline_body else self._body_end(index + 1, indent)
        if not statement.inline_body and not self._has_statements(index + 1, body_end):
            return body_end
        iteration = 0
        while iteration < count:
            if self._steps > self.max_steps:
                raise RunawayScriptError("Infinite loop detected (max steps reached)")
            self._run_body(statement.inline_body, index, indent)
            iteration += 1
        return body_end

    def _execute_if(self, statement: IfStmt, index: int, indent: int) -> int:
        lhs = self._resolve(statement.subject)
        rhs = self._resolve(statement.value)
        body_end = index + 1 if statement.inline_body else self._body_end(index + 1, indent)
        if compare(lhs, statement.operator, rhs):
            self._run_body(statement.inline_body, index, indent)
        return body_end

    def _run_body(self, inline_body: str, index: int, indent: int) -> None:
        if inline_body:
            self._count_step()
            self._execute_line(inline_body, index, indent)
        else:
            self._execute_block(index + 1, indent + 1)

    def _body_end(self, start: int, indent: int) -> int:
        index = start
        while index < len(self._lines):
            raw = self._lines[index]
            if not is_skippable(raw) and indent_of(raw) <= indent:
                break
            index += 1
        return index

    def _has_statements(self, start: int, end: int) -> bool:
        return any(not is_skippable(raw) for raw in self._lines[start:end])

    def _count_step(self) -> None:
        self._steps += 1
        if self._steps > self.max_steps:
            raise RunawayScriptError("Infinite loop detected (max steps reached)")

    def _resolve(self, operand: Operand) -> Any:
        if isinstance(operand, (NumberLiteral, StringLiteral)):
            return operand.value
        if isinstance(operand, NameRef) and operand.name in self._variables:
            return self._variables[operand.name]
        return operand.name


def _add(lhs: Any, rhs: Any) -> Any:
    if isinstance(lhs, str) or isinstance(rhs, str):
        return format_value(lhs) + format_value(rhs)
    return lhs + rhs


def run_script(source: str, max_steps: int = MAX_STEPS) -> list[str]:
    return ScriptInterpreter(max_steps=max_steps).run(source)
