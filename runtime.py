from __future__ import annotations

"""
Single-step interpreter for block programs.

The engine keeps an explicit stack of frames, one per sibling list that is
currently open (the root program, or the body of an active repeat, repeat
until, or if block). Every call to ``step()`` executes exactly one block, which
lets an editor highlight the active block and refresh its variable watch after
each step:

    engine = BlockEngine(program)
    state = engine.step()
    while not state.is_terminal:
        state = engine.step()
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from blocks import Block, get_definition
from conditions import evaluate_condition, format_value, to_number

logger = logging.getLogger(__name__)


class BlockExecutionError(ValueError):
    """Raised when a block cannot be executed with its parameters."""


@dataclass(frozen=True)
class Condition:
    variable: str
    operator: str
    value: Any


@dataclass(frozen=True)
class RunState:
    variables: dict[str, int | float] = field(default_factory=dict)
    console_output: tuple[str, ...] = ()
    current_block_id: str | None = None
    is_running: bool = False
    is_finished: bool = False
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.is_finished or self.error is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "variables": dict(self.variables),
            "consoleOutput": list(self.console_output),
            "currentBlockId": self.current_block_id,
            "isRunning": self.is_running,
            "isFinished": self.is_finished,
            "error": self.error,
        }


@dataclass
class _Frame:
    children: list[Block]
    position: int = 0
    loop_counter: int | None = None
    max_loops: int | float | None = None
    until_condition: Condition | None = None


class BlockEngine:
    def __init__(self, program: list[Block]) -> None:
        self._program = program
        self.reset()

    @property
    def program(self) -> list[Block]:
        return self._program

    def reset(self) -> None:
        self._variables: dict[str, int | float] = {}
        self._console_output: list[str] = []
        self._current_block_id: str | None = None
        self._is_running = False
        self._is_finished = False
        self._error: str | None = None
        self._stack: list[_Frame] = [_Frame(children=self._program)]

    def get_state(self) -> RunState:
        return RunState(
            variables=dict(self._variables),
            console_output=tuple(self._console_output),
            current_block_id=self._current_block_id,
            is_running=self._is_running,
            is_finished=self._is_finished,
            error=self._error,
        )

    def step(self) -> RunState:
        if self._is_finished or self._error is not None:
            return self.get_state()
        self._is_running = True

        frame = self._active_frame()
        if frame is None:
            self._is_finished = True
            self._is_running = False
            self._current_block_id = None
            logger.debug("Program finished with variables %s", self._variables)
            return self.get_state()

        block = frame.children[frame.position]
        self._current_block_id = block.id
        try:
            self._execute(block)
        except Exception as exc:
            self._error = str(exc) or type(exc).__name__
            self._is_running = False
            logger.warning("Block '%s' (%s) failed: %s", block.id, block.type, self._error)
            return self.get_state()
        # A frame pushed by the block resumes at the next sibling once popped.
        frame.position += 1
        return self.get_state()

    def run(self, max_steps: int | None = None) -> RunState:
        state = self.get_state()
        steps = 0
        while not state.is_terminal:
            if max_steps is not None and steps >= max_steps:
                break
            state = self.step()
            steps += 1
        return state

    def _active_frame(self) -> _Frame | None:
        while self._stack:
            frame = self._stack[-1]
            if frame.position < len(frame.children):
                return frame
            if frame.max_loops is not None and frame.loop_counter is not None:
                frame.loop_counter += 1
                if frame.loop_counter < frame.max_loops:
                    frame.position = 0
                    continue
            if frame.until_condition is not None and not self._condition_met(frame.until_condition):
                frame.position = 0
                continue
            self._stack.pop()
            logger.debug("Popped frame, stack depth %d", len(self._stack))
        return None

    def _condition_met(self, condition: Condition) -> bool:
        return evaluate_condition(condition.variable, condition.operator, condition.value, self._variables)

    def _execute(self, block: Block) -> None:
        logger.debug("Executing block '%s' (%s)", block.id, block.type)
        kind = block.type
        if kind == "start":
            self._console_output.append("> Program Started")
        elif kind == "print":
            message = self._param(block, "message")
            if isinstance(message, str) and message in self._variables:
                self._console_output.append(f"> {format_value(self._variables[message])}")
            else:
                self._console_output.append(f"> {format_value(message)}")
        elif kind == "set_var":
            name = self._param(block, "name")
            self._variables[name] = to_number(self._param(block, "value"))
        elif kind == "change_var":
            name = self._param(block, "name")
            delta = to_number(self._param(block, "value"))
            if name not in self._variables:
                self._variables[name] = 0
            self._variables[name] += delta
        elif kind == "wait":
            self._console_output.append(f"> Waiting {format_value(self._param(block, 'seconds'))}s...")
        elif kind == "move":
            self._console_output.append(f"> Avatar moving {self._param(block, 'direction')}")
        elif kind == "repeat":
            if block.has_children:
                self._push(_Frame(children=block.children, loop_counter=0, max_loops=self._loop_count(block)))
        elif kind == "repeat_until":
            if block.has_children:
                condition = self._condition(block)
                if not self._condition_met(condition):
                    self._push(_Frame(children=block.children, until_condition=condition))
        elif kind == "if":
            if block.has_children and self._condition_met(self._condition(block)):
                self._push(_Frame(children=block.children))
        else:
            logger.debug("Ignoring unknown block type '%s'", kind)

    def _push(self, frame: _Frame) -> None:
        self._stack.append(frame)
        logger.debug("Pushed frame over %d block(s), stack depth %d", len(frame.children), len(self._stack))

    def _condition(self, block: Block) -> Condition:
        return Condition(
            variable=self._param(block, "condition_var"),
            operator=self._param(block, "operator"),
            value=self._param(block, "value"),
        )

    def _loop_count(self, block: Block) -> int | float:
        try:
            count = to_number(self._param(block, "times"))
        except ValueError:
            return 1
        return count or 1

    def _param(self, block: Block, name: str) -> Any:
        if name in block.params:
            return block.params[name]
        definition = get_definition(block.type)
        spec = definition.input(name) if definition is not None else None
        if spec is None:
            raise BlockExecutionError(f"Block '{block.id}' ({block.type}) is missing parameter '{name}'.")
        return spec.default
