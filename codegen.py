from __future__ import annotations

from typing import Any

from blocks import Block, default_params
from conditions import format_value, is_number_text
from editor import referenced_variables

INDENT = "    "

PREAMBLE = "# Generated Python Code\nimport time\n\n# Setup\navatar = Avatar()\n"


def generate_python(program: list[Block]) -> str:
    builder = _ScriptBuilder(program)
    return builder.build()


class _ScriptBuilder:
    def __init__(self, program: list[Block]) -> None:
        self.program = program
        self.variables: list[str] = []
        self.lines: list[str] = []

    def build(self) -> str:
        self.variables = referenced_variables(self.program)
        parts = [PREAMBLE]
        # Declared up front so loop bodies never read an unbound name.
        if self.variables:
            parts.append("# Initialize variables\n")
            parts.extend(f"{name} = 0\n" for name in self.variables)
        parts.append("\n")
        self.lines = []
        for block in self.program:
            self._emit_block(block, depth=0)
        parts.extend(f"{line}\n" for line in self.lines)
        return "".join(parts)

    def _emit_block(self, block: Block, depth: int) -> None:
        self.lines.append(INDENT * depth + self._block_line(block))
        for child in block.children or []:
            self._emit_block(child, depth + 1)

    def _block_line(self, block: Block) -> str:
        kind = block.type
        if kind == "start":
            return "# Program Start"
        if kind == "print":
            return f"print({self._print_argument(self._param(block, 'message'))})"
        if kind == "wait":
            return f"time.sleep({self._fmt(self._param(block, 'seconds'))})"
        if kind == "move":
            return f'avatar.move("{self._param(block, "direction")}")'
        if kind == "set_var":
            return f"{self._param(block, 'name')} = {self._fmt(self._param(block, 'value'))}"
        if kind == "change_var":
            return f"{self._param(block, 'name')} += {self._fmt(self._param(block, 'value'))}"
        if kind == "repeat":
            return f"for i in range({self._fmt(self._param(block, 'times'))}):"
        if kind == "repeat_until":
            return f"while not ({self._condition_text(block)}):"
        if kind == "if":
            return f"if {self._condition_text(block)}:"
        return f"# Unknown block {kind}"

    def _condition_text(self, block: Block) -> str:
        variable = self._param(block, "condition_var")
        operator = self._param(block, "operator")
        value = self._fmt(self._param(block, "value"))
        return f"{variable} {operator} {value}"

    def _print_argument(self, message: Any) -> str:
        text = format_value(message)
        if text in self.variables or is_number_text(text):
            return text
        if '"' in text:
            return f"'{text}'"
        return f'"{text}"'

    def _param(self, block: Block, name: str) -> Any:
        if name in block.params:
            return block.params[name]
        return default_params(block.type).get(name, "")

    def _fmt(self, value: Any) -> str:
        return format_value(value)
