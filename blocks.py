from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class BlockFormatError(ValueError):
    """Raised when decoding a block program fails."""


@dataclass(frozen=True)
class InputSpec:
    name: str
    kind: str
    default: Any
    label: str | None = None
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class BlockDefinition:
    type: str
    category: str
    label: str
    color: str
    has_children: bool = False
    inputs: tuple[InputSpec, ...] = ()
    icon: str | None = None

    def input(self, name: str) -> InputSpec | None:
        for spec in self.inputs:
            if spec.name == name:
                return spec
        return None


INPUT_KINDS = {"text", "number", "select", "variable"}

CATEGORIES = ("event", "control", "action", "variable")

COMPARISON_OPTIONS = (">", "<", "==", "!=")

DIRECTION_OPTIONS = ("Forward", "Back", "Left", "Right")


BLOCK_DEFINITIONS: tuple[BlockDefinition, ...] = (
    BlockDefinition(type="start", category="event", label="On Start", color="bg-yellow-500", icon="Play"),
    BlockDefinition(
        type="repeat",
        category="control",
        label="Repeat",
        color="bg-orange-500",
        has_children=True,
        inputs=(InputSpec("times", "number", 3, label="times"),),
    ),
    BlockDefinition(
        type="repeat_until",
        category="control",
        label="Repeat Until",
        color="bg-orange-500",
        has_children=True,
        inputs=(
            InputSpec("condition_var", "variable", "score", label="Variable"),
            InputSpec("operator", "select", ">", label="is", options=COMPARISON_OPTIONS),
            InputSpec("value", "number", 10, label="Value"),
        ),
    ),
    BlockDefinition(
        type="if",
        category="control",
        label="If",
        color="bg-orange-500",
        has_children=True,
        inputs=(
            InputSpec("condition_var", "variable", "score", label="Variable"),
            InputSpec("operator", "select", ">", label="is", options=COMPARISON_OPTIONS),
            InputSpec("value", "number", 10, label="Value"),
        ),
    ),
    BlockDefinition(
        type="print",
        category="action",
        label="Print",
        color="bg-blue-500",
        inputs=(InputSpec("message", "text", "Hello!"),),
    ),
    BlockDefinition(
        type="move",
        category="action",
        label="Move Avatar",
        color="bg-blue-500",
        inputs=(InputSpec("direction", "select", "Forward", options=DIRECTION_OPTIONS),),
    ),
    BlockDefinition(
        type="wait",
        category="action",
        label="Wait",
        color="bg-blue-400",
        inputs=(InputSpec("seconds", "number", 1, label="seconds"),),
    ),
    BlockDefinition(
        type="set_var",
        category="variable",
        label="Set Variable",
        color="bg-rose-500",
        inputs=(
            InputSpec("name", "variable", "score", label="Name"),
            InputSpec("value", "number", 0, label="to"),
        ),
    ),
    BlockDefinition(
        type="change_var",
        category="variable",
        label="Change Variable",
        color="bg-rose-500",
        inputs=(
            InputSpec("name", "variable", "score", label="Name"),
            InputSpec("value", "number", 1, label="by"),
        ),
    ),
)

_DEFINITIONS_BY_TYPE = {definition.type: definition for definition in BLOCK_DEFINITIONS}


def get_definition(block_type: str) -> BlockDefinition | None:
    return _DEFINITIONS_BY_TYPE.get(block_type)


def definitions_in(category: str) -> list[BlockDefinition]:
    return [definition for definition in BLOCK_DEFINITIONS if definition.category == category]


def default_params(block_type: str) -> dict[str, Any]:
    definition = get_definition(block_type)
    if definition is None:
        return {}
    return {spec.name: spec.default for spec in definition.inputs}


@dataclass
class Block:
    id: str
    type: str
    params: dict[str, Any] = field(default_factory=dict)
    children: list[Block] | None = None

    @property
    def has_children(self) -> bool:
        return bool(self.children)


def iter_blocks(program: list[Block]) -> Iterator[Block]:
    """Yield every block of the forest depth-first, in program order."""
    for block in program:
        yield block
        if block.children:
            yield from iter_blocks(block.children)


def block_from_dict(data: Any, path: str = "program") -> Block:
    if not isinstance(data, dict):
        raise BlockFormatError(f"Expected an object at {path}, got {type(data).__name__}.")
    block_id = data.get("id")
    block_type = data.get("type")
    if not isinstance(block_id, str):
        raise BlockFormatError(f"Block at {path} needs a string 'id'.")
    if not isinstance(block_type, str):
        raise BlockFormatError(f"Block '{block_id}' at {path} needs a string 'type'.")
    params = data.get("params", {})
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise BlockFormatError(f"Block '{block_id}' at {path} has non-object 'params'.")
    children: list[Block] | None = None
    raw_children = data.get("children")
    if raw_children is not None:
        if not isinstance(raw_children, list):
            raise BlockFormatError(f"Block '{block_id}' at {path} has non-list 'children'.")
        children = [
            block_from_dict(child, path=f"{path}.{block_id}[{index}]") for index, child in enumerate(raw_children)
        ]
    return Block(id=block_id, type=block_type, params=dict(params), children=children)


def program_from_data(data: Any) -> list[Block]:
    if isinstance(data, dict) and "program" in data:
        data = data["program"]
    if not isinstance(data, list):
        raise BlockFormatError("A block program must be a list of blocks.")
    return [block_from_dict(item, path=f"program[{index}]") for index, item in enumerate(data)]


def block_to_dict(block: Block) -> dict[str, Any]:
    out: dict[str, Any] = {"id": block.id, "type": block.type, "params": dict(block.params)}
    if block.children is not None:
        out["children"] = [block_to_dict(child) for child in block.children]
    return out


def program_to_data(program: list[Block]) -> list[dict[str, Any]]:
    return [block_to_dict(block) for block in program]
