from __future__ import annotations

import uuid
from typing import Any

from blocks import Block, default_params, get_definition, iter_blocks


class EditorError(ValueError):
    """Raised when an edit cannot be applied to a block program."""


# Blocks whose params name the variables they read or write.
VARIABLE_PARAMS = {
    "set_var": "name",
    "change_var": "name",
    "if": "condition_var",
    "repeat_until": "condition_var",
}


def new_block_id() -> str:
    return uuid.uuid4().hex[:9]


def new_block(block_type: str, block_id: str | None = None) -> Block:
    definition = get_definition(block_type)
    if definition is None:
        raise EditorError(f"Unknown block type '{block_type}'.")
    return Block(
        id=block_id or new_block_id(),
        type=block_type,
        params=default_params(block_type),
        children=[] if definition.has_children else None,
    )


def find_block(program: list[Block], block_id: str) -> Block | None:
    for block in iter_blocks(program):
        if block.id == block_id:
            return block
    return None


def append_block(program: list[Block], block: Block) -> Block:
    program.append(block)
    return block


def append_child(program: list[Block], parent_id: str, block: Block) -> Block:
    parent = find_block(program, parent_id)
    if parent is None:
        raise EditorError(f"No block with id '{parent_id}'.")
    if parent.children is None:
        raise EditorError(f"Block '{parent_id}' of type '{parent.type}' cannot contain child blocks.")
    parent.children.append(block)
    return block


def update_params(program: list[Block], block_id: str, params: dict[str, Any]) -> Block:
    block = find_block(program, block_id)
    if block is None:
        raise EditorError(f"No block with id '{block_id}'.")
    block.params.update(params)
    return block


def delete_block(program: list[Block], block_id: str) -> bool:
    """Remove the block with ``block_id`` and its whole subtree.

    Returns False when no block in the forest carries that id.
    """
    for index, block in enumerate(program):
        if block.id == block_id:
            del program[index]
            return True
        if block.children and delete_block(block.children, block_id):
            return True
    return False


def referenced_variables(program: list[Block]) -> list[str]:
    names: dict[str, None] = {}
    for block in iter_blocks(program):
        param = VARIABLE_PARAMS.get(block.type)
        if param is None:
            continue
        name = block.params.get(param)
        if name is None:
            name = default_params(block.type).get(param)
        if name is not None:
            names.setdefault(str(name), None)
    return list(names)
