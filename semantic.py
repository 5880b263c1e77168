from __future__ import annotations

from blocks import Block, BlockDefinition, get_definition


class SemanticError(ValueError):
    """Raised when block program validation fails."""


def validate_program(program: list[Block]) -> None:
    seen_ids: dict[str, str] = {}
    _validate_blocks(program, seen_ids=seen_ids, scope_name="program")


def _validate_blocks(blocks: list[Block], seen_ids: dict[str, str], scope_name: str) -> None:
    for block in blocks:
        if not block.id:
            raise SemanticError(f"Block of type '{block.type}' in {scope_name} has an empty id.")
        if block.id in seen_ids:
            raise SemanticError(
                f"Duplicate block id '{block.id}' in {scope_name}; already used by a '{seen_ids[block.id]}' block."
            )
        seen_ids[block.id] = block.type
        definition = get_definition(block.type)
        if definition is None:
            raise SemanticError(f"Unknown block type '{block.type}' for block '{block.id}' in {scope_name}.")
        _validate_params(block, definition, scope_name)
        if block.children is None:
            continue
        if not definition.has_children:
            raise SemanticError(
                f"Block '{block.id}' of type '{block.type}' cannot contain child blocks (in {scope_name})."
            )
        _validate_blocks(block.children, seen_ids=seen_ids, scope_name=f"'{block.type}' block '{block.id}'")


def _validate_params(block: Block, definition: BlockDefinition, scope_name: str) -> None:
    for spec in definition.inputs:
        if spec.kind != "select" or not spec.options or spec.name not in block.params:
            continue
        value = block.params[spec.name]
        if value not in spec.options:
            choices = ", ".join(spec.options)
            raise SemanticError(
                f"Block '{block.id}' has {spec.name} {value!r}; expected one of {choices} (in {scope_name})."
            )
