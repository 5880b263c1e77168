from __future__ import annotations

import json
import logging
from pathlib import Path

from blocks import Block, BlockFormatError, program_from_data, program_to_data
from semantic import validate_program

logger = logging.getLogger(__name__)


class ProgramLoadError(ValueError):
    """Raised when reading a block program or script from disk fails."""


def load_program(path: Path, validate: bool = True) -> list[Block]:
    source = _read_text(path)
    try:
        data = json.loads(source)
    except json.JSONDecodeError as exc:
        raise ProgramLoadError(f"Invalid JSON in '{path}' at line {exc.lineno}, column {exc.colno}: {exc.msg}.") from exc
    try:
        program = program_from_data(data)
    except BlockFormatError as exc:
        raise ProgramLoadError(f"Malformed block program in '{path}': {exc}") from exc
    if validate:
        validate_program(program)
    logger.debug("Loaded %d top-level block(s) from %s", len(program), path)
    return program


def save_program(program: list[Block], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(program_to_data(program), indent=2) + "\n", encoding="utf-8")


def load_script(path: Path) -> str:
    return _read_text(path)


def _read_text(path: Path) -> str:
    if not path.exists() or not path.is_file():
        raise ProgramLoadError(f"Input file not found: '{path}'.")
    text = path.read_text(encoding="utf-8")
    return text.lstrip("\ufeff")
