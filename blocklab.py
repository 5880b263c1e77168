from __future__ import annotations

"""
Minimal block program (program.json):

[
  {"id": "a1", "type": "set_var", "params": {"name": "score", "value": 0}},
  {"id": "a2", "type": "repeat", "params": {"times": 3}, "children": [
    {"id": "a3", "type": "change_var", "params": {"name": "score", "value": 5}},
    {"id": "a4", "type": "print", "params": {"message": "score"}}
  ]}
]

Usage:
python blocklab.py step program.json
python blocklab.py step program.json --json
python blocklab.py convert program.json -o program.py
python blocklab.py run program.py --max-steps 5000
python blocklab.py exec program.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from codegen import generate_python
from interpreter import MAX_STEPS, run_script
from loader import load_program, load_script
from runtime import BlockEngine


def step_file(input_path: Path, as_json: bool = False, validate: bool = True) -> int:
    program = load_program(input_path, validate=validate)
    engine = BlockEngine(program)
    state = engine.get_state()
    printed = 0
    while not state.is_terminal:
        state = engine.step()
        if as_json:
            print(json.dumps(state.to_dict()))
            continue
        if state.current_block_id is not None:
            print(f"[{state.current_block_id}]")
        for line in state.console_output[printed:]:
            print(f"    {line}")
        printed = len(state.console_output)
    if not as_json:
        variables = ", ".join(f"{name}={value}" for name, value in state.variables.items())
        print(f"variables: {variables or '(none)'}")
    if state.error is not None:
        print(f"error: {state.error}", file=sys.stderr)
        return 1
    return 0


def convert_file(input_path: Path, output_path: Path | None = None, validate: bool = True) -> int:
    program = load_program(input_path, validate=validate)
    code = generate_python(program)
    if output_path is None:
        sys.stdout.write(code)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8")
    return 0


def run_file(input_path: Path, max_steps: int = MAX_STEPS) -> int:
    return _print_output(run_script(load_script(input_path), max_steps=max_steps))


def exec_file(input_path: Path, max_steps: int = MAX_STEPS, validate: bool = True) -> int:
    program = load_program(input_path, validate=validate)
    return _print_output(run_script(generate_python(program), max_steps=max_steps))


def _print_output(output: list[str]) -> int:
    for line in output:
        print(line)
    failed = any(line.startswith(("Runtime Error:", "Error on line")) for line in output)
    return 1 if failed else 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Step, convert and run block programs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_step = subparsers.add_parser("step", help="Step a block program to completion")
    p_step.add_argument("input", type=Path, help="Path to a block program .json file")
    p_step.add_argument("--json", action="store_true", help="Print the run state after every step as JSON")
    p_step.add_argument("--no-validate", action="store_true", help="Skip block program validation")

    p_convert = subparsers.add_parser("convert", help="Generate a Python script from a block program")
    p_convert.add_argument("input", type=Path, help="Path to a block program .json file")
    p_convert.add_argument("-o", "--output", type=Path, default=None, help="Write the script here instead of stdout")
    p_convert.add_argument("--no-validate", action="store_true", help="Skip block program validation")

    p_run = subparsers.add_parser("run", help="Run a script with the script interpreter")
    p_run.add_argument("input", type=Path, help="Path to a script file")
    p_run.add_argument("--max-steps", type=int, default=MAX_STEPS, help="Line budget before a run is stopped")

    p_exec = subparsers.add_parser("exec", help="Convert a block program and run the generated script")
    p_exec.add_argument("input", type=Path, help="Path to a block program .json file")
    p_exec.add_argument("--max-steps", type=int, default=MAX_STEPS, help="Line budget before a run is stopped")
    p_exec.add_argument("--no-validate", action="store_true", help="Skip block program validation")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "step":
            return step_file(args.input, as_json=args.json, validate=not args.no_validate)
        if args.command == "convert":
            return convert_file(args.input, output_path=args.output, validate=not args.no_validate)
        if args.command == "run":
            return run_file(args.input, max_steps=args.max_steps)
        return exec_file(args.input, max_steps=args.max_steps, validate=not args.no_validate)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
