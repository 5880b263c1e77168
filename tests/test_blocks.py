#!/usr/bin/env python3
"""
Block model tests
Definitions, decoding, validation, editing and loading programs
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from blocks import (
    BLOCK_DEFINITIONS,
    Block,
    BlockFormatError,
    default_params,
    definitions_in,
    get_definition,
    iter_blocks,
    program_from_data,
    program_to_data,
)
from editor import (
    EditorError,
    append_block,
    append_child,
    delete_block,
    find_block,
    new_block,
    referenced_variables,
    update_params,
)
from loader import ProgramLoadError, load_program, load_script, save_program
from semantic import SemanticError, validate_program

SAMPLE = [
    {"id": "a", "type": "set_var", "params": {"name": "score", "value": 0}},
    {
        "id": "r",
        "type": "repeat",
        "params": {"times": 2},
        "children": [{"id": "p", "type": "print", "params": {"message": "score"}}],
    },
]


class TestDefinitions(unittest.TestCase):

    def test_catalog(self):
        types = [definition.type for definition in BLOCK_DEFINITIONS]
        self.assertEqual(len(types), len(set(types)))
        nesting = {definition.type for definition in BLOCK_DEFINITIONS if definition.has_children}
        self.assertEqual(nesting, {"repeat", "repeat_until", "if"})
        self.assertEqual([d.type for d in definitions_in("variable")], ["set_var", "change_var"])

    def test_defaults(self):
        self.assertEqual(default_params("if"), {"condition_var": "score", "operator": ">", "value": 10})
        self.assertEqual(default_params("start"), {})
        self.assertEqual(default_params("nope"), {})
        self.assertIsNone(get_definition("nope"))
        self.assertEqual(get_definition("move").input("direction").options, ("Forward", "Back", "Left", "Right"))


class TestDecoding(unittest.TestCase):

    def test_program_from_data(self):
        program = program_from_data(SAMPLE)
        self.assertEqual(program[0], Block(id="a", type="set_var", params={"name": "score", "value": 0}))
        self.assertIsNone(program[0].children)
        self.assertEqual(program[1].children[0].params, {"message": "score"})
        self.assertEqual([block.id for block in iter_blocks(program)], ["a", "r", "p"])
        self.assertEqual(program_to_data(program), SAMPLE)

    def test_wrapped_program(self):
        self.assertEqual(len(program_from_data({"program": SAMPLE})), 2)

    def test_malformed(self):
        with self.assertRaises(BlockFormatError):
            program_from_data({"blocks": []})
        with self.assertRaises(BlockFormatError):
            program_from_data([{"type": "print"}])
        with self.assertRaises(BlockFormatError):
            program_from_data([{"id": "a", "type": "repeat", "children": {}}])
        with self.assertRaisesRegex(BlockFormatError, r"program\[0\]\.r\[1\]"):
            program_from_data([{"id": "r", "type": "repeat", "children": [{"id": "x", "type": "start"}, 3]}])


class TestValidation(unittest.TestCase):

    def test_valid_program(self):
        validate_program(program_from_data(SAMPLE))

    def test_duplicate_ids(self):
        program = [Block(id="a", type="start"), Block(id="r", type="repeat", children=[Block(id="a", type="start")])]
        with self.assertRaisesRegex(SemanticError, "Duplicate block id 'a'"):
            validate_program(program)

    def test_unknown_type(self):
        with self.assertRaisesRegex(SemanticError, "Unknown block type 'teleport'"):
            validate_program([Block(id="t", type="teleport")])

    def test_children_on_plain_block(self):
        with self.assertRaisesRegex(SemanticError, "cannot contain child blocks"):
            validate_program([Block(id="p", type="print", children=[])])

    def test_bad_select_option(self):
        with self.assertRaisesRegex(SemanticError, "operator"):
            validate_program([Block(id="i", type="if", params={"operator": "=>"}, children=[])])

    def test_empty_id(self):
        with self.assertRaises(SemanticError):
            validate_program([Block(id="", type="start")])


class TestEditor(unittest.TestCase):

    def test_new_block(self):
        repeat = new_block("repeat")
        self.assertEqual(repeat.params, {"times": 3})
        self.assertEqual(repeat.children, [])
        self.assertEqual(len(repeat.id), 9)
        text = new_block("print", block_id="p1")
        self.assertEqual(text, Block(id="p1", type="print", params={"message": "Hello!"}))
        with self.assertRaises(EditorError):
            new_block("teleport")

    def test_tree_edits(self):
        program = []
        loop = append_block(program, new_block("repeat", block_id="r"))
        append_child(program, "r", new_block("if", block_id="i"))
        append_child(program, "i", new_block("print", block_id="p"))
        self.assertIs(find_block(program, "r"), loop)
        self.assertEqual(find_block(program, "p").type, "print")

        update_params(program, "p", {"message": "hey"})
        self.assertEqual(find_block(program, "p").params, {"message": "hey"})

        with self.assertRaises(EditorError):
            append_child(program, "p", new_block("start"))
        with self.assertRaises(EditorError):
            update_params(program, "missing", {})

        self.assertTrue(delete_block(program, "i"))
        self.assertIsNone(find_block(program, "p"))
        self.assertEqual(loop.children, [])
        self.assertFalse(delete_block(program, "i"))

    def test_referenced_variables(self):
        program = [
            Block(id="i", type="if", params={"condition_var": "lives"}, children=[
                Block(id="s", type="set_var", params={"name": "score", "value": 1}),
            ]),
            Block(id="c", type="change_var", params={"name": "lives", "value": -1}),
            Block(id="u", type="repeat_until", params={"condition_var": "timer"}, children=[]),
            Block(id="p", type="print", params={"message": "score"}),
        ]
        self.assertEqual(referenced_variables(program), ["lives", "score", "timer"])


class TestLoader(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_and_save(self):
        path = self.dir / "program.json"
        path.write_text(json.dumps(SAMPLE), encoding="utf-8")
        program = load_program(path)
        out = self.dir / "nested" / "copy.json"
        save_program(program, out)
        self.assertEqual(json.loads(out.read_text(encoding="utf-8")), SAMPLE)

    def test_invalid_json(self):
        path = self.dir / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with self.assertRaisesRegex(ProgramLoadError, "Invalid JSON"):
            load_program(path)

    def test_malformed_program(self):
        path = self.dir / "bad.json"
        path.write_text('[{"id": 1, "type": "start"}]', encoding="utf-8")
        with self.assertRaises(ProgramLoadError):
            load_program(path)

    def test_validation_can_be_skipped(self):
        path = self.dir / "unknown.json"
        path.write_text('[{"id": "t", "type": "teleport"}]', encoding="utf-8")
        with self.assertRaises(SemanticError):
            load_program(path)
        self.assertEqual(load_program(path, validate=False)[0].type, "teleport")

    def test_missing_file(self):
        with self.assertRaises(ProgramLoadError):
            load_script(self.dir / "nope.py")

    def test_script_bom_is_dropped(self):
        path = self.dir / "script.py"
        path.write_text("\ufeffx = 1\n", encoding="utf-8")
        self.assertEqual(load_script(path), "x = 1\n")


if __name__ == '__main__':
    unittest.main(verbosity=2)
