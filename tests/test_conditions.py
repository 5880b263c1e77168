#!/usr/bin/env python3
"""
Condition evaluator tests
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conditions import compare, evaluate_condition, format_value, is_number_text, to_number


class TestConditions(unittest.TestCase):

    def test_operators(self):
        bindings = {"score": 10}
        self.assertTrue(evaluate_condition("score", ">", 5, bindings))
        self.assertFalse(evaluate_condition("score", "<", 5, bindings))
        self.assertTrue(evaluate_condition("score", "==", "10", bindings))
        self.assertTrue(evaluate_condition("score", "!=", 3, bindings))

    def test_missing_variable_is_zero(self):
        self.assertTrue(evaluate_condition("lives", "==", 0, {}))
        self.assertTrue(evaluate_condition("lives", "<", 1, {}))

    def test_unknown_operator_is_false(self):
        self.assertFalse(evaluate_condition("score", ">=", 1, {"score": 5}))
        self.assertFalse(evaluate_condition("score", "=", "not a number", {"score": 5}))

    def test_non_numeric_literal_never_raises(self):
        self.assertTrue(evaluate_condition("x", "!=", "abc", {}))
        self.assertFalse(evaluate_condition("x", ">", "abc", {}))
        self.assertFalse(evaluate_condition("x", "==", "abc", {"x": 3}))

    def test_bindings_untouched(self):
        bindings = {}
        evaluate_condition("lives", ">", 0, bindings)
        self.assertEqual(bindings, {})

    def test_loose_compare(self):
        self.assertTrue(compare(5, "==", "5"))
        self.assertTrue(compare("", "==", 0))
        self.assertTrue(compare("abc", "<", "abd"))
        self.assertFalse(compare("abc", ">", 1))
        self.assertFalse(compare("abc", "==", 1))
        self.assertTrue(compare("abc", "!=", 1))


class TestNumbers(unittest.TestCase):

    def test_to_number(self):
        self.assertEqual(to_number("7"), 7)
        self.assertIsInstance(to_number("7"), int)
        self.assertEqual(to_number(" -2.5 "), -2.5)
        self.assertEqual(to_number("1e3"), 1000.0)
        self.assertEqual(to_number(""), 0)
        self.assertEqual(to_number(4.5), 4.5)
        for bad in ("abc", "nan", None, [1]):
            with self.assertRaises(ValueError):
                to_number(bad)

    def test_is_number_text(self):
        self.assertTrue(is_number_text("42"))
        self.assertTrue(is_number_text(".5"))
        self.assertFalse(is_number_text(""))
        self.assertFalse(is_number_text("score"))

    def test_format_value(self):
        self.assertEqual(format_value(15.0), "15")
        self.assertEqual(format_value(2.5), "2.5")
        self.assertEqual(format_value("hi"), "hi")


if __name__ == '__main__':
    unittest.main(verbosity=2)
