"""Fuzzing tests for the line pipeline with random inputs."""

import random
import string
import unittest

from linekalk_pkg.api import validate_expression
from linekalk_pkg.calculator import Calculator
from linekalk_pkg.types import LineResult


class TestLineFuzzing(unittest.TestCase):
    """Random input never escapes as an exception."""

    def setUp(self):
        self.calculator = Calculator()
        self.rng = random.Random(1234)

    def test_random_strings(self):
        """Printable garbage gives a LineResult or None, never a raise."""
        for _ in range(200):
            length = self.rng.randint(1, 80)
            text = "".join(self.rng.choices(string.printable, k=length))
            result = self.calculator.execute("en", text)
            self.assertTrue(result.status)
            for line in result.lines:
                self.assertTrue(line is None or isinstance(line, LineResult))

    def test_random_token_soup(self):
        """Shuffled calculator vocabulary evaluates or fails cleanly."""
        vocabulary = [
            "$25", "10%", "of", "2 hours", "+", "-", "*", "/", "(", ")", "=",
            "to", "EUR", "1/1/2000", "11:30", "GMT+3", "1024mb", "kb", "x",
            "jan", "28", "is what %", "week", "0", "3,5",
        ]
        for _ in range(200):
            words = self.rng.choices(vocabulary, k=self.rng.randint(1, 8))
            text = " ".join(words)
            line = self.calculator.execute("en", text).lines[0]
            self.assertIsNotNone(line)
            if not line.ok:
                self.assertNotEqual(line.error_code, "INTERNAL_ERROR", repr(text))

    def test_malformed_expressions(self):
        """Malformed lines are rejected by validation."""
        malformed = ["(((", ")))", "1 + ", "* 2", "= 5", "(1 + 2))"]
        for expr in malformed:
            is_valid, error = validate_expression(expr)
            self.assertFalse(is_valid, expr)
            self.assertIsNotNone(error)
