"""Tests for sessions and variable bindings across lines."""

import datetime
import unittest

from linekalk_pkg.calculator import Calculator
from linekalk_pkg.calculus import NumberItem
from linekalk_pkg.session import Session, normalize_name


class TestSessionStore(unittest.TestCase):
    def test_normalize_name(self):
        self.assertEqual(normalize_name("  Monthly   Rent "), "monthly rent")

    def test_set_and_get(self):
        session = Session()
        session.set_variable("Erhan  Barış", NumberItem(100))
        self.assertTrue(session.has_variable("erhan barış"))
        self.assertEqual(session.get_variable("ERHAN BARIŞ"), NumberItem(100))
        self.assertIsNone(session.get_variable("missing"))

    def test_rebinding_replaces(self):
        session = Session()
        session.set_variable("a", NumberItem(1))
        session.set_variable("a", NumberItem(2))
        self.assertEqual(session.variable_names(), ["a"])
        self.assertEqual(session.get_variable("a"), NumberItem(2))

    def test_clear(self):
        session = Session()
        session.set_variable("a", NumberItem(1))
        session.clear()
        self.assertEqual(session.variable_names(), [])

    def test_lines(self):
        session = Session("en", "a = 1\n\nb = 2")
        self.assertEqual(session.lines(), ["a = 1", "", "b = 2"])


class TestBindingsAcrossLines(unittest.TestCase):
    def setUp(self):
        self.calculator = Calculator()

    def test_multi_word_variables(self):
        result = self.calculator.execute(
            "en",
            "erhan barış = 100\ntest aysel barış = 220\nerhan barış + test aysel barış",
        )
        self.assertTrue(result.ok)
        self.assertEqual(result.lines[2].item.value, 320)
        self.assertEqual(result.lines[2].output, "320")

    def test_assignment_outputs_value(self):
        result = self.calculator.execute("en", "price = $25")
        self.assertEqual(result.lines[0].output, "$25,00")

    def test_time_variable(self):
        result = self.calculator.execute(
            "tr", "tarih = 11:30\ntarih ekle 12 saat\ntarih ekle -1 saat"
        )
        self.assertEqual(result.lines[1].item.time, datetime.time(23, 30))
        self.assertEqual(result.lines[2].item.time, datetime.time(10, 30))

    def test_time_variable_english(self):
        result = self.calculator.execute(
            "en", "tarih = 11:30\ntarih add 12 hour\ntarih add -1 hour"
        )
        self.assertEqual(result.lines[1].item.time, datetime.time(23, 30))
        self.assertEqual(result.lines[2].item.time, datetime.time(10, 30))

    def test_fresh_session_per_execute(self):
        self.calculator.execute("en", "foo = 1\nbar = 2")
        result = self.calculator.execute("en", "foo + bar")
        self.assertFalse(result.lines[0].ok)
        self.assertEqual(result.lines[0].error_code, "UNDEFINED_VARIABLE")

    def test_persistent_session(self):
        session = Session("en", "foo = 1\nbar = 2\nfoo + bar")
        first = self.calculator.execute_session(session)
        self.assertEqual(first.lines[2].output, "3")

        session.set_text("foo = 10\nfoo + bar")
        second = self.calculator.execute_session(session)
        self.assertEqual(second.lines[1].output, "12")

    def test_blank_lines_hold_none(self):
        result = self.calculator.execute("en", "1 + 1\n\n   \n2 + 2")
        self.assertEqual(len(result.lines), 4)
        self.assertIsNone(result.lines[1])
        self.assertIsNone(result.lines[2])
        self.assertEqual(result.lines[3].output, "4")
        self.assertEqual(result.lines[3].line, 3)
