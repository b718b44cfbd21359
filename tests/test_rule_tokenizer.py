"""Tests for rule compilation, rule rewriting and the token pipeline."""

import datetime
import unittest

import pytest

from linekalk_pkg.config import get_default_config
from linekalk_pkg.rule_tokenizer import (
    FieldMatcher,
    OperatorMatcher,
    WordMatcher,
    compile_rule_pattern,
    compile_rules,
)
from linekalk_pkg.rules import RULE_HANDLERS, make_duration
from linekalk_pkg.session import Session
from linekalk_pkg.calculus import NumberItem
from linekalk_pkg.tokenizer import Tokenizer
from linekalk_pkg.types import (
    DateToken,
    DurationToken,
    DynamicValueToken,
    MoneyToken,
    NumberToken,
    PercentToken,
    TimeToken,
    UiTokenKind,
    VariableToken,
)


def _pipeline(line, session=None, language="en"):
    config = get_default_config()
    tokenizer = Tokenizer(config, config.get_language(language), session)
    return tokenizer.tokenize(line), tokenizer


def _single(line, language="en"):
    tokens, _ = _pipeline(line, language=language)
    assert len(tokens) == 1, tokens
    return tokens[0].token_type


class TestCompileRulePattern(unittest.TestCase):
    def test_fields_words_operators(self):
        pattern = compile_rule_pattern("{AMOUNT:part} is what % of {AMOUNT:total}")
        self.assertEqual(
            pattern,
            (
                FieldMatcher("AMOUNT", "part"),
                WordMatcher("is"),
                WordMatcher("what"),
                OperatorMatcher("%"),
                WordMatcher("of"),
                FieldMatcher("AMOUNT", "total"),
            ),
        )

    def test_single_matcher_rejected(self):
        with self.assertRaises(ValueError):
            compile_rule_pattern("{NUMBER:value}")

    def test_unknown_field_type_rejected(self):
        with self.assertRaises(ValueError):
            compile_rule_pattern("{COLOR:c} {NUMBER:n}")

    def test_unknown_handler_rejected(self):
        with self.assertRaises(ValueError):
            compile_rules({"no_such_rule": ["{NUMBER:a} {TEXT:b}"]}, RULE_HANDLERS)

    def test_patterns_sorted_longest_first(self):
        rules = compile_rules(
            {"time_zone": ["{TIME:time} {TIMEZONE:timezone}", "{TIME:time} {TIMEZONE:timezone} + {NUMBER:plus_hours}"]},
            RULE_HANDLERS,
        )
        lengths = [len(pattern) for pattern in rules[0].patterns]
        self.assertEqual(lengths, sorted(lengths, reverse=True))


class TestDurations(unittest.TestCase):
    def test_make_duration_calendar_units(self):
        self.assertEqual(make_duration(14, "month"), DurationToken(months=14))
        self.assertEqual(make_duration(32, "year"), DurationToken(years=32))
        self.assertEqual(make_duration(2, "week"), DurationToken(seconds=14 * 86400))

    def test_single_duration(self):
        self.assertEqual(_single("3 hours"), DurationToken(seconds=10800))

    def test_combined_durations(self):
        self.assertEqual(_single("5 hour 21 minute 55 second").total_seconds, 19315)
        self.assertEqual(_single("100 minutes 1 seconds").total_seconds, 6001)

    def test_not_a_unit(self):
        tokens, _ = _pipeline("10 apples")
        self.assertEqual(len(tokens), 1)
        self.assertIsInstance(tokens[0].token_type, NumberToken)

    def test_turkish_units(self):
        self.assertEqual(_single("2 saat", language="tr"), DurationToken(seconds=7200))


class TestRules(unittest.TestCase):
    def test_money_per_duration(self):
        money = _single("$25/hour * 14 hours of work")
        self.assertIsInstance(money, MoneyToken)
        self.assertEqual(money.amount, pytest.approx(350))
        self.assertEqual(money.currency.code, "usd")

    def test_money_per_duration_at(self):
        money = _single("14 hours at $25 per hour")
        self.assertEqual(money.amount, pytest.approx(350))

    def test_date_with_year(self):
        self.assertEqual(_single("April 1, 2019"), DateToken(datetime.date(2019, 4, 1)))
        self.assertEqual(_single("28 jan 2019"), DateToken(datetime.date(2019, 1, 28)))

    def test_date_without_year(self):
        today = datetime.date.today()
        self.assertEqual(_single("10 June"), DateToken(datetime.date(today.year, 6, 10)))

    def test_invalid_day_is_not_a_date(self):
        tokens, _ = _pipeline("feb 31 2019")
        self.assertFalse(any(isinstance(t.token_type, DateToken) for t in tokens))

    def test_date_range(self):
        duration = _single("1/1/2000 to 3/3/2021")
        self.assertEqual(duration.total_seconds, 7732 * 86400)

    def test_time_zone_minus_hours(self):
        time = _single("9:00 GMT-7")
        self.assertIsInstance(time, TimeToken)
        self.assertEqual(time.time, datetime.time(9, 0))
        self.assertEqual(time.offset.offset, -420)

    def test_time_zone_named(self):
        self.assertEqual(_single("9:00 MST").offset.offset, -420)

    def test_time_convert(self):
        time = _single("9:00 GMT-7 to CET")
        self.assertEqual(time.time, datetime.time(17, 0))
        self.assertEqual(time.offset.name, "CET")

    def test_convert_money(self):
        money = _single("100 USD in EUR")
        self.assertEqual(money.currency.code, "eur")
        self.assertEqual(money.amount, pytest.approx(92.0))

    def test_dynamic_type_convert(self):
        value = _single("2048 kb in mb")
        self.assertIsInstance(value, DynamicValueToken)
        self.assertEqual(value.value, pytest.approx(2))
        self.assertEqual(value.unit.index, 4)

    def test_dynamic_type_convert_across_levels(self):
        self.assertEqual(_single("1 km to cm").value, pytest.approx(100000))

    def test_percent_of(self):
        self.assertEqual(_single("10% of 200").value, pytest.approx(20))

    def test_percent_of_money(self):
        money = _single("10% of $50")
        self.assertIsInstance(money, MoneyToken)
        self.assertEqual(money.amount, pytest.approx(5))

    def test_find_numbers_percent(self):
        self.assertEqual(_single("15 is what % of 100"), PercentToken(15.0))

    def test_find_total_from_percent(self):
        self.assertEqual(_single("20 is 10% of what").value, pytest.approx(200))


class TestTokenizerPipeline(unittest.TestCase):
    def test_assignment_split(self):
        tokens, tokenizer = _pipeline("monthly rent = $1.200")
        self.assertEqual(tokens[0].token_type, VariableToken("monthly rent"))
        self.assertTrue(tokens[1].is_operator("="))
        self.assertEqual(tokenizer.assignment, "monthly rent")
        kinds = [ui.kind for ui in tokenizer.ui_tokens]
        self.assertIn(UiTokenKind.VARIABLE_DEFINITION, kinds)
        self.assertNotIn(UiTokenKind.TEXT, kinds)

    def test_multi_word_variable_resolution(self):
        session = Session()
        session.set_variable("erhan barış", NumberItem(100))
        session.set_variable("test aysel barış", NumberItem(220))
        tokens, tokenizer = _pipeline("erhan barış + test aysel barış", session)
        self.assertEqual(
            [t.token_type for t in tokens if isinstance(t.token_type, VariableToken)],
            [VariableToken("erhan barış"), VariableToken("test aysel barış")],
        )
        kinds = [ui.kind for ui in tokenizer.ui_tokens]
        self.assertEqual(kinds.count(UiTokenKind.VARIABLE_USE), 2)

    def test_filler_text_dropped(self):
        tokens, _ = _pipeline("I paid $30 for lunch")
        self.assertEqual(len(tokens), 1)
        self.assertIsInstance(tokens[0].token_type, MoneyToken)

    def test_unknown_name_kept_as_variable(self):
        tokens, _ = _pipeline("foo + 1")
        self.assertEqual(tokens[0].token_type, VariableToken("foo"))

    def test_punctuation_dropped(self):
        tokens, _ = _pipeline("100, 200!")
        self.assertEqual([t.token_type.value for t in tokens], [100, 200])
