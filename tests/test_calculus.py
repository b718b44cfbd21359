"""Tests for value calculus: numbers, money, percent, durations, dates, times and units."""

import datetime
import unittest

import pytest

from linekalk_pkg.calculator import Calculator
from linekalk_pkg.calculus import (
    DateItem,
    DurationItem,
    MoneyItem,
    NumberItem,
    PercentItem,
    TimeItem,
    apply_operation,
    convert_currency,
    shift_date,
    shift_time,
)
from linekalk_pkg.config import get_default_config
from linekalk_pkg.evaluator import calculate_item
from linekalk_pkg.session import Session
from linekalk_pkg.types import DurationToken, EvalError, NumberType, OperationType, UnaryType


def _line(text, session=None):
    result = Calculator().execute_line(text, session or Session())
    assert result is not None
    assert result.ok, result
    return result


def _item(text, session=None):
    return _line(text, session).item


class TestNumbers(unittest.TestCase):
    def test_percent_of_running_value(self):
        self.assertEqual(_item("120 + 30% + 10%").value, pytest.approx(171.6))

    def test_juxtaposed_numbers_add(self):
        result = _line("100 200")
        self.assertEqual(result.item.value, 300)
        self.assertEqual(result.output, "300")

    def test_percent_inside_parentheses(self):
        self.assertEqual(_item("8 / (45 - 20%)").value, pytest.approx(0.2222, abs=1e-4))

    def test_decimal_separator(self):
        result = _line("(4 * 2,5)")
        self.assertEqual(result.item.value, 10)
        self.assertEqual(result.output, "10")

    def test_word_operators(self):
        self.assertEqual(_item("6 times 7").value, 42)
        self.assertEqual(_item("10 minus 4").value, 6)

    def test_integer_kind_is_kept(self):
        self.assertEqual(_item("2 * 3").kind, NumberType.INTEGER)
        self.assertEqual(_item("7 / 2").kind, NumberType.DECIMAL)

    def test_exponent_is_not_split(self):
        result = _line("1e5 + 1")
        self.assertEqual(result.item.value, 100001)
        self.assertEqual(result.output, "100.001")

    def test_division_output(self):
        self.assertEqual(_line("7 / 2").output, "3,5")

    def test_apply_operation_division_by_zero(self):
        self.assertIsNone(apply_operation(OperationType.DIV, 1, 0))

    def test_division_by_zero_is_eval_error(self):
        config = get_default_config()
        with self.assertRaises(EvalError):
            calculate_item(config, OperationType.DIV, NumberItem(1), NumberItem(0))


class TestMoney(unittest.TestCase):
    def test_money_per_duration(self):
        money = _item("$25/hour * 14 hours of work")
        self.assertIsInstance(money, MoneyItem)
        self.assertEqual(money.amount, pytest.approx(350))
        self.assertEqual(money.currency.code, "usd")

    def test_number_adopts_currency(self):
        money = _item("2 * $10")
        self.assertIsInstance(money, MoneyItem)
        self.assertEqual(money.amount, 20)

    def test_money_plus_percent(self):
        self.assertEqual(_item("$200 + 10%").amount, pytest.approx(220))

    def test_left_currency_wins(self):
        money = _item("$10 + 9,2 EUR")
        self.assertEqual(money.currency.code, "usd")
        self.assertEqual(money.amount, pytest.approx(20))

    def test_money_divided_by_money_is_number(self):
        self.assertIsInstance(_item("$100 / $25"), NumberItem)

    def test_money_divided_by_itself_is_one(self):
        config = get_default_config()
        for currency in config.currencies.values():
            for amount in (0.5, 12, 1234.56):
                money = MoneyItem(amount, currency)
                result = calculate_item(config, OperationType.DIV, money, money)
                self.assertEqual(result, NumberItem(1.0))

    def test_currency_round_trip(self):
        config = get_default_config()
        priced = [c for c in config.currencies.values() if config.currency_rate(c)]
        self.assertGreater(len(priced), 1)
        for source in priced:
            for target in priced:
                there = convert_currency(config, 123.45, source, target)
                back = convert_currency(config, there, target, source)
                self.assertEqual(back, pytest.approx(123.45))

    def test_money_with_duration(self):
        money = _item("$10 * 2 hours")
        self.assertIsInstance(money, MoneyItem)
        self.assertEqual(money.amount, pytest.approx(72000))
        self.assertEqual(_item("2 hours * $10").amount, pytest.approx(72000))

    def test_money_output(self):
        self.assertEqual(_line("$1234,056").output, "$1.234,06")

    def test_unary_minus_keeps_currency(self):
        money = _item("-$5")
        self.assertEqual(money.amount, -5)
        self.assertEqual(money.currency.code, "usd")


class TestDurations(unittest.TestCase):
    def test_duration_arithmetic(self):
        self.assertEqual(_item("2 hours + 30 minutes").duration.total_seconds, 9000)
        self.assertEqual(_item("3 * 2 hours").duration.total_seconds, 21600)

    def test_duration_output(self):
        self.assertEqual(_line("5 hour 21 minute 55 second").output, "5 hours 21 minutes 55 seconds")

    def test_duration_ratio(self):
        self.assertEqual(_item("1 hour / 30 minutes").value, 2)

    def test_number_adopts_duration_as_seconds(self):
        self.assertEqual(_item("3 hours + 2").duration.total_seconds, 10802)
        self.assertEqual(_item("2 + 3 hours").duration.total_seconds, 10802)
        self.assertEqual(_item("3 hours - 60").duration.total_seconds, 10740)
        self.assertEqual(_line("3 hours + 2").output, "3 hours 2 seconds")


class TestTimes(unittest.TestCase):
    def test_subtract_minutes(self):
        self.assertEqual(_item("11:40 - 10 minute").time, datetime.time(11, 30))

    def test_add_hour_and_second(self):
        self.assertEqual(_item("11:40 + 1 hour 1 second").time, datetime.time(12, 40, 1))

    def test_meridiem(self):
        self.assertEqual(_item("3:35 am + 7 hours 15 minutes").time, datetime.time(10, 50))

    def test_wraps_around_midnight(self):
        self.assertEqual(_item("23:00 + 2 hours").time, datetime.time(1, 0))
        self.assertEqual(_item("1:00 - 2 hours").time, datetime.time(23, 0))

    def test_time_output(self):
        self.assertEqual(_line("11:40 - 10 minute").output, "11:30:00")

    def test_time_zone(self):
        item = _item("9:00 GMT-7")
        self.assertEqual(item.offset.offset, -420)
        self.assertEqual(item.utc_time, datetime.time(16, 0))
        self.assertEqual(_line("9:00 GMT-7").output, "09:00:00 GMT-7")

    def test_time_convert(self):
        result = _line("9:00 GMT-7 to CET")
        self.assertEqual(result.item.time, datetime.time(17, 0))
        self.assertEqual(result.item.utc_time, datetime.time(16, 0))
        self.assertEqual(result.output, "17:00:00 CET")

    def test_time_difference(self):
        self.assertEqual(_item("12:30 - 10:00").duration.total_seconds, 9000)

    def test_shift_time(self):
        self.assertEqual(shift_time(datetime.time(23, 59, 59), 2), datetime.time(0, 0, 1))

    def test_negating_time_fails(self):
        with self.assertRaises(EvalError):
            TimeItem(datetime.time(1, 0), get_default_config().default_timezone).unary(
                UnaryType.MINUS
            )


class TestDates(unittest.TestCase):
    def test_add_weeks(self):
        year = datetime.date.today().year
        self.assertEqual(_item("10 June + 3 weeks").date, datetime.date(year, 7, 1))

    def test_months_and_days(self):
        self.assertEqual(_item("April 1, 2019 - 3 months 5 days").date, datetime.date(2018, 12, 27))

    def test_add_month(self):
        self.assertEqual(_item("Feb 1, 2019 + 1 months").date, datetime.date(2019, 3, 1))

    def test_month_count_wraps_within_a_year(self):
        self.assertEqual(_item("jan 28, 2019 - 14 months").date, datetime.date(2018, 11, 28))
        self.assertEqual(_item("jan 28, 2019 - 14 months 10 days").date, datetime.date(2018, 11, 18))
        self.assertEqual(_item("jan 28, 2019 - 14 months 33 days").date, datetime.date(2018, 10, 25))

    def test_years(self):
        self.assertEqual(_item("12/02/1988 + 32 years").date, datetime.date(2020, 2, 12))
        self.assertEqual(_item("12/02/2020 - 32 years").date, datetime.date(1988, 2, 12))

    def test_month_end_clamps(self):
        self.assertEqual(_item("jan 31, 2019 + 1 month").date, datetime.date(2019, 2, 28))

    def test_date_difference_is_absolute(self):
        self.assertEqual(_item("1/1/2000 - 3/3/2021").duration.total_seconds, 7732 * 86400)
        self.assertEqual(_item("3/3/2021 - 1/1/2000").duration.total_seconds, 7732 * 86400)

    def test_date_range(self):
        self.assertEqual(_line("1/1/2000 to 3/3/2021").output, "7732 days")

    def test_date_output(self):
        self.assertEqual(_line("Feb 1, 2019 + 1 months").output, "1 March 2019")

    def test_shift_date_day_count_folds_into_years(self):
        self.assertEqual(
            shift_date(datetime.date(2020, 2, 12), DurationToken(seconds=11680 * 86400), -1),
            datetime.date(1988, 2, 12),
        )
        self.assertEqual(
            shift_date(datetime.date(2020, 2, 12), DurationToken(seconds=400 * 86400), 1),
            datetime.date(2021, 3, 19),
        )

    def test_subtract_many_days(self):
        self.assertEqual(_item("12/02/2020 - 11680 days").date, datetime.date(1988, 2, 12))
        self.assertEqual(_line("12/02/2020 - 11680 days").output, "12 February 1988")

    def test_date_plus_date_unsupported(self):
        config = get_default_config()
        today = DateItem(datetime.date(2020, 1, 1))
        with self.assertRaises(EvalError) as ctx:
            calculate_item(config, OperationType.ADD, today, today)
        self.assertEqual(ctx.exception.code, "UNSUPPORTED_OPERATION")

    def test_out_of_range_date_fails(self):
        config = get_default_config()
        date = DateItem(datetime.date(9999, 12, 1))
        with self.assertRaises(EvalError):
            calculate_item(
                config, OperationType.ADD, date, DurationItem(DurationToken(years=1))
            )


class TestDynamicTypes(unittest.TestCase):
    def test_mixed_levels(self):
        item = _item("1024mb + (1024kb * 24)")
        self.assertEqual(item.value, pytest.approx(1048))
        self.assertEqual(item.unit.index, 4)
        self.assertEqual(_line("1024mb + (1024kb * 24)").output, "1.048 MB")

    def test_same_level(self):
        item = _item("2 kg + 500 g")
        self.assertEqual(item.value, pytest.approx(2.5))
        self.assertEqual(item.unit.index, 2)

    def test_different_families_unsupported(self):
        result = Calculator().execute_line("2 kg + 3 km", Session())
        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "UNSUPPORTED_OPERATION")

    def test_scalar_multiplication(self):
        self.assertEqual(_item("3 * 2 GB").value, 6)


class TestPercentItem(unittest.TestCase):
    def test_get_number_against_value(self):
        self.assertEqual(PercentItem(10).get_number(NumberItem(200)), 20)

    def test_get_number_against_percent(self):
        self.assertEqual(PercentItem(10).get_number(PercentItem(50)), 10)

    def test_percent_plus_percent(self):
        self.assertEqual(_item("10% + 5%").value, 15)
