"""Rule handlers.

Each handler receives the tokens bound to its pattern fields and returns the
token payload that replaces the matched span, or raises ``RuleError`` when the
bindings do not make sense (an unknown unit word, a day out of range, ...).
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Mapping

from .calculus import convert_currency, shift_time
from .dynamic_types import convert_between
from .types import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    SECONDS_PER_DAY,
    DateToken,
    DurationToken,
    DynamicValueToken,
    MoneyToken,
    NumberToken,
    NumberType,
    PercentToken,
    RuleError,
    TimeOffset,
    TimeToken,
    Token,
    TokenType,
)

if TYPE_CHECKING:
    from .config import CalcConfig, LanguageConfig

Fields = Mapping[str, Token]

UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": SECONDS_PER_DAY,
    "week": 7 * SECONDS_PER_DAY,
    "month": DAYS_PER_MONTH * SECONDS_PER_DAY,
    "year": DAYS_PER_YEAR * SECONDS_PER_DAY,
}


def _amount(token: Token) -> float:
    token_type = token.token_type
    if isinstance(token_type, NumberToken):
        return token_type.value
    if isinstance(token_type, MoneyToken):
        return token_type.amount
    raise RuleError(f"{token.raw!r} is not an amount")


def _integer(token: Token) -> int:
    token_type = token.token_type
    if not isinstance(token_type, NumberToken) or not float(token_type.value).is_integer():
        raise RuleError(f"{token.raw!r} is not a whole number")
    return int(token_type.value)


def _unit_key(language: LanguageConfig, token: Token) -> str:
    unit = language.duration_units.get(token.raw.strip().lower())
    if unit is None:
        raise RuleError(f"{token.raw!r} is not a duration unit")
    return unit


def make_duration(amount: float, unit: str) -> DurationToken:
    """Build a duration from an amount of one unit.

    Whole months and years stay calendar units; fractional ones fold into seconds.
    """
    if unit in ("month", "year") and float(amount).is_integer():
        if unit == "month":
            return DurationToken(months=int(amount))
        return DurationToken(years=int(amount))
    return DurationToken(seconds=int(round(amount * UNIT_SECONDS[unit])))


def duration_parse(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    amount = fields["duration"].token_type.value
    return make_duration(amount, _unit_key(language, fields["unit"]))


def combine_durations(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    return fields["first"].token_type + fields["second"].token_type


def money_per_duration(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``$25/hour * 14 hours`` -> $350."""
    price = fields["price"].token_type
    unit_seconds = UNIT_SECONDS[_unit_key(language, fields["unit"])]
    duration = fields["duration"].token_type
    amount = price.amount * duration.total_seconds / unit_seconds
    return MoneyToken(amount, price.currency)


def date_parse(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    month = language.find_month(fields["month"].raw)
    day = _integer(fields["day"])
    year = _integer(fields["year"]) if "year" in fields else datetime.date.today().year
    try:
        return DateToken(datetime.date(year, month, day))
    except (TypeError, ValueError) as exc:
        raise RuleError(f"Invalid date: {exc}") from exc


def date_range(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    start = fields["start"].token_type.date
    end = fields["end"].token_type.date
    return DurationToken(seconds=abs((end - start).days) * SECONDS_PER_DAY)


def _target_offset(config: CalcConfig, fields: Fields) -> TimeOffset:
    zone = config.find_timezone(fields["timezone"].raw)
    if zone is None:
        raise RuleError(f"Unknown time zone {fields['timezone'].raw!r}")
    if "plus_hours" in fields:
        hours = fields["plus_hours"].token_type.value
        sign = "+"
    elif "minus_hours" in fields:
        hours = -fields["minus_hours"].token_type.value
        sign = "-"
    else:
        return zone
    if not -14 <= hours <= 14:
        raise RuleError(f"Offset {hours} hours is out of range")
    shown = fields["plus_hours" if sign == "+" else "minus_hours"].raw
    return TimeOffset(f"{zone.name}{sign}{shown}", zone.offset + int(round(hours * 60)))


def time_zone(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``9:00 GMT-7``: the clock time is read in the named zone."""
    time = fields["time"].token_type
    return TimeToken(time.time, _target_offset(config, fields))


def time_convert(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``9:00 GMT-7 to CET``: same instant, shown on the target zone's clock."""
    time = fields["time"].token_type
    target = _target_offset(config, fields)
    shift = (target.offset - time.offset.offset) * 60
    return TimeToken(shift_time(time.time, shift), target)


def convert_money(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    money = fields["money"].token_type
    target = config.find_currency(fields["currency"].raw)
    if target is None:
        raise RuleError(f"Unknown currency {fields['currency'].raw!r}")
    amount = convert_currency(config, money.amount, money.currency, target)
    if amount is None:
        raise RuleError(f"No rate between {money.currency.code} and {target.code}")
    return MoneyToken(amount, target)


def dynamic_type_convert(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    source = fields["source"].token_type
    family = config.dynamic_types[source.unit.group_name]
    target = family.find_level(fields["unit"].raw)
    if target is None:
        raise RuleError(f"{fields['unit'].raw!r} is not a {family.name} unit")
    try:
        value = convert_between(config.dynamic_types, source.value, source.unit, target)
    except ValueError as exc:
        raise RuleError(str(exc)) from exc
    return DynamicValueToken(value, target)


def _same_kind(amount: float, like: Token) -> TokenType:
    if isinstance(like.token_type, MoneyToken):
        return MoneyToken(amount, like.token_type.currency)
    return NumberToken(amount, NumberType.DECIMAL)


def percent_calculator(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``10% of 200`` -> 20."""
    percent = fields["p"].token_type.value
    number = fields["number"]
    return _same_kind(_amount(number) * percent / 100, number)


def find_numbers_percent(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``15 is what % of 100`` -> 15%."""
    part = _amount(fields["part"])
    total_token = fields["total"]
    total = _amount(total_token)
    part_type = fields["part"].token_type
    total_type = total_token.token_type
    if isinstance(part_type, MoneyToken) and isinstance(total_type, MoneyToken):
        total = convert_currency(config, total, total_type.currency, part_type.currency)
        if total is None:
            raise RuleError("No exchange rate for the total")
    if total == 0:
        raise RuleError("Total is zero")
    return PercentToken(part * 100 / total)


def find_total_from_percent(config: CalcConfig, language: LanguageConfig, fields: Fields) -> TokenType:
    """``20 is 10% of what`` -> 200."""
    number = fields["number_part"]
    percent = fields["percent_part"].token_type.value
    if percent == 0:
        raise RuleError("Percent is zero")
    return _same_kind(_amount(number) * 100 / percent, number)


RULE_HANDLERS = {
    "duration_parse": duration_parse,
    "combine_durations": combine_durations,
    "money_per_duration": money_per_duration,
    "date_parse": date_parse,
    "date_range": date_range,
    "time_zone": time_zone,
    "time_convert": time_convert,
    "convert_money": convert_money,
    "dynamic_type_convert": dynamic_type_convert,
    "percent_calculator": percent_calculator,
    "find_numbers_percent": find_numbers_percent,
    "find_total_from_percent": find_total_from_percent,
}
