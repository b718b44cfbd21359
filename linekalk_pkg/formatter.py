"""Locale-aware rendering of numbers, money, durations, dates and times."""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass
from typing import Mapping, Sequence

from .types import (
    SECONDS_PER_DAY,
    CurrencyInfo,
    DurationToken,
    TimeOffset,
)


@dataclass(frozen=True)
class FormatOptions:
    """Output options shared by every line of a configuration."""

    thousand_separator: str = "."
    decimal_separator: str = ","
    remove_fraction_if_zero: bool = False
    use_fraction_rounding: bool = True


def _group_thousands(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.append(digits[-3:])
        digits = digits[:-3]
    groups.append(digits)
    return separator.join(reversed(groups))


def format_number(
    number: float,
    thousand_separator: str = ".",
    decimal_separator: str = ",",
    decimal_digits: int = 2,
    remove_fraction_if_zero: bool = False,
    use_fraction_rounding: bool = True,
) -> str:
    """Format a number with grouping and a fixed number of fraction digits.

    Args:
        number: Value to format
        thousand_separator: Inserted between groups of three integer digits
        decimal_separator: Placed between the integer and fraction parts
        decimal_digits: Number of fraction digits to print
        remove_fraction_if_zero: Drop the fraction when all its digits are zero
        use_fraction_rounding: Round to ``decimal_digits``; truncate when False

    Returns:
        Formatted string, e.g. ``1.234,06`` for 1234.05555 with the defaults
    """
    if math.isnan(number) or math.isinf(number):
        return str(number)
    digits = max(int(decimal_digits), 0)
    magnitude = abs(number)
    if not use_fraction_rounding:
        factor = 10**digits
        magnitude = math.trunc(magnitude * factor) / factor
    text = f"{magnitude:.{digits}f}"
    integer_part, _, fraction_part = text.partition(".")
    if remove_fraction_if_zero and fraction_part.strip("0") == "":
        fraction_part = ""
    result = _group_thousands(integer_part, thousand_separator)
    if fraction_part:
        result = f"{result}{decimal_separator}{fraction_part}"
    if number < 0 and text.strip("0.") != "":
        result = "-" + result
    return result


def trim_fraction(text: str, decimal_separator: str) -> str:
    """Drop trailing zeros of the fraction part, and the separator if nothing remains."""
    if not decimal_separator or decimal_separator not in text:
        return text
    integer_part, _, fraction_part = text.rpartition(decimal_separator)
    fraction_part = fraction_part.rstrip("0")
    if not fraction_part:
        return integer_part
    return f"{integer_part}{decimal_separator}{fraction_part}"


def format_plain_number(number: float, options: FormatOptions, decimal_digits: int) -> str:
    """Format a bare number: up to ``decimal_digits`` digits, trailing zeros trimmed."""
    text = format_number(
        number,
        options.thousand_separator,
        options.decimal_separator,
        decimal_digits,
        True,
        options.use_fraction_rounding,
    )
    return trim_fraction(text, options.decimal_separator)


def format_money(amount: float, currency: CurrencyInfo, options: FormatOptions) -> str:
    """Format an amount with its currency symbol on the configured side."""
    text = format_number(
        amount,
        options.thousand_separator,
        options.decimal_separator,
        currency.decimal_digits,
        options.remove_fraction_if_zero,
        options.use_fraction_rounding,
    )
    space = " " if currency.space_between_amount_and_symbol else ""
    if currency.symbol_on_left:
        return f"{currency.symbol}{space}{text}"
    return f"{text}{space}{currency.symbol}"


def format_percent(value: float, options: FormatOptions, decimal_digits: int) -> str:
    return f"{format_plain_number(value, options, decimal_digits)}%"


def format_duration(
    duration: DurationToken, names: Mapping[str, Sequence[str]]
) -> str:
    """Render a duration with the language's unit words.

    ``names`` maps ``year``/``month``/``day``/``hour``/``minute``/``second``
    to ``(singular, plural)``.
    """
    sign = "-" if duration.total_seconds < 0 else ""
    seconds = abs(duration.seconds)
    days, seconds = divmod(seconds, SECONDS_PER_DAY)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    parts = [
        ("year", abs(duration.years)),
        ("month", abs(duration.months)),
        ("day", days),
        ("hour", hours),
        ("minute", minutes),
        ("second", seconds),
    ]
    words = []
    for unit, amount in parts:
        if not amount:
            continue
        singular, plural = names.get(unit, (unit, unit + "s"))
        words.append(f"{amount} {singular if amount == 1 else plural}")
    if not words:
        return f"0 {names.get('second', ('second', 'seconds'))[1]}"
    return sign + " ".join(words)


def format_date(date: datetime.date, month_names: Sequence[str], date_format: str) -> str:
    """Render a date; ``month_names[0]`` is January."""
    month = month_names[date.month - 1].capitalize() if month_names else str(date.month)
    return date_format.format(day=date.day, month=month, year=date.year)


def format_time(
    time: datetime.time, offset: TimeOffset, default_offset: TimeOffset | None = None
) -> str:
    """Render ``HH:MM:SS`` followed by the zone name unless it is the default zone."""
    text = time.strftime("%H:%M:%S")
    if default_offset is not None and offset == default_offset:
        return text
    return f"{text} {offset.name}"
