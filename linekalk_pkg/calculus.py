"""Value calculus: typed values and how they combine.

Every value class answers ``calculate(config, on_left, other, op)``. The
evaluator asks the left operand first (``on_left=True``); when it returns
``None`` the right operand is asked with ``on_left=False``. ``None`` from
both means the operation is not supported for that pair of types.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from .dynamic_types import convert_between
from .formatter import (
    format_date,
    format_duration,
    format_money,
    format_number,
    format_percent,
    format_plain_number,
    format_time,
    trim_fraction,
)
from .types import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    SECONDS_PER_DAY,
    CurrencyInfo,
    DateToken,
    DurationToken,
    DynamicTypeLevel,
    DynamicValueToken,
    EvalError,
    MoneyToken,
    NumberToken,
    NumberType,
    OperationType,
    PercentToken,
    TimeOffset,
    TimeToken,
    TokenType,
    UnaryType,
)

if TYPE_CHECKING:
    from .config import CalcConfig, LanguageConfig


def apply_operation(op: OperationType, left: float, right: float) -> float | None:
    """Apply ``op`` to two floats; division by zero yields ``None``."""
    if op is OperationType.ADD:
        return left + right
    if op is OperationType.SUB:
        return left - right
    if op is OperationType.MUL:
        return left * right
    if right == 0:
        return None
    return left / right


def _ordered(mine, theirs, on_left: bool):
    return (mine, theirs) if on_left else (theirs, mine)


def convert_currency(
    config: CalcConfig, amount: float, source: CurrencyInfo, target: CurrencyInfo
) -> float | None:
    """Convert through the USD pivot: ``amount / rate(source) * rate(target)``."""
    if source.code == target.code:
        return amount
    source_rate = config.currency_rate(source)
    target_rate = config.currency_rate(target)
    if not source_rate or target_rate is None:
        return None
    return amount / source_rate * target_rate


def shift_time(time: datetime.time, seconds: int) -> datetime.time:
    """Move a clock time by ``seconds``, wrapping around midnight."""
    total = (time.hour * 3600 + time.minute * 60 + time.second + seconds) % SECONDS_PER_DAY
    return datetime.time(total // 3600, total % 3600 // 60, total % 60)


def shift_date(date: datetime.date, duration: DurationToken, sign: int) -> datetime.date:
    """Move a date by a duration.

    Years and months move the calendar first (the day of month is clamped),
    then the remaining days apply. A month count wraps within one year, and a
    day count folds into 30-day months when the duration also has a month or
    year part; otherwise whole 365-day blocks move by calendar years and the
    rest by exact days.

    Raises:
        ValueError: If the result falls outside the supported date range
    """
    if duration.total_seconds < 0:
        duration = -duration
        sign = -sign
    days = duration.seconds // SECONDS_PER_DAY
    try:
        if not duration.has_calendar_part:
            delta = relativedelta(years=days // DAYS_PER_YEAR, days=days % DAYS_PER_YEAR)
            return date + delta if sign > 0 else date - delta
        months = duration.months + days // DAYS_PER_MONTH
        days = days % DAYS_PER_MONTH
        delta = relativedelta(years=duration.years, months=months % 12, days=days)
        return date + delta if sign > 0 else date - delta
    except OverflowError as exc:
        raise ValueError(str(exc)) from exc


class DataItem:
    """Base class of evaluated values."""

    def calculate(
        self, config: CalcConfig, on_left: bool, other: DataItem, op: OperationType
    ) -> DataItem | None:
        raise NotImplementedError

    def unary(self, op: UnaryType) -> DataItem:
        raise NotImplementedError

    def get_underlying_number(self) -> float:
        raise NotImplementedError

    def get_number(self, other: DataItem) -> float:
        """Magnitude of this value when it modifies ``other``."""
        return self.get_underlying_number()

    def print(self, config: CalcConfig, language: LanguageConfig) -> str:
        raise NotImplementedError

    def type_name(self) -> str:
        raise NotImplementedError

    def as_token_type(self) -> TokenType:
        raise NotImplementedError


def _percent_operand(percent: PercentItem, base: DataItem, op: OperationType) -> float:
    # "200 + 10%" adds 10% of 200, "200 * 10%" multiplies by 0.1
    if op in (OperationType.ADD, OperationType.SUB):
        return percent.get_number(base)
    return percent.value / 100


@dataclass(frozen=True)
class NumberItem(DataItem):
    value: float
    kind: NumberType = NumberType.DECIMAL

    def calculate(self, config, on_left, other, op):
        if isinstance(other, NumberItem):
            left, right = _ordered(self.value, other.value, on_left)
            result = apply_operation(op, left, right)
            if result is None:
                return None
            both_integer = self.kind is NumberType.INTEGER and other.kind is NumberType.INTEGER
            kind = NumberType.INTEGER if both_integer and op is not OperationType.DIV else NumberType.DECIMAL
            return NumberItem(result, kind)
        if isinstance(other, PercentItem):
            left, right = _ordered(self.value, _percent_operand(other, self, op), on_left)
            result = apply_operation(op, left, right)
            return None if result is None else NumberItem(result)
        return None

    def unary(self, op):
        return NumberItem(-self.value, self.kind) if op is UnaryType.MINUS else self

    def get_underlying_number(self):
        return self.value

    def print(self, config, language):
        digits = 0 if self.kind is NumberType.INTEGER and float(self.value).is_integer() else config.number_decimal_digits
        return format_plain_number(self.value, config.format_options, digits)

    def type_name(self):
        return "NUMBER"

    def as_token_type(self):
        return NumberToken(self.value, self.kind)


@dataclass(frozen=True)
class MoneyItem(DataItem):
    amount: float
    currency: CurrencyInfo

    def calculate(self, config, on_left, other, op):
        if isinstance(other, NumberItem):
            operand = other.value
        elif isinstance(other, PercentItem):
            operand = _percent_operand(other, self, op)
        elif isinstance(other, DurationItem):
            operand = other.get_number(self)
        elif isinstance(other, MoneyItem):
            operand = convert_currency(config, other.amount, other.currency, self.currency)
            if operand is None:
                return None
            left, right = _ordered(self.amount, operand, on_left)
            result = apply_operation(op, left, right)
            if result is None:
                return None
            if op is OperationType.DIV:
                return NumberItem(result)
            return MoneyItem(result, self.currency)
        else:
            return None
        left, right = _ordered(self.amount, operand, on_left)
        result = apply_operation(op, left, right)
        return None if result is None else MoneyItem(result, self.currency)

    def unary(self, op):
        return MoneyItem(-self.amount, self.currency) if op is UnaryType.MINUS else self

    def get_underlying_number(self):
        return self.amount

    def print(self, config, language):
        return format_money(self.amount, self.currency, config.format_options)

    def type_name(self):
        return "MONEY"

    def as_token_type(self):
        return MoneyToken(self.amount, self.currency)


@dataclass(frozen=True)
class PercentItem(DataItem):
    value: float

    def get_number(self, other):
        if isinstance(other, PercentItem):
            return self.value
        return other.get_underlying_number() * self.value / 100

    def calculate(self, config, on_left, other, op):
        if isinstance(other, (PercentItem, NumberItem)):
            left, right = _ordered(self.value, other.get_underlying_number(), on_left)
            result = apply_operation(op, left, right)
            return None if result is None else PercentItem(result)
        return None

    def unary(self, op):
        return PercentItem(-self.value) if op is UnaryType.MINUS else self

    def get_underlying_number(self):
        return self.value

    def print(self, config, language):
        return format_percent(self.value, config.format_options, config.number_decimal_digits)

    def type_name(self):
        return "PERCENT"

    def as_token_type(self):
        return PercentToken(self.value)


def _scale_duration(duration: DurationToken, factor: float) -> DurationToken:
    parts = (duration.seconds * factor, duration.months * factor, duration.years * factor)
    if all(float(part).is_integer() for part in parts):
        return DurationToken(int(parts[0]), int(parts[1]), int(parts[2]))
    return DurationToken(seconds=int(round(duration.total_seconds * factor)))


@dataclass(frozen=True)
class DurationItem(DataItem):
    duration: DurationToken

    def calculate(self, config, on_left, other, op):
        if isinstance(other, DurationItem):
            left, right = _ordered(self.duration, other.duration, on_left)
            if op is OperationType.ADD:
                return DurationItem(left + right)
            if op is OperationType.SUB:
                return DurationItem(left + (-right))
            if op is OperationType.DIV:
                result = apply_operation(op, left.total_seconds, right.total_seconds)
                return None if result is None else NumberItem(result)
            return None
        if isinstance(other, NumberItem):
            if op in (OperationType.ADD, OperationType.SUB):
                # a bare number counts as seconds
                number = DurationToken(seconds=int(round(other.value)))
                left, right = _ordered(self.duration, number, on_left)
                return DurationItem(left + (right if op is OperationType.ADD else -right))
            if op is OperationType.MUL:
                return DurationItem(_scale_duration(self.duration, other.value))
            if op is OperationType.DIV and on_left and other.value != 0:
                return DurationItem(_scale_duration(self.duration, 1 / other.value))
        return None

    def unary(self, op):
        return DurationItem(-self.duration) if op is UnaryType.MINUS else self

    def get_underlying_number(self):
        return float(self.duration.total_seconds)

    def print(self, config, language):
        return format_duration(self.duration, language.duration_names)

    def type_name(self):
        return "DURATION"

    def as_token_type(self):
        return self.duration


@dataclass(frozen=True)
class DateItem(DataItem):
    date: datetime.date

    def calculate(self, config, on_left, other, op):
        if isinstance(other, DurationItem):
            if op is OperationType.ADD:
                sign = 1
            elif op is OperationType.SUB and on_left:
                sign = -1
            else:
                return None
            try:
                return DateItem(shift_date(self.date, other.duration, sign))
            except ValueError:
                return None
        if isinstance(other, DateItem) and op is OperationType.SUB:
            days = abs((self.date - other.date).days)
            return DurationItem(DurationToken(seconds=days * SECONDS_PER_DAY))
        return None

    def unary(self, op):
        if op is UnaryType.MINUS:
            raise EvalError("A date cannot be negated", "UNSUPPORTED_OPERATION")
        return self

    def get_underlying_number(self):
        return float(self.date.toordinal())

    def print(self, config, language):
        return format_date(self.date, language.month_names, language.date_format)

    def type_name(self):
        return "DATE"

    def as_token_type(self):
        return DateToken(self.date)


@dataclass(frozen=True)
class TimeItem(DataItem):
    time: datetime.time
    offset: TimeOffset

    @property
    def utc_time(self) -> datetime.time:
        return shift_time(self.time, -self.offset.offset * 60)

    def calculate(self, config, on_left, other, op):
        if isinstance(other, DurationItem):
            seconds = other.duration.total_seconds
            if op is OperationType.ADD:
                return TimeItem(shift_time(self.time, seconds), self.offset)
            if op is OperationType.SUB and on_left:
                return TimeItem(shift_time(self.time, -seconds), self.offset)
            return None
        if isinstance(other, TimeItem) and op is OperationType.SUB:
            difference = self.get_utc_seconds() - other.get_utc_seconds()
            return DurationItem(DurationToken(seconds=abs(difference)))
        return None

    def get_utc_seconds(self) -> int:
        utc = self.utc_time
        return utc.hour * 3600 + utc.minute * 60 + utc.second

    def unary(self, op):
        if op is UnaryType.MINUS:
            raise EvalError("A time cannot be negated", "UNSUPPORTED_OPERATION")
        return self

    def get_underlying_number(self):
        return float(self.time.hour * 3600 + self.time.minute * 60 + self.time.second)

    def print(self, config, language):
        return format_time(self.time, self.offset, config.default_timezone)

    def type_name(self):
        return "TIME"

    def as_token_type(self):
        return TimeToken(self.time, self.offset)


@dataclass(frozen=True)
class DynamicTypeItem(DataItem):
    value: float
    unit: DynamicTypeLevel

    def calculate(self, config, on_left, other, op):
        if isinstance(other, DynamicTypeItem):
            if other.unit.group_name != self.unit.group_name or op is OperationType.MUL:
                return None
            lower = self.unit if self.unit.index <= other.unit.index else other.unit
            left_unit = self.unit if on_left else other.unit
            try:
                mine = convert_between(config.dynamic_types, self.value, self.unit, lower)
                theirs = convert_between(config.dynamic_types, other.value, other.unit, lower)
                left, right = _ordered(mine, theirs, on_left)
                result = apply_operation(op, left, right)
                if result is None:
                    return None
                if op is OperationType.DIV:
                    return NumberItem(result)
                converted = convert_between(config.dynamic_types, result, lower, left_unit)
            except ValueError:
                return None
            return DynamicTypeItem(converted, left_unit)
        if isinstance(other, NumberItem):
            operand = other.value
        elif isinstance(other, PercentItem):
            operand = _percent_operand(other, self, op)
        else:
            return None
        left, right = _ordered(self.value, operand, on_left)
        result = apply_operation(op, left, right)
        return None if result is None else DynamicTypeItem(result, self.unit)

    def unary(self, op):
        return DynamicTypeItem(-self.value, self.unit) if op is UnaryType.MINUS else self

    def get_underlying_number(self):
        return self.value

    def print(self, config, language):
        options = config.format_options
        unit = self.unit
        digits = unit.decimal_digits if unit.decimal_digits is not None else config.number_decimal_digits
        text = format_number(
            self.value,
            options.thousand_separator,
            options.decimal_separator,
            digits,
            True if unit.remove_fraction_if_zero is None else unit.remove_fraction_if_zero,
            options.use_fraction_rounding if unit.use_fraction_rounding is None else unit.use_fraction_rounding,
        )
        if unit.decimal_digits is None:
            text = trim_fraction(text, options.decimal_separator)
        return unit.format.format(value=text)

    def type_name(self):
        return "DYNAMIC_TYPE"

    def as_token_type(self):
        return DynamicValueToken(self.value, self.unit)


def item_from_token(token_type: TokenType) -> DataItem:
    """Wrap a value token payload in its DataItem.

    Raises:
        EvalError: If the payload is not a value (text, operator, variable)
    """
    if isinstance(token_type, NumberToken):
        return NumberItem(token_type.value, token_type.kind)
    if isinstance(token_type, MoneyToken):
        return MoneyItem(token_type.amount, token_type.currency)
    if isinstance(token_type, PercentToken):
        return PercentItem(token_type.value)
    if isinstance(token_type, DurationToken):
        return DurationItem(token_type)
    if isinstance(token_type, DateToken):
        return DateItem(token_type.date)
    if isinstance(token_type, TimeToken):
        return TimeItem(token_type.time, token_type.offset)
    if isinstance(token_type, DynamicValueToken):
        return DynamicTypeItem(token_type.value, token_type.unit)
    raise EvalError(f"Not a value: {token_type!r}")
