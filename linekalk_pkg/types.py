"""Type definitions: tokens, shared tables, exceptions and result dataclasses."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


class NumberType(Enum):
    INTEGER = "integer"
    DECIMAL = "decimal"


class OperationType(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class UnaryType(Enum):
    PLUS = "+"
    MINUS = "-"


class UiTokenKind(Enum):
    NUMBER = "number"
    SYMBOL1 = "symbol1"
    SYMBOL2 = "symbol2"
    DATE_TIME = "date_time"
    OPERATOR = "operator"
    TEXT = "text"
    COMMENT = "comment"
    VARIABLE_DEFINITION = "variable_definition"
    VARIABLE_USE = "variable_use"


@dataclass(frozen=True)
class UiToken:
    """Highlight span for a line, in character offsets."""

    start: int
    end: int
    kind: UiTokenKind

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "kind": self.kind.value}


@dataclass(frozen=True)
class CurrencyInfo:
    """Currency metadata shared by every money value in that currency."""

    code: str
    symbol: str
    decimal_digits: int = 2
    symbol_on_left: bool = True
    space_between_amount_and_symbol: bool = False


@dataclass(frozen=True)
class TimeOffset:
    """Named UTC offset in minutes."""

    name: str
    offset: int


@dataclass(frozen=True)
class DynamicTypeLevel:
    """One unit level of a dynamic unit family (e.g. MB in memory)."""

    group_name: str
    index: int
    format: str
    parse: tuple[str, ...]
    names: tuple[str, ...]
    upgrade_code: str | None = None
    downgrade_code: str | None = None
    decimal_digits: int | None = None
    use_fraction_rounding: bool | None = None
    remove_fraction_if_zero: bool | None = None


@dataclass(frozen=True)
class DynamicTypeDef:
    """A unit family: an ordered ladder of levels."""

    name: str
    levels: tuple[DynamicTypeLevel, ...]

    def level(self, index: int) -> DynamicTypeLevel:
        for level in self.levels:
            if level.index == index:
                return level
        raise KeyError(f"{self.name} has no level {index}")

    def find_level(self, name: str) -> DynamicTypeLevel | None:
        wanted = name.strip().lower()
        for level in self.levels:
            if wanted in (n.lower() for n in level.names):
                return level
        return None


# Token payloads. Each token carries exactly one of these.


@dataclass(frozen=True)
class NumberToken:
    value: float
    kind: NumberType = NumberType.DECIMAL


@dataclass(frozen=True)
class MoneyToken:
    amount: float
    currency: CurrencyInfo


@dataclass(frozen=True)
class PercentToken:
    value: float


@dataclass(frozen=True)
class DurationToken:
    """A span of time.

    ``seconds`` holds the clock part (weeks, days, hours, minutes, seconds).
    ``months`` and ``years`` keep the calendar part as written so date
    arithmetic can move by calendar months and years.
    """

    seconds: int = 0
    months: int = 0
    years: int = 0

    @property
    def total_seconds(self) -> int:
        return (
            self.seconds
            + self.months * DAYS_PER_MONTH * SECONDS_PER_DAY
            + self.years * DAYS_PER_YEAR * SECONDS_PER_DAY
        )

    @property
    def has_calendar_part(self) -> bool:
        return self.months != 0 or self.years != 0

    def __add__(self, other: DurationToken) -> DurationToken:
        return DurationToken(
            self.seconds + other.seconds,
            self.months + other.months,
            self.years + other.years,
        )

    def __neg__(self) -> DurationToken:
        return DurationToken(-self.seconds, -self.months, -self.years)


@dataclass(frozen=True)
class DateToken:
    date: datetime.date


@dataclass(frozen=True)
class TimeToken:
    time: datetime.time
    offset: TimeOffset


@dataclass(frozen=True)
class DynamicValueToken:
    value: float
    unit: DynamicTypeLevel


@dataclass(frozen=True)
class TextToken:
    word: str


@dataclass(frozen=True)
class OperatorToken:
    char: str


@dataclass(frozen=True)
class VariableToken:
    name: str


TokenType = Union[
    NumberToken,
    MoneyToken,
    PercentToken,
    DurationToken,
    DateToken,
    TimeToken,
    DynamicValueToken,
    TextToken,
    OperatorToken,
    VariableToken,
]

VALUE_TOKEN_TYPES = (
    NumberToken,
    MoneyToken,
    PercentToken,
    DurationToken,
    DateToken,
    TimeToken,
    DynamicValueToken,
)


@dataclass
class Token:
    """A lexical unit of one line."""

    start: int
    end: int
    raw: str
    token_type: TokenType
    ui_hint: UiTokenKind | None = None

    @property
    def is_value(self) -> bool:
        return isinstance(self.token_type, VALUE_TOKEN_TYPES)

    def is_operator(self, *chars: str) -> bool:
        if not isinstance(self.token_type, OperatorToken):
            return False
        return not chars or self.token_type.char in chars

    def __repr__(self) -> str:
        return f"Token({self.start}, {self.end}, {self.token_type!r})"


@dataclass
class LineResult:
    """Result of evaluating one line."""

    ok: bool
    line: int
    output: str | None = None
    item: Any = None
    ast: Any = None
    ui_tokens: list[UiToken] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "line": self.line}
        if self.output is not None:
            result_dict["output"] = self.output
        if self.item is not None:
            result_dict["type"] = self.item.type_name()
        if self.ui_tokens:
            result_dict["ui_tokens"] = [ui.to_dict() for ui in self.ui_tokens]
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return (
                f"LineResult(ok=False, line={self.line}, error={self.error!r}, "
                f"code={self.error_code!r})"
            )
        return f"LineResult(ok=True, line={self.line}, output={self.output!r})"


@dataclass
class ExecuteResult:
    """Result of evaluating a block of lines.

    ``lines`` has one entry per source line; blank lines hold ``None``.
    """

    status: bool
    lines: list[LineResult | None] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status and all(line is None or line.ok for line in self.lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status,
            "lines": [None if line is None else line.to_dict() for line in self.lines],
        }

    def __repr__(self) -> str:
        """Return string representation of the result."""
        return f"ExecuteResult(status={self.status}, lines={self.lines!r})"


class CalculatorError(Exception):
    """Base class for line-scoped calculator errors."""

    default_code = "ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class LexError(CalculatorError):
    """Raised when a regex candidate cannot be turned into a token."""

    default_code = "LEX_ERROR"


class RuleError(CalculatorError):
    """Raised by a rule handler that rejects its bindings."""

    default_code = "RULE_ERROR"


class ParseError(CalculatorError):
    """Raised when the token stream does not form an expression."""

    default_code = "PARSE_ERROR"


class EvalError(CalculatorError):
    """Raised when an expression cannot be evaluated."""

    default_code = "EVAL_ERROR"


class ValidationError(CalculatorError):
    """Raised when input validation fails."""

    default_code = "VALIDATION_ERROR"
