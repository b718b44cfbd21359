"""Centralized configuration for linekalk.

This module defines:
- Output formatting defaults (separators, fraction handling)
- Input and rule-engine limits
- Cache sizes for unit formula compilation
- Allowed SymPy names and transformations for unit formulas
- Regex templates for the tokenizers
- The immutable ``CalcConfig`` bundle built from the resource tables

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with LINEKALK_)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, standard_transformations

from .formatter import FormatOptions
from .logging_config import get_logger
from .types import CurrencyInfo, DynamicTypeDef, DynamicTypeLevel, TimeOffset

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("linekalk")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

logger = get_logger("config")

# Language and output formatting
DEFAULT_LANGUAGE = os.getenv("LINEKALK_DEFAULT_LANGUAGE", "en")
THOUSAND_SEPARATOR = os.getenv("LINEKALK_THOUSAND_SEPARATOR", ".")
DECIMAL_SEPARATOR = os.getenv("LINEKALK_DECIMAL_SEPARATOR", ",")
REMOVE_FRACTION_IF_ZERO = (
    os.getenv("LINEKALK_REMOVE_FRACTION_IF_ZERO", "false").lower() == "true"
)
USE_FRACTION_ROUNDING = (
    os.getenv("LINEKALK_USE_FRACTION_ROUNDING", "true").lower() == "true"
)
NUMBER_DECIMAL_DIGITS = int(
    os.getenv("LINEKALK_NUMBER_DECIMAL_DIGITS", "3")
)  # digits printed for plain numbers and percents
DEFAULT_TIMEZONE = os.getenv("LINEKALK_DEFAULT_TIMEZONE", "UTC")

# Input validation and rule engine limits
MAX_INPUT_LENGTH = int(os.getenv("LINEKALK_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_RULE_ITERATIONS = int(
    os.getenv("LINEKALK_MAX_RULE_ITERATIONS", "1000")
)  # rewrites per line

# Cache configuration
CACHE_SIZE_FORMULA = int(os.getenv("LINEKALK_CACHE_SIZE_FORMULA", "256"))

# Names a unit conversion formula may use besides ``value``
ALLOWED_FORMULA_NAMES = {
    "floor": sp.floor,
    "ceiling": sp.ceiling,
    "Abs": sp.Abs,
    "abs": sp.Abs,
    "sqrt": sp.sqrt,
    "Rational": sp.Rational,
}

TRANSFORMATIONS = standard_transformations + (convert_xor,)

# Magnitude suffixes accepted after a number or price
NOTATION_MULTIPLIERS = {
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "G": 1e9,
    "T": 1e12,
    "P": 1e15,
    "Z": 1e18,
    "Y": 1e21,
}

# Regex templates; ``{number}`` is filled with the locale number pattern
NOTATION_PATTERN = r"(?P<NOTATION>[kKMGTPZY](?![^\W\d_]))"
COMMENT_PATTERNS = (r"#.*$",)
MONEY_PATTERNS = (
    r"(?P<CURRENCY>{symbols})\s*(?P<PRICE>{number})" + NOTATION_PATTERN + "?",
    r"(?P<PRICE>{number})" + NOTATION_PATTERN + r"?\s*(?P<CURRENCY>{symbols}|[^\W\d_]+)",
)
PERCENT_PATTERNS = (
    r"(?P<NUMBER>{number})\s*%",
    r"%\s*(?P<NUMBER>{number})",
)
DATE_PATTERNS = (
    r"(?<!\d)(?P<DAY>\d{{1,2}})[/.](?P<MONTH>\d{{1,2}})[/.](?P<YEAR>\d{{4}})(?!\d)",
    r"(?<!\d)(?P<YEAR>\d{{4}})-(?P<MONTH>\d{{1,2}})-(?P<DAY>\d{{1,2}})(?!\d)",
)
TIME_PATTERNS = (
    r"(?<![\d:])(?P<HOUR>\d{{1,2}}):(?P<MINUTE>\d{{2}})(?::(?P<SECOND>\d{{2}}))?"
    r"(?:\s*(?P<MERIDIEM>[aApP][mM])(?![^\W\d_]))?",
)
DYNAMIC_TYPE_TEMPLATE = r"(?P<NUMBER>{number})\s*(?P<UNIT>{units})(?![^\W\d_])"
NUMBER_PATTERNS = (
    r"0[xX](?P<HEX>[0-9a-fA-F]+)",
    r"0[bB](?P<BIN>[01]+)(?![\w])",
    r"0[oO](?P<OCT>[0-7]+)",
    r"(?P<NUMBER>{number})" + NOTATION_PATTERN + "?",
)
TEXT_PATTERNS = (r"[^\W\d_]\w*",)
OPERATOR_PATTERNS = (r"[^\s\w]",)

# Rule pattern syntax: {TYPE:name} fields, literal words, literal operators
RULE_PATTERN_REGEX = re.compile(
    r"\{(?P<TYPE>[A-Z_]+):(?P<NAME>[^{}]+)\}|(?P<WORD>[^\W\d_]\w*)|(?P<OPERATOR>[^\s\w])"
)

# Operators the syntax parser understands
GRAMMAR_OPERATORS = frozenset("+-*/()=")


def number_pattern(thousand_separator: str, decimal_separator: str) -> str:
    """Digit runs joined by either locale separator, with an optional exponent."""
    exponent = r"(?:[eE][+-]?\d+)?"
    separators = "".join(
        re.escape(sep) for sep in (thousand_separator, decimal_separator) if sep
    )
    if not separators:
        return r"\d+" + exponent
    return rf"\d+(?:[{separators}]\d+)*" + exponent


@dataclass(frozen=True, eq=False)
class LanguageConfig:
    """Per-language grammar: month names, word groups, aliases and rules."""

    code: str
    long_months: dict[str, int]
    short_months: dict[str, int]
    word_groups: dict[str, frozenset[str]]
    aliases: dict[str, str]
    constants: dict[str, str]
    duration_units: dict[str, str]
    duration_names: dict[str, tuple[str, str]]
    date_format: str
    rules: tuple

    def find_month(self, word: str) -> int | None:
        word = word.lower()
        return self.long_months.get(word) or self.short_months.get(word)

    def in_group(self, group: str, word: str) -> bool:
        return word.lower() in self.word_groups.get(group, frozenset())

    @property
    def month_names(self) -> list[str]:
        by_number = {number: name for name, number in self.long_months.items()}
        return [by_number.get(number, str(number)) for number in range(1, 13)]


@dataclass(frozen=True, eq=False)
class CalcConfig:
    """Everything a calculation needs besides the session. Never mutated."""

    format_options: FormatOptions
    currencies: dict[str, CurrencyInfo]
    currency_aliases: dict[str, str]
    currency_rates: dict[str, float]
    timezones: dict[str, int]
    default_timezone: TimeOffset
    dynamic_types: dict[str, DynamicTypeDef]
    languages: dict[str, LanguageConfig]
    default_language: str
    number_decimal_digits: int
    max_rule_iterations: int
    max_input_length: int
    pattern_groups: tuple

    def get_language(self, code: str | None) -> LanguageConfig:
        """Return the language tables, falling back to the default language."""
        if code and code in self.languages:
            return self.languages[code]
        if code:
            logger.warning(
                "Unknown language %r, using %r", code, self.default_language
            )
        return self.languages[self.default_language]

    def find_currency(self, text: str) -> CurrencyInfo | None:
        key = text.strip().lower()
        code = self.currency_aliases.get(key, key)
        return self.currencies.get(code)

    def currency_rate(self, currency: CurrencyInfo) -> float | None:
        return self.currency_rates.get(currency.code)

    def find_timezone(self, name: str) -> TimeOffset | None:
        key = name.strip().upper()
        if key not in self.timezones:
            return None
        return TimeOffset(key, self.timezones[key])


def _build_currencies(table: Mapping[str, Mapping[str, Any]]) -> dict[str, CurrencyInfo]:
    currencies = {}
    for code, data in table.items():
        code = code.lower()
        currencies[code] = CurrencyInfo(
            code=code,
            symbol=data.get("symbol", code.upper()),
            decimal_digits=int(data.get("decimal_digits", 2)),
            symbol_on_left=bool(data.get("symbol_on_left", True)),
            space_between_amount_and_symbol=bool(
                data.get("space_between_amount_and_symbol", False)
            ),
        )
    return currencies


def _build_dynamic_types(table: list[Mapping[str, Any]]) -> dict[str, DynamicTypeDef]:
    from .dynamic_types import compile_formula

    families = {}
    for family in table:
        name = family["name"]
        levels = []
        for data in sorted(family["levels"], key=lambda level: level["index"]):
            level = DynamicTypeLevel(
                group_name=name,
                index=int(data["index"]),
                format=data["format"],
                parse=tuple(data.get("parse", ())),
                names=tuple(data.get("names", ())),
                upgrade_code=data.get("upgrade_code"),
                downgrade_code=data.get("downgrade_code"),
                decimal_digits=data.get("decimal_digits"),
                use_fraction_rounding=data.get("use_fraction_rounding"),
                remove_fraction_if_zero=data.get("remove_fraction_if_zero"),
            )
            # Compile now so a broken table fails at load time
            for code in (level.upgrade_code, level.downgrade_code):
                if code:
                    compile_formula(code)
            levels.append(level)
        families[name] = DynamicTypeDef(name=name, levels=tuple(levels))
    return families


def _build_language(code: str, data: Mapping[str, Any]) -> LanguageConfig:
    from .rule_tokenizer import compile_rules
    from .rules import RULE_HANDLERS

    lower = {key.lower(): value for key, value in data.get("duration_units", {}).items()}
    return LanguageConfig(
        code=code,
        long_months={k.lower(): int(v) for k, v in data.get("long_months", {}).items()},
        short_months={k.lower(): int(v) for k, v in data.get("short_months", {}).items()},
        word_groups={
            group: frozenset(word.lower() for word in words)
            for group, words in data.get("word_groups", {}).items()
        },
        aliases={k.lower(): v for k, v in data.get("aliases", {}).items()},
        constants={k.lower(): v for k, v in data.get("constants", {}).items()},
        duration_units=lower,
        duration_names={
            unit: (names[0], names[1]) for unit, names in data.get("duration_names", {}).items()
        },
        date_format=data.get("date_format", "{day} {month} {year}"),
        rules=compile_rules(data.get("rules", {}), RULE_HANDLERS),
    )


def build_config(
    tables: Mapping[str, Any] | None = None,
    *,
    default_language: str | None = None,
    thousand_separator: str | None = None,
    decimal_separator: str | None = None,
    remove_fraction_if_zero: bool | None = None,
    use_fraction_rounding: bool | None = None,
    number_decimal_digits: int | None = None,
    default_timezone: str | None = None,
    max_rule_iterations: int | None = None,
    max_input_length: int | None = None,
) -> CalcConfig:
    """Compile resource tables into an immutable configuration.

    Args:
        tables: Already-deserialised resource tables (defaults to ``resources.DEFAULT_TABLES``)
        **overrides: Values that replace the module-level defaults

    Returns:
        CalcConfig shared by every calculation that uses it

    Raises:
        ValueError: If a table is inconsistent (unknown rule, bad formula, missing language)
    """
    from .regex_tokenizer import build_pattern_groups
    from .resources import DEFAULT_TABLES

    tables = DEFAULT_TABLES if tables is None else tables
    options = FormatOptions(
        thousand_separator=THOUSAND_SEPARATOR if thousand_separator is None else thousand_separator,
        decimal_separator=DECIMAL_SEPARATOR if decimal_separator is None else decimal_separator,
        remove_fraction_if_zero=(
            REMOVE_FRACTION_IF_ZERO if remove_fraction_if_zero is None else remove_fraction_if_zero
        ),
        use_fraction_rounding=(
            USE_FRACTION_ROUNDING if use_fraction_rounding is None else use_fraction_rounding
        ),
    )
    if options.thousand_separator == options.decimal_separator:
        raise ValueError("Thousand and decimal separators must differ")

    currencies = _build_currencies(tables.get("currencies", {}))
    aliases = {alias.lower(): code.lower() for alias, code in tables.get("currency_aliases", {}).items()}
    for code, currency in currencies.items():
        aliases.setdefault(currency.symbol.lower(), code)
    rates = {code.lower(): float(rate) for code, rate in tables.get("currency_rates", {}).items()}
    timezones = {name.upper(): int(offset) for name, offset in tables.get("timezones", {}).items()}
    dynamic_types = _build_dynamic_types(tables.get("dynamic_types", []))
    languages = {
        code: _build_language(code, data) for code, data in tables.get("languages", {}).items()
    }

    language = default_language or DEFAULT_LANGUAGE
    if language not in languages:
        raise ValueError(f"Default language {language!r} is not defined")
    zone_name = (default_timezone or DEFAULT_TIMEZONE).upper()
    if zone_name not in timezones:
        raise ValueError(f"Default timezone {zone_name!r} is not defined")

    symbols = set(aliases) | {currency.symbol.lower() for currency in currencies.values()}
    pattern_groups = build_pattern_groups(
        options.thousand_separator,
        options.decimal_separator,
        [symbol for symbol in symbols if not symbol.isalpha()],
        dynamic_types,
    )
    logger.debug(
        "Built configuration: %d currencies, %d languages, %d unit families",
        len(currencies),
        len(languages),
        len(dynamic_types),
    )
    return CalcConfig(
        format_options=options,
        currencies=currencies,
        currency_aliases=aliases,
        currency_rates=rates,
        timezones=timezones,
        default_timezone=TimeOffset(zone_name, timezones[zone_name]),
        dynamic_types=dynamic_types,
        languages=languages,
        default_language=language,
        number_decimal_digits=NUMBER_DECIMAL_DIGITS if number_decimal_digits is None else number_decimal_digits,
        max_rule_iterations=MAX_RULE_ITERATIONS if max_rule_iterations is None else max_rule_iterations,
        max_input_length=MAX_INPUT_LENGTH if max_input_length is None else max_input_length,
        pattern_groups=pattern_groups,
    )


@lru_cache(maxsize=1)
def get_default_config() -> CalcConfig:
    """Return the shared configuration built from the default tables."""
    return build_config()
