"""Regex tokenizer: the first stage of the pipeline.

Pattern groups run in priority order over the whole line. A candidate is
accepted only if its span does not overlap a token accepted earlier, so a
money literal such as ``$25`` wins over the bare number inside it.
"""

from __future__ import annotations

import datetime
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Sequence

from .config import (
    COMMENT_PATTERNS,
    DATE_PATTERNS,
    DYNAMIC_TYPE_TEMPLATE,
    MONEY_PATTERNS,
    NOTATION_MULTIPLIERS,
    NUMBER_PATTERNS,
    OPERATOR_PATTERNS,
    PERCENT_PATTERNS,
    TEXT_PATTERNS,
    TIME_PATTERNS,
    number_pattern,
)
from .logging_config import get_logger
from .types import (
    DateToken,
    DynamicTypeDef,
    DynamicTypeLevel,
    DynamicValueToken,
    LexError,
    MoneyToken,
    NumberToken,
    NumberType,
    OperatorToken,
    PercentToken,
    TextToken,
    TimeToken,
    Token,
    UiToken,
    UiTokenKind,
)

if TYPE_CHECKING:
    from .config import CalcConfig, LanguageConfig

logger = get_logger("regex_tokenizer")


@dataclass(frozen=True)
class PatternGroup:
    """Compiled patterns of one group; ``levels`` pairs each dynamic pattern with its unit."""

    name: str
    patterns: tuple[re.Pattern, ...]
    levels: tuple[DynamicTypeLevel, ...] = ()


def build_pattern_groups(
    thousand_separator: str,
    decimal_separator: str,
    currency_symbols: Iterable[str],
    dynamic_types: Mapping[str, DynamicTypeDef],
) -> tuple[PatternGroup, ...]:
    """Compile the pattern groups for one pair of locale separators."""
    number = number_pattern(thousand_separator, decimal_separator)
    ordered = sorted(set(currency_symbols), key=len, reverse=True)
    symbols = "(?i:" + "|".join(re.escape(symbol) for symbol in ordered) + ")"

    def compile_all(templates: Sequence[str], flags: int = 0) -> tuple[re.Pattern, ...]:
        return tuple(
            re.compile(template.format(number=number, symbols=symbols), flags)
            for template in templates
        )

    money_templates = MONEY_PATTERNS
    if not ordered:
        money_templates = (MONEY_PATTERNS[1].replace("{symbols}|", ""),)

    dynamic_patterns = []
    dynamic_levels = []
    for family in dynamic_types.values():
        for level in family.levels:
            if not level.parse:
                continue
            units = "|".join(level.parse)
            dynamic_patterns.append(
                re.compile(DYNAMIC_TYPE_TEMPLATE.format(number=number, units=units))
            )
            dynamic_levels.append(level)

    return (
        PatternGroup("comment", compile_all(COMMENT_PATTERNS)),
        PatternGroup("money", compile_all(money_templates)),
        PatternGroup("percent", compile_all(PERCENT_PATTERNS)),
        PatternGroup("date", compile_all(DATE_PATTERNS)),
        PatternGroup("time", compile_all(TIME_PATTERNS)),
        PatternGroup("dynamic_type", tuple(dynamic_patterns), tuple(dynamic_levels)),
        PatternGroup("number", compile_all(NUMBER_PATTERNS)),
        PatternGroup("text", compile_all(TEXT_PATTERNS)),
        PatternGroup("operator", compile_all(OPERATOR_PATTERNS)),
    )


def parse_locale_number(text: str, thousand_separator: str, decimal_separator: str) -> float:
    """Parse digits written with the locale separators.

    Raises:
        LexError: If the digits do not form a number once separators are normalised
    """
    cleaned = text.replace(thousand_separator, "") if thousand_separator else text
    if decimal_separator:
        cleaned = cleaned.replace(decimal_separator, ".")
    try:
        number = float(cleaned)
    except ValueError as exc:
        raise LexError(f"Malformed number {text!r}") from exc
    if not math.isfinite(number):
        raise LexError(f"Number out of range {text!r}")
    return number


def _number_kind(text: str, decimal_separator: str, number: float) -> NumberType:
    if decimal_separator and decimal_separator in text or not float(number).is_integer():
        return NumberType.DECIMAL
    return NumberType.INTEGER


def _span_ui(match: re.Match, group: str, kind: UiTokenKind) -> list[UiToken]:
    if match.group(group) is None:
        return []
    start, end = match.span(group)
    return [UiToken(start, end, kind)]


def _parse_comment(config, language, match, level):
    return None, [UiToken(match.start(), match.end(), UiTokenKind.COMMENT)]


def _parse_money(config: CalcConfig, language, match: re.Match, level):
    options = config.format_options
    currency = config.find_currency(match.group("CURRENCY"))
    if currency is None:
        raise LexError(f"Unknown currency {match.group('CURRENCY')!r}")
    amount = parse_locale_number(
        match.group("PRICE"), options.thousand_separator, options.decimal_separator
    )
    notation = match.group("NOTATION")
    if notation:
        amount *= NOTATION_MULTIPLIERS[notation]
    ui = (
        _span_ui(match, "PRICE", UiTokenKind.NUMBER)
        + _span_ui(match, "NOTATION", UiTokenKind.SYMBOL2)
        + _span_ui(match, "CURRENCY", UiTokenKind.SYMBOL1)
    )
    token = Token(match.start(), match.end(), match.group(0), MoneyToken(amount, currency))
    return token, ui


def _parse_percent(config: CalcConfig, language, match: re.Match, level):
    options = config.format_options
    value = parse_locale_number(
        match.group("NUMBER"), options.thousand_separator, options.decimal_separator
    )
    number_start, number_end = match.span("NUMBER")
    ui = [UiToken(number_start, number_end, UiTokenKind.NUMBER)]
    sign = match.group(0).index("%") + match.start()
    ui.append(UiToken(sign, sign + 1, UiTokenKind.SYMBOL2))
    token = Token(match.start(), match.end(), match.group(0), PercentToken(value))
    return token, ui


def _parse_date(config, language, match: re.Match, level):
    try:
        date = datetime.date(
            int(match.group("YEAR")), int(match.group("MONTH")), int(match.group("DAY"))
        )
    except ValueError as exc:
        raise LexError(f"Invalid date {match.group(0)!r}") from exc
    token = Token(match.start(), match.end(), match.group(0), DateToken(date))
    return token, [UiToken(match.start(), match.end(), UiTokenKind.DATE_TIME)]


def _parse_time(config: CalcConfig, language, match: re.Match, level):
    hour = int(match.group("HOUR"))
    minute = int(match.group("MINUTE"))
    second = int(match.group("SECOND") or 0)
    meridiem = (match.group("MERIDIEM") or "").lower()
    if meridiem:
        if not 1 <= hour <= 12:
            raise LexError(f"Invalid 12-hour time {match.group(0)!r}")
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    try:
        time = datetime.time(hour, minute, second)
    except ValueError as exc:
        raise LexError(f"Invalid time {match.group(0)!r}") from exc
    token = Token(
        match.start(), match.end(), match.group(0), TimeToken(time, config.default_timezone)
    )
    return token, [UiToken(match.start(), match.end(), UiTokenKind.DATE_TIME)]


def _parse_dynamic_type(config: CalcConfig, language, match: re.Match, level):
    options = config.format_options
    value = parse_locale_number(
        match.group("NUMBER"), options.thousand_separator, options.decimal_separator
    )
    ui = _span_ui(match, "NUMBER", UiTokenKind.NUMBER) + _span_ui(
        match, "UNIT", UiTokenKind.SYMBOL1
    )
    token = Token(match.start(), match.end(), match.group(0), DynamicValueToken(value, level))
    return token, ui


def _parse_number(config: CalcConfig, language, match: re.Match, level):
    groups = match.groupdict()
    if groups.get("HEX"):
        value = NumberToken(float(int(groups["HEX"], 16)), NumberType.INTEGER)
    elif groups.get("BIN"):
        value = NumberToken(float(int(groups["BIN"], 2)), NumberType.INTEGER)
    elif groups.get("OCT"):
        value = NumberToken(float(int(groups["OCT"], 8)), NumberType.INTEGER)
    else:
        options = config.format_options
        text = groups["NUMBER"]
        number = parse_locale_number(
            text, options.thousand_separator, options.decimal_separator
        )
        if groups.get("NOTATION"):
            number *= NOTATION_MULTIPLIERS[groups["NOTATION"]]
        value = NumberToken(number, _number_kind(text, options.decimal_separator, number))
    ui = [UiToken(match.start(), match.end(), UiTokenKind.NUMBER)]
    if groups.get("NOTATION"):
        ui = _span_ui(match, "NUMBER", UiTokenKind.NUMBER) + _span_ui(
            match, "NOTATION", UiTokenKind.SYMBOL2
        )
    return Token(match.start(), match.end(), match.group(0), value), ui


def _constant_token(config: CalcConfig, constant: str):
    today = datetime.date.today()
    if constant == "today":
        return DateToken(today)
    if constant == "tomorrow":
        return DateToken(today + datetime.timedelta(days=1))
    if constant == "yesterday":
        return DateToken(today - datetime.timedelta(days=1))
    if constant == "now":
        zone = datetime.timezone(datetime.timedelta(minutes=config.default_timezone.offset))
        now = datetime.datetime.now(zone).time().replace(microsecond=0)
        return TimeToken(now, config.default_timezone)
    raise LexError(f"Unknown constant {constant!r}")


def _parse_text(config: CalcConfig, language: LanguageConfig, match: re.Match, level):
    word = match.group(0)
    lowered = word.lower()
    span = (match.start(), match.end())
    if lowered in language.constants:
        token_type = _constant_token(config, language.constants[lowered])
        return Token(*span, word, token_type), [UiToken(*span, UiTokenKind.DATE_TIME)]
    if lowered in language.aliases:
        token_type = OperatorToken(language.aliases[lowered])
        return Token(*span, word, token_type), [UiToken(*span, UiTokenKind.OPERATOR)]
    return Token(*span, word, TextToken(word)), [UiToken(*span, UiTokenKind.TEXT)]


def _parse_operator(config, language: LanguageConfig, match: re.Match, level):
    char = match.group(0)
    char = language.aliases.get(char, char)
    span = (match.start(), match.end())
    return Token(*span, match.group(0), OperatorToken(char)), [
        UiToken(*span, UiTokenKind.OPERATOR)
    ]


_PARSERS: dict[str, Callable] = {
    "comment": _parse_comment,
    "money": _parse_money,
    "percent": _parse_percent,
    "date": _parse_date,
    "time": _parse_time,
    "dynamic_type": _parse_dynamic_type,
    "number": _parse_number,
    "text": _parse_text,
    "operator": _parse_operator,
}


def _overlaps(spans: list[tuple[int, int]], start: int, end: int) -> bool:
    return any(start < taken_end and taken_start < end for taken_start, taken_end in spans)


def tokenize(
    line: str, config: CalcConfig, language: LanguageConfig
) -> tuple[list[Token], list[UiToken]]:
    """Tokenize one line.

    Args:
        line: Source text of the line
        config: Compiled configuration
        language: Language tables for aliases and constants

    Returns:
        (tokens, ui_tokens), both sorted by start offset
    """
    spans: list[tuple[int, int]] = []
    tokens: list[Token] = []
    ui_tokens: list[UiToken] = []
    for group in config.pattern_groups:
        parser = _PARSERS[group.name]
        for position, pattern in enumerate(group.patterns):
            level = group.levels[position] if group.levels else None
            for match in pattern.finditer(line):
                start, end = match.span()
                if start == end or _overlaps(spans, start, end):
                    continue
                try:
                    token, ui = parser(config, language, match, level)
                except LexError as exc:
                    logger.debug("Rejected %s candidate %r: %s", group.name, match.group(0), exc)
                    continue
                spans.append((start, end))
                ui_tokens.extend(ui)
                if token is not None:
                    token.ui_hint = ui[0].kind if ui else None
                    tokens.append(token)
    tokens.sort(key=lambda token: token.start)
    ui_tokens.sort(key=lambda ui: ui.start)
    return tokens, ui_tokens
