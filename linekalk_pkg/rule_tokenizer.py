"""Rule tokenizer: rewrites token sequences into higher-level tokens.

A rule pattern such as ``{MONEY:price} / {TEXT:unit} * {DURATION:duration}``
is compiled into a tuple of matchers. Rules run in the language's order; the
first full match whose handler accepts the bindings replaces its span with a
single token, and scanning restarts from the beginning of the line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping, Sequence, Union

from .config import RULE_PATTERN_REGEX
from .logging_config import get_logger
from .types import (
    DateToken,
    DurationToken,
    DynamicValueToken,
    MoneyToken,
    NumberToken,
    OperatorToken,
    PercentToken,
    RuleError,
    TextToken,
    TimeToken,
    Token,
    TokenType,
)

if TYPE_CHECKING:
    from .config import CalcConfig, LanguageConfig

logger = get_logger("rule_tokenizer")

RuleHandler = Callable[["CalcConfig", "LanguageConfig", Mapping[str, Token]], TokenType]

_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "TEXT": (TextToken,),
    "NUMBER": (NumberToken,),
    "AMOUNT": (NumberToken, MoneyToken),
    "MONEY": (MoneyToken,),
    "PERCENT": (PercentToken,),
    "DURATION": (DurationToken,),
    "DATE": (DateToken,),
    "TIME": (TimeToken,),
    "DYNAMIC_TYPE": (DynamicValueToken,),
    "MONTH": (TextToken,),
    "GROUP": (TextToken,),
    "CURRENCY": (TextToken, OperatorToken),
    "TIMEZONE": (TextToken,),
}


@dataclass(frozen=True)
class FieldMatcher:
    field_type: str
    name: str


@dataclass(frozen=True)
class WordMatcher:
    word: str


@dataclass(frozen=True)
class OperatorMatcher:
    char: str


Matcher = Union[FieldMatcher, WordMatcher, OperatorMatcher]


@dataclass(frozen=True)
class Rule:
    name: str
    patterns: tuple[tuple[Matcher, ...], ...]
    handler: RuleHandler


def compile_rule_pattern(text: str) -> tuple[Matcher, ...]:
    """Compile one rule pattern string.

    Raises:
        ValueError: On an unknown field type, leftover characters, or fewer
            than two matchers (a rewrite must shrink the token list)
    """
    matchers: list[Matcher] = []
    position = 0
    for match in RULE_PATTERN_REGEX.finditer(text):
        if text[position:match.start()].strip():
            raise ValueError(f"Unexpected text in rule pattern {text!r}")
        position = match.end()
        if match.group("TYPE"):
            field_type = match.group("TYPE")
            if field_type not in _FIELD_TYPES:
                raise ValueError(f"Unknown field type {field_type!r} in {text!r}")
            matchers.append(FieldMatcher(field_type, match.group("NAME").strip()))
        elif match.group("WORD"):
            matchers.append(WordMatcher(match.group("WORD").lower()))
        else:
            matchers.append(OperatorMatcher(match.group("OPERATOR")))
    if text[position:].strip():
        raise ValueError(f"Unexpected text in rule pattern {text!r}")
    if len(matchers) < 2:
        raise ValueError(f"Rule pattern {text!r} needs at least two parts")
    return tuple(matchers)


def compile_rules(
    table: Mapping[str, Sequence[str]], handlers: Mapping[str, RuleHandler]
) -> tuple[Rule, ...]:
    """Compile a language's rule table, keeping its order.

    Patterns of one rule are ordered longest first.
    """
    rules = []
    for name, pattern_texts in table.items():
        if name not in handlers:
            raise ValueError(f"No handler for rule {name!r}")
        patterns = sorted(
            (compile_rule_pattern(text) for text in pattern_texts), key=len, reverse=True
        )
        rules.append(Rule(name, tuple(patterns), handlers[name]))
    return tuple(rules)


def token_matches(
    matcher: Matcher, token: Token, config: CalcConfig, language: LanguageConfig
) -> bool:
    """Return True if ``token`` can fill ``matcher``."""
    token_type = token.token_type
    if isinstance(matcher, WordMatcher):
        return isinstance(token_type, TextToken) and token_type.word.lower() == matcher.word
    if isinstance(matcher, OperatorMatcher):
        return isinstance(token_type, OperatorToken) and token_type.char == matcher.char
    if not isinstance(token_type, _FIELD_TYPES[matcher.field_type]):
        return False
    if matcher.field_type == "MONTH":
        return language.find_month(token_type.word) is not None
    if matcher.field_type == "GROUP":
        return language.in_group(matcher.name, token_type.word)
    if matcher.field_type == "CURRENCY":
        return config.find_currency(token.raw) is not None
    if matcher.field_type == "TIMEZONE":
        return config.find_timezone(token_type.word) is not None
    return True


def _match_at(
    tokens: Sequence[Token],
    start: int,
    pattern: tuple[Matcher, ...],
    config: CalcConfig,
    language: LanguageConfig,
) -> dict[str, Token] | None:
    fields: dict[str, Token] = {}
    for offset, matcher in enumerate(pattern):
        token = tokens[start + offset]
        if not token_matches(matcher, token, config, language):
            return None
        if isinstance(matcher, FieldMatcher):
            fields[matcher.name] = token
    return fields


def _apply_first_match(
    tokens: list[Token], line: str, config: CalcConfig, language: LanguageConfig
) -> bool:
    for rule in language.rules:
        for pattern in rule.patterns:
            for start in range(len(tokens) - len(pattern) + 1):
                fields = _match_at(tokens, start, pattern, config, language)
                if fields is None:
                    continue
                try:
                    token_type = rule.handler(config, language, fields)
                except RuleError as exc:
                    logger.debug("Rule %s rejected its match: %s", rule.name, exc)
                    continue
                first = tokens[start]
                last = tokens[start + len(pattern) - 1]
                replacement = Token(
                    first.start, last.end, line[first.start:last.end], token_type
                )
                logger.debug("Rule %s produced %r", rule.name, replacement)
                tokens[start:start + len(pattern)] = [replacement]
                return True
    return False


def apply_rules(
    tokens: Sequence[Token], line: str, config: CalcConfig, language: LanguageConfig
) -> list[Token]:
    """Rewrite ``tokens`` until no rule fires.

    Args:
        tokens: Tokens from the regex stage (and variable resolution)
        line: Source text, used for the raw text of rewritten spans
        config: Compiled configuration
        language: Language whose rules apply

    Returns:
        New token list; the input sequence is not modified
    """
    result = list(tokens)
    for _ in range(config.max_rule_iterations):
        if not _apply_first_match(result, line, config, language):
            return result
    logger.warning(
        "Rule rewriting stopped after %d iterations for %r", config.max_rule_iterations, line
    )
    return result
