"""Token pipeline for one line.

regex tokenizer -> assignment split -> variable resolution -> rules -> finalisation
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from . import regex_tokenizer
from .config import GRAMMAR_OPERATORS
from .logging_config import get_logger
from .rule_tokenizer import apply_rules
from .session import normalize_name
from .types import EvalError, TextToken, Token, UiToken, UiTokenKind, VariableToken

if TYPE_CHECKING:
    from .config import CalcConfig, LanguageConfig
    from .session import Session

logger = get_logger("tokenizer")


def _is_text(token: Token) -> bool:
    return isinstance(token.token_type, TextToken)


def _is_grammar_operator(token: Token) -> bool:
    return token.is_operator() and token.token_type.char in GRAMMAR_OPERATORS


class Tokenizer:
    """Turns one line into the token stream the syntax parser consumes.

    After ``tokenize`` the instance also exposes ``ui_tokens`` (highlight
    spans) and ``assignment`` (the variable name being defined, if any).
    """

    def __init__(
        self, config: CalcConfig, language: LanguageConfig, session: Session | None = None
    ):
        self.config = config
        self.language = language
        self.session = session
        self.ui_tokens: list[UiToken] = []
        self.assignment: str | None = None

    def tokenize(self, line: str) -> list[Token]:
        tokens, self.ui_tokens = regex_tokenizer.tokenize(line, self.config, self.language)
        tokens = self._split_assignment(line, tokens)
        tokens = self._resolve_variables(line, tokens)
        tokens = apply_rules(tokens, line, self.config, self.language)
        self._check_conversions(tokens)
        tokens = self._finalize(line, tokens)
        self.ui_tokens.sort(key=lambda ui: ui.start)
        logger.debug("Tokens for %r: %r", line, tokens)
        return tokens

    def _mark(self, start: int, end: int, kind: UiTokenKind) -> None:
        self.ui_tokens = [
            ui
            for ui in self.ui_tokens
            if not (ui.kind is UiTokenKind.TEXT and start <= ui.start and ui.end <= end)
        ]
        self.ui_tokens.append(UiToken(start, end, kind))

    def _variable(
        self, line: str, words: Sequence[Token], name: str, kind: UiTokenKind
    ) -> Token:
        start, end = words[0].start, words[-1].end
        self._mark(start, end, kind)
        return Token(start, end, line[start:end], VariableToken(name), kind)

    def _split_assignment(self, line: str, tokens: list[Token]) -> list[Token]:
        equals = next((i for i, token in enumerate(tokens) if token.is_operator("=")), None)
        if not equals or not all(_is_text(token) for token in tokens[:equals]):
            return tokens
        name = normalize_name(" ".join(token.raw for token in tokens[:equals]))
        self.assignment = name
        definition = self._variable(
            line, tokens[:equals], name, UiTokenKind.VARIABLE_DEFINITION
        )
        return [definition] + tokens[equals:]

    def _resolve_variables(self, line: str, tokens: list[Token]) -> list[Token]:
        if self.session is None:
            return tokens
        known = set(self.session.variable_names())
        if not known:
            return tokens
        result: list[Token] = []
        index = 0
        while index < len(tokens):
            if not _is_text(tokens[index]):
                result.append(tokens[index])
                index += 1
                continue
            run_end = index
            while run_end < len(tokens) and _is_text(tokens[run_end]):
                run_end += 1
            # Longest run of words starting here that names a bound variable
            for stop in range(run_end, index, -1):
                name = normalize_name(" ".join(t.raw for t in tokens[index:stop]))
                if name in known:
                    result.append(
                        self._variable(line, tokens[index:stop], name, UiTokenKind.VARIABLE_USE)
                    )
                    index = stop
                    break
            else:
                result.append(tokens[index])
                index += 1
        return result

    def _check_conversions(self, tokens: list[Token]) -> None:
        """Fail on a conversion no rule could apply.

        A conversion word still sitting next to a value and a word
        (``$5 in xyz``, ``1 kb to km``, or ``$5 xyz olarak``) names a target
        that is unknown or incompatible with the value.

        Raises:
            EvalError: With code UNSUPPORTED_CONVERSION
        """
        for index, token in enumerate(tokens):
            if not _is_text(token) or not self.language.in_group("conversion_group", token.raw):
                continue
            before = tokens[index - 1] if index > 0 else None
            after = tokens[index + 1] if index + 1 < len(tokens) else None
            if before is not None and before.is_value and after is not None and _is_text(after):
                target = after
            elif before is not None and _is_text(before) and index > 1 and tokens[index - 2].is_value:
                target = before
            else:
                continue
            raise EvalError(f"Cannot convert to {target.raw!r}", "UNSUPPORTED_CONVERSION")

    def _finalize(self, line: str, tokens: list[Token]) -> list[Token]:
        """Drop filler text and punctuation.

        Text inside an operand segment that holds no value is a reference to an
        unknown variable and is kept as one; elsewhere text is filler.
        """
        segments: list[list[Token]] = [[]]
        for token in tokens:
            if _is_grammar_operator(token):
                segments.append([token])
                segments.append([])
            else:
                segments[-1].append(token)

        result: list[Token] = []
        for segment in segments:
            if len(segment) == 1 and _is_grammar_operator(segment[0]):
                result.append(segment[0])
                continue
            has_value = any(
                token.is_value or isinstance(token.token_type, VariableToken)
                for token in segment
            )
            words: list[Token] = []
            for token in segment + [None]:
                if token is not None and _is_text(token) and not has_value:
                    words.append(token)
                    continue
                if words:
                    name = normalize_name(" ".join(word.raw for word in words))
                    result.append(self._variable(line, words, name, UiTokenKind.VARIABLE_USE))
                    words = []
                if token is None or _is_text(token) or token.is_operator():
                    continue
                result.append(token)
        return result
