"""Line-by-line calculation over a session."""

from __future__ import annotations

from .config import CalcConfig, LanguageConfig, get_default_config
from .evaluator import evaluate
from .logging_config import get_logger
from .session import Session
from .syntax import SyntaxParser
from .tokenizer import Tokenizer
from .types import CalculatorError, ExecuteResult, LineResult, UiTokenKind, ValidationError

logger = get_logger("calculator")


class Calculator:
    """Evaluates blocks of text, one result per line.

    Example:
        >>> calculator = Calculator()
        >>> result = calculator.execute("en", "price = $25\\nprice * 2")
        >>> result.lines[1].output
        '$50,00'
    """

    def __init__(self, config: CalcConfig | None = None):
        self.config = config or get_default_config()

    def execute(self, language: str, text: str) -> ExecuteResult:
        """Evaluate ``text`` with a fresh session that is discarded afterwards."""
        return self.execute_session(Session(language, text))

    def execute_session(self, session: Session) -> ExecuteResult:
        """Evaluate the session's text; bindings persist in the session."""
        language = self.config.get_language(session.language)
        lines = [
            self.execute_line(line, session, number, language)
            for number, line in enumerate(session.lines())
        ]
        return ExecuteResult(status=True, lines=lines)

    def execute_line(
        self,
        line: str,
        session: Session,
        number: int = 0,
        language: LanguageConfig | None = None,
    ) -> LineResult | None:
        """Evaluate one line. Whitespace-only lines give ``None``.

        Errors are reported in the returned LineResult and never raised.
        """
        if not line.strip():
            return None
        language = language or self.config.get_language(session.language)
        tokenizer = Tokenizer(self.config, language, session)
        try:
            if len(line) > self.config.max_input_length:
                raise ValidationError(
                    f"Line is too long ({len(line)} > {self.config.max_input_length} characters)",
                    "TOO_LONG",
                )
            tokens = tokenizer.tokenize(line)
            if not tokens and any(ui.kind is UiTokenKind.COMMENT for ui in tokenizer.ui_tokens):
                return LineResult(ok=True, line=number, ui_tokens=tokenizer.ui_tokens)
            ast = SyntaxParser(tokens).parse()
            item = evaluate(ast, self.config, session)
            output = item.print(self.config, language)
        except CalculatorError as exc:
            logger.debug("Line %d failed (%s): %s", number, exc.code, exc.message)
            return LineResult(
                ok=False,
                line=number,
                ui_tokens=tokenizer.ui_tokens,
                error=exc.message,
                error_code=exc.code,
            )
        except Exception as exc:
            logger.error("Unexpected error on line %d: %r", number, line, exc_info=True)
            return LineResult(
                ok=False,
                line=number,
                ui_tokens=tokenizer.ui_tokens,
                error=f"Internal error: {exc}",
                error_code="INTERNAL_ERROR",
            )
        return LineResult(
            ok=True,
            line=number,
            output=output,
            item=item,
            ast=ast,
            ui_tokens=tokenizer.ui_tokens,
        )
