"""Public API for Linekalk - returns structured objects without side effects."""

from __future__ import annotations

from .calculator import Calculator
from .config import DEFAULT_LANGUAGE, CalcConfig, get_default_config
from .logging_config import get_logger
from .session import Session
from .syntax import SyntaxParser
from .tokenizer import Tokenizer
from .types import CalculatorError, ExecuteResult, LineResult, Token, ValidationError

logger = get_logger("api")


def execute(
    text: str,
    language: str = DEFAULT_LANGUAGE,
    session: Session | None = None,
    config: CalcConfig | None = None,
) -> ExecuteResult:
    """Evaluate a block of text, one result per line.

    Args:
        text: Newline-separated lines (e.g., "a = 10\\na * 2")
        language: Language code of the lines ("en", "tr")
        session: Session whose bindings should persist; a fresh one is used if omitted
        config: Configuration to use (defaults to the environment-driven one)

    Returns:
        ExecuteResult with one LineResult (or None for blank lines) per line

    Example:
        >>> from linekalk_pkg.api import execute
        >>> result = execute("a = 10\\na * 2")
        >>> print(result.lines[1].output)
        20
    """
    calculator = Calculator(config)
    if session is None:
        return calculator.execute(language, text)
    session.set_language(language)
    session.set_text(text)
    return calculator.execute_session(session)


def evaluate(
    expression: str,
    language: str = DEFAULT_LANGUAGE,
    session: Session | None = None,
    config: CalcConfig | None = None,
) -> LineResult:
    """Evaluate a single line.

    Args:
        expression: One line (e.g., "$25/hour * 14 hours")
        language: Language code of the line
        session: Optional session for variable bindings

    Returns:
        LineResult; blank input gives a failed result with code EMPTY_EXPRESSION

    Example:
        >>> from linekalk_pkg.api import evaluate
        >>> print(evaluate("120 + 30% + 10%").output)
        171,6
    """
    session = session or Session(language)
    result = Calculator(config).execute_line(expression, session)
    if result is None:
        return LineResult(
            ok=False, line=0, error="Empty expression", error_code="EMPTY_EXPRESSION"
        )
    return result


def tokenize(
    expression: str, language: str = DEFAULT_LANGUAGE, config: CalcConfig | None = None
) -> list[Token]:
    """Run the token pipeline on one line without evaluating it.

    Raises:
        EvalError: If a conversion names an unknown or incompatible target
    """
    config = config or get_default_config()
    return Tokenizer(config, config.get_language(language)).tokenize(expression)


def validate_expression(
    expression: str, language: str = DEFAULT_LANGUAGE
) -> tuple[bool, str | None]:
    """Check that a line tokenizes and parses, without evaluating it.

    Args:
        expression: Line to validate

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from linekalk_pkg.api import validate_expression
        >>> validate_expression("10 + 20")
        (True, None)
        >>> validate_expression("(10 + 20")
        (False, 'Unbalanced parentheses at position 0')
    """
    config = get_default_config()
    try:
        if len(expression) > config.max_input_length:
            raise ValidationError("Line is too long", "TOO_LONG")
        SyntaxParser(tokenize(expression, language, config)).parse()
        return True, None
    except CalculatorError as e:
        return False, e.message
    except Exception as e:
        logger.warning(f"Unexpected validation error: {e}", exc_info=True)
        return False, "Unexpected validation error"
