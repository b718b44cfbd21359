"""Test that API functions return typed dataclasses."""

from linekalk_pkg.api import evaluate, execute, tokenize, validate_expression
from linekalk_pkg.calculus import MoneyItem
from linekalk_pkg.session import Session
from linekalk_pkg.types import ExecuteResult, LineResult, MoneyToken, Token


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_execute_returns_execute_result(self):
        """Test that execute() returns ExecuteResult with one entry per line."""
        result = execute("a = 10\n\na * 2")
        assert isinstance(result, ExecuteResult)
        assert result.status is True
        assert len(result.lines) == 3
        assert result.lines[1] is None
        assert result.lines[2].output == "20"

    def test_execute_with_session_keeps_bindings(self):
        """Test that execute() stores bindings in a caller-owned session."""
        session = Session()
        execute("rate = $40", session=session)
        result = execute("rate * 3", session=session)
        assert result.lines[0].output == "$120,00"
        assert session.has_variable("rate")

    def test_evaluate_returns_line_result(self):
        """Test that evaluate() returns LineResult."""
        result = evaluate("$25/hour * 14 hours")
        assert isinstance(result, LineResult)
        assert result.ok is True
        assert isinstance(result.item, MoneyItem)
        assert result.output == "$350,00"

    def test_evaluate_error_returns_line_result(self):
        """Test that evaluate() errors return LineResult."""
        result = evaluate("(1 + ")
        assert isinstance(result, LineResult)
        assert result.ok is False
        assert result.error is not None
        assert result.error_code is not None

    def test_evaluate_blank(self):
        result = evaluate("   ")
        assert result.ok is False
        assert result.error_code == "EMPTY_EXPRESSION"

    def test_tokenize_returns_tokens(self):
        tokens = tokenize("$25 + 5")
        assert all(isinstance(token, Token) for token in tokens)
        assert isinstance(tokens[0].token_type, MoneyToken)

    def test_validate_expression_returns_tuple(self):
        """Test that validate_expression() returns tuple."""
        assert validate_expression("10 + 20") == (True, None)
        is_valid, error = validate_expression("(10 + 20")
        assert is_valid is False
        assert "Unbalanced" in error

    def test_to_dict(self):
        result = evaluate("10% of 200")
        data = result.to_dict()
        assert data["ok"] is True
        assert data["output"] == "20"
        assert data["type"] == "NUMBER"
        assert all({"start", "end", "kind"} <= set(ui) for ui in data["ui_tokens"])
