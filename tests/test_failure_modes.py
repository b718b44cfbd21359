"""Tests for failure isolation and unusual input."""

from unittest import mock

from linekalk_pkg.calculator import Calculator
from linekalk_pkg.session import Session


class TestLineIsolation:
    """A failing line never affects the other lines."""

    def test_bad_lines_do_not_abort_batch(self):
        result = Calculator().execute("en", "=\na=\n=1\n1 + 1")
        assert result.status is True
        assert [line.ok for line in result.lines] == [False, False, False, True]
        assert result.lines[3].output == "2"
        assert result.ok is False

    def test_failed_assignment_binds_nothing(self):
        session = Session("en", "x = foo\nx")
        result = Calculator().execute_session(session)
        assert not result.lines[0].ok
        assert not session.has_variable("x")
        assert result.lines[1].error_code == "UNDEFINED_VARIABLE"

    def test_unexpected_exception_is_internal_error(self):
        calculator = Calculator()
        with mock.patch(
            "linekalk_pkg.calculator.evaluate", side_effect=RuntimeError("boom")
        ):
            result = calculator.execute("en", "1 + 1\n2 + 2")
        assert result.status is True
        assert all(line.error_code == "INTERNAL_ERROR" for line in result.lines)
        assert "boom" in result.lines[0].error

    def test_deterministic(self):
        first = Calculator().execute("en", "foo\n1 / 0\n3 * 3")
        second = Calculator().execute("en", "foo\n1 / 0\n3 * 3")
        assert first.to_dict() == second.to_dict()


class TestUnusualInput:
    def test_comment_only_line(self):
        result = Calculator().execute_line("# rent for march", Session())
        assert result.ok is True
        assert result.output is None

    def test_filler_words_only(self):
        result = Calculator().execute_line("hello world", Session())
        assert result.ok is False
        assert result.error_code == "UNDEFINED_VARIABLE"

    def test_invalid_literal_is_skipped(self):
        result = Calculator().execute_line("31/02/2020", Session())
        assert result.ok is True

    def test_unknown_language_falls_back(self):
        result = Calculator().execute("xx", "2 + 2")
        assert result.lines[0].output == "4"

    def test_huge_date_shift_fails_cleanly(self):
        result = Calculator().execute_line("1/1/2000 + 9000 years", Session())
        assert result.ok is False
        assert result.error_code == "UNSUPPORTED_OPERATION"


class TestRuleIterationCap:
    def test_rewriting_stops_at_cap(self):
        from linekalk_pkg.config import build_config, get_default_config
        from linekalk_pkg.regex_tokenizer import tokenize
        from linekalk_pkg.rule_tokenizer import apply_rules

        line = "5 hour 21 minute 55 second"
        capped = build_config(max_rule_iterations=1)
        tokens, _ = tokenize(line, capped, capped.get_language("en"))
        assert len(apply_rules(tokens, line, capped, capped.get_language("en"))) > 1

        config = get_default_config()
        tokens, _ = tokenize(line, config, config.get_language("en"))
        assert len(apply_rules(tokens, line, config, config.get_language("en"))) == 1
