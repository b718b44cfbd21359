from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .calculator import Calculator
from .config import DEFAULT_LANGUAGE, VERSION, CalcConfig, build_config, get_default_config
from .logging_config import get_logger, setup_logging
from .session import Session
from .types import ExecuteResult

logger = get_logger("cli")


def print_result_pretty(res: dict[str, Any] | None, output_format: str = "human") -> None:
    """Print one line's result in the specified format.

    Args:
        res: Result dictionary from ``LineResult.to_dict`` (None for a blank line)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if res is None:
        print()
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    output = res.get("output")
    if output is None:
        print()
        return
    try:
        print(output)
    except (UnicodeEncodeError, OSError):
        # Windows consoles without UTF-8 cannot print some currency symbols
        print(output.encode("ascii", "replace").decode("ascii"))


def print_execute_result(result: ExecuteResult, output_format: str = "human") -> None:
    if output_format == "json":
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    for line in result.lines:
        print_result_pretty(line.to_dict() if line is not None else None, output_format)


def print_help_text() -> None:
    """Print help text for REPL commands."""
    help_text = f"""Linekalk version {VERSION}

Each line is evaluated on its own; bindings made with "name = value" stay
available to later lines.

Numbers use "." for thousands and "," for decimals by default, so "1.5 + 1"
is 16 and "1,5 + 1" is 2,5. Change this with --thousand-separator and
--decimal-separator (or LINEKALK_THOUSAND_SEPARATOR and
LINEKALK_DECIMAL_SEPARATOR). Exponents are accepted: 1e5, 2,5e-3.

Examples:
  120 + 30% + 10%              percent of the running value
  $25/hour * 14 hours of work  money per duration
  1024mb + (1024kb * 24)       unit families
  April 1, 2019 - 3 months     calendar arithmetic
  9:00 GMT-7 to CET            time zone conversion
  100 USD in EUR               currency conversion
  20 is 10% of what            percent helpers
  monthly rent = $1.200        multi-word variables

Commands:
  help    Show this text
  vars    List the current bindings
  clear   Forget every binding
  quit    Leave (also: exit, Ctrl+D)
"""
    print(help_text)


def print_variables(session: Session, calculator: Calculator) -> None:
    names = session.variable_names()
    if not names:
        print("No variables defined.")
        return
    language = calculator.config.get_language(session.language)
    for name, value in session.variables():
        print(f"{name} = {value.print(calculator.config, language)}")


def repl_loop(
    output_format: str = "human",
    language: str = DEFAULT_LANGUAGE,
    config: CalcConfig | None = None,
) -> None:
    """Interactive REPL loop over one persistent session."""
    try:
        import readline  # noqa: F401
    except (ImportError, ModuleNotFoundError):
        # readline not available on Windows - that's fine
        pass

    calculator = Calculator(config)
    session = Session(language)
    number = 0
    print("Linekalk - type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        command = raw.lower()
        if command in ("quit", "exit"):
            print("Goodbye.")
            break
        if command == "help":
            print_help_text()
            continue
        if command == "vars":
            print_variables(session, calculator)
            continue
        if command == "clear":
            session.clear()
            print("Variables cleared.")
            continue
        result = calculator.execute_line(raw, session, number)
        number += 1
        print_result_pretty(result.to_dict() if result is not None else None, output_format)


def _build_cli_config(args: argparse.Namespace) -> CalcConfig:
    overrides: dict[str, Any] = {}
    if args.thousand_separator is not None:
        overrides["thousand_separator"] = args.thousand_separator
    if args.decimal_separator is not None:
        overrides["decimal_separator"] = args.decimal_separator
    if args.remove_fraction_if_zero:
        overrides["remove_fraction_if_zero"] = True
    if args.no_fraction_rounding:
        overrides["use_fraction_rounding"] = False
    if not overrides:
        return get_default_config()
    return build_config(**overrides)


def _all_ok(result: ExecuteResult) -> bool:
    return all(line is None or line.ok for line in result.lines)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Linekalk CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 when every line succeeded, 1 otherwise)
    """
    parser = argparse.ArgumentParser(prog="linekalk")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate text and exit (a literal \\n separates lines)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-f", "--file", type=str, help="Evaluate every line of a text file and exit"
    )
    parser.add_argument(
        "-l",
        "--language",
        type=str,
        default=DEFAULT_LANGUAGE,
        help=f"Language of the input (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--thousand-separator",
        type=str,
        help="Character grouping thousands (default: ., so 1.5 reads as 15)",
    )
    parser.add_argument(
        "--decimal-separator", type=str, help="Character before the fraction (default: ,)"
    )
    parser.add_argument(
        "--remove-fraction-if-zero",
        action="store_true",
        help="Print whole money amounts without a fraction",
    )
    parser.add_argument(
        "--no-fraction-rounding",
        action="store_true",
        help="Truncate fractions instead of rounding them",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0

    try:
        config = _build_cli_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    text = None
    if args.eval_expr is not None:
        text = args.eval_expr.replace("\\n", "\n")
    elif args.file:
        try:
            with open(args.file, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as e:
            print(f"Error: Cannot read {args.file}: {e}")
            return 1

    if text is None:
        repl_loop(args.format, args.language, config)
        return 0

    if not text.strip():
        print("Error: Empty input. Please enter at least one line to evaluate.")
        return 1
    logger.debug("Evaluating %d lines in %r", len(text.splitlines()), args.language)
    result = Calculator(config).execute(args.language, text)
    print_execute_result(result, args.format)
    return 0 if _all_ok(result) else 1


if __name__ == "__main__":
    sys.exit(main_entry())
