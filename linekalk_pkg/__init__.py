"""Linekalk package: line tokenizers, rule engine, parser, value calculus and CLI."""

__all__ = [
    "config",
    "resources",
    "regex_tokenizer",
    "rule_tokenizer",
    "rules",
    "tokenizer",
    "syntax",
    "calculus",
    "evaluator",
    "calculator",
    "session",
    "formatter",
    "dynamic_types",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "execute",
    "evaluate",
    "tokenize",
    "validate_expression",
]
