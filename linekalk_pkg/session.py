"""Binding store shared by the lines of one calculation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .config import DEFAULT_LANGUAGE

if TYPE_CHECKING:
    from .calculus import DataItem


def normalize_name(name: str) -> str:
    """Lower-case a variable name and collapse its whitespace."""
    return " ".join(word.lower() for word in name.split())


class Session:
    """Source text, language and variable bindings.

    A session created by ``Calculator.execute`` lives for one call; a session
    the host keeps and passes to ``Calculator.execute_session`` keeps its
    bindings across calls. Rebinding a name replaces its value.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE, text: str = ""):
        self.language = language
        self.text = text
        self._variables: dict[str, DataItem] = {}

    def set_text(self, text: str) -> None:
        self.text = text

    def set_language(self, language: str) -> None:
        self.language = language

    def lines(self) -> list[str]:
        return self.text.splitlines()

    def set_variable(self, name: str, value: DataItem) -> None:
        self._variables[normalize_name(name)] = value

    def get_variable(self, name: str) -> DataItem | None:
        return self._variables.get(normalize_name(name))

    def has_variable(self, name: str) -> bool:
        return normalize_name(name) in self._variables

    def variable_names(self) -> list[str]:
        return list(self._variables)

    def variables(self) -> Iterator[tuple[str, DataItem]]:
        return iter(self._variables.items())

    def clear(self) -> None:
        self._variables.clear()

    def __repr__(self) -> str:
        return f"Session(language={self.language!r}, variables={sorted(self._variables)!r})"
