"""Conversion between the levels of a dynamic unit family.

Each level holds formulas such as ``{value} / 1024`` that move a value one
step up or down the ladder. Formulas are parsed once with SymPy and applied to
exact rationals, so converting across several levels is the exact composition
of the single steps.
"""

from __future__ import annotations

from fractions import Fraction
from functools import lru_cache
from tokenize import TokenError
from typing import Mapping

import sympy as sp
from sympy.parsing.sympy_parser import parse_expr

from .config import ALLOWED_FORMULA_NAMES, CACHE_SIZE_FORMULA, TRANSFORMATIONS
from .types import DynamicTypeDef, DynamicTypeLevel

VALUE_SYMBOL = sp.Symbol("value")


@lru_cache(maxsize=CACHE_SIZE_FORMULA)
def compile_formula(code: str) -> sp.Expr:
    """Parse a unit formula.

    Args:
        code: Formula over ``{value}``, e.g. ``"{value} * 1024"``

    Returns:
        SymPy expression in the ``value`` symbol

    Raises:
        ValueError: If the formula does not parse or uses other symbols
    """
    text = code.replace("{value}", "value")
    local_dict = {"value": VALUE_SYMBOL, **ALLOWED_FORMULA_NAMES}
    try:
        expr = parse_expr(text, local_dict=local_dict, transformations=TRANSFORMATIONS)
    except (SyntaxError, TypeError, TokenError, sp.SympifyError) as exc:
        raise ValueError(f"Invalid unit formula {code!r}: {exc}") from exc
    unknown = expr.free_symbols - {VALUE_SYMBOL}
    if unknown:
        names = ", ".join(sorted(str(symbol) for symbol in unknown))
        raise ValueError(f"Unit formula {code!r} uses unknown names: {names}")
    return expr


def _to_rational(value: float) -> sp.Rational:
    fraction = Fraction(repr(float(value)))
    return sp.Rational(fraction.numerator, fraction.denominator)


def convert_value(
    value: float, family: DynamicTypeDef, source_index: int, target_index: int
) -> float:
    """Move ``value`` from one level of ``family`` to another.

    Raises:
        ValueError: If a step on the way has no formula or the value is not finite
    """
    if source_index == target_index:
        return value
    current = _to_rational(value)
    step = 1 if target_index > source_index else -1
    index = source_index
    while index != target_index:
        level = family.level(index)
        code = level.upgrade_code if step > 0 else level.downgrade_code
        if not code:
            raise ValueError(
                f"{family.name}: no formula from level {index} towards {target_index}"
            )
        current = compile_formula(code).subs(VALUE_SYMBOL, current)
        index += step
    return float(current)


def convert_between(
    families: Mapping[str, DynamicTypeDef],
    value: float,
    source: DynamicTypeLevel,
    target: DynamicTypeLevel,
) -> float:
    """Convert between two levels of the same family."""
    if source.group_name != target.group_name:
        raise ValueError(f"Cannot convert {source.group_name} to {target.group_name}")
    family = families[source.group_name]
    return convert_value(value, family, source.index, target.index)
