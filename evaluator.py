"""
Evaluator

Folds the numeric parts of an expression tree. A fully numeric tree comes
back as a plain number (int or Fraction while every input is exact, float
otherwise); anything else comes back as a new, simplified Expression.
"""
from __future__ import annotations
from fractions import Fraction
from typing import Any, Dict, List, Optional

import numeric
from expression import (
    Expression,
    VARIABLE,
    POWER,
    MULTIPLICATION,
    ADDITION,
    SUBTRACTION,
    DIVISION,
    INTEGRAL,
)


def evaluate(expression: Any, env: Optional[Dict[str, Any]] = None) -> Any:
    """Evaluate expression, substituting names bound in env."""
    env = env or {}
    if not isinstance(expression, Expression):
        value = numeric.numerical(expression)
        if numeric.is_number(value):
            return value
        if isinstance(value, str) and value in env:
            return _bound(env[value])
        raise TypeError(f"Cannot evaluate {type(expression).__name__}")
    return _fold(expression, env)


def _bound(value: Any) -> Any:
    if isinstance(value, Expression):
        return value.copy()
    v = numeric.numerical(value)
    if not numeric.is_number(v):
        raise TypeError(f"Unsupported binding {value!r}")
    return v


def _fold(e: Expression, env: Dict[str, Any]) -> Any:
    kind = e.type
    if kind == VARIABLE:
        v = numeric.numerical(e, prefer_value=True)
        if numeric.is_number(v):
            return v
        if str(v) in env:
            return _bound(env[str(v)])
        return e.copy()
    if kind == INTEGRAL:
        return e.copy()
    values = [_fold(p, env) for p in e.parts()]
    if kind == ADDITION:
        return _add(values)
    if kind == MULTIPLICATION:
        return _mul(values)
    a, b = values
    if kind == SUBTRACTION:
        return subtract(a, b)
    if kind == DIVISION:
        return _div(a, b)
    if kind == POWER:
        return _pow(a, b)
    raise ValueError(f"Unknown expression type {kind}")


def _flatten(values: List[Any], kind: str) -> List[Any]:
    out: List[Any] = []
    for v in values:
        if isinstance(v, Expression) and v.type == kind:
            for p in v.parts():
                n = numeric.numerical(p)
                out.append(n if numeric.is_number(n) else p.copy())
        else:
            out.append(v)
    return out


def _add(values: List[Any]) -> Any:
    values = _flatten(values, ADDITION)
    total: Any = 0
    syms: List[Any] = []
    for v in values:
        if numeric.is_number(v):
            total = total + v
        else:
            syms.append(v)
    total = numeric.demote(total)
    if not syms:
        return total
    if total != 0:
        syms.append(total)
    if len(syms) == 1:
        return syms[0]
    return Expression.addition(*syms)


def _mul(values: List[Any]) -> Any:
    values = _flatten(values, MULTIPLICATION)
    product: Any = 1
    syms: List[Any] = []
    for v in values:
        if numeric.is_number(v):
            product = product * v
        else:
            syms.append(v)
    product = numeric.demote(product)
    if not syms or product == 0:
        return product
    if product != 1:
        syms.insert(0, product)
    if len(syms) == 1:
        return syms[0]
    return Expression.multiplication(*syms)


def subtract(a: Any, b: Any) -> Any:
    """a - b, exact on numbers; folds a trailing constant into a sum."""
    if numeric.is_number(a) and numeric.is_number(b):
        return numeric.demote(a - b)
    if numeric.is_number(b):
        if b == 0:
            return a
        if isinstance(a, Expression) and a.type == ADDITION:
            return _add([a, -b])
    if isinstance(a, Expression) and isinstance(b, Expression) and a.equals(b, exact=True):
        return 0
    return Expression.subtraction(a, b)


def _div(a: Any, b: Any) -> Any:
    if numeric.is_number(a) and numeric.is_number(b):
        return numeric.divide(a, b)
    if numeric.is_number(b):
        if b == 0:
            raise ZeroDivisionError("division by zero")
        if b == 1:
            return a
    if numeric.is_number(a) and a == 0:
        return 0
    if isinstance(a, Expression) and isinstance(b, Expression) and a.equals(b, exact=True):
        return 1
    return Expression.division(a, b)


def _pow(a: Any, b: Any) -> Any:
    if numeric.is_number(b):
        if b == 0:
            return 1
        if b == 1:
            return a
    if numeric.is_number(a) and numeric.is_number(b):
        if numeric.is_exact(a) and numeric.is_integral(b):
            n = int(b)
            if n < 0 and a == 0:
                raise ZeroDivisionError("zero to a negative power")
            return numeric.demote(Fraction(a) ** n)
        if a < 0 and not numeric.is_integral(b):
            # no real value; keep it symbolic
            return Expression.power(a, b)
        return float(a) ** float(b)
    if numeric.is_number(a) and a == 1:
        return 1
    return Expression.power(a, b)
