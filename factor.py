"""
Factorization

Splits a product of powers of leaves into Factors (base, exponent) and
cancels Factors back out of a product. Exponents are plain numbers while
everything merged into them was numeric, and become expressions otherwise.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union
import logging
import math

import numeric
from evaluator import evaluate
from expression import (
    Expression,
    VARIABLE,
    POWER,
    MULTIPLICATION,
    DIVISION,
    INTEGRAL,
)
from numeric import Number
from primes import PrimeCache

logger = logging.getLogger(__name__)

Exponent = Union[Number, Expression]


class UnsupportedExpressionKind(ValueError):
    """Extraction met a node type that is not a product of powers of leaves."""


@dataclass(eq=False)
class Factor:
    """One base raised to an exponent."""
    base: Expression
    exponent: Exponent = 1

    @property
    def is_symbolic(self) -> bool:
        return not numeric.is_number(self.exponent)

    def copy(self) -> "Factor":
        exponent = self.exponent
        if isinstance(exponent, Expression):
            exponent = exponent.copy()
        return Factor(self.base.copy(), exponent)

    def __str__(self) -> str:
        base = self.base.to_string()
        if not self.base.is_leaf():
            base = f"({base})"
        if self.is_symbolic:
            return f"{base}^({self.exponent})"
        if self.exponent == 1:
            return base
        return f"{base}^{numeric.to_string(self.exponent)}"

    def __repr__(self) -> str:
        return f"Factor({self.base.to_string()!r}, {self.exponent!s})"


FactorSet = List[Factor]


def _as_expression(value: Any) -> Expression:
    return value if isinstance(value, Expression) else Expression.variable(value)


def merge_exponents(existing: Exponent, incoming: Exponent) -> Exponent:
    if numeric.is_number(existing) and numeric.is_number(incoming):
        return numeric.demote(existing + incoming)
    return Expression.addition(_as_expression(incoming), _as_expression(existing))


def reduce_exponent(count: Exponent, amount: Exponent) -> Exponent:
    if numeric.is_number(count) and numeric.is_number(amount):
        return numeric.demote(count - amount)
    return evaluate(Expression.subtraction(count, amount))


def _outstanding(exponent: Exponent) -> bool:
    if numeric.is_number(exponent):
        return exponent > 0
    return True


# =====================
# Extraction
# =====================


def extract_factors(expression: Expression, primes: Optional[PrimeCache] = None) -> FactorSet:
    """Decompose expression into Factors, unique by exact base equality.

    Leaves holding a composite integer expand into their distinct primes,
    powers become one Factor after nested powers are flattened, and products
    merge the Factors of their parts in order of first appearance. Anything
    else raises UnsupportedExpressionKind.
    """
    if primes is None:
        primes = PrimeCache()
    kind = expression.type
    if kind in (VARIABLE, INTEGRAL):
        return _leaf_factors(expression, primes)
    if kind == POWER:
        return _power_factors(expression)
    if kind == MULTIPLICATION:
        return _multiplication_factors(expression, primes)
    raise UnsupportedExpressionKind(f"Cannot extract factors from {kind} '{expression}'")


def _leaf_factors(expression: Expression, primes: PrimeCache) -> FactorSet:
    n = numeric.numerical(expression)
    if numeric.is_number(n) and numeric.is_integral(n) and n > 1:
        found = primes.factor(n)
        distinct = sorted(set(found))
        if len(distinct) > 1:
            return [Factor(Expression.variable(p), 1) for p in distinct if p != n]
    return [Factor(expression.copy(), 1)]


def _power_factors(expression: Expression) -> FactorSet:
    flat = expression.flatten_power()
    return [Factor(flat.part("base"), numeric.numerical(flat.part("power")))]


def _multiplication_factors(expression: Expression, primes: PrimeCache) -> FactorSet:
    factors: FactorSet = []
    for part in expression.parts():
        for incoming in extract_factors(part, primes):
            existing = next(
                (f for f in factors if f.base.equals(incoming.base, exact=True)), None
            )
            if existing is None:
                factors.append(incoming)
            else:
                existing.exponent = merge_exponents(existing.exponent, incoming.exponent)
    return factors


# =====================
# Removal
# =====================


def strip_exponent(expression: Expression) -> Expression:
    if expression.type == POWER:
        return expression.part("base")
    return expression


def exponent_of(expression: Expression) -> Exponent:
    if expression.type == POWER:
        return numeric.numerical(expression.part("power"))
    return 1


def _discharge_numeric(expression: Expression, factor: Factor, value: Number, primes: PrimeCache) -> None:
    for part in expression.parts():
        n = numeric.numerical(part)
        if numeric.is_number(n) and value in primes.factor(n):
            quotient = evaluate(Expression.division(part.copy(), value))
            expression.replace(part, quotient)
            factor.exponent = reduce_exponent(factor.exponent, 1)
            logger.debug("divided %s by %s", numeric.to_string(n), numeric.to_string(value))
            return
    logger.debug("no part of %s is divisible by %s", expression, numeric.to_string(value))


def _discharge_symbolic(expression: Expression, factor: Factor) -> None:
    matches = [
        p for p in expression.parts() if strip_exponent(p).equals(factor.base, exact=True)
    ]
    if not matches:
        logger.debug("no part of %s has base %s", expression, factor.base)
    for part in matches:
        factor.exponent = reduce_exponent(factor.exponent, exponent_of(part))
        logger.debug("removed %s", part)
        expression.remove(part)


def _remove(expression: Expression, factors: FactorSet, primes: PrimeCache) -> Tuple[Expression, FactorSet]:
    remaining = [f.copy() for f in factors]
    if expression.type != MULTIPLICATION:
        return expression, remaining
    for factor in remaining:
        if not _outstanding(factor.exponent):
            continue
        value = numeric.numerical(factor.base)
        if numeric.is_number(value):
            _discharge_numeric(expression, factor, value, primes)
        else:
            _discharge_symbolic(expression, factor)
    parts = expression.parts()
    if len(parts) == 1:
        return parts[0].copy(), remaining
    if not parts:
        return Expression.variable(1), remaining
    return expression.remove_one(), remaining


def remove_factors(expression: Expression, factors: FactorSet, primes: Optional[PrimeCache] = None) -> Expression:
    """Cancel factors out of a multiplication, editing it in place.

    A numeric factor divides the first part whose value it divides, once.
    A symbolic factor removes every part whose base matches it, whatever the
    part's exponent. Unmatched factors are skipped. The given factors are
    not modified. A product left with one part collapses to it, an emptied
    product becomes 1, and other expression kinds are returned as they are.
    """
    if primes is None:
        primes = PrimeCache()
    reduced, _ = _remove(expression, factors, primes)
    return reduced


# =====================
# Cancellation
# =====================


def common_factors(left: FactorSet, right: FactorSet) -> FactorSet:
    """Factors whose base occurs on both sides, at the smaller exponent."""
    shared: FactorSet = []
    for f in left:
        other = next((g for g in right if g.base.equals(f.base, exact=True)), None)
        if other is None:
            continue
        if f.is_symbolic or other.is_symbolic:
            if isinstance(f.exponent, Expression) and f.exponent.equals(other.exponent):
                shared.append(f.copy())
            continue
        exponent = min(f.exponent, other.exponent)
        if exponent > 0:
            shared.append(Factor(f.base.copy(), exponent))
    return shared


def _integer_part(side: Expression) -> Optional[Tuple[int, int]]:
    """Index and value of the first nonzero exact integer part of side."""
    parts = side.parts() if side.type == MULTIPLICATION else [side]
    for index, part in enumerate(parts):
        n = numeric.numerical(part)
        if numeric.is_exact(n) and numeric.is_integral(n) and n != 0:
            return index, int(n)
    return None


def _divide_part(side: Expression, index: int, divisor: int) -> Expression:
    if side.type != MULTIPLICATION:
        return Expression.variable(int(numeric.numerical(side)) // divisor)
    out = side.copy()
    part = out.parts()[index]
    out.replace(part, int(numeric.numerical(part)) // divisor)
    return _as_expression(evaluate(out))


def _cancel_coefficients(numerator: Expression, denominator: Expression) -> Tuple[Expression, Expression]:
    top, bottom = _integer_part(numerator), _integer_part(denominator)
    if top is None or bottom is None:
        return numerator, denominator
    g = math.gcd(top[1], bottom[1])
    if g < 2:
        return numerator, denominator
    logger.debug("dividing coefficients %d and %d by %d", top[1], bottom[1], g)
    return (
        _divide_part(numerator, top[0], g),
        _divide_part(denominator, bottom[0], g),
    )


def _factorable(expression: Expression) -> bool:
    kind = expression.type
    if kind in (VARIABLE, INTEGRAL, POWER):
        return True
    if kind == MULTIPLICATION:
        return all(_factorable(p) for p in expression.parts())
    return False


def _cancel_side(side: Expression, shared: FactorSet, primes: PrimeCache) -> Expression:
    product = side.copy() if side.type == MULTIPLICATION else Expression.multiplication(side)
    reduced, remaining = _remove(product, shared, primes)
    # a whole power was removed for part of its exponent; put the excess back
    restore = [reduced]
    for f in remaining:
        if numeric.is_numerical(f.base):
            continue
        if numeric.is_number(f.exponent):
            if f.exponent < 0:
                restore.append(Expression.power(f.base, -f.exponent))
            continue
        excess = evaluate(Expression.subtraction(0, f.exponent))
        if not (numeric.is_number(excess) and excess == 0):
            restore.append(Expression.power(f.base, excess))
    if len(restore) > 1:
        reduced = evaluate(Expression.multiplication(*restore))
    return _as_expression(reduced)


def cancel(expression: Expression, primes: Optional[PrimeCache] = None) -> Expression:
    """Cancel the factors a division's numerator and denominator share.

    Returns a new expression; the input is left untouched. Divisions whose
    sides are not products of powers of leaves come back as a copy.
    """
    if expression.type != DIVISION:
        return expression.copy()
    if primes is None:
        primes = PrimeCache()
    # fold numeric powers and products first so both sides expose plain numbers
    numerator = _as_expression(evaluate(expression.part("numerator")))
    denominator = _as_expression(evaluate(expression.part("denominator")))
    if not (_factorable(numerator) and _factorable(denominator)):
        return expression.copy()
    numerator, denominator = _cancel_coefficients(numerator, denominator)
    while True:
        shared = common_factors(
            extract_factors(numerator, primes), extract_factors(denominator, primes)
        )
        if not shared:
            break
        new_numerator = _cancel_side(numerator, shared, primes)
        new_denominator = _cancel_side(denominator, shared, primes)
        if new_numerator.equals(numerator) and new_denominator.equals(denominator):
            break
        numerator, denominator = new_numerator, new_denominator
    d = numeric.numerical(denominator)
    if numeric.is_number(d) and d == 1:
        return numerator
    return Expression.division(numerator, denominator)
