from __future__ import annotations
from fractions import Fraction
from typing import Any, Dict, Optional, Sequence, Union

import numeric
from evaluator import evaluate
from expression import Expression, DIVISION
from factor import Factor, FactorSet, cancel, extract_factors, remove_factors
from matrix import Matrix
from parser import parse_expression
from primes import PrimeCache

NumberLike = Union[int, float, Fraction]


class CAS:
    """Entry point tying the parser, factorization and row reduction together.

    The prime cache used for every factorization is owned by the instance,
    so lookups are shared between calls on one CAS and nowhere else.
    """

    def __init__(self, primes: Optional[PrimeCache] = None) -> None:
        self.primes = primes if primes is not None else PrimeCache()

    def _wrap(self, obj: Any) -> Expression:
        if isinstance(obj, Expression):
            return obj
        if isinstance(obj, str):
            return parse_expression(obj)
        if numeric.is_number(obj):
            return Expression.variable(obj)
        raise TypeError("Unsupported object for wrapping")

    def parse(self, expr: str) -> Expression:
        return parse_expression(expr)

    def factors(self, expr: Any) -> FactorSet:
        return extract_factors(self._wrap(expr), self.primes)

    def remove_factors(self, expr: Any, factors: Sequence[Factor]) -> Expression:
        """Cancel factors out of expr; a parsed string is reduced in a fresh tree."""
        return remove_factors(self._wrap(expr), list(factors), self.primes)

    def cancel(self, expr: Any) -> Expression:
        return cancel(self._wrap(expr), self.primes)

    def eval(self, expr: Any, env: Dict[str, NumberLike] | None = None) -> Any:
        return evaluate(self._wrap(expr), env)

    def simplify(self, expr: Any) -> str:
        e = self._wrap(expr)
        if e.type == DIVISION:
            e = self.cancel(e)
        result = evaluate(e)
        if isinstance(result, Expression):
            return result.to_string()
        return numeric.to_string(result)

    def rref(self, matrix: Union[Matrix, Sequence[Sequence[NumberLike]]]) -> Matrix:
        """Reduced row-echelon form of a copy of matrix."""
        if isinstance(matrix, Matrix):
            m = matrix.copy()
        else:
            m = Matrix.from_rows(matrix)
        m.rref()
        return m
