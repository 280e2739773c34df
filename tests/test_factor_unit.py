from fractions import Fraction

import pytest

import numeric
from expression import Expression, ADDITION, DIVISION, VARIABLE
from factor import (
    Factor,
    UnsupportedExpressionKind,
    cancel,
    common_factors,
    extract_factors,
    merge_exponents,
    reduce_exponent,
    remove_factors,
)
from parser import parse_expression
from primes import PrimeCache


def _names(factors):
    return [str(f) for f in factors]


# =====================
# extraction
# =====================


def test_extract_merges_equal_bases() -> None:
    factors = extract_factors(parse_expression("12x^2*x^3"))
    assert _names(factors) == ["2", "3", "x^5"]
    assert factors[2].exponent == 5


def test_extract_reuses_a_shared_cache() -> None:
    cache = PrimeCache()
    extract_factors(parse_expression("1000003*2"), cache)
    assert cache.limit >= 1000


@pytest.mark.parametrize(
    "text, expected",
    [
        ("7", ["7"]),
        ("1", ["1"]),
        ("4", ["4"]),
        ("8", ["8"]),
        ("9", ["9"]),
        ("12", ["2", "3"]),
        ("30", ["2", "3", "5"]),
        ("x", ["x"]),
        ("(x^2)^3", ["x^6"]),
        ("integral(x, x)", ["(integral(x,x))"]),
    ],
)
def test_extract_single_parts(text, expected) -> None:
    assert _names(extract_factors(parse_expression(text))) == expected


def test_prime_power_literal_keeps_its_value() -> None:
    assert _names(extract_factors(parse_expression("4x"))) == ["4", "x"]
    assert _names(extract_factors(parse_expression("25*x^2"))) == ["25", "x^2"]


def test_extract_symbolic_exponent() -> None:
    factors = extract_factors(parse_expression("x^n*x^2"))
    assert len(factors) == 1
    f = factors[0]
    assert f.is_symbolic
    assert f.exponent.type == ADDITION
    assert str(f.exponent) == "2+n"
    assert str(f) == "x^(2+n)"


def test_extract_does_not_touch_the_input() -> None:
    e = parse_expression("x^2*x")
    extract_factors(e)
    assert str(e) == "x^2*x"


@pytest.mark.parametrize("text", ["x+1", "x - 1", "x/y", "2*(x+1)"])
def test_extract_rejects_other_kinds(text) -> None:
    with pytest.raises(UnsupportedExpressionKind):
        extract_factors(parse_expression(text))


def test_unsupported_kind_is_a_value_error() -> None:
    assert issubclass(UnsupportedExpressionKind, ValueError)


# =====================
# exponent arithmetic
# =====================


def test_merge_exponents() -> None:
    assert merge_exponents(2, 3) == 5
    merged = merge_exponents(Fraction(1, 2), Fraction(1, 2))
    assert merged == 1
    assert isinstance(merged, int)
    assert str(merge_exponents(Expression.variable("n"), 2)) == "2+n"


def test_reduce_exponent() -> None:
    assert reduce_exponent(5, 2) == 3
    assert str(reduce_exponent(Expression.variable("n"), 1)) == "n - 1"
    assert str(reduce_exponent(Expression.addition("n", 3), 1)) == "n+2"
    assert reduce_exponent(Expression.variable("n"), Expression.variable("n")) == 0


# =====================
# removal
# =====================


def test_remove_numeric_and_symbolic_factors() -> None:
    e = parse_expression("6*x^2*y")
    factors = [Factor(Expression.variable(2)), Factor(Expression.variable("x"), 2)]
    reduced = remove_factors(e, factors)
    assert str(reduced) == "3*y"
    # the caller's factor set is left as it was
    assert factors[0].exponent == 1
    assert factors[1].exponent == 2


def test_numeric_factor_divides_only_once() -> None:
    e = parse_expression("12*x")
    reduced = remove_factors(e, [Factor(Expression.variable(2), 2)])
    assert str(reduced) == "6*x"


def test_remove_collapses_a_single_part() -> None:
    reduced = remove_factors(parse_expression("x*y"), [Factor(Expression.variable("x"))])
    assert reduced.type == VARIABLE
    assert reduced.value == "y"


def test_remove_drops_the_multiplicative_identity() -> None:
    reduced = remove_factors(parse_expression("2*x*y"), [Factor(Expression.variable(2))])
    assert str(reduced) == "x*y"


def test_remove_every_matching_part() -> None:
    reduced = remove_factors(parse_expression("x*x^2"), [Factor(Expression.variable("x"))])
    assert numeric.numerical(reduced) == 1


def test_unmatched_factors_are_skipped() -> None:
    factors = [Factor(Expression.variable("z")), Factor(Expression.variable(5))]
    reduced = remove_factors(parse_expression("x*y"), factors)
    assert str(reduced) == "x*y"
    assert factors[0].exponent == 1
    assert factors[1].exponent == 1


def test_spent_factors_are_skipped() -> None:
    reduced = remove_factors(parse_expression("x*y"), [Factor(Expression.variable("x"), 0)])
    assert str(reduced) == "x*y"


def test_other_kinds_come_back_unchanged() -> None:
    e = parse_expression("x^2")
    assert remove_factors(e, [Factor(Expression.variable("x"))]) is e


# =====================
# common factors and cancellation
# =====================


def test_common_factors_take_the_smaller_exponent() -> None:
    left = extract_factors(parse_expression("x^3*y*2"))
    right = extract_factors(parse_expression("x*2*z"))
    assert _names(common_factors(left, right)) == ["x", "2"]


def test_common_symbolic_exponents_must_match() -> None:
    xn = extract_factors(parse_expression("x^n"))
    assert _names(common_factors(xn, extract_factors(parse_expression("x^n")))) == ["x^(n)"]
    assert common_factors(xn, extract_factors(parse_expression("x^2"))) == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("(x^2*y)/(x*y^2)", "x/y"),
        ("6/4", "3/2"),
        ("(2x)/2", "x"),
        ("2^3/2", "4"),
        ("x^n/x^n", "1"),
        ("(6x^2*y)/(4x)", "3*y*x/2"),
        ("12/18", "2/3"),
        ("(4x)/(8y)", "x/(2*y)"),
    ],
)
def test_cancel(text, expected) -> None:
    assert str(cancel(parse_expression(text))) == expected


def test_cancel_leaves_input_untouched() -> None:
    e = parse_expression("(x^2*y)/(x*y^2)")
    cancel(e)
    assert str(e) == "x^2*y/(x*y^2)"


def test_cancel_returns_unfactorable_division_as_is() -> None:
    e = parse_expression("(x+1)/(x+1)")
    result = cancel(e)
    assert result.type == DIVISION
    assert result.equals(e)
    assert result is not e


def test_cancel_of_non_division_is_a_copy() -> None:
    e = parse_expression("x*y")
    result = cancel(e)
    assert result.equals(e)
    assert result is not e
