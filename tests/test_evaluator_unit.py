from fractions import Fraction

import pytest

from evaluator import evaluate, subtract
from expression import Expression, ADDITION, MULTIPLICATION, SUBTRACTION
from parser import parse_expression


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2+3*4", 14),
        ("6/4", Fraction(3, 2)),
        ("2^10", 1024),
        ("2^-2", Fraction(1, 4)),
        ("1/3 + 2/3", 1),
        ("0.5*4", 2),
        ("7 - 10", -3),
    ],
)
def test_numeric_trees_fold_exactly(text: str, expected) -> None:
    result = evaluate(parse_expression(text))
    assert result == expected
    assert type(result) is type(expected)


def test_float_operand_makes_result_inexact() -> None:
    result = evaluate(Expression.multiplication(0.5, 3))
    assert isinstance(result, float)
    assert result == 1.5


def test_symbolic_parts_survive() -> None:
    e = evaluate(parse_expression("2*x*3"))
    assert e.type == MULTIPLICATION
    assert str(e) == "6*x"
    s = evaluate(parse_expression("x + 1 + 2"))
    assert s.type == ADDITION
    assert str(s) == "x+3"


def test_identities_drop_out() -> None:
    assert str(evaluate(parse_expression("x*1"))) == "x"
    assert str(evaluate(parse_expression("x+0"))) == "x"
    assert str(evaluate(parse_expression("x^1"))) == "x"
    assert evaluate(parse_expression("x^0")) == 1
    assert evaluate(parse_expression("0*x")) == 0
    assert evaluate(parse_expression("x/x")) == 1
    assert evaluate(parse_expression("x - x")) == 0


def test_environment_substitution() -> None:
    e = parse_expression("x^2 + y")
    assert evaluate(e, {"x": 3, "y": Fraction(1, 2)}) == Fraction(19, 2)
    partial = evaluate(e, {"x": 2})
    assert str(partial) == "y+4"
    assert evaluate("x", {"x": 5}) == 5
    assert evaluate(7) == 7


def test_expression_bindings_are_copied() -> None:
    binding = parse_expression("a+1")
    result = evaluate(parse_expression("2*x"), {"x": binding})
    assert str(result) == "2*(a+1)"
    assert str(binding) == "a+1"


def test_division_by_zero_raises() -> None:
    with pytest.raises(ZeroDivisionError):
        evaluate(parse_expression("1/0"))
    with pytest.raises(ZeroDivisionError):
        evaluate(parse_expression("x/0"))
    with pytest.raises(ZeroDivisionError):
        evaluate(parse_expression("0^-1"))


def test_negative_base_with_fractional_exponent_stays_symbolic() -> None:
    e = evaluate(Expression.power(-8, Fraction(1, 3)))
    assert isinstance(e, Expression)


def test_unsupported_input() -> None:
    with pytest.raises(TypeError):
        evaluate([1, 2])
    with pytest.raises(TypeError):
        evaluate("x", {"x": [1]})


def test_integral_is_left_alone() -> None:
    e = parse_expression("integral(2*3, x)")
    result = evaluate(e)
    assert result.equals(e)
    assert result is not e


def test_subtract_helper() -> None:
    assert subtract(5, 2) == 3
    assert subtract(Fraction(1, 2), Fraction(1, 2)) == 0
    n = Expression.variable("n")
    assert subtract(n, 0) is n
    diff = subtract(n, 1)
    assert diff.type == SUBTRACTION
    assert str(diff) == "n - 1"
    assert str(subtract(Expression.addition("n", 3), 1)) == "n+2"
    assert subtract(Expression.variable("n"), Expression.variable("n")) == 0
