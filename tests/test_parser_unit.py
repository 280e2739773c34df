from fractions import Fraction

import pytest

import numeric
from expression import ADDITION, INTEGRAL, MULTIPLICATION, POWER, SUBTRACTION, VARIABLE
from parser import expr_tokenize, parse_expression


def test_implicit_multiplication_tokens() -> None:
    kinds = [t.kind for t in expr_tokenize("2x(y)")]
    assert kinds == ["NUM", "*", "ID", "*", "(", "ID", ")"]


def test_products_are_flattened() -> None:
    e = parse_expression("a*b*c")
    assert e.type == MULTIPLICATION
    assert [p.value for p in e.parts()] == ["a", "b", "c"]
    s = parse_expression("a+b+c")
    assert s.type == ADDITION
    assert len(s.parts()) == 3


def test_power_binds_tighter_than_negation() -> None:
    e = parse_expression("-x^2")
    assert e.type == MULTIPLICATION
    first, second = e.parts()
    assert first.value == -1
    assert second.type == POWER
    assert str(e) == "-1*x^2"


def test_negative_literals() -> None:
    assert parse_expression("-3").value == -3
    e = parse_expression("2^-1")
    assert e.type == POWER
    assert e.part("power").value == -1
    assert str(e) == "2^(-1)"


def test_decimal_literal_is_exact() -> None:
    e = parse_expression("2.5")
    assert e.type == VARIABLE
    assert numeric.numerical(e) == Fraction(5, 2)


def test_subtraction_is_left_associative() -> None:
    e = parse_expression("x - y - z")
    assert e.type == SUBTRACTION
    assert e.part("minuend").type == SUBTRACTION
    assert str(e) == "x - y - z"


def test_integral_call() -> None:
    e = parse_expression("integral(x^2, x)")
    assert e.type == INTEGRAL
    assert e.part("input").type == POWER
    assert e.part("respect_to").value == "x"


@pytest.mark.parametrize(
    "text",
    ["x^2*y", "(x+1)(x-1)", "x/(y*z)", "2^(-1)", "-x^2", "integral(3, x)", "(x^2)^3"],
)
def test_printing_reparses_to_the_same_tree(text: str) -> None:
    e = parse_expression(text)
    assert parse_expression(str(e)).equals(e)


@pytest.mark.parametrize(
    "text", ["x + (", "x)", "x $ 1", "integral(x)", "", "*"]
)
def test_malformed_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_expression(text)
