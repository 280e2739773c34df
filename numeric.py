from __future__ import annotations
from fractions import Fraction
from typing import Any, Union
import math

Number = Union[int, float, Fraction]

def is_number(value: Any) -> bool:
	# bool is an int subclass but never a literal here
	return isinstance(value, (int, float, Fraction)) and not isinstance(value, bool)

def is_exact(value: Any) -> bool:
	return is_number(value) and not isinstance(value, float)

def demote(value: Number) -> Number:
	"""Collapse an integral Fraction to int; other values pass through."""
	if isinstance(value, Fraction) and value.denominator == 1:
		return value.numerator
	return value

def parse_number(text: str) -> Number | None:
	s = text.strip()
	if not s:
		return None
	try:
		return int(s)
	except ValueError:
		pass
	try:
		f = float(s)
	except ValueError:
		return None
	if math.isnan(f) or math.isinf(f):
		return None
	# keep decimal literals exact
	return demote(Fraction(s))

def divide(a: Number, b: Number) -> Number:
	if is_exact(a) and is_exact(b):
		if b == 0:
			raise ZeroDivisionError("division by zero")
		return demote(Fraction(a) / Fraction(b))
	return a / b

def reciprocal(value: Number) -> Number:
	return divide(1, value)

def is_integral(value: Any) -> bool:
	if isinstance(value, float):
		return value.is_integer()
	return is_exact(value) and Fraction(value).denominator == 1

def numerical(obj: Any, prefer_value: bool = False) -> Any:
	"""Coerce obj to a number when it denotes one.

	A variable expression yields its literal parsed as a number, or the
	expression itself (the raw literal with prefer_value) when the literal is
	symbolic. Numbers pass through, strings are parsed when they can be, and
	anything else is returned untouched.
	"""
	# local import, expression depends on this module
	from expression import Expression, VARIABLE
	if isinstance(obj, Expression):
		if obj.type != VARIABLE:
			return obj
		literal = obj.value
		if is_number(literal):
			return literal
		num = parse_number(str(literal))
		if num is None:
			return literal if prefer_value else obj
		return num
	if is_number(obj):
		return obj
	if isinstance(obj, str):
		num = parse_number(obj)
		return obj if num is None else num
	return obj

def is_numerical(obj: Any) -> bool:
	return is_number(numerical(obj))

def to_string(value: Number) -> str:
	if isinstance(value, Fraction):
		if value.denominator == 1:
			return str(value.numerator)
		return f"{value.numerator}/{value.denominator}"
	if isinstance(value, float):
		return "%g" % value
	return str(value)
