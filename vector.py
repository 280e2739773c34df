from __future__ import annotations
from typing import Any, Iterable, List, Optional, Sequence
import math

import numpy as np

import numeric
from numeric import Number

# length under which a vector counts as zero
ZERO_LENGTH = 1e-10


class DimensionMismatch(ValueError):
    """Operands have incompatible dimensions."""


class Vector:
    """Ordered, fixed-length tuple of numbers.

    Entries live in a numpy object array so ints and Fractions stay exact.
    Reads past the end give 0, and every arithmetic method returns a new
    vector.
    """

    def __init__(self, values: Iterable[Optional[Number]] = ()) -> None:
        self.vector = np.array([0 if v is None else v for v in values], dtype=object)

    @staticmethod
    def zero_vector(dim: int = 4) -> "Vector":
        return Vector([0] * dim)

    @staticmethod
    def create(obj: Any) -> "Vector":
        if isinstance(obj, Vector):
            return obj.copy()
        if isinstance(obj, dict):
            return Vector([obj.get("x", 0), obj.get("y", 0), obj.get("z", 0)])
        return Vector(list(obj))

    @staticmethod
    def lerp(start: Number, to: Number, percentage: Number) -> Number:
        """Linear interpolation between two numbers."""
        return start + (to - start) * percentage

    @staticmethod
    def lerp_vectors(a: "Vector", b: "Vector", percentage: Number) -> "Vector":
        if a.dimensions() != b.dimensions():
            raise DimensionMismatch("Vectors must have the same dimensions")
        return Vector(
            Vector.lerp(a.get_index(i), b.get_index(i), percentage)
            for i in range(a.dimensions())
        )

    @staticmethod
    def center_of_gravity(vectors: Sequence["Vector"]) -> "Vector":
        result = Vector.zero_vector(vectors[0].dimensions())
        for v in vectors:
            result = result.add(v)
        return result.divide(len(vectors))

    def dimensions(self) -> int:
        return len(self.vector)

    def get_index(self, index: int) -> Number:
        if 0 <= index < len(self.vector):
            v = self.vector[index]
            return 0 if v is None else v
        return 0

    def _padded(self, n: int) -> np.ndarray:
        return np.array([self.get_index(i) for i in range(n)], dtype=object)

    def first_non_zero_index(self) -> Optional[int]:
        nz = np.flatnonzero(self.vector != 0)
        return int(nz[0]) if len(nz) else None

    def equals(self, that: "Vector") -> bool:
        return that.dimensions() == self.dimensions() and all(
            x == that.get_index(i) for i, x in enumerate(self.vector)
        )

    def copy(self) -> "Vector":
        return Vector(self.vector)

    def to_list(self) -> List[Number]:
        return self.vector.tolist()

    # -----------------
    # Arithmetic
    # -----------------
    def add(self, that: "Vector") -> "Vector":
        return Vector(self.vector + that._padded(self.dimensions()))

    def subtract(self, that: "Vector") -> "Vector":
        return Vector(self.vector - that._padded(self.dimensions()))

    def multiply(self, scalar: Number) -> "Vector":
        return Vector(self.vector * scalar)

    def divide(self, scalar: Number) -> "Vector":
        """Divide every entry by scalar; dividing by 0 gives the zero vector."""
        if scalar == 0:
            return Vector.zero_vector(self.dimensions())
        return Vector(numeric.divide(v, scalar) for v in self.vector)

    def dot(self, that: "Vector") -> Number:
        products = self.vector * that._padded(self.dimensions())
        return numeric.demote(sum(products.tolist(), 0))

    def cross(self, that: "Vector") -> "Vector":
        """Cross product (self x that).

        Two dimensions give the one-element vector [a0*b1 - a1*b0]; other
        sizes use the cyclic form, which is the usual product in 3-D.
        """
        dim = self.dimensions()
        if that.dimensions() != dim:
            raise DimensionMismatch("Vector: cross product requires same dimensions")
        if dim == 2:
            return Vector(
                [self.get_index(0) * that.get_index(1) - self.get_index(1) * that.get_index(0)]
            )
        result: List[Number] = []
        index = dim
        for i in range(dim):
            u2 = self.get_index((i + 1) % dim)
            index = (index - 1) % dim
            v3 = that.get_index(index)
            index = (index - 1) % dim
            u3 = self.get_index((i + 2) % dim)
            v2 = that.get_index(index)
            result.append(u2 * v3 - u3 * v2)
        return Vector(result)

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def is_zero(self, tolerance: float = ZERO_LENGTH) -> bool:
        # squared lengths, exact entries may not fit a float
        return self.dot(self) < tolerance * tolerance

    def distance(self, that: "Vector") -> float:
        return self.subtract(that).length()

    def unit(self) -> "Vector":
        return self.divide(self.length())

    def get_vector_of_length(self, length: Number) -> "Vector":
        return self.divide(self.length() / length)

    def project(self, that: "Vector") -> "Vector":
        """Projection of self onto that."""
        percent = numeric.divide(self.dot(that), that.dot(that))
        return that.multiply(percent)

    def reject(self, that: "Vector") -> "Vector":
        return self.subtract(self.project(that))

    def angle_between(self, that: "Vector") -> float:
        cos = self.dot(that) / (self.length() * that.length())
        return math.acos(max(-1.0, min(1.0, float(cos))))

    def __len__(self) -> int:
        return self.dimensions()

    def __iter__(self):
        return iter(self.vector.tolist())

    def __str__(self) -> str:
        return ",".join(numeric.to_string(v) for v in self.vector)

    def __repr__(self) -> str:
        return f"Vector([{', '.join(numeric.to_string(v) for v in self.vector)}])"
