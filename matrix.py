"""
Matrix

Row-major numeric matrix built on Vector rows and columns, with products,
transposition and in-place reduction to reduced row-echelon form.
"""
from __future__ import annotations
from typing import Any, List, Sequence
import logging

import numpy as np

import numeric
from numeric import Number
from vector import Vector, DimensionMismatch, ZERO_LENGTH

logger = logging.getLogger(__name__)

# rows shorter than this after elimination are replaced by exact zeros
ZERO_TOLERANCE = ZERO_LENGTH


class Matrix:
    def __init__(self, rows: int = 0, columns: int = 0) -> None:
        self.rows = rows
        self.columns = columns
        self.matrix = np.zeros(rows * columns, dtype=object)

    @staticmethod
    def from_rows(rows: Sequence[Sequence[Number]]) -> "Matrix":
        columns = len(rows[0]) if rows else 0
        if any(len(r) != columns for r in rows):
            raise DimensionMismatch("All rows must have the same number of columns")
        result = Matrix(len(rows), columns)
        result.set([v for r in rows for v in r])
        return result

    def set(self, values: Sequence[Number]) -> None:
        if len(values) > len(self.matrix):
            raise DimensionMismatch(
                f"{len(values)} values do not fit a {self.rows}x{self.columns} matrix"
            )
        for index, x in enumerate(values):
            self.matrix[index] = x

    def get(self, row: int, col: int) -> Number:
        return self.matrix[row * self.columns + col]

    def set_cell(self, row: int, col: int, value: Number) -> None:
        self.matrix[row * self.columns + col] = value

    def set_row(self, ith: int, vector: Vector) -> None:
        n = min(vector.dimensions(), self.columns)
        start = ith * self.columns
        for index in range(n):
            self.matrix[start + index] = vector.get_index(index)

    def row(self, ith: int) -> Vector:
        return Vector(self.matrix[ith * self.columns : (ith + 1) * self.columns])

    def column(self, ith: int) -> Vector:
        return Vector(self.matrix[x * self.columns + ith] for x in range(self.rows))

    def copy(self) -> "Matrix":
        result = Matrix(self.rows, self.columns)
        result.set(self.matrix.tolist())
        return result

    def to_list(self) -> List[List[Number]]:
        return [self.row(i).to_list() for i in range(self.rows)]

    def equals(self, that: "Matrix") -> bool:
        return (
            self.rows == that.rows
            and self.columns == that.columns
            and all(a == b for a, b in zip(self.matrix, that.matrix))
        )

    # -----------------
    # Arithmetic
    # -----------------
    def add(self, matrix: "Matrix") -> "Matrix":
        if (self.rows, self.columns) != (matrix.rows, matrix.columns):
            raise DimensionMismatch(
                f"cannot add {matrix.rows}x{matrix.columns} to {self.rows}x{self.columns}"
            )
        result = Matrix(self.rows, self.columns)
        result.set((self.matrix + matrix.matrix).tolist())
        return result

    def mul(self, other: Any) -> "Matrix":
        if numeric.is_number(other):
            return self.scalar_mul(other)
        if isinstance(other, Matrix):
            return self.mat_mul(other)
        raise TypeError(f"Cannot multiply a matrix by {type(other).__name__}")

    def mat_mul(self, that: "Matrix") -> "Matrix":
        if self.columns != that.rows:
            raise DimensionMismatch(
                f"not a valid matrix multiplication: {self.rows}x{self.columns} by {that.rows}x{that.columns}"
            )
        result = Matrix(self.rows, that.columns)
        for i in range(self.rows):
            row = self.row(i)
            for j in range(that.columns):
                result.set_cell(i, j, row.dot(that.column(j)))
        return result

    def scalar_mul(self, scalar: Number) -> "Matrix":
        result = Matrix(self.rows, self.columns)
        result.set((self.matrix * scalar).tolist())
        return result

    def transpose(self) -> "Matrix":
        result = Matrix(self.columns, self.rows)
        for i in range(self.columns):
            for j in range(self.rows):
                result.set_cell(i, j, self.get(j, i))
        return result

    # -----------------
    # Row reduction
    # -----------------
    def switch_row(self, r1: int, r2: int) -> "Matrix":
        row1 = self.row(r1)
        row2 = self.row(r2)
        self.set_row(r1, row2)
        self.set_row(r2, row1)
        return self

    def rref(self) -> None:
        """Reduce the matrix in place to reduced row-echelon form.

        Only column 0 gets a pivot search: the first row with a nonzero
        entry there is swapped to the top. After that each row i is
        normalised on its own leading entry and cleared from every other
        row, so a matrix that needs a later row exchange keeps its rows in
        their original order. Rows are never dropped.
        """
        if self.rows == 0 or self.columns == 0:
            return
        first = self.column(0).first_non_zero_index()
        if first is not None and first != 0:
            self.switch_row(0, first)
        for i in range(self.rows):
            self.reduce_column(i)
            logger.debug("rref after row %d:\n%s", i, self)

    def get_multiple(self, ith: int, jth: int) -> Number:
        """Multiple of row ith that clears row jth below/above its pivot."""
        r1 = self.row(ith)
        r2 = self.row(jth)
        index = r1.first_non_zero_index()
        if index is None:
            return 0
        r2v = r2.get_index(index)
        if r2v == 0:
            return 0
        return -numeric.divide(r2v, r1.get_index(index))

    def reduce_column(self, ith: int) -> None:
        self.reduce_row(ith)
        for j in range(self.rows):
            if j == ith:
                continue
            multiple = self.get_multiple(ith, j)
            r2 = self.row(j).add(self.row(ith).multiply(multiple))
            if r2.is_zero(ZERO_TOLERANCE):
                r2 = Vector.zero_vector(r2.dimensions())
            self.set_row(j, r2)

    def reduce_row(self, ith: int) -> None:
        r1 = self.row(ith)
        index = r1.first_non_zero_index()
        if index is None:
            return
        r1 = r1.divide(r1.get_index(index))
        r1.vector[index] = 1
        self.set_row(ith, r1)

    def print_matrix(self) -> str:
        lines = [
            ", ".join(numeric.to_string(self.get(j, i)) for i in range(self.columns))
            for j in range(self.rows)
        ]
        return "[\n" + "\n".join(lines) + "\n]"

    def __str__(self) -> str:
        return self.print_matrix()

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"
