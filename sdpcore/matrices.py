"""Vectors and matrices for the block-structured problem data.

Dense storage is a two-dimensional numpy array indexed ``[row, column]``.
Sparse matrices keep the upper or lower triangle of a symmetric matrix as
coordinate triples with a fixed capacity.
"""

from __future__ import annotations

import enum
import sys
from typing import Iterator, Optional, Sequence, TextIO, Union

import numpy as np

P_FORMAT = "%+18.36e"
SYMMETRY_TOLERANCE = 1.0e-8
DENSE_SWITCH_RATIO = 0.20

_STDOUT = object()


def _resolve_output(fpout: object) -> Optional[TextIO]:
    if fpout is _STDOUT:
        return sys.stdout
    return fpout  # type: ignore[return-value]


def _fmt(value: float) -> str:
    return P_FORMAT % float(value)


class Vector:
    """A real vector of fixed dimension."""

    def __init__(self, n_dim: int = 0, value: float = 0.0) -> None:
        if n_dim < 0:
            raise ValueError("Vector: n_dim is negative")
        self.ele = np.full(n_dim, float(value), dtype=float)

    @property
    def n_dim(self) -> int:
        return int(self.ele.shape[0])

    def __len__(self) -> int:
        return self.n_dim

    def fill(self, value: float) -> None:
        """Set every element to ``value``."""
        if self.n_dim <= 0:
            raise ValueError("Vector: n_dim is nonpositive")
        self.ele.fill(float(value))

    def set_zero(self) -> None:
        self.fill(0.0)

    def display(self, fpout: object = _STDOUT, scalar: Optional[float] = None) -> None:
        """Write the elements, optionally multiplied by ``scalar``."""
        out = _resolve_output(fpout)
        if out is None:
            return
        values = self.ele if scalar is None else self.ele * float(scalar)
        if values.size == 0:
            out.write("{  }\n")
            return
        body = "".join(_fmt(v) + "," for v in values[:-1])
        out.write("{" + body + _fmt(values[-1]) + "}\n")

    def copy_from(self, other: "Vector") -> None:
        """Make this vector an independent copy of ``other``."""
        if other is self:
            return
        if other.n_dim <= 0:
            raise ValueError("Vector: n_dim is nonpositive")
        self.ele = other.ele.copy()


class BlockVector:
    """A sequence of vectors, one per block."""

    def __init__(self, block_struct: Sequence[int], value: float = 0.0) -> None:
        if len(block_struct) <= 0:
            raise ValueError("BlockVector: n_block is nonpositive")
        self.block_struct = [int(size) for size in block_struct]
        self.ele = [Vector(abs(size), value) for size in self.block_struct]

    @property
    def n_block(self) -> int:
        return len(self.ele)

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.ele)

    def fill(self, value: float) -> None:
        for block in self.ele:
            block.fill(value)

    def set_zero(self) -> None:
        for block in self.ele:
            block.set_zero()

    def display(self, fpout: object = _STDOUT) -> None:
        out = _resolve_output(fpout)
        if out is None:
            return
        out.write("{ ")
        for block in self.ele:
            block.display(out)
        out.write("} \n")

    def copy_from(self, other: "BlockVector") -> None:
        """Make this block vector an independent copy of ``other``."""
        if other is self:
            return
        if other.n_block <= 0:
            raise ValueError("BlockVector: n_block is nonpositive")
        self.block_struct = list(other.block_struct)
        copies = []
        for block in other.ele:
            vec = Vector()
            vec.copy_from(block)
            copies.append(vec)
        self.ele = copies


class MatrixType(enum.Enum):
    """Storage scheme of a matrix."""

    SPARSE = "sparse"
    DENSE = "dense"


def _format_dense(matrix: np.ndarray, opening: str) -> str:
    n_row = matrix.shape[0]
    parts = [opening]
    for i in range(n_row - 1):
        row = matrix[i]
        parts.append(" " if i == 0 else "  ")
        parts.append("{" + "".join(_fmt(v) + "," for v in row[:-1]))
        parts.append(_fmt(row[-1]) + " },\n")
    if n_row > 1:
        parts.append("  {")
    last = matrix[n_row - 1]
    parts.append("".join(_fmt(v) + "," for v in last[:-1]))
    parts.append(_fmt(last[-1]) + " }")
    parts.append("   }\n" if n_row > 1 else "\n")
    return "".join(parts)


class SparseMatrix:
    """A symmetric matrix stored either as coordinates or densely."""

    def __init__(
        self,
        n_row: int,
        n_col: int,
        kind: MatrixType = MatrixType.SPARSE,
        nonzero_number: int = 0,
    ) -> None:
        if n_row <= 0 or n_col <= 0:
            raise ValueError("SparseMatrix: dimensions are nonpositive")
        self.n_row = n_row
        self.n_col = n_col
        self.kind = MatrixType(kind)
        self.de_ele: Optional[np.ndarray] = None
        if self.kind is MatrixType.SPARSE:
            capacity = max(int(nonzero_number), 0)
            self.nonzero_number = int(nonzero_number)
            self.nonzero_count = 0
            self.nonzero_effect = 0
            self.row_index = np.zeros(capacity, dtype=np.int64)
            self.column_index = np.zeros(capacity, dtype=np.int64)
            self.sp_ele = np.zeros(capacity, dtype=float)
        else:
            length = n_row * n_col
            self.nonzero_number = length
            self.nonzero_count = length
            self.nonzero_effect = length
            self.de_ele = np.zeros((n_row, n_col), dtype=float)
            self._clear_sparse()

    def _clear_sparse(self) -> None:
        self.row_index = np.zeros(0, dtype=np.int64)
        self.column_index = np.zeros(0, dtype=np.int64)
        self.sp_ele = np.zeros(0, dtype=float)

    def _entries(self) -> Iterator[tuple[int, int, float]]:
        n = self.nonzero_count
        for i, j, v in zip(self.row_index[:n], self.column_index[:n], self.sp_ele[:n]):
            yield int(i), int(j), float(v)

    def display(self, fpout: object = _STDOUT) -> None:
        out = _resolve_output(fpout)
        if out is None:
            return
        if self.kind is MatrixType.SPARSE:
            lines = "".join(
                "val[%d,%d] = %s\n" % (i, j, _fmt(v)) for i, j, v in self._entries()
            )
            out.write("{" + lines + "}\n")
        else:
            out.write(_format_dense(self.de_ele, "{\n"))

    def copy_from(self, other: "SparseMatrix") -> None:
        """Make this matrix an independent copy of ``other``."""
        if other is self:
            return
        self.n_row = other.n_row
        self.n_col = other.n_col
        self.kind = other.kind
        self.nonzero_number = other.nonzero_number
        self.nonzero_count = other.nonzero_count
        self.nonzero_effect = other.nonzero_effect
        self.row_index = other.row_index.copy()
        self.column_index = other.column_index.copy()
        self.sp_ele = other.sp_ele.copy()
        self.de_ele = None if other.de_ele is None else other.de_ele.copy()

    def change_to_dense(self, force: bool = False) -> None:
        """Switch to dense storage when at least 20% of entries are stored."""
        if self.kind is not MatrixType.SPARSE:
            return
        length = self.n_row * self.n_col
        if not force and self.nonzero_count < length * DENSE_SWITCH_RATIO:
            return
        dense = np.zeros((self.n_row, self.n_col), dtype=float)
        for i, j, v in self._entries():
            dense[i, j] = v
            if i != j:
                dense[j, i] = v
        self.kind = MatrixType.DENSE
        self.de_ele = dense
        self.nonzero_count = self.nonzero_number = self.nonzero_effect = length
        self._clear_sparse()

    def set_zero(self) -> None:
        if self.kind is MatrixType.SPARSE:
            self.nonzero_count = 0
            self.nonzero_effect = 0
        else:
            self.de_ele.fill(0.0)

    def set_identity(self, scalar: float = 1.0) -> None:
        """Make this matrix ``scalar`` times the identity."""
        if self.n_row != self.n_col:
            raise ValueError("SparseMatrix: identity matrix must be square")
        if self.kind is MatrixType.SPARSE:
            if self.n_col > self.nonzero_number:
                raise ValueError("SparseMatrix: cannot store over nonzero_number")
            n = self.n_col
            self.nonzero_count = n
            self.nonzero_effect = n
            self.row_index[:n] = np.arange(n)
            self.column_index[:n] = np.arange(n)
            self.sp_ele[:n] = float(scalar)
        else:
            self.de_ele.fill(0.0)
            np.fill_diagonal(self.de_ele, float(scalar))

    def sort_sparse_index(self) -> Optional[tuple[int, int]]:
        """Normalise storage and check symmetry.

        Sparse entries are moved to the upper triangle, sorted column-major
        and duplicates are merged, keeping the first. Returns the position of
        the first pair whose values differ by more than the tolerance, or
        None when the matrix is symmetric.
        """
        if self.kind is MatrixType.DENSE:
            if self.n_row != self.n_col:
                raise ValueError("SparseMatrix: matrix is not square")
            for j in range(1, self.n_col):
                for i in range(j):
                    if abs(self.de_ele[i, j] - self.de_ele[j, i]) > SYMMETRY_TOLERANCE:
                        return (i, j)
            return None

        n = self.nonzero_count
        rows = self.row_index[:n]
        cols = self.column_index[:n]
        upper_rows = np.minimum(rows, cols)
        upper_cols = np.maximum(rows, cols)
        order = np.lexsort((upper_rows, upper_cols))
        kept: list[tuple[int, int, float]] = []
        mismatch: Optional[tuple[int, int]] = None
        for k in order:
            r, c, v = int(upper_rows[k]), int(upper_cols[k]), float(self.sp_ele[k])
            if kept and kept[-1][0] == r and kept[-1][1] == c:
                if abs(kept[-1][2] - v) > SYMMETRY_TOLERANCE and mismatch is None:
                    mismatch = (r, c)
                self.nonzero_effect -= 1 if r == c else 2
                continue
            kept.append((r, c, v))
        for pos, (r, c, v) in enumerate(kept):
            self.row_index[pos] = r
            self.column_index[pos] = c
            self.sp_ele[pos] = v
        self.nonzero_count = len(kept)
        return mismatch

    def to_array(self) -> np.ndarray:
        """Return the full symmetric matrix as a new dense array."""
        if self.kind is MatrixType.DENSE:
            return self.de_ele.copy()
        dense = np.zeros((self.n_row, self.n_col), dtype=float)
        for i, j, v in self._entries():
            dense[i, j] = v
            dense[j, i] = v
        return dense


class DenseMatrix:
    """A dense real matrix."""

    def __init__(self, n_row: int, n_col: int) -> None:
        if n_row <= 0 or n_col <= 0:
            raise ValueError("DenseMatrix: dimensions are nonpositive")
        self.de_ele = np.zeros((n_row, n_col), dtype=float)

    @property
    def n_row(self) -> int:
        return int(self.de_ele.shape[0])

    @property
    def n_col(self) -> int:
        return int(self.de_ele.shape[1])

    def display(self, fpout: object = _STDOUT) -> None:
        out = _resolve_output(fpout)
        if out is None:
            return
        out.write(_format_dense(self.de_ele, "{"))

    def copy_from(self, other: Union["DenseMatrix", SparseMatrix]) -> None:
        """Copy a dense or symmetric sparse matrix into this one."""
        if other is self:
            return
        if isinstance(other, SparseMatrix):
            self.de_ele = other.to_array()
        else:
            self.de_ele = other.de_ele.copy()

    def set_zero(self) -> None:
        self.de_ele.fill(0.0)

    def set_identity(self, scalar: float = 1.0) -> None:
        if self.n_row != self.n_col:
            raise ValueError("DenseMatrix: identity matrix must be square")
        self.de_ele.fill(0.0)
        np.fill_diagonal(self.de_ele, float(scalar))


def format_vector(values: Sequence[float], inc: int = 1) -> str:
    """Format a vector in bracketed column form, taking every ``inc``-th value."""
    picked = list(values)[::inc]
    if not picked:
        raise ValueError("cannot format an empty vector")
    body = "".join(_fmt(v) + "; " for v in picked[:-1])
    return " [ " + body + _fmt(picked[-1]) + " ] "


def format_matrix(matrix: Union[np.ndarray, Sequence[Sequence[float]]]) -> str:
    """Format a matrix row by row in bracketed form."""
    rows = np.asarray(matrix, dtype=float)
    parts = ["[ "]
    for i, row in enumerate(rows):
        parts.append("[ " + ", ".join(_fmt(v) for v in row))
        parts.append("]; " if i < len(rows) - 1 else "] ")
    parts.append("]")
    return "".join(parts)


def format_tridiagonal(diagonal: Sequence[float], offdiagonal: Sequence[float]) -> str:
    """Format the symmetric tridiagonal matrix with the given diagonals."""
    n = len(diagonal)
    parts = [" [ "]
    for i in range(n):
        entries = []
        for j in range(n):
            if i == j:
                entries.append(_fmt(diagonal[i]))
            elif abs(i - j) == 1:
                entries.append(_fmt(offdiagonal[min(i, j)]))
            else:
                entries.append(_fmt(0.0))
        parts.append(" [ " + ", ".join(entries))
        parts.append("]; " if i < n - 1 else "] ")
    parts.append(" ] ")
    return "".join(parts)