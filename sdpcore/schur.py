"""Sparsity pattern of the Schur complement matrix.

The Schur complement matrix B of the Newton system is symmetric. When its
sparsity pattern comes from a chordal extension, only the upper triangle of
the permuted matrix is stored, row by row. This module builds that pattern
from an elimination ordering and the cliques of the symbolic factorisation.
It also works out, for every pair of constraints that share a block, where
their contribution to B lands in the stored entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

# Sequence of (constraint, block_index, matrix) triples for each SDP block,
# where ``matrix`` has a ``nonzero_effect`` attribute.
SdpConstraints = Sequence[Sequence[tuple[int, int, Any]]]
# Sequence of (constraint, block_index, value) triples for each LP block.
LpConstraints = Sequence[Sequence[tuple[int, int, float]]]


@dataclass(frozen=True)
class AggregateEntry:
    """A pair of constraints with nonzero data in one block.

    ``location`` is the position of B[constraint1, constraint2] among the
    stored entries of the sparse Schur matrix.
    """

    constraint1: int
    constraint2: int
    block_index1: int
    block_index2: int
    location: int


class SparseSchurPattern:
    """Stored upper triangle of the permuted Schur complement matrix.

    ``ordering[k]`` is the original index of row ``k`` of the permuted
    matrix and ``reverse_ordering`` is its inverse. The entries of row ``k``
    sit at positions ``diagonal_index[k]`` up to ``diagonal_index[k + 1]``,
    starting with the diagonal.
    """

    def __init__(
        self,
        m: int,
        new_to_old: Sequence[int],
        cliques: Sequence[Sequence[int]],
    ) -> None:
        if m <= 0:
            raise ValueError("SparseSchurPattern: m is nonpositive")
        ordering = np.asarray(list(new_to_old), dtype=np.int64)
        if ordering.shape != (m,) or sorted(ordering.tolist()) != list(range(m)):
            raise ValueError("SparseSchurPattern: ordering is not a permutation of range(m)")
        self.m = m
        self.ordering = ordering
        self.reverse_ordering = np.empty(m, dtype=np.int64)
        self.reverse_ordering[ordering] = np.arange(m)

        clique_rows = [
            [int(self.reverse_ordering[int(node)]) for node in clique]
            for clique in cliques
        ]

        # Each index belongs to the front of the last clique holding it; the
        # rest of that clique gives the length of its row.
        counter = [-1] * m
        seen = [False] * m
        n_front = [0] * len(clique_rows)
        for number in range(len(clique_rows) - 1, -1, -1):
            rows = clique_rows[number]
            n_front[number] = len(rows)
            for position, row in enumerate(rows):
                if seen[row]:
                    n_front[number] = position
                    break
                counter[row] = len(rows) - position
                seen[row] = True

        if any(count == -1 for count in counter):
            raise ValueError("SparseSchurPattern: cliques do not cover every index")

        self.diagonal_index = np.concatenate(
            ([0], np.cumsum(np.asarray(counter, dtype=np.int64)))
        ).astype(np.int64)
        total = int(self.diagonal_index[-1])
        self.row_index = np.zeros(total, dtype=np.int64)
        self.column_index = np.zeros(total, dtype=np.int64)

        nonzeros = 0
        for rows, front in zip(clique_rows, n_front):
            for first in range(front):
                ii = rows[first]
                for second in range(first, len(rows)):
                    offset = second - first
                    if offset >= counter[ii]:
                        raise ValueError("SparseSchurPattern: inconsistent cliques")
                    index = int(self.diagonal_index[ii]) + offset
                    self.row_index[index] = ii
                    self.column_index[index] = rows[second]
                    nonzeros += 1
        if nonzeros != total:
            raise ValueError("SparseSchurPattern: inconsistent cliques")

        self._positions = {
            (int(r), int(c)): index
            for index, (r, c) in enumerate(zip(self.row_index, self.column_index))
        }

    @property
    def nonzero_count(self) -> int:
        """Number of stored entries."""
        return int(self.row_index.shape[0])

    def locate(self, i: int, j: int) -> int:
        """Return the stored position of B[i, j] for original indices ``i`` and ``j``."""
        ri = int(self.reverse_ordering[i])
        rj = int(self.reverse_ordering[j])
        key = (min(ri, rj), max(ri, rj))
        try:
            return self._positions[key]
        except KeyError:
            raise ValueError(
                f"SparseSchurPattern: entry ({i}, {j}) is not in the pattern"
            ) from None

    def aggregate_sdp(self, sdp_constraints: SdpConstraints) -> list[list[AggregateEntry]]:
        """List, per SDP block, the constraint pairs that contribute to B.

        Of each pair the constraint with more nonzero effect comes first;
        on a tie the one with the larger index does.
        """
        result = []
        for block in sdp_constraints:
            entries = []
            for i, ib, ai in block:
                inz = ai.nonzero_effect
                for j, jb, aj in block:
                    jnz = aj.nonzero_effect
                    if inz < jnz or (inz == jnz and i < j):
                        continue
                    entries.append(AggregateEntry(i, j, ib, jb, self.locate(i, j)))
            result.append(entries)
        return result

    def aggregate_lp(self, lp_constraints: LpConstraints) -> list[list[AggregateEntry]]:
        """List, per LP block, the constraint pairs ``(i, j)`` with ``i >= j``."""
        result = []
        for block in lp_constraints:
            entries = []
            for i, ib, _ in block:
                for j, jb, _ in block:
                    if i < j:
                        continue
                    entries.append(AggregateEntry(i, j, ib, jb, self.locate(i, j)))
            result.append(entries)
        return result

    def permute_vec(self, vec: Sequence[float]) -> np.ndarray:
        """Reorder a vector from original into permuted order."""
        values = np.asarray(vec, dtype=float)
        if values.shape != (self.m,):
            raise ValueError("SparseSchurPattern: vector has the wrong length")
        return values[self.ordering]

    def reverse_permute_vec(self, vec: Sequence[float]) -> np.ndarray:
        """Reorder a vector from permuted back into original order."""
        values = np.asarray(vec, dtype=float)
        if values.shape != (self.m,):
            raise ValueError("SparseSchurPattern: vector has the wrong length")
        result = np.empty(self.m, dtype=float)
        result[self.ordering] = values
        return result

    def permute_mat(self, dense: Any) -> np.ndarray:
        """Pick the stored entries out of a dense matrix in original order."""
        matrix = np.asarray(dense, dtype=float)
        if matrix.shape != (self.m, self.m):
            raise ValueError("SparseSchurPattern: matrix has the wrong shape")
        return matrix[self.ordering[self.row_index], self.ordering[self.column_index]]

    def to_dense(self, values: Sequence[float]) -> np.ndarray:
        """Expand stored entries into a full symmetric matrix in original order."""
        stored = np.asarray(values, dtype=float)
        if stored.shape != (self.nonzero_count,):
            raise ValueError("SparseSchurPattern: wrong number of values")
        dense = np.zeros((self.m, self.m), dtype=float)
        rows = self.ordering[self.row_index]
        cols = self.ordering[self.column_index]
        dense[rows, cols] = stored
        dense[cols, rows] = stored
        return dense


def _format_block(label: str, blocks: Sequence[Sequence[AggregateEntry]]) -> str:
    parts = []
    for number, entries in enumerate(blocks):
        parts.append("%s:%dth block\n" % (label, number))
        for entry in entries:
            parts.append(
                "cons1:%d const2:%d block1:%d block2:%d sp_bMat:%d \n"
                % (
                    entry.constraint1,
                    entry.constraint2,
                    entry.block_index1,
                    entry.block_index2,
                    entry.location,
                )
            )
    return "".join(parts)


def format_index(
    sdp_entries: Sequence[Sequence[AggregateEntry]],
    lp_entries: Sequence[Sequence[AggregateEntry]],
) -> str:
    """Describe the aggregate index of every SDP and LP block."""
    header = "display_index: %d %d %d\n" % (len(sdp_entries), 0, len(lp_entries))
    return header + _format_block("SDP", sdp_entries) + _format_block("LP", lp_entries)