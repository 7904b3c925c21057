"""Block-structured linear spaces of symmetric matrices and LP entries.

A space holds one matrix per SDP block and one scalar per LP block.
SOCP blocks are not supported.
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

import numpy as np

from sdpcore.matrices import DenseMatrix, MatrixType, SparseMatrix

_STDOUT = object()
_SOCP_UNSUPPORTED = "SOCP blocks are not supported"


def _resolve_output(fpout: object) -> Optional[TextIO]:
    if fpout is _STDOUT:
        return sys.stdout
    return fpout  # type: ignore[return-value]


class SparseLinearSpace:
    """Sparse data of one constraint: only the blocks that hold entries are kept.

    ``sdp_index[k]`` is the problem block number of ``sdp_blocks[k]``, and
    ``lp_index[k]`` the LP block number of ``lp_blocks[k]``.
    """

    def __init__(
        self,
        sdp_index: Sequence[int] = (),
        sdp_block_struct: Sequence[int] = (),
        sdp_nonzero_numbers: Sequence[int] = (),
        lp_index: Sequence[int] = (),
    ) -> None:
        if not len(sdp_index) == len(sdp_block_struct) == len(sdp_nonzero_numbers):
            raise ValueError("SparseLinearSpace: SDP layout lengths differ")
        self.sdp_index = [int(b) for b in sdp_index]
        self.sdp_blocks = [
            SparseMatrix(size, size, MatrixType.SPARSE, nonzero)
            for size, nonzero in zip(sdp_block_struct, sdp_nonzero_numbers)
        ]
        self.lp_index = [int(b) for b in lp_index]
        self.lp_blocks = np.zeros(len(self.lp_index), dtype=float)

    @classmethod
    def from_dense_layout(
        cls,
        sdp_block_struct: Sequence[int],
        sdp_nonzero_numbers: Sequence[int],
        lp_nonzero: Sequence[bool],
    ) -> "SparseLinearSpace":
        """Build a space from per-block counts, keeping blocks that have entries."""
        kept = [
            (block, size, nonzero)
            for block, (size, nonzero) in enumerate(
                zip(sdp_block_struct, sdp_nonzero_numbers)
            )
            if nonzero > 0
        ]
        lp_index = [block for block, flag in enumerate(lp_nonzero) if flag]
        return cls(
            [block for block, _, _ in kept],
            [size for _, size, _ in kept],
            [nonzero for _, _, nonzero in kept],
            lp_index,
        )

    @property
    def sdp_n_block(self) -> int:
        return len(self.sdp_blocks)

    @property
    def lp_n_block(self) -> int:
        return len(self.lp_blocks)

    def change_to_dense(self, force: bool = False) -> None:
        """Switch SDP blocks to dense storage where they are full enough."""
        for block in self.sdp_blocks:
            block.change_to_dense(force)

    def display(self, fpout: object = _STDOUT) -> None:
        out = _resolve_output(fpout)
        if out is None:
            return
        if self.sdp_blocks:
            out.write("SDP part{\n")
            for index, block in zip(self.sdp_index, self.sdp_blocks):
                out.write("block %d\n" % index)
                block.display(out)
            out.write("} \n")
        if self.lp_n_block:
            out.write("LP part{\n")
            for index, value in zip(self.lp_index, self.lp_blocks):
                out.write("index: %d, element %f\n" % (index, value))
            out.write("} \n")

    def copy_from(self, other: "SparseLinearSpace") -> None:
        """Make this space an independent copy of ``other``."""
        if other is self:
            return
        self.sdp_index = list(other.sdp_index)
        blocks = []
        for block in other.sdp_blocks:
            copy = SparseMatrix(block.n_row, block.n_col, block.kind, 0)
            copy.copy_from(block)
            blocks.append(copy)
        self.sdp_blocks = blocks
        self.lp_index = list(other.lp_index)
        self.lp_blocks = other.lp_blocks.copy()

    def _sdp_position(self, block: int) -> int:
        try:
            return self.sdp_index.index(block)
        except ValueError:
            raise ValueError(f"SparseLinearSpace: no SDP block {block}") from None

    def set_element_sdp(self, block: int, i: int, j: int, value: float) -> None:
        """Append the entry ``(i, j)`` to the given SDP block."""
        matrix = self.sdp_blocks[self._sdp_position(block)]
        if matrix.nonzero_count >= matrix.nonzero_number:
            raise ValueError("SparseLinearSpace: nonzero_count >= nonzero_number")
        if i < 0 or j < 0 or i >= matrix.n_row or j >= matrix.n_col:
            raise ValueError("out of range in input data")
        count = matrix.nonzero_count
        matrix.row_index[count] = i
        matrix.column_index[count] = j
        matrix.sp_ele[count] = float(value)
        matrix.nonzero_count += 1
        matrix.nonzero_effect += 1 if i == j else 2

    def set_element_socp(self, block: int, i: int, j: int, value: float) -> None:
        raise ValueError(_SOCP_UNSUPPORTED)

    def set_element_lp(self, block: int, value: float) -> None:
        """Set the value of the given LP block."""
        try:
            position = self.lp_index.index(block)
        except ValueError:
            raise ValueError(f"SparseLinearSpace: no LP block {block}") from None
        self.lp_blocks[position] = float(value)

    def set_zero(self) -> None:
        for block in self.sdp_blocks:
            block.set_zero()
        self.lp_blocks.fill(0.0)

    def set_identity(self, scalar: float = 1.0) -> None:
        raise ValueError("SparseLinearSpace: identity is not supported")

    def sort_sparse_index(self) -> Optional[tuple[int, int, int]]:
        """Normalise every SDP block and check symmetry.

        Returns ``(position, i, j)`` for the first block found asymmetric,
        or None when every block is symmetric.
        """
        found: Optional[tuple[int, int, int]] = None
        for position, block in enumerate(self.sdp_blocks):
            mismatch = block.sort_sparse_index()
            if mismatch is not None and found is None:
                found = (position, mismatch[0], mismatch[1])
        return found

    def inner_product(self, dense: "DenseLinearSpace") -> float:
        """Return the trace inner product with a dense space."""
        total = 0.0
        for index, block in zip(self.sdp_index, self.sdp_blocks):
            total += float(np.vdot(block.to_array(), dense.sdp_blocks[index].de_ele))
        for index, value in zip(self.lp_index, self.lp_blocks):
            total += float(value) * float(dense.lp_blocks[index])
        return total


class DenseLinearSpace:
    """Dense variables of the problem: a matrix per SDP block, a scalar per LP block."""

    def __init__(
        self,
        sdp_block_struct: Sequence[int] = (),
        socp_block_struct: Sequence[int] = (),
        lp_n_block: int = 0,
    ) -> None:
        if len(sdp_block_struct) + len(socp_block_struct) + lp_n_block <= 0:
            raise ValueError("DenseLinearSpace: SDP + SOCP + LP blocks are nonpositive")
        if lp_n_block < 0:
            raise ValueError("DenseLinearSpace: lp_n_block is negative")
        if any(size <= 0 for size in sdp_block_struct):
            raise ValueError("DenseLinearSpace: SDP size is nonpositive")
        self.sdp_blocks = [DenseMatrix(size, size) for size in sdp_block_struct]
        self.socp_n_block = 0
        self.lp_blocks = np.zeros(lp_n_block, dtype=float)

    @property
    def sdp_n_block(self) -> int:
        return len(self.sdp_blocks)

    @property
    def lp_n_block(self) -> int:
        return len(self.lp_blocks)

    def display(self, fpout: object = _STDOUT) -> None:
        out = _resolve_output(fpout)
        if out is None:
            return
        if self.sdp_blocks:
            out.write("SDP part{\n")
            for block in self.sdp_blocks:
                block.display(out)
            out.write("} \n")
        if self.lp_n_block:
            out.write("LP part{\n")
            out.write("".join("%f, " % value for value in self.lp_blocks))
            out.write("} \n")

    def copy_from(self, other: "DenseLinearSpace") -> None:
        """Make this space an independent copy of ``other``."""
        if other is self:
            return
        if other.sdp_n_block + other.socp_n_block + other.lp_n_block <= 0:
            raise ValueError("DenseLinearSpace: SDP + SOCP + LP blocks are nonpositive")
        blocks = []
        for block in other.sdp_blocks:
            copy = DenseMatrix(block.n_row, block.n_col)
            copy.copy_from(block)
            blocks.append(copy)
        self.sdp_blocks = blocks
        self.socp_n_block = 0
        self.lp_blocks = other.lp_blocks.copy()

    def set_element_sdp(self, block: int, i: int, j: int, value: float) -> None:
        """Set the symmetric pair ``(i, j)`` and ``(j, i)`` of an SDP block."""
        if block < 0 or block >= self.sdp_n_block:
            raise ValueError("out of range in input data")
        matrix = self.sdp_blocks[block]
        if i < 0 or j < 0 or i >= matrix.n_row or j >= matrix.n_col:
            raise ValueError("out of range in input data")
        matrix.de_ele[i, j] = float(value)
        matrix.de_ele[j, i] = float(value)

    def set_element_socp(self, block: int, i: int, j: int, value: float) -> None:
        raise ValueError(_SOCP_UNSUPPORTED)

    def set_element_lp(self, block: int, value: float) -> None:
        if block < 0 or block >= self.lp_n_block:
            raise ValueError("out of range in input data")
        self.lp_blocks[block] = float(value)

    def set_zero(self) -> None:
        for block in self.sdp_blocks:
            block.set_zero()
        self.lp_blocks.fill(0.0)

    def set_identity(self, scalar: float = 1.0) -> None:
        for block in self.sdp_blocks:
            block.set_identity(scalar)
        self.lp_blocks.fill(float(scalar))

    def inner_product(self, other: "DenseLinearSpace") -> float:
        """Return the trace inner product with another dense space."""
        total = sum(
            float(np.vdot(mine.de_ele, theirs.de_ele))
            for mine, theirs in zip(self.sdp_blocks, other.sdp_blocks)
        )
        return total + float(np.dot(self.lp_blocks, other.lp_blocks))