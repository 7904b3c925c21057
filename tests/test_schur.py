import numpy as np
import pytest

from sdpcore.matrices import MatrixType, SparseMatrix
from sdpcore.schur import AggregateEntry, SparseSchurPattern, format_index


def _full(m, ordering=None):
    ordering = list(range(m)) if ordering is None else ordering
    return SparseSchurPattern(m, ordering, [ordering])


def _matrix(effect):
    mat = SparseMatrix(2, 2, MatrixType.SPARSE, 3)
    mat.nonzero_effect = effect
    return mat


def test_full_clique_stores_upper_triangle():
    pattern = _full(3)
    assert pattern.nonzero_count == 6
    assert pattern.diagonal_index.tolist() == [0, 3, 5, 6]
    assert all(r <= c for r, c in zip(pattern.row_index, pattern.column_index))


def test_rows_start_with_diagonal():
    pattern = SparseSchurPattern(3, [0, 1, 2], [[0, 2], [1, 2], [2]])
    assert pattern.nonzero_count == 5
    for k in range(3):
        start = int(pattern.diagonal_index[k])
        assert pattern.row_index[start] == k
        assert pattern.column_index[start] == k


def test_locate_is_symmetric_and_missing_entry_raises():
    pattern = SparseSchurPattern(3, [0, 1, 2], [[0, 2], [1, 2], [2]])
    assert pattern.locate(0, 2) == pattern.locate(2, 0)
    with pytest.raises(ValueError):
        pattern.locate(0, 1)


def test_uncovered_index_raises():
    with pytest.raises(ValueError):
        SparseSchurPattern(3, [0, 1, 2], [[0, 1]])


def test_bad_ordering_raises():
    with pytest.raises(ValueError):
        SparseSchurPattern(3, [0, 0, 2], [[0, 1, 2]])


def test_permute_vec_round_trip():
    pattern = _full(3, [2, 0, 1])
    vec = np.array([10.0, 20.0, 30.0])
    permuted = pattern.permute_vec(vec)
    assert permuted[0] == vec[2]
    assert np.array_equal(pattern.reverse_permute_vec(permuted), vec)


def test_permute_mat_to_dense_round_trip():
    pattern = _full(3, [2, 0, 1])
    rng = np.random.default_rng(1)
    a = rng.standard_normal((3, 3))
    sym = a + a.T
    values = pattern.permute_mat(sym)
    assert np.allclose(pattern.to_dense(values), sym)


def test_to_dense_wrong_length_raises():
    with pytest.raises(ValueError):
        _full(2).to_dense([1.0])


def test_aggregate_sdp_orders_pairs_by_effect():
    pattern = _full(3)
    block = [(0, 0, _matrix(1)), (1, 0, _matrix(3)), (2, 0, _matrix(3))]
    (entries,) = pattern.aggregate_sdp([block])
    assert len(entries) == 6
    for entry in entries:
        assert entry.location == pattern.locate(entry.constraint1, entry.constraint2)
    pairs = {(e.constraint1, e.constraint2) for e in entries}
    assert (1, 0) in pairs and (0, 1) not in pairs
    assert (2, 1) in pairs and (1, 2) not in pairs


def test_aggregate_lp_keeps_lower_pairs():
    pattern = _full(2)
    (entries,) = pattern.aggregate_lp([[(0, 0, 1.0), (1, 0, 2.0)]])
    assert [(e.constraint1, e.constraint2) for e in entries] == [(0, 0), (1, 0), (1, 1)]


def test_format_index_lists_entries():
    entry = AggregateEntry(1, 0, 0, 0, 1)
    text = format_index([[entry]], [])
    lines = text.splitlines()
    assert lines[0] == "display_index: 1 0 0"
    assert lines[1] == "SDP:0th block"
    assert lines[2] == "cons1:1 const2:0 block1:0 block2:0 sp_bMat:1 "