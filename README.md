# sdpcore

Data structures for a primal-dual interior-point solver for semidefinite
programs (SDP) with additional linear (LP) blocks: block-structured
matrices and spaces, solver parameter sets, a timing report, and the sparse
pattern of the Schur complement matrix.

## Modules

- `sdpcore.matrices` – `Vector`, `BlockVector`, `SparseMatrix` (a symmetric
  block stored as coordinate triples or densely, see `MatrixType`), and
  `DenseMatrix`. `SparseMatrix.sort_sparse_index` moves entries to the upper
  triangle, sorts them, merges duplicates and reports the first asymmetric
  pair; `SparseMatrix.change_to_dense` switches storage once at least 20% of
  the entries are stored. The text formatters `format_vector`,
  `format_matrix` and `format_tridiagonal` write values in bracketed form.
- `sdpcore.spaces` – `SparseLinearSpace` (the data of one constraint, keeping
  only the SDP and LP blocks that hold entries) and `DenseLinearSpace` (one
  dense matrix per SDP block and one scalar per LP block), with element
  setters, `set_zero`, `set_identity`, `copy_from` and trace
  `inner_product`. SOCP blocks are not supported: their setters raise
  `ValueError`.
- `sdpcore.settings` – `Parameter`, the tuning parameters of the iteration.
  `set_default` loads one of the `ParameterType` presets (`DEFAULT`,
  `STABLE_BUT_SLOW`, `UNSTABLE_BUT_FAST`), and `read_file` reads the ten
  values, one per line, from a text stream. `ComputeTime` holds accumulated
  seconds per solver phase and `display` writes them as a table with each
  entry's share of the main loop.
- `sdpcore.schur` – `SparseSchurPattern`, the stored upper triangle of the
  permuted Schur complement matrix built from an elimination ordering and the
  cliques of a symbolic factorisation. It locates entries (`locate`), lists
  the constraint pairs of each SDP or LP block as `AggregateEntry` records
  (`aggregate_sdp`, `aggregate_lp`), permutes vectors and matrices between
  original and permuted order, and expands stored values with `to_dense`.
  `format_index` describes the aggregate lists as text.

Every `display` method writes to standard output by default, to any text
stream passed as `fpout`, and does nothing when `fpout` is `None`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from sdpcore.settings import Parameter, ParameterType

param = Parameter()
param.set_default(ParameterType.STABLE_BUT_SLOW)
param.display()
```

```python
from sdpcore.spaces import DenseLinearSpace

x = DenseLinearSpace([2, 3], [], 1)
x.set_identity(1.0)
z = DenseLinearSpace([2, 3], [], 1)
z.set_identity(2.0)
print(x.inner_product(z))   # 12.0
```

```python
from sdpcore.schur import SparseSchurPattern

pattern = SparseSchurPattern(3, [0, 1, 2], [[0, 1, 2]])
print(pattern.nonzero_count)   # 6
print(pattern.locate(2, 0))    # 2
```

## What the package does not do

The package is a library of building blocks, not a solver. It does not
compute Newton directions, assemble or factorise the Schur complement matrix,
choose step lengths or run the predictor-corrector iteration, and it does not
read problem data files; the only file it reads is a parameter file through
`Parameter.read_file`. It installs no command-line programs.