"""
Compressed Sparse Row storage.

A CSRMatrix owns three parallel arrays: ``row_start`` (length num_rows + 1),
``col_index`` and ``values`` (length nnz). Row ``r`` occupies the half-open
slice ``row_start[r]:row_start[r + 1]`` of the other two. Instances are built
once from coordinate triples and never modified afterwards; every
transformation returns a new matrix.

Example usage:
    from csrkit.matrix import CSRMatrix
    rows = [0, 0, 1, 1, 2, 2]
    cols = [0, 1, 1, 2, 0, 2]
    vals = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    A = CSRMatrix.from_coo(3, 3, rows, cols, vals)
    print(A.to_dense())
"""

import logging

import numpy as np
import scipy.sparse

from .errors import DimensionMismatch, DuplicateEntry, InvalidIndex, MatrixDestroyedError

log = logging.getLogger(__name__)

INDEX_DTYPE = np.int64
VALUE_DTYPE = np.float64


def _as_index_array(indices, name):
    arr = np.asarray(indices)
    if arr.ndim != 1:
        raise DimensionMismatch(f"{name} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        return np.zeros(0, dtype=INDEX_DTYPE)
    if not np.issubdtype(arr.dtype, np.integer):
        raise InvalidIndex(f"{name} must hold integers, got dtype {arr.dtype}")
    return arr.astype(INDEX_DTYPE)


def _check_range(indices, bound, name):
    if indices.size == 0:
        return
    bad = np.flatnonzero((indices < 0) | (indices >= bound))
    if bad.size:
        pos = int(bad[0])
        raise InvalidIndex(
            f"{name}[{pos}] = {int(indices[pos])} is outside [0, {bound})"
        )


def group_by_row(num_rows, rows, cols, vals, check_duplicates=True):
    """Scatter coordinate triples into row-contiguous CSR arrays.

    Entries are ordered by row, then by column within a row. Row offsets come
    from a per-row count followed by a prefix sum.
    """
    order = np.lexsort((cols, rows))
    rows = rows[order]
    cols = cols[order]
    vals = vals[order]

    if check_duplicates and rows.size > 1:
        same = (rows[1:] == rows[:-1]) & (cols[1:] == cols[:-1])
        if same.any():
            pos = int(np.flatnonzero(same)[0])
            raise DuplicateEntry(
                f"entry ({int(rows[pos])}, {int(cols[pos])}) appears more than once"
            )

    counts = np.bincount(rows, minlength=num_rows)
    row_start = np.zeros(num_rows + 1, dtype=INDEX_DTYPE)
    row_start[1:] = np.cumsum(counts)
    return row_start, cols, vals


class CSRMatrix:
    """Immutable sparse matrix in compressed sparse row form.

    Use :meth:`from_coo` (or :func:`create`) to build one from coordinate
    triples. The constructor itself trusts its arguments and is meant for
    code that derives arrays from an already valid matrix.
    """

    def __init__(self, num_rows, num_cols, row_start, col_index, values):
        self._num_rows = int(num_rows)
        self._num_cols = int(num_cols)
        # Own copies: the arrays are frozen below and must not alias caller data
        self._row_start = np.array(row_start, dtype=INDEX_DTYPE)
        self._col_index = np.array(col_index, dtype=INDEX_DTYPE)
        self._values = np.array(values, dtype=VALUE_DTYPE)
        for arr in (self._row_start, self._col_index, self._values):
            arr.flags.writeable = False
        self._destroyed = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_coo(cls, num_rows, num_cols, rows, cols, values):
        """
        Build a matrix from coordinate-format triples.

        Parameters:
        -----------
        num_rows, num_cols : int
            Declared shape
        rows, cols : sequence of int
            Row and column index of each entry, in any order
        values : sequence of float
            Value of each entry

        Returns:
        --------
        CSRMatrix : New matrix

        Raises:
        -------
        DimensionMismatch : the three sequences differ in length
        InvalidIndex : an index lies outside the declared shape
        DuplicateEntry : two triples share a (row, col) position
        """
        if num_rows < 0 or num_cols < 0:
            raise InvalidIndex(f"negative shape ({num_rows}, {num_cols})")

        rows = _as_index_array(rows, 'rows')
        cols = _as_index_array(cols, 'cols')
        vals = np.asarray(values, dtype=VALUE_DTYPE)
        if vals.ndim != 1:
            raise DimensionMismatch(f"values must be one-dimensional, got shape {vals.shape}")
        if not (rows.size == cols.size == vals.size):
            raise DimensionMismatch(
                f"coordinate arrays differ in length: rows={rows.size}, "
                f"cols={cols.size}, values={vals.size}"
            )

        _check_range(rows, num_rows, 'rows')
        _check_range(cols, num_cols, 'cols')

        row_start, col_index, vals = group_by_row(num_rows, rows, cols, vals)
        log.debug("Built %dx%d CSR matrix with %d nonzeros", num_rows, num_cols, vals.size)
        return cls(num_rows, num_cols, row_start, col_index, vals)

    @classmethod
    def from_scipy(cls, matrix):
        """Convert a scipy sparse matrix (or dense array) to a CSRMatrix.

        Duplicate entries of a scipy COO matrix are summed first, which is
        scipy's canonical form.
        """
        if not scipy.sparse.issparse(matrix):
            matrix = scipy.sparse.csr_matrix(np.asarray(matrix))
        coo = scipy.sparse.coo_matrix(matrix, copy=True)
        coo.sum_duplicates()
        num_rows, num_cols = coo.shape
        return cls.from_coo(num_rows, num_cols, coo.row, coo.col, coo.data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def destroy(self):
        """Release the storage. Any later use raises MatrixDestroyedError."""
        if self._destroyed:
            return
        self._row_start = None
        self._col_index = None
        self._values = None
        self._destroyed = True

    @property
    def destroyed(self):
        return self._destroyed

    def _require_alive(self):
        if self._destroyed:
            raise MatrixDestroyedError("matrix used after destroy()")

    def __enter__(self):
        self._require_alive()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.destroy()
        return False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def row_start(self):
        self._require_alive()
        return self._row_start

    @property
    def col_index(self):
        self._require_alive()
        return self._col_index

    @property
    def values(self):
        self._require_alive()
        return self._values

    @property
    def num_rows(self):
        return self._num_rows

    @property
    def num_cols(self):
        return self._num_cols

    @property
    def shape(self):
        return (self._num_rows, self._num_cols)

    @property
    def nnz(self):
        self._require_alive()
        return int(self._row_start[-1])

    @property
    def is_square(self):
        return self._num_rows == self._num_cols

    def row(self, r):
        """Return ``(cols, vals)`` views of row ``r``."""
        self._require_alive()
        if not 0 <= r < self._num_rows:
            raise InvalidIndex(f"row {r} is outside [0, {self._num_rows})")
        lo, hi = self._row_start[r], self._row_start[r + 1]
        return self._col_index[lo:hi], self._values[lo:hi]

    def row_indices(self):
        """Row index of every stored entry, parallel to ``col_index``."""
        self._require_alive()
        return np.repeat(np.arange(self._num_rows, dtype=INDEX_DTYPE),
                         np.diff(self._row_start))

    def triples(self):
        """Return ``(rows, cols, values)`` copies in storage order."""
        self._require_alive()
        return self.row_indices(), self._col_index.copy(), self._values.copy()

    def to_dense(self):
        self._require_alive()
        dense = np.zeros(self.shape, dtype=VALUE_DTYPE)
        dense[self.row_indices(), self._col_index] = self._values
        return dense

    def to_scipy(self):
        """Return an independent ``scipy.sparse.csr_matrix`` copy."""
        self._require_alive()
        return scipy.sparse.csr_matrix(
            (self._values.copy(), self._col_index.copy(), self._row_start.copy()),
            shape=self.shape,
        )

    def __repr__(self):
        if self._destroyed:
            return f"<CSRMatrix {self._num_rows}x{self._num_cols} (destroyed)>"
        return f"<CSRMatrix {self._num_rows}x{self._num_cols}, {self.nnz} NNZ>"


def create(num_rows, num_cols, rows, cols, values):
    """Build a CSRMatrix from coordinate triples; see CSRMatrix.from_coo."""
    return CSRMatrix.from_coo(num_rows, num_cols, rows, cols, values)


def destroy(matrix):
    matrix.destroy()


def as_csr_matrix(matrix):
    """Return ``matrix`` itself if it is a CSRMatrix, else convert it."""
    if isinstance(matrix, CSRMatrix):
        return matrix
    return CSRMatrix.from_scipy(matrix)
