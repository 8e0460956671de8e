import logging
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..config import DEFAULT_CONFIG
from ..errors import DimensionMismatch
from ..matrix import VALUE_DTYPE, as_csr_matrix

log = logging.getLogger(__name__)

STRATEGIES = ('serial', 'threaded', 'scipy')


def _as_vector(x, length, name):
    x = np.asarray(x, dtype=VALUE_DTYPE)
    if x.ndim != 1 or x.shape[0] != length:
        raise DimensionMismatch(
            f"{name} must have length {length}, got shape {x.shape}"
        )
    return x


def _multiply_rows(row_start, col_index, values, x, lo, hi, out):
    """Write rows [lo, hi) of A*x into ``out`` (a slice of length hi - lo)."""
    first, last = row_start[lo], row_start[hi]
    products = values[first:last] * x[col_index[first:last]]
    local_rows = np.repeat(np.arange(hi - lo), np.diff(row_start[lo:hi + 1]))
    out[:] = np.bincount(local_rows, weights=products, minlength=hi - lo)


def multiply(matrix, x):
    """
    Compute y = A*x.

    Parameters:
    -----------
    matrix : CSRMatrix
        Input matrix
    x : array_like
        Dense vector of length num_cols

    Returns:
    --------
    numpy.ndarray : y, length num_rows
    """
    A = as_csr_matrix(matrix)
    x = _as_vector(x, A.num_cols, 'x')
    y = np.zeros(A.num_rows, dtype=VALUE_DTYPE)
    if A.num_rows:
        _multiply_rows(A.row_start, A.col_index, A.values, x, 0, A.num_rows, y)
    return y


multiply_with_vector = multiply


def spmv(alpha, matrix, x, beta=0.0, y=None, gamma=0.0):
    """w = alpha*A*x + beta*y + gamma"""
    A = as_csr_matrix(matrix)
    w = alpha * multiply(A, x)
    if y is not None:
        w += beta * _as_vector(y, A.num_rows, 'y')
    if gamma:
        w += gamma
    return w


class SpMVKernel:
    """Reusable y = A*x evaluator bound to one matrix."""

    def __init__(self, matrix, strategy='auto', num_workers=None, block_size=None,
                 config=DEFAULT_CONFIG):
        # Strategy to use ('serial', 'threaded', 'scipy', 'auto')
        self.matrix = as_csr_matrix(matrix)
        self.config = config
        self.strategy = self._select_strategy(strategy)
        self.num_workers = num_workers or config.num_workers or os.cpu_count() or 1
        self.block_size = block_size
        self.matrix_scipy = None
        self._prepare_matrix()

    def _select_strategy(self, strategy):
        """Select the strategy for this matrix."""
        if strategy == 'auto':
            if self.matrix.nnz >= self.config.threaded_nnz_threshold:
                return 'threaded'
            return 'serial'
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {strategy}")
        return strategy

    def _prepare_matrix(self):
        if self.strategy == 'scipy':
            self.matrix_scipy = self.matrix.to_scipy()

    def _row_blocks(self):
        """Contiguous, disjoint row ranges, one or more per worker."""
        n_rows = self.matrix.num_rows
        if self.block_size:
            size = self.block_size
        else:
            size = max(1, -(-n_rows // self.num_workers))
        return [(lo, min(lo + size, n_rows)) for lo in range(0, n_rows, size)]

    def spmv(self, x, y=None):
        """Return A*x; when ``y`` is given the result is written into it."""
        x = _as_vector(x, self.matrix.num_cols, 'x')
        if y is None:
            y = np.zeros(self.matrix.num_rows, dtype=VALUE_DTYPE)
        elif not isinstance(y, np.ndarray):
            # Not a writable buffer; the result goes to a new array
            y = _as_vector(y, self.matrix.num_rows, 'y')
        elif y.shape != (self.matrix.num_rows,):
            raise DimensionMismatch(
                f"y must have length {self.matrix.num_rows}, got shape {y.shape}"
            )

        if self.strategy == 'scipy':
            y[:] = self.matrix_scipy.dot(x)
        elif self.strategy == 'threaded':
            self._spmv_threaded(x, y)
        else:
            self._spmv_serial(x, y)
        return y

    def _spmv_serial(self, x, y):
        A = self.matrix
        if A.num_rows:
            _multiply_rows(A.row_start, A.col_index, A.values, x, 0, A.num_rows, y)

    def _spmv_threaded(self, x, y):
        """Each worker reads the shared matrix and fills its own slice of y."""
        A = self.matrix
        blocks = self._row_blocks()
        if len(blocks) <= 1:
            self._spmv_serial(x, y)
            return

        with ThreadPoolExecutor(max_workers=self.num_workers) as pool:
            futures = [
                pool.submit(_multiply_rows, A.row_start, A.col_index, A.values,
                            x, lo, hi, y[lo:hi])
                for lo, hi in blocks
            ]
            for future in futures:
                future.result()


def create_spmv_kernel(matrix, strategy='auto', num_workers=None, block_size=None):
    return SpMVKernel(matrix, strategy, num_workers=num_workers, block_size=block_size)


def analyze_spmv_characteristics(matrix, config=DEFAULT_CONFIG):
    A = as_csr_matrix(matrix)

    # Row length analysis
    row_lengths = np.diff(A.row_start)

    # Memory access pattern analysis
    access_pattern = np.diff(A.col_index)

    def _stat(fn, arr):
        return float(fn(arr)) if arr.size else 0.0

    size = A.num_rows * A.num_cols
    analysis = {
        'matrix_shape': A.shape,
        'nnz': A.nnz,
        'avg_row_length': _stat(np.mean, row_lengths),
        'std_row_length': _stat(np.std, row_lengths),
        'max_row_length': int(row_lengths.max()) if row_lengths.size else 0,
        'min_row_length': int(row_lengths.min()) if row_lengths.size else 0,
        'row_length_variance': _stat(np.var, row_lengths),
        'avg_access_stride': _stat(np.mean, np.abs(access_pattern)),
        'memory_irregularity': _stat(np.std, access_pattern),
        'density': A.nnz / size if size else 0.0,
    }

    # Strategy recommendations
    recommendations = []

    if A.nnz >= config.threaded_nnz_threshold:
        recommendations.append('threaded')

    if analysis['memory_irregularity'] > 100:
        recommendations.append('reorder')  # Irregular access pattern, try RCM

    if analysis['density'] > 0.1:
        recommendations.append('dense_optimization')

    analysis['recommendations'] = recommendations

    return analysis
