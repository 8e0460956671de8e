import numpy as np

from ..matrix import as_csr_matrix
from .graph_struct import component_summary


def get_bandwidth(matrix):
    """
    Compute matrix bandwidth.

    Parameters:
    -----------
    matrix : CSRMatrix or scipy.sparse matrix
        Input matrix, square or rectangular

    Returns:
    --------
    int : max |r - c| over stored entries, 0 when there are none
    """
    A = as_csr_matrix(matrix)
    if A.nnz == 0:
        return 0

    bandwidth = np.max(np.abs(A.row_indices() - A.col_index))
    return int(bandwidth)


def calculate_profile(matrix):
    """
    Envelope size below the diagonal.

    Each row whose leftmost entry sits at or left of the diagonal contributes
    ``r - min(c) + 1``.
    """
    A = as_csr_matrix(matrix)
    if A.nnz == 0:
        return 0

    lengths = np.diff(A.row_start)
    nonempty = np.flatnonzero(lengths)
    # Columns are sorted within a row, so the first entry is the leftmost
    leftmost = A.col_index[A.row_start[nonempty]]
    spans = nonempty - leftmost + 1
    return int(spans[spans > 0].sum())


def is_structurally_symmetric(matrix):
    A = as_csr_matrix(matrix)
    if not A.is_square:
        return False
    rows = A.row_indices()
    forward = set(zip(rows.tolist(), A.col_index.tolist()))
    return all((c, r) in forward for r, c in forward)


def compute_matrix_properties(matrix):
    """
    Compute matrix properties.

    Parameters:
    -----------
    matrix : CSRMatrix or scipy.sparse matrix
        Input matrix

    Returns:
    --------
    dict : Dictionary of matrix properties
    """
    A = as_csr_matrix(matrix)
    rows, cols = A.shape
    nnz = A.nnz

    properties = {
        'shape': (rows, cols),
        'nnz': nnz,
        'density': (nnz / (rows * cols)) * 100 if rows * cols > 0 else 0,
        'bandwidth': get_bandwidth(A),
        'profile': calculate_profile(A),
        'is_square': A.is_square,
        'is_structurally_symmetric': is_structurally_symmetric(A),
    }

    row_nnz = np.diff(A.row_start)
    if row_nnz.size:
        properties.update({
            'avg_nnz_per_row': float(np.mean(row_nnz)),
            'max_nnz_per_row': int(np.max(row_nnz)),
            'min_nnz_per_row': int(np.min(row_nnz)),
            'std_nnz_per_row': float(np.std(row_nnz)),
            'empty_rows': int(np.sum(row_nnz == 0)),
        })
    else:
        properties.update({
            'avg_nnz_per_row': 0,
            'max_nnz_per_row': 0,
            'min_nnz_per_row': 0,
            'std_nnz_per_row': 0,
            'empty_rows': 0,
        })

    if A.is_square:
        properties.update(component_summary(A))

    return properties
