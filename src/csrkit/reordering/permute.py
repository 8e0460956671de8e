"""
Symmetric permutation of CSR matrices and vector reordering.

A permutation pair follows the convention ``perm[new] = old`` and
``inverse_perm[old] = new``. Rows and columns are renumbered with the same
pair, so an entry at (r, c) moves to (inverse_perm[r], inverse_perm[c]).
"""

import logging

import numpy as np

from ..errors import DimensionMismatch, InvalidPermutation
from ..matrix import INDEX_DTYPE, CSRMatrix, as_csr_matrix, group_by_row

log = logging.getLogger(__name__)


def _as_permutation(perm, length, name):
    arr = np.asarray(perm)
    if arr.ndim != 1 or arr.shape[0] != length:
        raise DimensionMismatch(f"{name} must have length {length}, got shape {arr.shape}")
    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        raise InvalidPermutation(f"{name} must hold integers, got dtype {arr.dtype}")
    return arr.astype(INDEX_DTYPE)


def _is_permutation(perm):
    n = perm.size
    if n == 0:
        return True
    if perm.min() < 0 or perm.max() >= n:
        return False
    return bool(np.bincount(perm, minlength=n).max() == 1)


def is_valid_permutation_pair(perm, inverse_perm):
    """True when ``perm`` is a bijection on [0, n) and ``inverse_perm[perm[i]] == i``."""
    perm = np.asarray(perm)
    inverse_perm = np.asarray(inverse_perm)
    if perm.ndim != 1 or perm.shape != inverse_perm.shape:
        return False
    if perm.size == 0:
        return True
    if not (np.issubdtype(perm.dtype, np.integer) and np.issubdtype(inverse_perm.dtype, np.integer)):
        return False
    if not _is_permutation(perm):
        return False
    return bool(np.array_equal(inverse_perm[perm], np.arange(perm.size)))


def _one_dimensional(arr, name):
    arr = np.asarray(arr)
    if arr.ndim != 1:
        raise DimensionMismatch(f"{name} must be one-dimensional, got shape {arr.shape}")
    return arr


def invert_permutation(perm):
    perm = _one_dimensional(perm, 'perm')
    perm = _as_permutation(perm, perm.shape[0], 'perm')
    if not _is_permutation(perm):
        raise InvalidPermutation("perm is not a permutation of [0, n)")
    inverse = np.empty(perm.size, dtype=INDEX_DTYPE)
    inverse[perm] = np.arange(perm.size, dtype=INDEX_DTYPE)
    return inverse


def permute(matrix, perm, inverse_perm):
    """
    Renumber rows and columns of a square matrix.

    New row ``nr`` holds the entries of old row ``perm[nr]``; an old column
    ``oc`` becomes ``inverse_perm[oc]``. The input matrix is left untouched.

    Parameters:
    -----------
    matrix : CSRMatrix
        Square input matrix
    perm, inverse_perm : array_like of int
        Permutation pair, each of length num_rows

    Returns:
    --------
    CSRMatrix : New matrix with the same nnz and the same values

    Raises:
    -------
    DimensionMismatch : non-square matrix or wrong permutation length
    InvalidPermutation : the pair is not a bijection and its inverse
    """
    A = as_csr_matrix(matrix)
    n = A.num_rows
    if not A.is_square:
        raise DimensionMismatch(
            f"symmetric permutation needs a square matrix, got {A.num_rows}x{A.num_cols}"
        )
    perm = _as_permutation(perm, n, 'perm')
    inverse_perm = _as_permutation(inverse_perm, n, 'inverse_perm')
    if not is_valid_permutation_pair(perm, inverse_perm):
        raise InvalidPermutation("perm and inverse_perm are not a permutation and its inverse")

    # Entries of a valid matrix under a valid pair stay in range and unique
    new_rows = inverse_perm[A.row_indices()]
    new_cols = inverse_perm[A.col_index]
    row_start, col_index, values = group_by_row(n, new_rows, new_cols, A.values,
                                                check_duplicates=False)
    log.debug("Permuted %dx%d matrix with %d nonzeros", n, n, values.size)
    return CSRMatrix(n, n, row_start, col_index, values)


def reorder_vector(vector, perm):
    """new[i] = vector[perm[i]]"""
    vector = _one_dimensional(vector, 'vector')
    perm = _as_permutation(perm, vector.shape[0], 'perm')
    if not _is_permutation(perm):
        raise InvalidPermutation("perm is not a permutation of [0, n)")
    return vector[perm]


def reverse_reorder_vector(vector, perm):
    """new[perm[i]] = vector[i]; undoes reorder_vector."""
    vector = _one_dimensional(vector, 'vector')
    perm = _as_permutation(perm, vector.shape[0], 'perm')
    if not _is_permutation(perm):
        raise InvalidPermutation("perm is not a permutation of [0, n)")
    result = np.empty_like(vector)
    result[perm] = vector
    return result
