"""
csrkit: Compressed Sparse Row matrices with Reverse Cuthill-McKee reordering.

Example usage:
    import csrkit
    A = csrkit.create(3, 3, [0, 0, 1, 1, 2, 2], [0, 1, 1, 2, 0, 2],
                      [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    perm, inverse_perm = csrkit.get_rcm_permutation(A)
    B = csrkit.permute(A, perm, inverse_perm)
    print(csrkit.get_bandwidth(A), csrkit.get_bandwidth(B))
    csrkit.print_dense(B)
"""

from .errors import (
    CSRError, DimensionMismatch, DuplicateEntry, InvalidIndex, InvalidPermutation,
    MatrixDestroyedError,
)
from .matrix import CSRMatrix, create, destroy
from .spmv.kernel import multiply, multiply_with_vector, spmv
from .analysis.mat_specs import get_bandwidth
from .reordering.permute import permute, reorder_vector, reverse_reorder_vector
from .reordering.rcm import compute_rcm, get_rcm_permutation, reorder_matrix
from .visualization.dense import format_dense, print_dense

__version__ = "0.1.0"
