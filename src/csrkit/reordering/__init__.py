from .permute import (
    invert_permutation, is_valid_permutation_pair, permute, reorder_vector,
    reverse_reorder_vector,
)
from .rcm import compute_rcm, cuthill_mckee_order, get_rcm_permutation, reorder_matrix
