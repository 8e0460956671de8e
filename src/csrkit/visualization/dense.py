import sys

import numpy as np

from ..config import DEFAULT_CONFIG
from ..matrix import as_csr_matrix


def format_dense(matrix, precision=None):
    """Render the matrix as a grid of right-aligned numbers, 0 for absent entries."""
    A = as_csr_matrix(matrix)
    if precision is None:
        precision = DEFAULT_CONFIG.dense_precision

    dense = A.to_dense()
    cells = [[np.format_float_positional(v, precision=precision, trim='-') for v in row]
             for row in dense]
    width = max((len(cell) for row in cells for cell in row), default=1)
    return "\n".join(" ".join(cell.rjust(width) for cell in row) for row in cells)


def print_dense(matrix, file=None, precision=None):
    print(format_dense(matrix, precision=precision), file=file or sys.stdout)
