import logging
import os
from typing import Optional

import numpy as np
import scipy.io
import scipy.sparse

from ..config import DEFAULT_CONFIG, CsrkitConfig
from ..matrix import CSRMatrix

log = logging.getLogger(__name__)

PATTERNS = ('random', 'banded', 'shuffled_banded', 'block_diagonal')


def _symmetric_values(pattern, rng):
    """Give a symmetric 0/1 pattern random symmetric values and a unit diagonal."""
    upper = scipy.sparse.triu(pattern, k=1).tocoo()
    values = rng.random(upper.nnz) + 0.1
    n = pattern.shape[0]
    off = scipy.sparse.coo_matrix((values, (upper.row, upper.col)), shape=(n, n))
    return (off + off.T + scipy.sparse.identity(n, format='coo')).tocsr()


def generate_random_sparse_matrix(size: int, density: float, pattern: str = 'random',
                                  block_size: int = 10, random_state: Optional[int] = None):
    """
    Generate a random square sparse matrix with a symmetric nonzero pattern.

    Parameters:
    -----------
    size : int
        Number of rows and columns
    density : float
        Approximate fraction of stored entries
    pattern : str
        Pattern type: 'random', 'banded', 'shuffled_banded', 'block_diagonal'
    block_size : int
        Size of blocks for 'block_diagonal'
    random_state : int, optional
        Random seed for reproducibility

    Returns:
    --------
    CSRMatrix : Generated matrix, always with a full diagonal
    """
    if pattern not in PATTERNS:
        raise ValueError(f"Unknown pattern: {pattern}")
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    if not 0.0 <= density <= 1.0:
        raise ValueError(f"density must lie in [0, 1], got {density}")

    rng = np.random.default_rng(random_state)

    if pattern == 'random':
        mask = rng.random((size, size)) < density / 2
        structure = scipy.sparse.csr_matrix(mask | mask.T)

    elif pattern in ('banded', 'shuffled_banded'):
        half_band = max(1, int(round(density * size / 2)))
        offsets = [k for k in range(-half_band, half_band + 1) if abs(k) < size]
        structure = scipy.sparse.diags(
            [np.ones(size - abs(k)) for k in offsets], offsets=offsets,
            shape=(size, size), format='csr',
        )

    else:
        num_blocks = max(1, -(-size // block_size))
        blocks = []
        for b in range(num_blocks):
            n = min(block_size, size - b * block_size)
            mask = rng.random((n, n)) < max(density * 2, 0.3)
            blocks.append(scipy.sparse.csr_matrix(mask | mask.T))
        structure = scipy.sparse.block_diag(blocks, format='csr')

    matrix = _symmetric_values(structure, rng)

    if pattern == 'shuffled_banded':
        p = rng.permutation(size)
        matrix = matrix[p, :][:, p]

    return CSRMatrix.from_scipy(matrix)


def load_matrix(path: str) -> CSRMatrix:
    """
    Load a sparse matrix from a ``.mtx`` or ``.npz`` file.

    Parameters:
    -----------
    path : str
        Matrix file path

    Returns:
    --------
    CSRMatrix : Loaded matrix
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Matrix file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == '.mtx':
        matrix = scipy.io.mmread(path)
    elif ext == '.npz':
        matrix = scipy.sparse.load_npz(path)
    else:
        raise ValueError(f"Unsupported matrix file extension: {ext!r}")

    log.info("Loaded matrix from %s", path)
    return CSRMatrix.from_scipy(matrix)


def save_matrix(matrix: CSRMatrix, path: str):
    """
    Save a matrix to ``.npz`` or ``.mtx``; any other extension gets ``.npz`` appended.

    Returns:
    --------
    str : Path actually written
    """
    ext = os.path.splitext(path)[1].lower()

    if ext == '.mtx':
        scipy.io.mmwrite(path, matrix.to_scipy())
    else:
        if ext != '.npz':
            path = path + '.npz'
        scipy.sparse.save_npz(path, matrix.to_scipy())

    log.info("Saved matrix to %s", path)
    return path


def load_or_generate(name: str, config: CsrkitConfig = DEFAULT_CONFIG) -> CSRMatrix:
    """Load ``name`` from disk, or build the demo matrix when ``name`` is 'demo'."""
    if name == 'demo':
        return generate_random_sparse_matrix(
            config.demo_size, config.demo_density, config.demo_pattern,
            random_state=config.demo_seed,
        )
    return load_matrix(name)
