"""
Reverse Cuthill-McKee ordering.

The matrix is read as an undirected graph: vertex u is adjacent to v when
A[u, v] or A[v, u] is stored (the pattern is symmetrized, self loops are
ignored). For a strongly unsymmetric matrix the resulting permutation still
is a valid reordering, but the bandwidth reduction applies to the
symmetrized pattern only.

The ordering is deterministic. Every breadth-first search starts from the
unvisited vertex of smallest degree (smallest index on ties), and each BFS
level is emitted in ascending (degree, index) order. Components are handled
one after another until every vertex is placed.

Permutation convention: ``perm[new] = old`` and ``inverse_perm[old] = new``.
"""

import heapq
import logging

import numpy as np

from ..analysis.graph_struct import adjacency_structure
from ..matrix import INDEX_DTYPE, as_csr_matrix
from .permute import invert_permutation, permute

log = logging.getLogger(__name__)


def _cuthill_mckee(indptr, indices):
    n = len(indptr) - 1
    degree = np.diff(indptr)

    # Candidate roots in (degree, index) order; a visited vertex is skipped
    root_order = np.lexsort((np.arange(n), degree)).tolist()
    degree = degree.tolist()
    indptr = indptr.tolist()
    indices = indices.tolist()

    visited = [False] * n
    order = []
    next_root = 0
    num_components = 0

    while len(order) < n:
        while visited[root_order[next_root]]:
            next_root += 1
        root = root_order[next_root]
        visited[root] = True
        order.append(root)
        num_components += 1
        log.debug("BFS root %d (degree %d)", root, degree[root])

        frontier = [root]
        while frontier:
            level = []
            for u in frontier:
                for v in indices[indptr[u]:indptr[u + 1]]:
                    if not visited[v]:
                        visited[v] = True
                        heapq.heappush(level, (degree[v], v))
            frontier = []
            while level:
                _, v = heapq.heappop(level)
                order.append(v)
                frontier.append(v)

    log.debug("Cuthill-McKee visited %d vertices in %d components", n, num_components)
    return np.asarray(order, dtype=INDEX_DTYPE)


def cuthill_mckee_order(matrix):
    """Cuthill-McKee visit order (before reversal) of a square matrix."""
    indptr, indices = adjacency_structure(as_csr_matrix(matrix))
    return _cuthill_mckee(indptr, indices)


def compute_rcm(matrix):
    """
    Compute the Reverse Cuthill-McKee permutation of a square matrix.

    Parameters:
    -----------
    matrix : CSRMatrix or scipy.sparse matrix
        Square input matrix

    Returns:
    --------
    tuple : (perm, inverse_perm), int64 arrays with perm[new] = old

    Raises:
    -------
    DimensionMismatch : the matrix is not square
    """
    order = cuthill_mckee_order(matrix)
    perm = order[::-1].copy()
    return perm, invert_permutation(perm)


get_rcm_permutation = compute_rcm


def reorder_matrix(matrix):
    """Apply RCM to ``matrix``; returns (reordered, perm, inverse_perm)."""
    A = as_csr_matrix(matrix)
    perm, inverse_perm = compute_rcm(A)
    return permute(A, perm, inverse_perm), perm, inverse_perm
