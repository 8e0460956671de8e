import networkx as nx
import numpy as np
import scipy.sparse

from ..errors import DimensionMismatch
from ..matrix import INDEX_DTYPE, as_csr_matrix


def adjacency_structure(A):
    """
    Symmetrized, loop-free adjacency of a square matrix.

    Vertex u is adjacent to v when A[u, v] or A[v, u] is stored. Explicitly
    stored zeros count as structural entries.

    Returns:
    --------
    tuple : (indptr, indices) with each vertex's neighbors sorted ascending
    """
    A = as_csr_matrix(A)
    n, m = A.shape
    if n != m:
        raise DimensionMismatch(f"adjacency view needs a square matrix, got {n}x{m}")

    rows = A.row_indices()
    cols = A.col_index
    off_diagonal = rows != cols
    rows, cols = rows[off_diagonal], cols[off_diagonal]

    pattern = scipy.sparse.coo_matrix(
        (np.ones(2 * rows.size, dtype=np.int8),
         (np.concatenate([rows, cols]), np.concatenate([cols, rows]))),
        shape=(n, n),
    ).tocsr()
    pattern.sum_duplicates()
    pattern.sort_indices()
    return pattern.indptr.astype(INDEX_DTYPE), pattern.indices.astype(INDEX_DTYPE)


def vertex_degrees(A):
    indptr, _ = adjacency_structure(A)
    return np.diff(indptr)


def build_adjacency_graph(A):
    indptr, indices = adjacency_structure(A)
    n = indptr.size - 1
    G = nx.Graph()
    G.add_nodes_from(range(n))  # keep isolated vertices
    for u in range(n):
        for v in indices[indptr[u]:indptr[u + 1]]:
            if u < v:
                G.add_edge(u, int(v))
    return G


def component_summary(A):
    G = build_adjacency_graph(A)
    components = sorted(nx.connected_components(G), key=min)
    return {
        'num_components': len(components),
        'component_sizes': [len(comp) for comp in components],
        'isolated_vertices': nx.number_of_isolates(G),
    }
