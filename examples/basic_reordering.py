#!/usr/bin/env python3
"""
Basic Reordering Example for csrkit

This example demonstrates how to:
1. Build a CSR matrix from coordinate triples
2. Compute the Reverse Cuthill-McKee permutation
3. Apply it to the matrix and to vectors
4. Visualize the sparsity pattern before and after

Usage:
    python examples/basic_reordering.py
"""

import numpy as np
import sys
import os

# Add src to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from csrkit import (
    create, get_bandwidth, get_rcm_permutation, multiply, permute, print_dense,
    reorder_vector, reverse_reorder_vector,
)
from csrkit.analysis.mat_specs import compute_matrix_properties
from csrkit.utils.loader import generate_random_sparse_matrix
from csrkit.visualization.plots import compare_matrices_sparsity, save_plot


def small_example():
    """Arrow matrix: one hub row and column, bandwidth n - 1."""
    n = 6
    rows, cols, vals = [], [], []
    for i in range(n):
        rows.append(i); cols.append(i); vals.append(4.0)
        if i > 0:
            rows += [0, i]; cols += [i, 0]; vals += [-1.0, -1.0]
    A = create(n, n, rows, cols, vals)

    print("Original matrix:")
    print_dense(A)
    print(f"Bandwidth: {get_bandwidth(A)}")

    perm, inverse_perm = get_rcm_permutation(A)
    B = permute(A, perm, inverse_perm)
    print(f"\nRCM order (perm[new] = old): {perm.tolist()}")
    print_dense(B)
    print(f"Bandwidth: {get_bandwidth(B)}")

    # Solving with B instead of A: permute x in, permute y back out
    x = np.arange(1.0, n + 1)
    y = reverse_reorder_vector(multiply(B, reorder_vector(x, perm)), perm)
    print(f"\nA*x computed through the reordered matrix matches: {np.allclose(y, multiply(A, x))}")


def main():
    """Main function demonstrating basic reordering workflow."""

    print("=== csrkit Basic Reordering Example ===\n")
    small_example()

    print("\nLarger matrix:")
    matrix = generate_random_sparse_matrix(300, 0.02, 'shuffled_banded', random_state=42)
    props = compute_matrix_properties(matrix)
    print(f"  {props['shape'][0]}x{props['shape'][1]}, {props['nnz']} NNZ, "
          f"bandwidth {props['bandwidth']}, profile {props['profile']}")

    perm, inverse_perm = get_rcm_permutation(matrix)
    reordered = permute(matrix, perm, inverse_perm)
    new_props = compute_matrix_properties(reordered)
    print(f"  after RCM: bandwidth {new_props['bandwidth']}, profile {new_props['profile']}")

    output = os.path.join('results', 'rcm_sparsity.png')
    save_plot(compare_matrices_sparsity({'Original': matrix, 'RCM': reordered}), output)
    print(f"\nSparsity comparison saved to {output}")


if __name__ == "__main__":
    main()
