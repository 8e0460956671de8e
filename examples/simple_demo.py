#!/usr/bin/env python3
"""
Simple Demo - Shows basic usage of csrkit

This is a minimal example showing how to:
1. Generate a matrix
2. Apply RCM reordering
3. Check improvement
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from csrkit.utils.loader import generate_random_sparse_matrix
from csrkit.analysis.mat_specs import get_bandwidth
from csrkit.reordering.rcm import reorder_matrix

def simple_example():
    """Simple 10-line example."""
    # Generate test matrix: a banded matrix with shuffled rows and columns
    matrix = generate_random_sparse_matrix(100, 0.05, 'shuffled_banded', random_state=0)

    # Check original bandwidth
    original_bw = get_bandwidth(matrix)
    print(f"Original bandwidth: {original_bw:,}")

    # Apply RCM reordering
    reordered, perm, inverse_perm = reorder_matrix(matrix)

    # Check improvement
    new_bw = get_bandwidth(reordered)
    improvement = (original_bw - new_bw) / original_bw * 100
    print(f"RCM bandwidth: {new_bw:,} ({improvement:+.1f}% improvement)")

if __name__ == "__main__":
    simple_example()
