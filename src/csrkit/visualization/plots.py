import logging
import os

import matplotlib.pyplot as plt
import numpy as np

from ..analysis.mat_specs import get_bandwidth
from ..matrix import as_csr_matrix

log = logging.getLogger(__name__)


def plot_sparsity_pattern(matrix, title="Matrix Sparsity Pattern", ax=None, figsize=(8, 8),
                          show_band=True):
    """
    Plot the sparsity pattern of a sparse matrix.

    Parameters:
    -----------
    matrix : CSRMatrix or scipy.sparse matrix
        Input sparse matrix
    title : str
        Plot title
    ax : matplotlib.axes, optional
        Axes to plot on
    figsize : tuple
        Figure size
    show_band : bool
        Draw the two diagonals that bound the band

    Returns:
    --------
    matplotlib.figure or None
    """
    A = as_csr_matrix(matrix)
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
        return_fig = True
    else:
        return_fig = False

    markersize = max(0.5, min(6.0, 300.0 / max(A.shape + (1,))))
    ax.plot(A.col_index, A.row_indices(), 's', markersize=markersize, alpha=0.8)
    ax.set_xlim(-0.5, A.num_cols - 0.5)
    ax.set_ylim(A.num_rows - 0.5, -0.5)
    ax.set_aspect('equal')

    bandwidth = get_bandwidth(A)
    if show_band and A.nnz:
        diag = np.arange(A.num_rows)
        ax.plot(diag + bandwidth, diag, 'r--', linewidth=0.8)
        ax.plot(diag - bandwidth, diag, 'r--', linewidth=0.8)

    ax.set_title(f"{title}\n{A.num_rows}x{A.num_cols}, {A.nnz} NNZ, bandwidth {bandwidth}")
    ax.set_xlabel("Column Index")
    ax.set_ylabel("Row Index")

    if return_fig:
        return fig
    return None


def compare_matrices_sparsity(matrices_dict, figsize=None):
    """
    Compare sparsity patterns of multiple matrices side by side.

    Parameters:
    -----------
    matrices_dict : dict
        Dictionary of {name: matrix} pairs

    Returns:
    --------
    matplotlib.figure
    """
    n_matrices = len(matrices_dict)
    if n_matrices == 0:
        raise ValueError("No matrices to compare")
    cols = min(4, n_matrices)
    rows = (n_matrices + cols - 1) // cols
    if figsize is None:
        figsize = (5 * cols, 5 * rows)

    fig, axes = plt.subplots(rows, cols, figsize=figsize, squeeze=False)
    axes = axes.flatten()

    for ax, (name, matrix) in zip(axes, matrices_dict.items()):
        plot_sparsity_pattern(matrix, title=name, ax=ax)

    # Hide empty subplots
    for ax in axes[n_matrices:]:
        ax.set_visible(False)

    fig.tight_layout()
    return fig


def plot_bandwidth_comparison(matrices_dict, figsize=(8, 5)):
    """Bar chart of the bandwidth of each matrix in ``matrices_dict``."""
    names = list(matrices_dict.keys())
    bandwidths = [get_bandwidth(matrix) for matrix in matrices_dict.values()]

    fig, ax = plt.subplots(figsize=figsize)

    bars = ax.bar(names, bandwidths)
    ax.set_ylabel('Bandwidth')
    ax.set_title('Matrix Bandwidth Comparison')

    # Add value labels on bars
    for bar, bw in zip(bars, bandwidths):
        ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height(),
                f'{bw:,}', ha='center', va='bottom')

    fig.tight_layout()
    return fig


def save_plot(fig, filepath, dpi=150):
    """Save ``fig`` to ``filepath`` (parent directories are created) and close it."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(filepath, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    log.info("Saved plot to %s", filepath)
    return filepath
