"""Exceptions raised by csrkit operations."""


class CSRError(ValueError):
    """Base class for invalid input handed to a csrkit operation."""


class InvalidIndex(CSRError):
    """A coordinate row or column index lies outside the declared shape."""


class DuplicateEntry(CSRError):
    """Two coordinate triples target the same (row, col) position."""


class DimensionMismatch(CSRError):
    """A vector or permutation length disagrees with the matrix dimensions."""


class InvalidPermutation(CSRError):
    """A permutation pair is not a bijection with its inverse."""


class MatrixDestroyedError(RuntimeError):
    """A matrix was used after destroy() released its storage."""
