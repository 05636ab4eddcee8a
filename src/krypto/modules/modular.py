"""Integer matrix arithmetic modulo the alphabet size.

Determinants are computed by cofactor expansion with exact Python integers
(no ``np.linalg.det``), so the result is the true determinant and callers
reduce it themselves. Cost is O(n!) which is fine for the 2-4 sized keys
this is used with.
"""
import logging

import numpy as np

from krypto.modules.errors import DimensionMismatch, NotInvertible

MODULUS = 26

logger = logging.getLogger(__name__)


def as_key_matrix(matrix):
    """Coerce nested sequences (or an array) into a square integer numpy matrix."""
    try:
        rows = [list(row) for row in matrix]
    except TypeError:
        raise DimensionMismatch("Key matrix must be a sequence of rows.") from None
    size = len(rows)
    if size < 2:
        raise DimensionMismatch(f"Key matrix must be at least 2x2, got {size} row(s).")
    if any(len(row) != size for row in rows):
        raise DimensionMismatch("Key matrix must be square.")

    array = np.asarray(rows)
    if array.dtype.kind not in "iu":
        raise TypeError(f"Key matrix entries must be integers, got {array.dtype}.")
    return array.astype(np.int64)


def gcd(a, b):
    """Greatest common divisor by Euclid's recursion."""
    if b == 0:
        return a
    return gcd(b, a % b)


def invertible(det, modulus=MODULUS):
    return gcd(det % modulus, modulus) == 1


def modular_inverse(a, modulus=MODULUS):
    """Return x in [1, modulus) with a*x = 1 (mod modulus)."""
    try:
        return pow(a % modulus, -1, modulus)
    except ValueError:
        raise NotInvertible(f"{a} has no inverse modulo {modulus}.") from None


def submatrix(matrix, exclude_row, exclude_col):
    """Drop one row and one column, keeping the order of what remains."""
    matrix = np.asarray(matrix)
    return np.delete(np.delete(matrix, exclude_row, axis=0), exclude_col, axis=1)


def determinant(matrix):
    """Raw integer determinant by expansion along the first row."""
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionMismatch("Matrix must be square.")

    size = matrix.shape[0]
    if size == 1:
        return int(matrix[0, 0])
    if size == 2:
        return int(matrix[0, 0]) * int(matrix[1, 1]) - int(matrix[0, 1]) * int(matrix[1, 0])

    det = 0
    for col in range(size):
        sign = (-1) ** col
        det += sign * int(matrix[0, col]) * determinant(submatrix(matrix, 0, col))
    return det


def adjugate(matrix, modulus=MODULUS):
    """Transposed cofactor matrix, reduced into [0, modulus)."""
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionMismatch("Matrix must be square.")

    size = matrix.shape[0]
    adj = np.zeros((size, size), dtype=np.int64)
    for i in range(size):
        for j in range(size):
            cofactor = (-1) ** (i + j) * determinant(submatrix(matrix, i, j))
            adj[j, i] = cofactor % modulus
    return adj


def inverse_matrix(matrix, modulus=MODULUS):
    """Inverse of ``matrix`` over the integers mod ``modulus`` via the adjugate."""
    det = determinant(matrix)
    if not invertible(det, modulus):
        raise NotInvertible(
            f"Matrix is not invertible mod {modulus} (determinant {det}, "
            f"gcd {gcd(det % modulus, modulus)})."
        )

    det_inv = modular_inverse(det, modulus)
    logger.debug("Determinant: %d, modular inverse of determinant: %d", det, det_inv)
    return (adjugate(matrix, modulus) * det_inv) % modulus
