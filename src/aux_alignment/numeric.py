"""
3x3 linear algebra used by the alignment transforms.

Determinant and inverse go through an LU decomposition (scipy.linalg). A
singular matrix is reported by returning None, never by raising.
"""

import warnings
import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve


def _as_matrix(matrix):
    m = np.asarray(matrix, dtype=float)
    if m.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")
    return m


def _as_vector(vector):
    v = np.asarray(vector, dtype=float)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def _lu(matrix):
    with warnings.catch_warnings():
        # An exactly singular matrix is an expected outcome here
        warnings.simplefilter("ignore", LinAlgWarning)
        return lu_factor(matrix)


def _lu_determinant(lu, piv):
    swaps = np.count_nonzero(piv != np.arange(len(piv)))
    sign = -1.0 if swaps % 2 else 1.0
    return sign * float(np.prod(np.diag(lu)))


def matrix_3x3_determinant(matrix):
    """Determinant of a 3x3 matrix via LU decomposition."""
    lu, piv = _lu(_as_matrix(matrix))
    return _lu_determinant(lu, piv)


def matrix_invert_3x3(matrix):
    """Inverse of a 3x3 matrix, or None when its determinant is exactly zero."""
    lu, piv = _lu(_as_matrix(matrix))
    if _lu_determinant(lu, piv) == 0.0:
        return None
    return lu_solve((lu, piv), np.identity(3))


def matrix_matrix_multiply(a, b, out=None):
    """C = A @ B for 3x3 operands. `out`, if given, is zeroed and filled."""
    a = _as_matrix(a)
    b = _as_matrix(b)
    if out is None:
        out = np.zeros((3, 3))
    else:
        out[...] = 0.0
    out += a @ b
    return out


def matrix_vector_multiply(a, v, out=None):
    """y = A @ v for a 3x3 matrix and a 3-vector. `out`, if given, is zeroed and filled."""
    a = _as_matrix(a)
    v = _as_vector(v)
    if out is None:
        out = np.zeros(3)
    else:
        out[...] = 0.0
    out += a @ v
    return out
