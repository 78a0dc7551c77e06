"""
Basis-change matrices between the actual and apparent frames.

Three source direction cosines and their three target counterparts define a
linear map. With the vectors stacked as matrix columns, A = [a1 a2 a3] and
B = [b1 b2 b3], the forward transform is B A^-1 and the inverse A B^-1.
"""

from typing import NamedTuple, Optional
import logging
import numpy as np

from .numeric import matrix_3x3_determinant, matrix_invert_3x3, matrix_matrix_multiply

logger = logging.getLogger(__name__)

DEFAULT_SINGULARITY_TOLERANCE = 1e-10


class TransformPair(NamedTuple):
    forward: np.ndarray
    inverse: Optional[np.ndarray]


def _columns(v1, v2, v3):
    return np.column_stack(
        [np.asarray(v1, dtype=float), np.asarray(v2, dtype=float), np.asarray(v3, dtype=float)]
    )


def _checked_inverse(basis, tolerance, label):
    determinant = matrix_3x3_determinant(basis)
    if abs(determinant) < tolerance:
        logger.debug("%s basis is degenerate (det=%g)", label, determinant)
        return None
    return matrix_invert_3x3(basis)


def calculate_transform_matrices(
    a1, a2, a3, b1, b2, b3, want_inverse=True, tolerance=DEFAULT_SINGULARITY_TOLERANCE
):
    """
    Computes the matrix mapping (a1, a2, a3) onto (b1, b2, b3).

    Returns a TransformPair, with `inverse` set to None unless requested, or
    None when a basis is coplanar within `tolerance`.
    """
    source = _columns(a1, a2, a3)
    target = _columns(b1, b2, b3)

    source_inverse = _checked_inverse(source, tolerance, "Source")
    if source_inverse is None:
        return None
    forward = matrix_matrix_multiply(target, source_inverse)

    if not want_inverse:
        return TransformPair(forward, None)

    target_inverse = _checked_inverse(target, tolerance, "Target")
    if target_inverse is None:
        return None
    inverse = matrix_matrix_multiply(source, target_inverse)
    return TransformPair(forward, inverse)
