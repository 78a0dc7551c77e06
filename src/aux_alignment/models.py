"""
Alignment models.

One model is active at a time and is chosen by the number of sync points:

* IdentityModel - no sync points, the mount is taken as perfectly aligned.
* DirectModel - 1 to 3 sync points, a single basis-change matrix pair.
* PiecewiseSphericalModel - 4 or more sync points, a matrix per hull facet.

Every model maps a direction cosine from a source frame to the other frame
through `transform(frame, vector)`, returning None when it cannot. Each model
also carries the `epoch` of the build that produced it. The epoch only
identifies that build for logs and callers; queries do not check it.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
import itertools
import logging
import numpy as np

from .basis import DEFAULT_SINGULARITY_TOLERANCE, calculate_transform_matrices
from .hull import DualHull, Frame, HullFace
from .intersection import ray_triangle_intersection
from .numeric import matrix_vector_multiply
from .vectors import DirectionVector

logger = logging.getLogger(__name__)

# Scale applied to a query so the ray reaches past the unit sphere
RAY_SCALE = 2.0


def dump_vector(label: str, vector) -> None:
    logger.debug("Vector dump - %s: %.9f %.9f %.9f", label, *vector)


def dump_matrix(label: str, matrix: np.ndarray) -> None:
    logger.debug("Matrix dump - %s", label)
    for i, row in enumerate(matrix):
        logger.debug("Row %d %.9f %.9f %.9f", i, *row)


def apply_matrix(matrix: np.ndarray, vector: DirectionVector) -> DirectionVector:
    """Applies a transform matrix and normalises the result to unit length."""
    result = DirectionVector.from_array(matrix_vector_multiply(matrix, vector.to_array()))
    result.normalize()
    return result


class IdentityModel:
    """Zero sync points: directions are only reinterpreted between frames."""

    sync_point_count = 0

    def __init__(self, epoch: int = 0):
        self.epoch = epoch

    def transform(self, frame: Frame, vector: DirectionVector) -> Optional[DirectionVector]:
        return vector.copy()


class DirectModel:
    """A single actual->apparent matrix and its apparent->actual counterpart."""

    def __init__(
        self,
        actual_to_apparent: np.ndarray,
        apparent_to_actual: np.ndarray,
        sync_point_count: int,
        epoch: int = 0,
    ):
        self.actual_to_apparent = actual_to_apparent
        self.apparent_to_actual = apparent_to_actual
        self.sync_point_count = sync_point_count
        self.epoch = epoch

    def transform(self, frame: Frame, vector: DirectionVector) -> Optional[DirectionVector]:
        if frame is Frame.ACTUAL:
            return apply_matrix(self.actual_to_apparent, vector)
        return apply_matrix(self.apparent_to_actual, vector)


class PiecewiseSphericalModel:
    """
    Dual convex hull model for four or more sync points.

    Each facet of the actual hull maps its three actual vectors onto the
    apparent vectors of the same sync points, and each facet of the apparent
    hull does the reverse. Facets touching the nadir vertex only close the
    hull and carry no matrix.
    """

    def __init__(
        self,
        actual: Sequence[DirectionVector],
        apparent: Sequence[DirectionVector],
        epoch: int = 0,
        tolerance: float = DEFAULT_SINGULARITY_TOLERANCE,
    ):
        self.hull = DualHull(actual, apparent)
        self.sync_point_count = len(actual)
        self.epoch = epoch
        self.tolerance = tolerance
        self.degenerate_faces: List[HullFace] = []
        for frame in (Frame.ACTUAL, Frame.APPARENT):
            self._compute_face_matrices(frame)

    def _compute_face_matrices(self, frame: Frame) -> None:
        target = frame.other
        for face in self.hull.faces(frame):
            if face.touches_nadir:
                logger.debug("Ignoring %s face %d %s", frame.value, face.index, face.vertices)
                continue
            logger.debug("Processing %s face %d %s", frame.value, face.index, face.vertices)
            pair = calculate_transform_matrices(
                *self.hull.triangle(frame, face),
                *self.hull.triangle(target, face),
                want_inverse=False,
                tolerance=self.tolerance,
            )
            if pair is None:
                logger.warning(
                    "Degenerate %s face %s, it will never be selected",
                    frame.value,
                    face.vertices,
                )
                self.degenerate_faces.append(face)
                continue
            self.hull.set_matrix(frame, face, pair.forward)

    def locate(self, frame: Frame, vector: DirectionVector) -> Optional[HullFace]:
        """First facet (in hull order) hit by a ray along `vector`."""
        ray = vector * RAY_SCALE
        for face in self.hull.faces(frame):
            if face.touches_nadir or self.hull.matrix(frame, face) is None:
                continue
            if ray_triangle_intersection(ray, *self.hull.triangle(frame, face)):
                return face
        return None

    def nearest_sync_points(self, frame: Frame, vector: DirectionVector, count: int = 3) -> List[int]:
        """Vertex ids of the sync points closest to `vector`, ties in recording order."""
        vectors = self.hull.vectors[frame]
        distances = [(vectors[vid] - vector).length() for vid in range(1, len(vectors))]
        order = sorted(range(len(distances)), key=lambda i: distances[i])
        return [i + 1 for i in order[:count]]

    def _fallback_matrix(self, frame: Frame, vector: DirectionVector) -> Optional[np.ndarray]:
        """
        Matrix from the three nearest sync points that form a usable basis.

        Triples are tried in order of distance: the nearest two with each
        following point as the third, then the nearest with the next two,
        and so on.
        """
        ranked = self.nearest_sync_points(frame, vector, count=self.sync_point_count)
        logger.warning(
            "No %s facet covers the direction, using nearest sync points %s",
            frame.value,
            ranked[:3],
        )
        for triple in itertools.combinations(ranked, 3):
            pair = calculate_transform_matrices(
                *(self.hull.vertex(frame, vid) for vid in triple),
                *(self.hull.vertex(frame.other, vid) for vid in triple),
                want_inverse=False,
                tolerance=self.tolerance,
            )
            if pair is None:
                logger.debug("Sync points %s form a degenerate basis", triple)
                continue
            if list(triple) != ranked[:3]:
                logger.info("Fallback uses sync points %s", triple)
            return pair.forward
        logger.error("No three sync points form a usable basis")
        return None

    def transform(self, frame: Frame, vector: DirectionVector) -> Optional[DirectionVector]:
        face = self.locate(frame, vector)
        if face is not None:
            matrix = self.hull.matrix(frame, face)
        else:
            matrix = self._fallback_matrix(frame, vector)
            if matrix is None:
                return None
        dump_matrix(f"{frame.value} transform", matrix)
        return apply_matrix(matrix, vector)
