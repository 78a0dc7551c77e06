"""
Convex hulls over direction cosines.

ConvexHull3D wraps qhull (scipy.spatial.ConvexHull) and exposes the result as
a flat list of triangular faces addressed by index, each carrying the integer
ids of its vertices wound counter-clockwise as seen from outside the hull.

DualHull holds the two hulls the piecewise alignment model needs, one over
the actual-frame vectors and one over the apparent-frame vectors, with
parallel vertex numbering and a single table of per-face transform matrices.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import logging
import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .vectors import DirectionVector

logger = logging.getLogger(__name__)

NADIR_VERTEX = 0
NADIR = DirectionVector(0.0, 0.0, -1.0)


class HullError(Exception):
    """Raised when a point set does not span a 3D hull."""


class Frame(Enum):
    ACTUAL = "actual"
    APPARENT = "apparent"

    @property
    def other(self) -> "Frame":
        return Frame.APPARENT if self is Frame.ACTUAL else Frame.ACTUAL


@dataclass(frozen=True)
class HullFace:
    index: int
    vertices: Tuple[int, int, int]

    @property
    def key(self) -> Tuple[int, int, int]:
        a, b, c = sorted(self.vertices)
        return a, b, c

    def has_vertex(self, vertex_id: int) -> bool:
        return vertex_id in self.vertices

    @property
    def touches_nadir(self) -> bool:
        return NADIR_VERTEX in self.vertices


class ConvexHull3D:
    """Triangulated convex hull of a set of tagged 3D points."""

    def __init__(self, vertices: Mapping[int, Sequence[float]]):
        self.vertex_ids: List[int] = list(vertices)
        self.points = np.array([np.asarray(vertices[vid], dtype=float) for vid in self.vertex_ids])
        if self.points.shape[0] < 4:
            raise HullError(f"Need at least 4 points, got {self.points.shape[0]}")

        try:
            hull = ConvexHull(self.points)
        except QhullError as e:
            raise HullError(str(e)) from e

        self.faces: List[HullFace] = []
        for simplex, equation in zip(hull.simplices, hull.equations):
            p0, p1, p2 = self.points[simplex]
            # qhull gives no winding guarantee, the facet normal points outward
            if np.dot(np.cross(p1 - p0, p2 - p0), equation[:3]) < 0:
                simplex = simplex[[0, 2, 1]]
            ids = tuple(self.vertex_ids[i] for i in simplex)
            self.faces.append(HullFace(len(self.faces), ids))

    def __iter__(self) -> Iterator[HullFace]:
        return iter(self.faces)

    def __len__(self) -> int:
        return len(self.faces)

    def faces_with_vertex(self, vertex_id: int) -> List[HullFace]:
        return [face for face in self.faces if face.has_vertex(vertex_id)]


class DualHull:
    """
    Parallel actual/apparent hulls sharing vertex numbering.

    Vertex 0 is the synthetic nadir in both frames; vertex i (1..N) is the
    i-th sync point.
    """

    def __init__(
        self,
        actual: Sequence[DirectionVector],
        apparent: Sequence[DirectionVector],
    ):
        if len(actual) != len(apparent):
            raise ValueError("Actual and apparent vector lists differ in length")
        self.vectors: Dict[Frame, List[DirectionVector]] = {
            Frame.ACTUAL: [NADIR.copy()] + [v.copy() for v in actual],
            Frame.APPARENT: [NADIR.copy()] + [v.copy() for v in apparent],
        }
        self.hulls: Dict[Frame, ConvexHull3D] = {
            frame: ConvexHull3D({vid: tuple(v) for vid, v in enumerate(vectors)})
            for frame, vectors in self.vectors.items()
        }
        self._matrices: Dict[Tuple[Frame, Tuple[int, int, int]], np.ndarray] = {}
        logger.debug(
            "Hulls built: %d actual faces, %d apparent faces",
            len(self.hulls[Frame.ACTUAL]),
            len(self.hulls[Frame.APPARENT]),
        )

    def faces(self, frame: Frame) -> List[HullFace]:
        return self.hulls[frame].faces

    def vertex(self, frame: Frame, vertex_id: int) -> DirectionVector:
        return self.vectors[frame][vertex_id]

    def triangle(self, frame: Frame, face: HullFace) -> Tuple[DirectionVector, ...]:
        return tuple(self.vectors[frame][vid] for vid in face.vertices)

    def set_matrix(self, frame: Frame, face: HullFace, matrix: np.ndarray) -> None:
        self._matrices[(frame, face.key)] = matrix

    def matrix(self, frame: Frame, face: HullFace) -> Optional[np.ndarray]:
        return self._matrices.get((frame, face.key))

    @property
    def matrix_count(self) -> int:
        return len(self._matrices)
