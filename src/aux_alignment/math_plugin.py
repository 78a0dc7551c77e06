"""
Basic Math Plugin

Builds the active alignment model from the sync point database and uses it to
convert celestial coordinates to telescope direction vectors and back.

Model selection by number of sync points:
    - 0: no transformation, the mount is assumed perfectly aligned.
    - 1: a dummy second point is taken from the approximate mount alignment
      (zenith or celestial pole), a third is the cross product of the first
      two. One matrix pair is computed.
    - 2: the third point is the cross product of the two sync points.
    - 3: the sync points are used directly.
    - 4+: a convex hull is computed over the points in each frame and a
      matrix for each triangular facet.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Tuple, Union
import logging
import math

from .basis import DEFAULT_SINGULARITY_TOLERANCE, calculate_transform_matrices
from .coordinates import (
    MountAlignment,
    actual_direction,
    celestial_from_direction,
    current_julian_date,
)
from .database import InMemoryDatabase
from .hull import Frame, HullError
from .models import (
    DirectModel,
    IdentityModel,
    PiecewiseSphericalModel,
    dump_matrix,
    dump_vector,
)
from .vectors import DirectionVector, angular_distance, vector_from_radec

logger = logging.getLogger(__name__)

AlignmentModel = Union[IdentityModel, DirectModel, PiecewiseSphericalModel]


class BasicMathPlugin:
    """
    Alignment transform engine.

    `initialise` must complete before any transform call. Each successful
    call replaces the active model as a whole; a failed call leaves the
    previous model in place.
    """

    def __init__(
        self,
        approximate_mount_alignment: MountAlignment = MountAlignment.ZENITH,
        clock: Optional[Callable[[], float]] = None,
        singularity_tolerance: float = DEFAULT_SINGULARITY_TOLERANCE,
    ) -> None:
        self._approximate_mount_alignment = approximate_mount_alignment
        self._clock = clock or current_julian_date
        self.singularity_tolerance = singularity_tolerance
        self._database: Optional[InMemoryDatabase] = None
        self._model: Optional[AlignmentModel] = None
        self._epoch = 0
        self.rms_error_arcsec = 0.0

    def get_approximate_mount_alignment(self) -> MountAlignment:
        return self._approximate_mount_alignment

    def set_approximate_mount_alignment(self, hint: MountAlignment) -> None:
        self._approximate_mount_alignment = hint

    @property
    def model(self) -> Optional[AlignmentModel]:
        return self._model

    @property
    def epoch(self) -> int:
        """
        Number of successful model builds.

        Informational only: it tells callers which build answered a query.
        Queries read the active model once, so they never need to compare it.
        """
        return self._epoch

    def _dummy_direction(self) -> DirectionVector:
        hint = self._approximate_mount_alignment
        if hint is MountAlignment.ZENITH:
            return DirectionVector(0.0, 0.0, 1.0)
        if hint is MountAlignment.NORTH_CELESTIAL_POLE:
            return vector_from_radec(0.0, 90.0)
        return vector_from_radec(0.0, -90.0)

    def _build_direct(
        self, actual: List[DirectionVector], apparent: List[DirectionVector], epoch: int
    ) -> Optional[DirectModel]:
        count = len(actual)
        actual = list(actual)
        apparent = list(apparent)
        if count == 1:
            dummy = self._dummy_direction()
            actual.append(dummy)
            apparent.append(dummy.copy())
        if count < 3:
            actual.append(actual[0].cross(actual[1]).normalized())
            apparent.append(apparent[0].cross(apparent[1]).normalized())

        pair = calculate_transform_matrices(
            *actual, *apparent, tolerance=self.singularity_tolerance
        )
        if pair is None:
            logger.error("Sync points do not form a usable basis (%d points)", count)
            return None
        dump_matrix("actual to apparent", pair.forward)
        dump_matrix("apparent to actual", pair.inverse)
        return DirectModel(pair.forward, pair.inverse, count, epoch)

    def initialise(self, database: InMemoryDatabase) -> bool:
        """Builds a new alignment model from the database's sync points."""
        position = database.get_reference_position()
        if position is None:
            logger.error("No reference position in the alignment database")
            return False

        entries = database.entries
        hint = self._approximate_mount_alignment
        epoch = self._epoch + 1

        actual = [
            actual_direction(e.ra, e.dec, hint, position, e.julian_date) for e in entries
        ]
        apparent = [e.telescope_direction.copy() for e in entries]

        model: Optional[AlignmentModel]
        if not entries:
            model = IdentityModel(epoch)
        elif len(entries) <= 3:
            model = self._build_direct(actual, apparent, epoch)
        else:
            try:
                model = PiecewiseSphericalModel(
                    actual, apparent, epoch, tolerance=self.singularity_tolerance
                )
            except HullError as e:
                logger.error("Cannot build convex hull from sync points: %s", e)
                model = None
        if model is None:
            return False

        self._database = database
        self._model = model
        self._epoch = epoch
        self._compute_rms(actual, apparent)
        logger.info(
            "Alignment model %s built from %d sync points (epoch %d)",
            type(model).__name__,
            len(entries),
            epoch,
        )
        return True

    def transform_celestial_to_telescope(
        self, ra: float, dec: float, julian_offset: float = 0.0
    ) -> Tuple[Optional[DirectionVector], bool]:
        """
        Converts RA (hours) / Dec (degrees) to an apparent telescope direction.

        `julian_offset` (days) is added to the current time, e.g. to compute
        where a target will be when a slew completes.
        """
        model = self._model
        if model is None or self._database is None:
            return None, False
        position = self._database.get_reference_position()
        if position is None:
            logger.debug("No database or no position in database")
            return None, False

        julian_date = self._clock() + julian_offset
        actual = actual_direction(
            ra, dec, self._approximate_mount_alignment, position, julian_date
        )
        apparent = model.transform(Frame.ACTUAL, actual)
        if apparent is None:
            return None, False
        dump_vector("actual", actual)
        dump_vector("apparent", apparent)
        return apparent, True

    def transform_telescope_to_celestial(
        self, apparent: DirectionVector
    ) -> Tuple[float, float, bool]:
        """Converts an apparent telescope direction to RA (hours) / Dec (degrees)."""
        model = self._model
        if model is None or self._database is None:
            return 0.0, 0.0, False
        position = self._database.get_reference_position()
        if position is None:
            logger.debug("No database or no position in database")
            return 0.0, 0.0, False

        actual = model.transform(Frame.APPARENT, apparent)
        if actual is None:
            return 0.0, 0.0, False
        dump_vector("apparent", apparent)
        dump_vector("actual", actual)
        ra, dec = celestial_from_direction(
            actual, self._approximate_mount_alignment, position, self._clock()
        )
        return ra, dec, True

    def sync_point_residuals(self) -> List[float]:
        """
        Angular error (arcsec) of each sync point pushed through the active
        model: predicted apparent direction against the recorded one.
        """
        if self._model is None or self._database is None:
            return []
        position = self._database.get_reference_position()
        if position is None:
            return []
        hint = self._approximate_mount_alignment
        entries = self._database.entries
        actual = [
            actual_direction(e.ra, e.dec, hint, position, e.julian_date) for e in entries
        ]
        return self._residuals(actual, [e.telescope_direction for e in entries])

    def _residuals(self, actual, apparent) -> List[float]:
        residuals = []
        for a, m in zip(actual, apparent):
            predicted = self._model.transform(Frame.ACTUAL, a)
            if predicted is None:
                residuals.append(float("nan"))
                continue
            residuals.append(angular_distance(predicted, m) * 3600.0)
        return residuals

    def _compute_rms(self, actual, apparent) -> None:
        """Calculates RMS error of the fit in arcseconds."""
        residuals = [r for r in self._residuals(actual, apparent) if not math.isnan(r)]
        if not residuals:
            self.rms_error_arcsec = 0.0
            return
        self.rms_error_arcsec = math.sqrt(sum(r * r for r in residuals) / len(residuals))
