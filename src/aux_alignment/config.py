"""
Configuration for the alignment tools.

Configuration is loaded from config.yaml (next to this module unless another
path is given). Sync points are read from a separate YAML file of the form::

    reference_position: {latitude: 50.18, longitude: 19.79, elevation: 400}
    sync_points:
      - {ra: 5.9195, dec: 7.407, julian_date: 2460000.5, direction: [0.1, 0.7, 0.7]}
      - {ra: 6.7525, dec: -16.716, julian_date: 2460000.5, az: 120.0, alt: 35.0}
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import copy
import logging
import os
import yaml

from .basis import DEFAULT_SINGULARITY_TOLERANCE
from .coordinates import GeographicPosition, MountAlignment
from .database import CalibrationEntry, InMemoryDatabase
from .vectors import DirectionVector, vector_from_altaz

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.path.join(BASE_DIR, "config.yaml")
DEFAULT_CONFIG = {
    "observer": {"latitude": 50.1822, "longitude": 19.7925, "elevation": 400},
    "alignment": {
        "approximate_mount_alignment": MountAlignment.ZENITH.value,
        "singularity_tolerance": DEFAULT_SINGULARITY_TOLERANCE,
    },
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration from YAML file, filling missing sections with defaults."""
    path = path or CONFIG_PATH
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        return config
    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Error loading config %s: %s", path, e)
        return config
    if not isinstance(loaded, dict):
        logger.error("Error loading config %s: expected a mapping", path)
        return config
    for section, values in loaded.items():
        if isinstance(config.get(section), dict):
            if isinstance(values, dict):
                config[section].update(values)
            else:
                logger.error(
                    "Config section %s in %s is not a mapping, using defaults",
                    section,
                    path,
                )
        else:
            config[section] = values
    return config


def observer_position(config: Dict[str, Any]) -> GeographicPosition:
    obs_cfg = config.get("observer", DEFAULT_CONFIG["observer"])
    return GeographicPosition(
        float(obs_cfg.get("latitude", 0.0)),
        float(obs_cfg.get("longitude", 0.0)),
        float(obs_cfg.get("elevation", 0.0)),
    )


def mount_alignment_hint(config: Dict[str, Any]) -> MountAlignment:
    align_cfg = config.get("alignment") or {}
    value = align_cfg.get(
        "approximate_mount_alignment", MountAlignment.ZENITH.value
    )
    try:
        return MountAlignment(str(value).lower())
    except ValueError:
        logger.error(
            "Unknown approximate_mount_alignment %r, using %s",
            value,
            MountAlignment.ZENITH.value,
        )
        return MountAlignment.ZENITH


def singularity_tolerance(config: Dict[str, Any]) -> float:
    align_cfg = config.get("alignment") or {}
    value = align_cfg.get("singularity_tolerance", DEFAULT_SINGULARITY_TOLERANCE)
    try:
        tolerance = float(value)
    except (TypeError, ValueError):
        tolerance = -1.0
    if not tolerance > 0.0:
        logger.error(
            "Invalid singularity_tolerance %r, using %g",
            value,
            DEFAULT_SINGULARITY_TOLERANCE,
        )
        return DEFAULT_SINGULARITY_TOLERANCE
    return tolerance


def _entry_from_dict(item: Dict[str, Any]) -> CalibrationEntry:
    if "direction" in item:
        direction = DirectionVector.from_array(item["direction"])
        direction.normalize()
    else:
        direction = vector_from_altaz(float(item["az"]), float(item["alt"]))
    return CalibrationEntry(
        float(item["ra"]), float(item["dec"]), float(item["julian_date"]), direction
    )


def load_sync_points(
    path: str, database: Optional[InMemoryDatabase] = None
) -> InMemoryDatabase:
    """Reads sync points (and optionally the site) from a YAML file into a database."""
    database = database if database is not None else InMemoryDatabase()
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    position = data.get("reference_position")
    if position is not None:
        database.set_reference_position(observer_position({"observer": position}))

    for item in data.get("sync_points", []):
        database.add_entry(_entry_from_dict(item))
    logger.info("Loaded %d sync points from %s", len(database), path)
    return database
