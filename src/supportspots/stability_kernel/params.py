# -*- coding: utf-8 -*-
"""
Analysis parameters
===================

Flat parameter set of the support spot search. Defaults come from
``default_config.DEFAULTS`` (through ``stability_kernel.config``); callers
override single values with ``Params.from_dict``.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from .config import (
    BRIDGE_DISTANCE,
    BRIDGE_DISTANCE_DECREASE_BY_CURVATURE_FACTOR,
    MIN_DISTANCE_BETWEEN_SUPPORT_POINTS,
    SUPPORT_POINTS_INTERFACE_RADIUS,
    GRAVITY_CONSTANT,
    FILAMENT_DENSITY,
    MAX_ACCELERATION,
    BED_ADHESION_YIELD_STRENGTH,
    MATERIAL_YIELD_STRENGTH,
    STANDARD_EXTRUDER_CONFLICT_FORCE,
    MALFORMATIONS_ADDITIVE_CONFLICT_EXTRUDER_FORCE,
)

# Values that must stay strictly positive for the model to make sense.
_POSITIVE_FIELDS = (
    "bridge_distance",
    "min_distance_between_support_points",
    "gravity_constant",
    "filament_density",
)


@dataclass(frozen=True)
class Params:
    """
    Physical and geometric parameters.

    Units follow the slicer: mm, g, s. Forces are g*mm/s^2, strengths are
    (g*mm/s^2)/mm^2.
    """
    bridge_distance: float = BRIDGE_DISTANCE
    bridge_distance_decrease_by_curvature_factor: float = BRIDGE_DISTANCE_DECREASE_BY_CURVATURE_FACTOR
    min_distance_between_support_points: float = MIN_DISTANCE_BETWEEN_SUPPORT_POINTS
    support_points_interface_radius: float = SUPPORT_POINTS_INTERFACE_RADIUS
    gravity_constant: float = GRAVITY_CONSTANT
    filament_density: float = FILAMENT_DENSITY
    max_acceleration: float = MAX_ACCELERATION
    bed_adhesion_yield_strength: float = BED_ADHESION_YIELD_STRENGTH
    material_yield_strength: float = MATERIAL_YIELD_STRENGTH
    standard_extruder_conflict_force: float = STANDARD_EXTRUDER_CONFLICT_FORCE
    malformations_additive_conflict_extruder_force: float = MALFORMATIONS_ADDITIVE_CONFLICT_EXTRUDER_FORCE

    def __post_init__(self):
        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise ValueError(f"Parameter '{name}' must be positive, got {getattr(self, name)}")
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"Parameter '{f.name}' must not be negative, got {getattr(self, f.name)}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "Params":
        """Build parameters from a flat mapping; keys are case-insensitive.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.lower()
            if name not in known:
                raise ValueError(f"Unknown parameter: {key}")
            kwargs[name] = float(value)
        return cls(**kwargs)

    def updated(self, **changes: Any) -> "Params":
        return replace(self, **changes)
