# -*- coding: utf-8 -*-
"""
Object parts
============

An object part is one rigid, already printed volume: the union of islands
connected across layers. Parts only ever grow and merge; ``ActiveObjectParts``
is the union-find that tracks them.
"""

import logging
import math
from typing import Dict

import numpy as np

from .config import EPSILON
from .extrusion_line import ExtrusionLine
from .islands import Island, IslandConnection
from .params import Params

logger = logging.getLogger("SupportSpots.global")


def _distance_to_segment(point: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    v = b - a
    l2 = float(np.dot(v, v))
    t = 0.0 if l2 <= 0.0 else min(1.0, max(0.0, float(np.dot(point - a, v)) / l2))
    return float(np.linalg.norm(point - (a + t * v)))


def elastic_section_modulus(line_dir: np.ndarray, centroid_accumulator: np.ndarray,
                            second_moment_of_area_accumulator: np.ndarray, area: float) -> float:
    """
    Elastic section modulus of an area around the axis perpendicular to `line_dir`.

    Returns 0 for a vanishing extreme fibre distance and ``inf`` when the
    second moment is unbounded.
    """
    if not np.all(np.isfinite(second_moment_of_area_accumulator)):
        return math.inf
    centroid = centroid_accumulator / area
    variance = second_moment_of_area_accumulator / area - centroid[:2] * centroid[:2]
    variance = variance * np.abs(line_dir)
    extreme_fiber_dist = float(np.linalg.norm(np.sqrt(np.maximum(variance, 0.0))))
    if extreme_fiber_dist < EPSILON:
        return 0.0
    return area * float(variance[0] + variance[1]) / extreme_fiber_dist


class ObjectPart:
    """Cumulative mass and sticking statistics of one rigid part."""

    def __init__(self, island: Island = None):
        self.volume = 0.0
        self.volume_centroid_accumulator = np.zeros(3)
        self.sticking_area = 0.0
        self.sticking_centroid_accumulator = np.zeros(3)
        self.sticking_second_moment_of_area_accumulator = np.zeros(2)
        if island is not None:
            self.volume = island.volume
            self.volume_centroid_accumulator = island.volume_centroid_accumulator.copy()
            self.sticking_area = island.sticking_area
            self.sticking_centroid_accumulator = island.sticking_centroid_accumulator.copy()
            self.sticking_second_moment_of_area_accumulator = island.sticking_second_moment_of_area_accumulator.copy()

    def add(self, other: "ObjectPart") -> "ObjectPart":
        self.volume += other.volume
        self.volume_centroid_accumulator = self.volume_centroid_accumulator + other.volume_centroid_accumulator
        self.sticking_area += other.sticking_area
        self.sticking_centroid_accumulator = self.sticking_centroid_accumulator + other.sticking_centroid_accumulator
        self.sticking_second_moment_of_area_accumulator = (self.sticking_second_moment_of_area_accumulator
                                                           + other.sticking_second_moment_of_area_accumulator)
        return self

    def add_island(self, island: Island) -> "ObjectPart":
        return self.add(ObjectPart(island))

    def add_support_point(self, position, sticking_area: float):
        position = np.asarray(position, dtype=np.float64)
        self.sticking_area += sticking_area
        self.sticking_centroid_accumulator = self.sticking_centroid_accumulator + sticking_area * position
        self.sticking_second_moment_of_area_accumulator = (self.sticking_second_moment_of_area_accumulator
                                                           + sticking_area * position[:2] * position[:2])

    def is_stable_while_extruding(self, connection: IslandConnection, extruded_line: ExtrusionLine,
                                  layer_z: float, params: Params) -> float:
        """
        Torque balance of the part while `extruded_line` is printed.

        Checks the bed contact first, then the weakest connection. Each balance
        is weight torque + movement torque + extruder conflict torque - yield
        torque.

        Returns:
            Net torque divided by the conflict arm when a balance is positive
            (the force a support has to take), otherwise a value <= 0.
        """
        line_dir = extruded_line.direction()

        if self.volume < EPSILON:
            # nothing printed yet, no weight to topple
            return 0.0
        mass_centroid = self.volume_centroid_accumulator / self.volume
        mass = self.volume * params.filament_density
        weight = mass * params.gravity_constant
        movement_force = params.max_acceleration * mass

        # the nozzle pushes along the line and, over malformed lines, down into them
        pressure_direction = np.array([line_dir[0], line_dir[1], -extruded_line.malformation * 0.5])
        pressure_direction = pressure_direction / np.linalg.norm(pressure_direction)
        endpoint = np.array([extruded_line.b[0], extruded_line.b[1], layer_z])
        extruder_conflict_force = (params.standard_extruder_conflict_force
                                   + min(extruded_line.malformation, 1.0)
                                   * params.malformations_additive_conflict_extruder_force)

        # bed
        if self.sticking_area < EPSILON:
            # floating part, nothing holds it
            return 1.0

        bed_centroid = self.sticking_centroid_accumulator / self.sticking_area
        bed_yield_torque = elastic_section_modulus(
            line_dir, self.sticking_centroid_accumulator,
            self.sticking_second_moment_of_area_accumulator, self.sticking_area) * params.bed_adhesion_yield_strength

        bed_weight_arm = float(np.linalg.norm(bed_centroid[:2] - mass_centroid[:2]))
        bed_weight_torque = bed_weight_arm * weight
        bed_movement_arm = max(0.0, float(mass_centroid[2] - bed_centroid[2]))
        bed_movement_torque = movement_force * bed_movement_arm
        bed_conflict_torque_arm = _distance_to_segment(bed_centroid, endpoint, endpoint + pressure_direction)
        bed_extruder_conflict_torque = extruder_conflict_force * bed_conflict_torque_arm

        bed_total_torque = bed_movement_torque + bed_extruder_conflict_torque + bed_weight_torque - bed_yield_torque
        logger.debug(f"bed: centroid={np.round(bed_centroid, 3).tolist()} yield={bed_yield_torque:.3f} "
                     f"weight={bed_weight_torque:.3f} movement={bed_movement_torque:.3f} "
                     f"conflict={bed_extruder_conflict_torque:.3f} total={bed_total_torque:.3f} z={layer_z:.3f}")
        if bed_total_torque > 0:
            return bed_total_torque / max(bed_conflict_torque_arm, EPSILON)

        # weakest connection
        if connection.area < EPSILON:
            return 0.0
        conn_modulus = elastic_section_modulus(line_dir, connection.centroid_accumulator,
                                               connection.second_moment_of_area_accumulator, connection.area)
        if not math.isfinite(conn_modulus):
            # unbounded connection (the bed itself)
            return 0.0
        conn_centroid = connection.centroid_accumulator / connection.area
        conn_yield_torque = conn_modulus * params.material_yield_strength

        conn_weight_arm = float(np.linalg.norm(conn_centroid[:2] - mass_centroid[:2]))
        conn_weight_torque = conn_weight_arm * weight * (conn_centroid[2] / layer_z)
        conn_movement_arm = max(0.0, float(mass_centroid[2] - conn_centroid[2]))
        conn_movement_torque = movement_force * conn_movement_arm
        conn_conflict_torque_arm = _distance_to_segment(conn_centroid, endpoint, endpoint + pressure_direction)
        conn_extruder_conflict_torque = extruder_conflict_force * conn_conflict_torque_arm

        conn_total_torque = (conn_movement_torque + conn_extruder_conflict_torque + conn_weight_torque
                             - conn_yield_torque)
        logger.debug(f"conn: centroid={np.round(conn_centroid, 3).tolist()} yield={conn_yield_torque:.3f} "
                     f"weight={conn_weight_torque:.3f} movement={conn_movement_torque:.3f} "
                     f"conflict={conn_extruder_conflict_torque:.3f} total={conn_total_torque:.3f} z={layer_z:.3f}")
        return conn_total_torque / max(conn_conflict_torque_arm, EPSILON)


class ActiveObjectParts:
    """
    Union-find over object parts.

    Ids are handed out by ``create``; ``merge`` folds one part into another for
    good. ``find`` resolves any id ever issued to its live representative.
    """

    def __init__(self):
        self.next_part_idx = 0
        self.active_object_parts: Dict[int, ObjectPart] = {}
        self.active_object_parts_id_mapping: Dict[int, int] = {}

    def create(self, island: Island) -> int:
        part_id = self.next_part_idx
        self.active_object_parts[part_id] = ObjectPart(island)
        self.active_object_parts_id_mapping[part_id] = part_id
        self.next_part_idx += 1
        return part_id

    def find(self, part_id: int) -> int:
        """Canonical id, with iterative path compression."""
        mapping = self.active_object_parts_id_mapping
        root = mapping[part_id]
        while root != mapping[root]:
            root = mapping[root]
        i = part_id
        while mapping[i] != root:
            nxt = mapping[i]
            mapping[i] = root
            i = nxt
        return root

    def access(self, part_id: int) -> ObjectPart:
        return self.active_object_parts[self.find(part_id)]

    def merge(self, from_id: int, to_id: int):
        """Fold `from_id` into `to_id`; no-op when both are already one part."""
        to_flat = self.find(to_id)
        from_flat = self.find(from_id)
        if to_flat == from_flat:
            return
        self.active_object_parts[to_flat].add(self.active_object_parts[from_flat])
        del self.active_object_parts[from_flat]
        self.active_object_parts_id_mapping[from_flat] = to_flat
        self.active_object_parts_id_mapping[from_id] = to_flat

    def __len__(self) -> int:
        return len(self.active_object_parts)
