# -*- coding: utf-8 -*-
"""
Global stability
================

Walks the islands graph bottom-up, keeps object parts up to date and checks
every part against toppling off the bed or breaking at its weakest
connection while its boundary lines are printed.
"""

import logging
import math
from typing import Dict, List, Sequence

import numpy as np

from .config import PIVOT_SEARCH_DISTANCE
from .islands import IslandConnection, LayerIslands
from .issues import Issues
from .object_part import ActiveObjectParts
from .params import Params
from .pixel_grid import SupportGridFilter
from .segment_index import SegmentIndex

logger = logging.getLogger("SupportSpots.global")


def estimate_strength(conn: IslandConnection, layer_z: float) -> float:
    """Smaller minimal variance and longer arm mean a weaker connection."""
    centroid = conn.centroid_accumulator / conn.area
    variance = conn.second_moment_of_area_accumulator / conn.area - centroid[:2] * centroid[:2]
    arm_len_estimate = max(1.1, layer_z - centroid[2])
    return float(np.min(variance)) / arm_len_estimate


def debug_print_graph(islands_graph: Sequence[LayerIslands]):
    logger.debug("BUILT ISLANDS GRAPH:")
    for layer_idx, layer in enumerate(islands_graph):
        logger.debug(f"ISLANDS AT LAYER: {layer_idx}  AT HEIGHT: {layer.layer_z}")
        for island_idx, island in enumerate(layer.islands):
            logger.debug(f"    ISLAND {island_idx}: volume={island.volume:.4f} "
                         f"sticking_area={island.sticking_area:.4f} "
                         f"connected_islands={len(island.connected_islands)} "
                         f"lines={len(island.external_lines)}")
    logger.debug("END OF GRAPH")


def check_global_stability(supports_presence_grid: SupportGridFilter,
                           islands_graph: Sequence[LayerIslands], params: Params) -> Issues:
    """
    Global support points of the whole object.

    Args:
        supports_presence_grid: Voxel filter, updated in place.
        islands_graph: Islands of every layer, bottom to top.
        params: Analysis parameters.
    """
    if logger.isEnabledFor(logging.DEBUG):
        debug_print_graph(islands_graph)

    issues = Issues()
    active_object_parts = ActiveObjectParts()
    prev_island_to_object_part: Dict[int, int] = {}
    prev_island_weakest_connection: Dict[int, IslandConnection] = {}
    support_area = params.support_points_interface_radius ** 2 * math.pi

    for layer_idx, layer in enumerate(islands_graph):
        layer_z = layer.layer_z
        next_island_to_object_part: Dict[int, int] = {}
        next_island_weakest_connection: Dict[int, IslandConnection] = {}

        for island_idx, island in enumerate(layer.islands):
            if not island.connected_islands:
                # new object part emerging
                part_id = active_object_parts.create(island)
                next_island_to_object_part[island_idx] = part_id
                next_island_weakest_connection[island_idx] = IslandConnection.unbounded()
                continue

            transferred_weakest_connection = IslandConnection()
            new_weakest_connection = IslandConnection()
            part_ids: List[int] = []
            for prev_idx, connection in island.connected_islands.items():
                part_id = active_object_parts.find(prev_island_to_object_part[prev_idx])
                if part_id not in part_ids:
                    part_ids.append(part_id)
                transferred_weakest_connection.add(prev_island_weakest_connection[prev_idx])
                new_weakest_connection.add(connection)

            final_part_id = part_ids[0]
            for part_id in part_ids[1:]:
                logger.debug(f"at layer {layer_idx}: merging object part {part_id} into part {final_part_id}")
                active_object_parts.merge(part_id, final_part_id)

            if estimate_strength(transferred_weakest_connection, layer_z) < estimate_strength(new_weakest_connection, layer_z):
                new_weakest_connection = transferred_weakest_connection
            next_island_weakest_connection[island_idx] = new_weakest_connection
            next_island_to_object_part[island_idx] = final_part_id
            active_object_parts.access(final_part_id).add_island(island)

        prev_island_to_object_part = next_island_to_object_part
        prev_island_weakest_connection = next_island_weakest_connection

        # parts are up to date, check them while the boundary of each island is printed
        for island_idx, island in enumerate(layer.islands):
            part = active_object_parts.access(prev_island_to_object_part[island_idx])
            weakest_conn = prev_island_weakest_connection[island_idx]
            island_lines_dist = None
            unchecked_dist = params.min_distance_between_support_points + 1.0

            for line in island.external_lines:
                if ((unchecked_dist + line.len < params.min_distance_between_support_points
                     and line.malformation < 0.3) or line.len == 0):
                    unchecked_dist += line.len
                    continue
                unchecked_dist = line.len
                force = part.is_stable_while_extruding(weakest_conn, line, layer_z, params)
                if not np.isfinite(force) or force <= 0:
                    continue

                if island_lines_dist is None:
                    island_lines_dist = SegmentIndex(island.external_lines)
                line_dir = line.direction()
                pivot_site_search_point = line.b + line_dir * PIVOT_SEARCH_DISTANCE
                _, _, target_point = island_lines_dist.signed_distance(pivot_site_search_point)
                support_point = np.array([target_point[0], target_point[1], layer_z])
                if supports_presence_grid.position_taken(support_point):
                    continue

                part.add_support_point(support_point, support_area)
                issues.add_support_point(support_point, force, np.array([line_dir[0], line_dir[1], 0.0]))
                supports_presence_grid.take_position(support_point)
                weakest_conn.add_area(support_area, support_point)
                logger.debug(f"Global support at {np.round(support_point, 3).tolist()}, force={force:.3f}")

    return issues
