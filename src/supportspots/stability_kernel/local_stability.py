# -*- coding: utf-8 -*-
"""
Local stability
===============

Walks each extrusion path against the previous layer and

* emits a support point where an unsupported span (bridge) gets too long,
  the tolerable length shrinking with the curvature of the span;
* estimates malformation (curling) of lines printed partially in the air,
  inherited and compounded from the layer below.
"""

import logging
import math
from typing import List

import numpy as np

from .extrusion_line import ExtrusionLine, angle
from .issues import Issues
from .params import Params
from .segment_index import SegmentIndex
from ..toolpath.path_data import ExtrusionPath

logger = logging.getLogger("SupportSpots.local")

SUPPORT_DIRECTION = np.array([0.0, 0.0, -1.0])


class ExtrusionPropertiesAccumulator:
    """Unsupported distance and the largest accumulated turning over it."""

    def __init__(self):
        self.distance = 0.0
        self.curvature = 0.0
        self.max_curvature = 0.0

    def add_distance(self, dist: float):
        self.distance += dist

    def add_angle(self, ccw_angle: float):
        self.curvature += ccw_angle
        self.max_curvature = max(self.max_curvature, abs(self.curvature))

    def reset(self):
        self.distance = 0.0
        self.curvature = 0.0
        self.max_curvature = 0.0


def subdivide_path(path: ExtrusionPath, max_length: float) -> List[ExtrusionLine]:
    """
    Cut the path polyline into equal pieces no longer than `max_length`.

    The first line is a zero-length line on the first point so that a path
    starting in the air is caught before anything is extruded.
    """
    points = path.polyline()
    if len(points) == 0:
        return []
    lines = [ExtrusionLine.of_path(points[0], points[0], path)]
    for start, end in zip(points[:-1], points[1:]):
        v = end - start
        dist_to_next = float(np.linalg.norm(v))
        if dist_to_next <= 0.0:
            continue
        lines_count = int(math.ceil(dist_to_next / max_length))
        step = v / lines_count
        for i in range(lines_count):
            lines.append(ExtrusionLine.of_path(start + step * i, start + step * (i + 1), path))
    return lines


def check_extrusion_entity_stability(path: ExtrusionPath, layer_z: float, flow_width: float,
                                     prev_layer_lines: SegmentIndex, issues: Issues,
                                     params: Params) -> List[ExtrusionLine]:
    """
    Check one path against the previous layer.

    Local supports are appended to `issues`; the returned lines carry
    ``malformation`` and ``support_point_generated``.
    """
    lines = subdivide_path(path, params.bridge_distance)

    bridging_acc = ExtrusionPropertiesAccumulator()
    malformation_acc = ExtrusionPropertiesAccumulator()
    # start above the tolerance, a path beginning in the air needs support at once
    bridging_acc.add_distance(params.bridge_distance + 1.0)

    checked: List[ExtrusionLine] = []
    for line_idx, line in enumerate(lines):
        curr_angle = 0.0
        if line_idx + 1 < len(lines):
            nxt = lines[line_idx + 1]
            curr_angle = angle(line.b - line.a, nxt.b - nxt.a)
        bridging_acc.add_angle(curr_angle)
        malformation_acc.add_angle(max(0.0, curr_angle))

        dist_from_prev_layer, nearest_idx, _ = prev_layer_lines.signed_distance(line.b)

        pieces = [line]
        if abs(dist_from_prev_layer) < flow_width:
            bridging_acc.reset()
        else:
            pieces = _check_bridging(line, bridging_acc, layer_z, issues, params)

        for piece in pieces:
            if abs(dist_from_prev_layer) < flow_width * 2.0:
                piece.malformation += 0.9 * prev_layer_lines.get_line(nearest_idx).malformation
            if dist_from_prev_layer > flow_width * 0.3:
                malformation_acc.add_distance(piece.len)
                piece.malformation += 0.15 * (0.8 + 0.2 * malformation_acc.max_curvature
                                              / (1.0 + 0.5 * malformation_acc.distance))
            else:
                malformation_acc.reset()
        checked.extend(pieces)
    return checked


def _check_bridging(line: ExtrusionLine, bridging_acc: ExtrusionPropertiesAccumulator, layer_z: float,
                    issues: Issues, params: Params) -> List[ExtrusionLine]:
    """Grow the unsupported span by `line`, splitting it wherever the span reaches the threshold."""
    pieces: List[ExtrusionLine] = []
    remainder = line
    while True:
        threshold = params.bridge_distance / (
            1.0 + bridging_acc.max_curvature * params.bridge_distance_decrease_by_curvature_factor / math.pi)
        if bridging_acc.distance + remainder.len < threshold:
            bridging_acc.add_distance(remainder.len)
            pieces.append(remainder)
            return pieces

        need = threshold - bridging_acc.distance
        if need <= 0.0 or need >= remainder.len:
            # already past the threshold, or it falls on the end point
            head, remainder = remainder, None
        else:
            head, remainder = remainder.split(need)
        issues.add_support_point(np.array([head.b[0], head.b[1], layer_z]), 0.0, SUPPORT_DIRECTION)
        logger.debug(f"Bridge support at ({head.b[0]:.3f}, {head.b[1]:.3f}, {layer_z:.3f})")
        head.support_point_generated = True
        pieces.append(head)
        bridging_acc.reset()
        if remainder is None:
            return pieces
