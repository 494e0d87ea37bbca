# -*- coding: utf-8 -*-
"""
Segment Index
=============

Fast nearest-line queries over the extrusion lines of one layer.

Given a point, returns the distance to the nearest line, signed by the side of
that directed line the point lies on. For a consistently oriented (CCW) chain
the sign doubles as an O(log N) inside test.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .bvh import BVHNode, build_bvh, query_nearest
from .config import SEGMENT_INDEX_LEAF_SIZE
from .extrusion_line import ExtrusionLine


class SegmentIndex:
    """
    BVH-backed spatial index over extrusion lines.

    Used for distances to the previous layer, for the "is this run inside that
    island" test and for the pivot search of global supports.
    """

    def __init__(self, lines: Sequence[ExtrusionLine], leaf_size: int = SEGMENT_INDEX_LEAF_SIZE):
        """
        Build the index.

        Args:
            lines: Lines to index; kept by reference so their malformation stays readable.
            leaf_size: Maximal number of lines per BVH leaf.
        """
        self.lines = list(lines)
        self.root: Optional[BVHNode] = None
        if self.lines:
            self._a = np.array([line.a for line in self.lines], dtype=np.float64)
            self._b = np.array([line.b for line in self.lines], dtype=np.float64)
            self.root = build_bvh(self._a, self._b, leaf_size)
        else:
            self._a = np.zeros((0, 2))
            self._b = np.zeros((0, 2))

    # -------------------------------------------------

    def signed_distance(self, point) -> Tuple[float, Optional[int], Optional[np.ndarray]]:
        """
        Distance from `point` to the nearest line; negative means inside.

        The sign is negative when the point lies left of the nearest directed
        line, i.e. (b - a) x (p - a) > 0.

        Returns:
            (distance, nearest line index, nearest point on that line);
            (inf, None, None) when the index is empty.
        """
        point = np.asarray(point, dtype=np.float64)[:2]
        d2, idx, nearest = query_nearest(self.root, self._a, self._b, point)
        if d2 < 0:
            return float("inf"), None, None

        distance = float(np.sqrt(d2))
        a = self._a[idx]
        v1 = self._b[idx] - a
        v2 = point - a
        if v1[0] * v2[1] - v1[1] * v2[0] > 0.0:
            distance = -distance
        return distance, idx, nearest

    def get_line(self, line_idx: int) -> ExtrusionLine:
        return self.lines[line_idx]

    def get_lines(self):
        return self.lines

    def __len__(self) -> int:
        return len(self.lines)
