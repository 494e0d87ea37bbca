# -*- coding: utf-8 -*-
"""
Extrusion lines
===============

Short directed segments the analysis works on. A layer's toolpaths are cut
into lines; every line remembers the path it came from through an opaque
``path_id`` so that contiguous lines of one path can be regrouped later.
"""

import math
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from ..toolpath.extrusion_role import ExtrusionRole
if TYPE_CHECKING:
    from ..toolpath.path_data import ExtrusionPath


class ExtrusionLine:
    """Directed 2D segment a -> b of one extrusion path.

    ``malformation`` and ``support_point_generated`` are filled in by the
    local stability pass and read by island building and the global pass.
    """
    __slots__ = ("a", "b", "len", "path_id", "role", "mm3_per_mm",
                 "malformation", "support_point_generated")

    def __init__(self, a, b, path_id: Optional[int] = None,
                 role: ExtrusionRole = ExtrusionRole.PERIMETER, mm3_per_mm: float = 0.0):
        self.a = np.asarray(a, dtype=np.float64).reshape(2)
        self.b = np.asarray(b, dtype=np.float64).reshape(2)
        self.len = float(np.linalg.norm(self.b - self.a))
        self.path_id = path_id
        self.role = role
        self.mm3_per_mm = float(mm3_per_mm)
        self.malformation = 0.0
        self.support_point_generated = False

    @classmethod
    def of_path(cls, a, b, path: "ExtrusionPath") -> "ExtrusionLine":
        return cls(a, b, path.path_id, path.role, path.mm3_per_mm)

    def is_external_perimeter(self) -> bool:
        return self.role.is_external_perimeter

    def direction(self) -> np.ndarray:
        """Unit direction, zero vector for degenerate lines."""
        if self.len <= 0.0:
            return np.zeros(2)
        return (self.b - self.a) / self.len

    def split(self, distance: float) -> Tuple["ExtrusionLine", "ExtrusionLine"]:
        """Cut the line `distance` mm after `a`; both halves keep the path identity."""
        point = self.a + self.direction() * distance
        head = ExtrusionLine(self.a, point, self.path_id, self.role, self.mm3_per_mm)
        tail = ExtrusionLine(point, self.b, self.path_id, self.role, self.mm3_per_mm)
        head.malformation = tail.malformation = self.malformation
        return head, tail

    def __repr__(self):
        return (f"ExtrusionLine(a={self.a.tolist()}, b={self.b.tolist()}, path_id={self.path_id}, "
                f"malformation={self.malformation:.3f}, support={self.support_point_generated})")


def lines_from_polyline(points: np.ndarray, path: "ExtrusionPath") -> List[ExtrusionLine]:
    """One line per consecutive point pair, no subdivision."""
    return [ExtrusionLine.of_path(points[i], points[i + 1], path) for i in range(len(points) - 1)]


def angle(v1: np.ndarray, v2: np.ndarray) -> float:
    """Signed CCW angle from v1 to v2 in (-pi, pi]; 0 when either vector is zero."""
    cross = float(v1[0] * v2[1] - v1[1] * v2[0])
    dot = float(v1[0] * v2[0] + v1[1] * v2[1])
    if cross == 0.0 and dot == 0.0:
        return 0.0
    return math.atan2(cross, dot)
