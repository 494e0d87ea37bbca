# -*- coding: utf-8 -*-
from dataclasses import dataclass, field
import numpy as np
from typing import ClassVar, Optional

from .extrusion_role import ExtrusionRole
from ..default_config import DEFAULTS


@dataclass
class ExtrusionPath:
    """
    One extrusion path of a layer, as produced by the toolpath generator.

    Attributes:
        points: (N, 2) float64 array of XY coordinates in mm, in printing order.
        role: Extrusion role of the whole path.
        mm3_per_mm: Minimal cross-section of the extruded flow (mm^3 per mm of path).
        width: Flow width in mm.
        is_loop: Closed loop; the closing segment back to the first point is implied.
        source_id: Id carried by the toolpath dump, kept as metadata only.
        path_id: Opaque identity token, always generated here so it is unique per process.
    """
    # 类属性：计数器，用于生成 path_id
    count: ClassVar[int] = 0

    points: np.ndarray
    role: ExtrusionRole
    mm3_per_mm: float
    width: float = DEFAULTS["DEFAULT_FLOW_WIDTH"]
    is_loop: bool = False
    source_id: Optional[int] = None
    path_id: int = field(init=False)

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float64).reshape(-1, 2)
        self.role = ExtrusionRole.parse(self.role)
        self.mm3_per_mm = float(self.mm3_per_mm)
        self.width = float(self.width)
        if self.width <= 0:
            raise ValueError(f"Path width must be positive, got {self.width}")
        if self.mm3_per_mm < 0:
            raise ValueError(f"Path flow must be non-negative, got {self.mm3_per_mm} mm3/mm")
        self.path_id = ExtrusionPath.count
        ExtrusionPath.count += 1

    def polyline(self) -> np.ndarray:
        """Points in printing order, closed back to the start for loops."""
        if self.is_loop and len(self.points) > 1 and not np.array_equal(self.points[0], self.points[-1]):
            return np.vstack([self.points, self.points[:1]])
        return self.points

    def __repr__(self):
        return (f"ExtrusionPath(path_id={self.path_id}, source_id={self.source_id}, role={self.role.value}, "
                f"points={len(self.points)}, loop={self.is_loop})")
