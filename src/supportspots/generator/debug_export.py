# -*- coding: utf-8 -*-
"""
Debug exports
=============

Point clouds in Wavefront OBJ (``v x y z r g b``) for inspecting the
analysis in any mesh viewer. Files go to the workspace directory.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from ..stability_kernel.issues import SupportPoint
from ..toolpath.workspace_utils import get_workspace_dir

logger = logging.getLogger("SupportSpots.export")


def value_to_rgb(value: float, min_value: float, max_value: float) -> np.ndarray:
    """Blue -> green -> red ramp, clamped to [min_value, max_value]."""
    span = max_value - min_value
    t = 0.0 if span <= 0 else float(np.clip((value - min_value) / span, 0.0, 1.0))
    if t < 0.5:
        return np.array([0.0, 2.0 * t, 1.0 - 2.0 * t])
    return np.array([2.0 * t - 1.0, 2.0 - 2.0 * t, 0.0])


class ObjExporter:
    """Collects colored points and writes them as one OBJ file."""

    def __init__(self, file_name: str, output_dir: Optional[Union[str, Path]] = None):
        self.output_dir = Path(output_dir) if output_dir is not None else get_workspace_dir()
        self.file_path = self.output_dir / file_name
        self._rows = []

    def add_point(self, position: Sequence[float], color: Sequence[float]):
        self._rows.append((*np.asarray(position, dtype=np.float64)[:3], *np.asarray(color, dtype=np.float64)[:3]))

    def save(self) -> Path:
        os.makedirs(self.output_dir, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            for x, y, z, r, g, b in self._rows:
                f.write(f"v {x:.6f} {y:.6f} {z:.6f} {r:.4f} {g:.4f} {b:.4f}\n")
        logger.info(f"Saved {len(self._rows)} points to: {self.file_path}")
        return self.file_path

    def __len__(self) -> int:
        return len(self._rows)


def export_support_points(support_points: Sequence[SupportPoint], name: str,
                          output_dir: Optional[Union[str, Path]] = None) -> Path:
    """Write `<name>_supports.obj`: red for global supports, blue for local ones."""
    exporter = ObjExporter(f"{name}_supports.obj", output_dir)
    for sp in support_points:
        color = (1.0, 0.0, 0.0) if sp.force > 0 else (0.0, 0.0, 1.0)
        exporter.add_point(sp.position, color)
    return exporter.save()
