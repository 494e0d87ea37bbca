from dataclasses import dataclass, field
from typing import List, Tuple, TYPE_CHECKING

import numpy as np

from .path_data import ExtrusionPath
from ..default_config import DEFAULTS
if TYPE_CHECKING:
    from ..visualizer.visualizer_interface import IVisualizer


@dataclass
class ToolpathLayer:
    """
    All extrusion paths printed at one height.

    Attributes:
        z: Slice height of the layer in mm.
        paths: Extrusion paths in printing order.
    """
    z: float
    paths: List[ExtrusionPath] = field(default_factory=list)

    @property
    def flow_width(self) -> float:
        """External perimeter flow width, used for sticking area and supported-distance tests."""
        for path in self.paths:
            if path.role.is_external_perimeter:
                return path.width
        if self.paths:
            return self.paths[0].width
        return DEFAULTS["DEFAULT_FLOW_WIDTH"]

    def add_path(self, path: ExtrusionPath):
        self.paths.append(path)


@dataclass
class PrintObject:
    """
    Toolpaths of one printed object, layers kept in increasing z order.
    """
    layers: List[ToolpathLayer] = field(default_factory=list)

    def __post_init__(self):
        self.layers = sorted(self.layers, key=lambda layer: layer.z)

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def height(self) -> float:
        return float(self.layers[-1].z) if self.layers else 0.0

    def bounds_2d(self) -> Tuple[np.ndarray, np.ndarray]:
        """XY bounding box (min, max) over all path points."""
        all_points = [path.points for layer in self.layers for path in layer.paths if len(path.points)]
        if not all_points:
            return np.zeros(2), np.zeros(2)
        stacked = np.vstack(all_points)
        return stacked.min(axis=0), stacked.max(axis=0)

    def show(self, visualizer: "IVisualizer"):
        """Draw the raw toolpaths, one polyline set per layer."""
        from ..stability_kernel.extrusion_line import lines_from_polyline
        for layer in self.layers:
            lines = []
            for path in layer.paths:
                lines.extend(lines_from_polyline(path.polyline(), path))
            visualizer.addLayerLines(lines, layer.z, color_by_malformation=False)
