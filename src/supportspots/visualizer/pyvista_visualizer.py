# -*- coding: utf-8 -*-
try:
    import pyvista as pv
except ImportError:
    pv = None

import logging
import numpy as np
import os
from datetime import datetime
from typing import Optional, Sequence, TYPE_CHECKING
from .visualizer_interface import IVisualizer
if TYPE_CHECKING:
    from ..stability_kernel.extrusion_line import ExtrusionLine
    from ..stability_kernel.issues import SupportPoint


class PyVistaVisualizer(IVisualizer):
    """
    Concrete implementation of IVisualizer using PyVista.
    """

    def __init__(self, **kwargs):
        if pv is None:
            raise ImportError("PyVista is required for PyVistaVisualizer but not installed.")
        try:
            self.plotter = pv.Plotter(**kwargs)
        except TypeError as e:
            logging.warning(f"PyVistaVisualizer init failed with kwargs: {e}. Fallback to default.")
            self.plotter = pv.Plotter()

    def addPoints(self, points, scalars=None, color=None, point_size: float = 5.0):
        """
        Add point cloud to PyVista plotter.
        """
        points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        if len(points) == 0:
            return
        cloud = pv.PolyData(points)
        if scalars is not None:
            cloud["scalars"] = np.asarray(scalars, dtype=np.float32)
            self.plotter.add_mesh(cloud, scalars="scalars", point_size=point_size,
                                  render_points_as_spheres=True, cmap="jet")
        else:
            self.plotter.add_mesh(cloud, color=color or "black", point_size=point_size,
                                  render_points_as_spheres=True)

    def addLayerLines(self, lines: Sequence["ExtrusionLine"], layer_z: float,
                      color_by_malformation: bool = True, opacity: float = 1.0):
        """
        Add one layer of extrusion lines to PyVista plotter.
        """
        lines = [line for line in lines if line.len > 0]
        if not lines:
            return
        vertices = np.empty((2 * len(lines), 3), dtype=np.float32)
        vertices[0::2, :2] = [line.a for line in lines]
        vertices[1::2, :2] = [line.b for line in lines]
        vertices[:, 2] = layer_z
        # PyVista expects [2, i, j, 2, k, l, ...]
        cells = np.hstack([
            np.full((len(lines), 1), 2),
            np.arange(2 * len(lines)).reshape(-1, 2),
        ]).flatten()
        mesh = pv.PolyData(vertices, lines=cells)
        if color_by_malformation:
            mesh.cell_data["malformation"] = np.array([line.malformation for line in lines], dtype=np.float32)
            self.plotter.add_mesh(mesh, scalars="malformation", cmap="jet", clim=[0.0, 1.0],
                                  line_width=2, opacity=opacity)
        else:
            self.plotter.add_mesh(mesh, color="#66b3ff", line_width=2, opacity=opacity)

    def addSupportPoints(self, support_points: Sequence["SupportPoint"], color=None, point_size: float = 10.0):
        """
        Add support points to PyVista plotter.
        """
        if not support_points:
            return
        points = np.array([sp.position for sp in support_points], dtype=np.float32)
        self.addPoints(points, color=color or "magenta", point_size=point_size)

    def show(self, **kwargs):
        """
        Show the PyVista plot.
        """
        self.plotter.add_axes()
        self.plotter.set_background("white")
        self.plotter.show(**kwargs)

    def save(self, file_path: str = None, name: str = None, **kwargs):
        """
        Save a screenshot of the PyVista plot.

        Args:
            file_path: Target file path. If None, auto-generates in 'screenshots/'.
            name: Optional tag to include in the auto-generated filename (e.g. 'layer_1').
        """
        if file_path is None:
            output_dir = "screenshots"
            os.makedirs(output_dir, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            if name:
                safe_name = "".join([c for c in name if c.isalnum() or c in ('-', '_')]).strip()
                filename = f"snapshot_{timestamp}_{safe_name}.png"
            else:
                filename = f"snapshot_{timestamp}.png"
            file_path = os.path.join(output_dir, filename)

        self.plotter.off_screen = kwargs.pop('off_screen', True)
        self.plotter.show(screenshot=file_path, **kwargs)
        logging.info(f"Saved snapshot to: {file_path}")
        return file_path
