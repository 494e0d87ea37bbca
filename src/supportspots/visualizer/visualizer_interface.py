# -*- coding: utf-8 -*-
from abc import ABC, abstractmethod
import numpy as np
from .visualizer_type import VisualizerType
from typing import Optional, TYPE_CHECKING, Sequence, Any

if TYPE_CHECKING:
    from ..stability_kernel.extrusion_line import ExtrusionLine
    from ..stability_kernel.issues import SupportPoint


class IVisualizer(ABC):
    """
    Abstract Base Class for Visualization.
    Allows decoupling the analysis from specific visualization libraries (e.g., PyVista).
    """
 
    def __init__(self, **kwargs):
        """
        Initialize the visualizer.
        
        Args:
            **kwargs: Arguments passed to the visualizer constructor.
        """
        pass

    @abstractmethod
    def addPoints(
        self,
        points: np.ndarray,
        scalars: Optional[np.ndarray] = None,
        color: Optional[Any] = None,
        point_size: float = 5.0,
    ):
        """
        Add a 3D point cloud, optionally coloured by per-point scalars.

        Args:
            points: (N, 3) array of positions.
            scalars: Optional (N,) values mapped through the colour map.
            color: Uniform colour used when no scalars are given.
            point_size: Rendered point size in pixels.
        """
        pass

    @abstractmethod
    def addLayerLines(
        self,
        lines: Sequence["ExtrusionLine"],
        layer_z: float,
        color_by_malformation: bool = True,
        opacity: float = 1.0,
    ):
        """
        Add the extrusion lines of one layer.

        Args:
            lines: Checked lines of the layer.
            layer_z: Height the lines are drawn at.
            color_by_malformation: Colour lines by their malformation value.
            opacity: Opacity value (0.0-1.0).
        """
        pass

    @abstractmethod
    def addSupportPoints(
        self,
        support_points: Sequence["SupportPoint"],
        color: Optional[Any] = None,
        point_size: float = 10.0,
    ):
        """
        Add support points as spheres-like markers.

        Args:
            support_points: Result of the support spot search.
            color: Marker colour.
            point_size: Rendered point size in pixels.
        """
        pass

    @abstractmethod
    def show(self, **kwargs):
        """
        Render the scene and display the window.
        
        Args:
            **kwargs: Additional show options (e.g., interactive, window_size).
        """
        pass

    @abstractmethod
    def save(self, file_path: Optional[str] = None, **kwargs):
        """
        Render the scene and save a screenshot.
        
        Args:
            file_path: Target file path (e.g., 'output.png'). 
                       If None, a default filename with timestamp will be generated.
        """
        pass

    @staticmethod
    def create(visualizer_type: Optional[VisualizerType] = None, **kwargs) -> "IVisualizer":
        """
        Factory method to create a visualizer instance based on the specified type.

        Args:
            visualizer_type: Backend member or its name; defaults to DEFAULT_VISUALIZER.
            **kwargs: Arguments passed to the visualizer constructor.
        
        Returns:
            An instance of a concrete IVisualizer implementation.
        """
        if visualizer_type is None:
            from .config import DEFAULT_VISUALIZER
            visualizer_type = DEFAULT_VISUALIZER
            
        visualizer_type = VisualizerType.parse(visualizer_type)
        if visualizer_type == VisualizerType.PyVista:
            from .pyvista_visualizer import PyVistaVisualizer
            return PyVistaVisualizer(**kwargs)
        raise ValueError(f"Unsupported visualizer type: {visualizer_type}")
