"""
Shared test fixtures for the support spot analysis tests.
"""
import numpy as np
import pytest

from supportspots.stability_kernel import Params
from supportspots.toolpath import ExtrusionPath, ExtrusionRole, PrintObject, ToolpathLayer


def square_points(side: float, center=(0.0, 0.0), ccw: bool = True) -> np.ndarray:
    """Corners of an axis-aligned square, counter-clockwise unless told otherwise."""
    h = side / 2.0
    cx, cy = center
    points = np.array([[cx - h, cy - h], [cx + h, cy - h], [cx + h, cy + h], [cx - h, cy + h]])
    return points if ccw else points[::-1].copy()


@pytest.fixture
def params():
    """Default analysis parameters."""
    return Params()


@pytest.fixture
def make_square_path():
    """Factory for closed square loops."""
    def _make(side=10.0, center=(0.0, 0.0), role=ExtrusionRole.EXTERNAL_PERIMETER,
              mm3_per_mm=0.1, width=0.45, ccw=True):
        return ExtrusionPath(points=square_points(side, center, ccw), role=role,
                             mm3_per_mm=mm3_per_mm, width=width, is_loop=True)
    return _make


@pytest.fixture
def make_wall(make_square_path):
    """Factory for a straight square tube, one external perimeter per layer."""
    def _make(side=20.0, layers=10, layer_height=0.2, width=0.45):
        return PrintObject(layers=[
            ToolpathLayer(z=layer_height * (i + 1),
                          paths=[make_square_path(side=side, width=width, mm3_per_mm=width * layer_height)])
            for i in range(layers)
        ])
    return _make
