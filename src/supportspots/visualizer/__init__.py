"""
SupportSpots Visualization Package
==================================

该包为支撑点分析结果提供可视化功能 (layer lines, malformation and support points).
核心设计基于工厂模式和抽象基类，支持多种后端可视化引擎（目前主要支持 PyVista）。

Modules
-------
- `visualizer_interface`: 抽象基类 `IVisualizer`，规范所有可视化器的行为。
- `pyvista_visualizer`: 基于 PyVista 库的具体实现 `PyVistaVisualizer`。
- `visualizer_type`: `VisualizerType` 枚举，用于指定可视化后端类型。

Usage Example
-------------
.. code-block:: python

    from supportspots.visualizer import IVisualizer

    visualizer = IVisualizer.create()
    visualizer.addLayerLines(lines, layer_z=0.2)
    visualizer.addSupportPoints(issues.support_points)
    visualizer.show()

Notes
-----
- **依赖库**: `pyvista` is an optional dependency (``pip install supportspots[viz]``).
"""

# -*- coding: utf-8 -*-

from .visualizer_type import VisualizerType
from .visualizer_interface import IVisualizer

__all__ = ["IVisualizer", "VisualizerType"]
