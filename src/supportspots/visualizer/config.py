# -*- coding: utf-8 -*-
"""
SupportSpots Visualizer Configuration
=====================================

Exposes the visualizer related defaults from ``default_config.DEFAULTS``.

Attributes:
    DEFAULT_VISUALIZER (VisualizerType): Backend used by ``IVisualizer.create``.
"""

from ..default_config import DEFAULTS

DEFAULT_VISUALIZER = DEFAULTS["DEFAULT_VISUALIZER"]
