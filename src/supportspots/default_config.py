from typing import Any, Dict
CONFIG_VERSION = "1.0.0"
from .visualizer.visualizer_type import VisualizerType

GRAVITY_CONSTANT = 9806.65  # mm/s^2

DEFAULTS: Dict[str, Any] = {
    "DEFAULT_VISUALIZER": VisualizerType.PyVista,  # 默认可视化器

    # Local stability (bridges / curling)
    "BRIDGE_DISTANCE": 12.0,                          # mm
    "BRIDGE_DISTANCE_DECREASE_BY_CURVATURE_FACTOR": 5.0,  # allowed = bridge / (1 + f * curvature / pi)
    "MIN_DISTANCE_BETWEEN_SUPPORT_POINTS": 3.0,       # mm, also the support voxel size
    "SUPPORT_POINTS_INTERFACE_RADIUS": 0.6,           # mm

    # Physical model
    "GRAVITY_CONSTANT": GRAVITY_CONSTANT,
    "FILAMENT_DENSITY": 1.25e-3,                      # g/mm^3
    "MAX_ACCELERATION": 9 * 1000.0,                   # mm/s^2, bed movement incl. jerk phase
    "BED_ADHESION_YIELD_STRENGTH": 0.128 * 1e6,       # MPa * 1e6 = g/(mm*s^2)
    "MATERIAL_YIELD_STRENGTH": 33.0 * 1e6,            # ABS, weakest of common materials
    "STANDARD_EXTRUDER_CONFLICT_FORCE": 20.0 * GRAVITY_CONSTANT,
    "MALFORMATIONS_ADDITIVE_CONFLICT_EXTRUDER_FORCE": 100.0 * GRAVITY_CONSTANT,

    # Numerics
    "EPSILON": 1e-4,
    "PIVOT_SEARCH_DISTANCE": 300.0,                   # mm, along the extrusion direction
    "DEFAULT_FLOW_WIDTH": 0.45,                       # mm, used when a path carries no width
    "SEGMENT_INDEX_LEAF_SIZE": 8,

    # Rasterization
    "RASTER_MIN_EDGE": 0.1,                           # mm, shorter edges are not stamped
    "RASTER_WORKERS": 4,
    "RASTER_CHUNK_SIZE": 2048,                        # lines per stamping task

    # Diagnostics
    "DEBUG_EXPORT": False,                            # write OBJ point clouds into the workspace
}
