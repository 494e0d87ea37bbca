from ..default_config import DEFAULTS

BRIDGE_DISTANCE = DEFAULTS["BRIDGE_DISTANCE"]
BRIDGE_DISTANCE_DECREASE_BY_CURVATURE_FACTOR = DEFAULTS["BRIDGE_DISTANCE_DECREASE_BY_CURVATURE_FACTOR"]
MIN_DISTANCE_BETWEEN_SUPPORT_POINTS = DEFAULTS["MIN_DISTANCE_BETWEEN_SUPPORT_POINTS"]
SUPPORT_POINTS_INTERFACE_RADIUS = DEFAULTS["SUPPORT_POINTS_INTERFACE_RADIUS"]

GRAVITY_CONSTANT = DEFAULTS["GRAVITY_CONSTANT"]
FILAMENT_DENSITY = DEFAULTS["FILAMENT_DENSITY"]
MAX_ACCELERATION = DEFAULTS["MAX_ACCELERATION"]
BED_ADHESION_YIELD_STRENGTH = DEFAULTS["BED_ADHESION_YIELD_STRENGTH"]
MATERIAL_YIELD_STRENGTH = DEFAULTS["MATERIAL_YIELD_STRENGTH"]
STANDARD_EXTRUDER_CONFLICT_FORCE = DEFAULTS["STANDARD_EXTRUDER_CONFLICT_FORCE"]
MALFORMATIONS_ADDITIVE_CONFLICT_EXTRUDER_FORCE = DEFAULTS["MALFORMATIONS_ADDITIVE_CONFLICT_EXTRUDER_FORCE"]

EPSILON = DEFAULTS["EPSILON"]
PIVOT_SEARCH_DISTANCE = DEFAULTS["PIVOT_SEARCH_DISTANCE"]
SEGMENT_INDEX_LEAF_SIZE = DEFAULTS["SEGMENT_INDEX_LEAF_SIZE"]

RASTER_MIN_EDGE = DEFAULTS["RASTER_MIN_EDGE"]   # 栅格化最小边长 (mm)
RASTER_WORKERS = DEFAULTS["RASTER_WORKERS"]
RASTER_CHUNK_SIZE = DEFAULTS["RASTER_CHUNK_SIZE"]

DEBUG_EXPORT = DEFAULTS["DEBUG_EXPORT"]
