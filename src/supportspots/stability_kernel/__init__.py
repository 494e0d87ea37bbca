# -*- coding: utf-8 -*-

from .config import EPSILON, PIVOT_SEARCH_DISTANCE
from .params import Params
from .extrusion_line import ExtrusionLine, angle, lines_from_polyline
from .issues import Issues, SupportPoint
from .bvh import AABB, BVHNode, build_bvh
from .segment_index import SegmentIndex
from .pixel_grid import NULL_ISLAND, PixelGrid, SupportGridFilter
from .islands import Island, IslandConnection, LayerIslands, reckon_islands
from .local_stability import ExtrusionPropertiesAccumulator, check_extrusion_entity_stability, subdivide_path
from .object_part import ActiveObjectParts, ObjectPart, elastic_section_modulus
from .global_stability import check_global_stability, debug_print_graph, estimate_strength

__all__ = [
    "AABB",
    "ActiveObjectParts",
    "BVHNode",
    "EPSILON",
    "ExtrusionLine",
    "ExtrusionPropertiesAccumulator",
    "Island",
    "IslandConnection",
    "Issues",
    "LayerIslands",
    "NULL_ISLAND",
    "ObjectPart",
    "PIVOT_SEARCH_DISTANCE",
    "Params",
    "PixelGrid",
    "SegmentIndex",
    "SupportGridFilter",
    "SupportPoint",
    "angle",
    "build_bvh",
    "check_extrusion_entity_stability",
    "check_global_stability",
    "debug_print_graph",
    "elastic_section_modulus",
    "estimate_strength",
    "lines_from_polyline",
    "reckon_islands",
    "subdivide_path",
]
