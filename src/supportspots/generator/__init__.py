# -*- coding: utf-8 -*-

from .support_spots_generator import SupportSpotsGenerator, full_search, quick_search
from .debug_export import ObjExporter, export_support_points

__all__ = [
    "ObjExporter",
    "SupportSpotsGenerator",
    "export_support_points",
    "full_search",
    "quick_search",
]
