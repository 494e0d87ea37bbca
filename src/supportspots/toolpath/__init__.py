# -*- coding: utf-8 -*-
"""
SupportSpots Toolpath Package
=============================

Input data model of the analysis (extrusion paths grouped into layers) and
readers for toolpath dumps.

Currently supported formats:
- JSON toolpath dump

Usage Example:
    from supportspots.toolpath import parse_file
    print_object = parse_file("toolpaths.json")
"""

from .extrusion_role import ExtrusionRole
from .path_data import ExtrusionPath
from .model import PrintObject, ToolpathLayer
from .json_parser import read_toolpath_json
from .workspace_utils import get_workspace_dir
from .file_dispatcher import parse_file

__all__ = [
    "ExtrusionPath",
    "ExtrusionRole",
    "PrintObject",
    "ToolpathLayer",
    "get_workspace_dir",
    "parse_file",
    "read_toolpath_json",
]
