__version__ = "1.0.0"
__license__ = "MIT"

from .default_config import CONFIG_VERSION, DEFAULTS
from .stability_kernel import Issues, Params, SupportPoint
from .toolpath import ExtrusionPath, ExtrusionRole, PrintObject, ToolpathLayer, parse_file
from .generator import SupportSpotsGenerator, full_search, quick_search

__all__ = [
    "CONFIG_VERSION",
    "DEFAULTS",
    "ExtrusionPath",
    "ExtrusionRole",
    "Issues",
    "Params",
    "PrintObject",
    "SupportPoint",
    "SupportSpotsGenerator",
    "ToolpathLayer",
    "full_search",
    "parse_file",
    "quick_search",
]
