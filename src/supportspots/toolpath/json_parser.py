"""Toolpath JSON Parser
解析切片器导出的刀路 JSON 文件为内部 PrintObject 数据结构。

Expected layout::

    {
      "layers": [
        {"z": 0.2,
         "paths": [
            {"role": "external_perimeter", "points": [[x, y], ...],
             "mm3_per_mm": 0.09, "width": 0.45, "loop": true, "id": 7},
            ...
         ]},
        ...
      ]
    }

"width", "loop" and "id" are optional. "id" is kept as ``source_id``;
runs are keyed by the internal ``path_id``, so dump ids never have to be unique.

主要接口:
- read_toolpath_json: 读取 JSON 文件并返回 PrintObject
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from tqdm import tqdm

from .model import PrintObject, ToolpathLayer
from .path_data import ExtrusionPath
from ..default_config import DEFAULTS


def _read_path(path_json: Dict[str, Any], layer_index: int) -> ExtrusionPath:
    """Build one ExtrusionPath from its JSON description.

    Raises:
        ValueError: If a mandatory key is missing.
    """
    missing = [key for key in ("role", "points", "mm3_per_mm") if key not in path_json]
    if missing:
        raise ValueError(f"Layer {layer_index}: path is missing keys {missing}")
    return ExtrusionPath(
        points=path_json["points"],
        role=path_json["role"],
        mm3_per_mm=path_json["mm3_per_mm"],
        width=path_json.get("width", DEFAULTS["DEFAULT_FLOW_WIDTH"]),
        is_loop=bool(path_json.get("loop", False)),
        source_id=path_json.get("id"),
    )


def read_toolpath_json(file_path: Union[str, Path], progress: bool = True, **kwargs: Any) -> PrintObject:
    """Read a toolpath dump and construct a PrintObject.

    Args:
        file_path: Path to the JSON file (str or Path).
        progress: Whether to show a progress bar over layers.
        **kwargs: Reserved for future options (unused).

    Returns:
        PrintObject: Layers sorted by increasing z.

    Raises:
        ValueError: If the document does not follow the expected layout.
        json.JSONDecodeError: If the file is not valid JSON.

    Examples:
        >>> from supportspots.toolpath.json_parser import read_toolpath_json
        >>> obj = read_toolpath_json("cube_toolpaths.json", progress=False)
        >>> assert obj.layer_count >= 0
    """
    with open(file_path, "r", encoding="utf-8") as f:
        document = json.load(f)

    if not isinstance(document, dict) or "layers" not in document:
        raise ValueError(f"{file_path}: expected an object with a 'layers' list")

    layers = []
    for index, layer_json in enumerate(
        tqdm(document["layers"], desc="Toolpath layers", unit="layer", leave=False, disable=not progress)
    ):
        if "z" not in layer_json:
            raise ValueError(f"Layer {index} has no 'z'")
        layer = ToolpathLayer(z=float(layer_json["z"]))
        for path_json in layer_json.get("paths", []):
            layer.add_path(_read_path(path_json, index))
        layers.append(layer)
    return PrintObject(layers=layers)
