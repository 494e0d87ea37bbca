# -*- coding: utf-8 -*-
"""
File Dispatcher
统一的文件解析分发入口，根据文件后缀调用具体解析器。

主要接口:
- parse_file: 通用入口，返回 PrintObject
"""

from pathlib import Path
from typing import Any, Union

from .model import PrintObject
from .json_parser import read_toolpath_json


def parse_file(file_path: Union[str, Path], **kwargs: Any) -> PrintObject:
    """Dispatch file parsing based on file suffix and return PrintObject.

    Args:
        file_path: 文件路径，支持 str 或 Path。
        **kwargs: 传递给具体解析器的参数，例如 progress。

    Returns:
        PrintObject: 解析得到的刀路对象。

    Raises:
        FileNotFoundError: 当文件不存在时抛出。
        ValueError: 当文件类型暂不支持时抛出。
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return read_toolpath_json(path, **kwargs)
    raise ValueError(f"Unsupported file format: {suffix}. Only .json is supported.")
