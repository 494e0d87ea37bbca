import os
from pathlib import Path


def get_project_root() -> Path:
    """
    获取项目根目录路径。
    
    优先级：
    1. 环境变量 SUPPORTSPOTS_ROOT
    2. 向上查找 pyproject.toml 文件
    3. 回退到当前工作目录
    """
    env_root = os.environ.get("SUPPORTSPOTS_ROOT")
    if env_root:
        return Path(env_root).resolve()

    current_path = Path(__file__).resolve()
    for parent in current_path.parents:
        if (parent / "pyproject.toml").exists():
            return parent

    # 安装到 site-packages 时没有 pyproject.toml
    return Path.cwd()


def get_workspace_dir() -> Path:
    """
    获取 workspace 目录路径。
    优先级：环境变量 SUPPORTSPOTS_WORKSPACE > 项目根目录/data/workspace
    """
    env_ws = os.environ.get("SUPPORTSPOTS_WORKSPACE")
    if env_ws:
        return Path(env_ws).resolve()
    
    return get_project_root() / "data" / "workspace"
