from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Union


def entry_point_directory() -> Path:
    """Directory of the script the task was started with; cwd for interactive sessions."""
    main = sys.modules.get("__main__")
    main_file = getattr(main, "__file__", None)
    if main_file:
        return Path(main_file).resolve().parent
    if sys.argv and sys.argv[0] and Path(sys.argv[0]).is_file():
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()


def resolve_directory(directory: Optional[Union[str, Path]]) -> Path:
    if directory is None or not str(directory).strip():
        return entry_point_directory()
    return Path(directory)


def type_module_name(type_name: str) -> str:
    """vss.common.VssCredentials -> vss.common"""
    return str(type_name).rsplit(".", 1)[0]


def module_file(directory: Path, module_name: str, suffix: str = ".py") -> Path:
    return directory / f"{module_name}{suffix}"
