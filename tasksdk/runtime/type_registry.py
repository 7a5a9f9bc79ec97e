from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional, Union

from ..models import TypeResolution

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def module_name_for_path(path: Path) -> str:
    """Vendor.Area.WebApi.py -> Vendor.Area.WebApi"""
    return path.stem


class TypeRegistry:
    """Looks up dotted type names among the modules already loaded into the process.

    The live table is ``sys.modules``; a type name is ``<module>.<attr>[.<attr>...]``
    where ``<module>`` is any registered module name, dots included. Nothing is
    cached here.
    """

    def find_type(self, type_name: str) -> Optional[type]:
        """Return the loaded type or None. Never raises."""
        try:
            return self._lookup(type_name)
        except Exception as e:
            log.debug("Probing for type %s failed: %s", type_name, e)
            return None

    def _lookup(self, type_name: str) -> Optional[type]:
        parts = [p for p in str(type_name or "").strip().split(".") if p]
        # Longest registered module prefix wins.
        for i in range(len(parts) - 1, 0, -1):
            mod = sys.modules.get(".".join(parts[:i]))
            if mod is None:
                continue
            obj: object = mod
            for attr in parts[i:]:
                obj = getattr(obj, attr, None)
                if obj is None:
                    break
            if isinstance(obj, type):
                return obj
        return None

    def is_loaded(self, type_name: str) -> bool:
        return self.find_type(type_name) is not None

    def get_type(self, type_name: str) -> type:
        t = self.find_type(type_name)
        if t is None:
            raise LookupError(f"Type not loaded: {type_name}")
        return t

    def load_module(self, path: PathLike) -> ModuleType:
        """Load a module file into the process. Loading is one way; modules stay registered.

        Errors raised while executing the module propagate to the caller.
        """
        module_path = Path(path).resolve()
        name = module_name_for_path(module_path)

        existing = sys.modules.get(name)
        if existing is not None:
            existing_file = getattr(existing, "__file__", None)
            if existing_file and Path(existing_file).resolve() == module_path:
                return existing

        spec = importlib.util.spec_from_file_location(name, module_path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Failed to load module: {module_path}", name=name, path=str(module_path))

        mod = importlib.util.module_from_spec(spec)
        sys.modules[name] = mod
        try:
            spec.loader.exec_module(mod)
        except BaseException:
            if sys.modules.get(name) is mod:
                del sys.modules[name]
            raise
        log.info("Loaded module %s from %s", name, module_path)
        return mod

    def resolve_details(self, type_name: str, fallback_module_path: Optional[PathLike] = None) -> TypeResolution:
        if self.is_loaded(type_name):
            return TypeResolution(type_name=type_name, found=True)

        if fallback_module_path is None:
            return TypeResolution(type_name=type_name, found=False)

        fallback = Path(fallback_module_path)
        if not fallback.is_file():
            log.debug("Type %s not loaded and fallback module not found: %s", type_name, fallback)
            return TypeResolution(type_name=type_name, found=False)

        self.load_module(fallback)
        return TypeResolution(type_name=type_name, found=self.is_loaded(type_name), loaded_module=fallback)

    def resolve(self, type_name: str, fallback_module_path: Optional[PathLike] = None) -> bool:
        return self.resolve_details(type_name, fallback_module_path).found
