from __future__ import annotations

from .type_registry import TypeRegistry
from .module_override import active_override, module_override, with_override

__all__ = [
    "TypeRegistry",
    "active_override",
    "module_override",
    "with_override",
]
