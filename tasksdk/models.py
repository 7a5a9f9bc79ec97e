from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

# Qualified module names may carry ", Version=..." style qualifiers; only the
# part before the first comma takes part in matching.
NAME_QUALIFIER_DELIMITER = ","


def base_module_name(name: str) -> str:
    return str(name or "").split(NAME_QUALIFIER_DELIMITER, 1)[0].strip()


@dataclass(frozen=True)
class EndpointDescriptor:
    """Service endpoint as exposed by the host for the current task invocation."""

    name: str
    url: str
    auth_parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only copy; later changes to the source mapping do not leak in.
        object.__setattr__(self, "auth_parameters", MappingProxyType(dict(self.auth_parameters)))

    def auth_parameter(self, key: str) -> Optional[str]:
        val = self.auth_parameters.get(key)
        if val is None or not str(val).strip():
            return None
        return str(val)


@dataclass(frozen=True)
class TypeResolution:
    """Outcome of one TypeRegistry lookup. Never cached."""

    type_name: str
    found: bool
    loaded_module: Optional[Path] = None


@dataclass(frozen=True)
class ModuleOverride:
    """Redirects requests for one named module to a file on disk."""

    name_pattern: str
    replacement_path: Path

    def matches(self, requested_name: str) -> bool:
        wanted = base_module_name(self.name_pattern)
        return bool(wanted) and base_module_name(requested_name) == wanted
