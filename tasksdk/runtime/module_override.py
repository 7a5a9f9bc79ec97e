from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar, Union

from ..errors import OverrideError
from ..models import ModuleOverride

log = logging.getLogger(__name__)

T = TypeVar("T")

# sys.meta_path is process wide; one override at a time, across all threads.
_lock = threading.Lock()
_owner: Optional[int] = None
_active: Optional["OverrideFinder"] = None


class OverrideFinder(importlib.abc.MetaPathFinder):
    """Serves one named module from a fixed file; has no opinion on anything else."""

    def __init__(self, override: ModuleOverride) -> None:
        self.override = override

    def find_spec(self, fullname, path=None, target=None):
        if not self.override.matches(fullname):
            return None
        log.info("Resolving %s from %s", fullname, self.override.replacement_path)
        return importlib.util.spec_from_file_location(fullname, str(self.override.replacement_path))


def active_override() -> Optional[ModuleOverride]:
    finder = _active
    return finder.override if finder is not None else None


@contextmanager
def module_override(name_pattern: str, replacement_path: Union[str, Path]) -> Iterator[ModuleOverride]:
    """Install a module-resolution override for the duration of the block.

    The finder is removed on every exit path. Nesting on one thread raises
    OverrideError; other threads wait until the active override is removed.
    """
    global _owner, _active

    if _owner == threading.get_ident():
        raise OverrideError(
            f"Module resolution override already installed: {active_override()}; nesting is not supported"
        )

    override = ModuleOverride(name_pattern=name_pattern, replacement_path=Path(replacement_path))
    finder = OverrideFinder(override)

    with _lock:
        _owner = threading.get_ident()
        _active = finder
        sys.meta_path.insert(0, finder)
        log.info("Installed module resolution override %s -> %s", name_pattern, override.replacement_path)
        try:
            yield override
        finally:
            try:
                sys.meta_path.remove(finder)
            except ValueError:
                pass
            _active = None
            _owner = None
            log.info("Removed module resolution override %s", name_pattern)


def with_override(name_pattern: str, replacement_path: Union[str, Path], action: Callable[[], T]) -> T:
    with module_override(name_pattern, replacement_path):
        return action()
