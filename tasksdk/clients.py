from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from .config import SdkProfile, load_sdk_profile
from .credentials import CredentialFactory, FederatedCredential
from .errors import ClientConstructionError, DependencyConflictError, TypeResolutionError
from .host import HostEnvironment, ProcessHost
from .models import base_module_name
from .paths import module_file, resolve_directory
from .runtime.module_override import with_override
from .runtime.type_registry import TypeRegistry

log = logging.getLogger(__name__)

# <vendor>[.<area>...].WebApi.<Name>HttpClient
HTTP_CLIENT_TYPE_RE = re.compile(
    r"^(?P<module>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*\.(?i:webapi))\.(?P<type>\w*HttpClient)$"
)


def client_fallback_module_path(type_name: str, directory: Path, suffix: str = ".py") -> Optional[Path]:
    """Map a vendor HttpClient type name to the module file expected to define it."""
    m = HTTP_CLIENT_TYPE_RE.match(str(type_name or "").strip())
    if not m:
        return None
    return module_file(directory, m.group("module"), suffix)


def _requested_name(exc: BaseException) -> Optional[str]:
    if isinstance(exc, ModuleNotFoundError):
        return exc.name
    if isinstance(exc, FileNotFoundError) and exc.filename:
        return Path(str(exc.filename)).name
    return None


def missing_dependency(exc: BaseException, dependency: str, suffix: str = ".py") -> Optional[str]:
    """Return the requested name if the first not-found error in the chain is for `dependency`.

    Only the module itself (or its file, `dependency + suffix`) counts; the
    override serves a single file, so submodule requests are general failures.
    """
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        requested = _requested_name(cur)
        if requested is not None:
            base = base_module_name(requested)
            if base in (dependency, dependency + suffix):
                return requested
            return None
        cur = cur.__cause__ or (None if cur.__suppress_context__ else cur.__context__)
    return None


class ClientFactory:
    def __init__(
        self,
        host: Optional[HostEnvironment] = None,
        registry: Optional[TypeRegistry] = None,
        profile: Optional[SdkProfile] = None,
        credentials: Optional[CredentialFactory] = None,
    ) -> None:
        self.host = host if host is not None else ProcessHost()
        self.registry = registry if registry is not None else TypeRegistry()
        self.profile = profile if profile is not None else load_sdk_profile()
        self.credentials = (
            credentials
            if credentials is not None
            else CredentialFactory(host=self.host, registry=self.registry, profile=self.profile)
        )

    def _instantiate(self, type_name: str, client_type: type, uri: str, credentials: Any) -> Any:
        try:
            return client_type(uri, credentials)
        except Exception as e:
            dep = self.profile.conflict_dependency
            requested = missing_dependency(e, dep, self.profile.module_suffix)
            if requested is not None:
                raise DependencyConflictError(
                    f"Constructing {type_name} failed: dependency {requested!r} could not be loaded",
                    type_name=type_name,
                    dependency=dep,
                    requested_name=requested,
                ) from e
            raise ClientConstructionError(f"Constructing {type_name} failed: {e}", type_name=type_name) from e

    def construct(
        self,
        type_name: str,
        directory: Optional[Union[str, Path]] = None,
        uri: Optional[str] = None,
        credentials: Optional[FederatedCredential] = None,
    ) -> Any:
        d = resolve_directory(directory)
        if uri is None or not str(uri).strip():
            uri = self.host.require_variable(self.profile.collection_uri_variable)
        if credentials is None:
            credentials = self.credentials.get_rest_credentials(d)

        fallback = client_fallback_module_path(type_name, d, self.profile.module_suffix)
        if not self.registry.resolve(type_name, fallback):
            raise TypeResolutionError(type_name, str(fallback) if fallback is not None else None)
        client_type = self.registry.get_type(type_name)

        try:
            return self._instantiate(type_name, client_type, uri, credentials)
        except DependencyConflictError as e:
            conflict = e

        dep_path = module_file(d, conflict.dependency, self.profile.module_suffix)
        if not dep_path.is_file():
            log.warning("No %s module in %s to resolve %r", conflict.dependency, d, conflict.requested_name)
            raise conflict

        log.info("Retrying %s with %s resolved from %s", type_name, conflict.dependency, dep_path)
        return with_override(
            conflict.dependency,
            dep_path,
            lambda: self._instantiate(type_name, client_type, uri, credentials),
        )
