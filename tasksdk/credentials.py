from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union

from .config import SdkProfile, load_sdk_profile
from .errors import CredentialError, CredentialNotImplementedError
from .host import HostEnvironment, ProcessHost
from .paths import module_file, resolve_directory, type_module_name
from .runtime.type_registry import TypeRegistry

log = logging.getLogger(__name__)

ACCESS_TOKEN_PARAMETER = "AccessToken"

CredentialKind = Literal["extended", "rest"]


@dataclass(frozen=True)
class FederatedCredential:
    """Access-token credential. Never prompts and never falls back to the ambient identity."""

    kind: CredentialKind
    access_token: str = field(repr=False)
    native: Any = field(default=None, repr=False)
    allow_interactive: bool = False
    use_default_credentials: bool = False

    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"


class CredentialFactory:
    def __init__(
        self,
        host: Optional[HostEnvironment] = None,
        registry: Optional[TypeRegistry] = None,
        profile: Optional[SdkProfile] = None,
    ) -> None:
        self.host = host if host is not None else ProcessHost()
        self.registry = registry if registry is not None else TypeRegistry()
        self.profile = profile if profile is not None else load_sdk_profile()

    def _access_token(self) -> str:
        # MissingEndpointError propagates before any type resolution.
        endpoint = self.host.require_endpoint(self.profile.connection_endpoint)
        token = endpoint.auth_parameter(ACCESS_TOKEN_PARAMETER)
        if token is None:
            raise CredentialError(
                f"Endpoint {endpoint.name!r} has no {ACCESS_TOKEN_PARAMETER} auth parameter"
            )
        return token

    def _resolve_type(self, type_name: str, directory: Path) -> Optional[type]:
        fallback = module_file(directory, type_module_name(type_name), self.profile.module_suffix)
        if not self.registry.resolve(type_name, fallback):
            return None
        return self.registry.get_type(type_name)

    def get_extended_client_credentials(self, directory: Optional[Union[str, Path]] = None) -> FederatedCredential:
        token = self._access_token()
        d = resolve_directory(directory)

        cred_type = self._resolve_type(self.profile.extended_credential_type, d)
        if cred_type is None:
            raise CredentialError(f"Unable to resolve credential type: {self.profile.extended_credential_type}")

        return FederatedCredential(kind="extended", access_token=token, native=cred_type(token))

    def get_rest_credentials(self, directory: Optional[Union[str, Path]] = None) -> FederatedCredential:
        token = self._access_token()
        d = resolve_directory(directory)

        rest_type = self._resolve_type(self.profile.rest_credential_type, d)
        if rest_type is None:
            raise CredentialError(f"Unable to resolve credential type: {self.profile.rest_credential_type}")

        oauth_type = self._resolve_type(self.profile.oauth_credential_type, d)
        if oauth_type is None:
            # No weaker credential is substituted here.
            raise CredentialNotImplementedError(
                f"REST credentials are not implemented for this runtime version: "
                f"{self.profile.oauth_credential_type} is not available"
            )

        log.debug("Building REST credentials from %s", self.profile.oauth_credential_type)
        return FederatedCredential(kind="rest", access_token=token, native=rest_type(oauth_type(token)))
