from __future__ import annotations

import os
from typing import Dict, Mapping, Optional, Protocol

from .errors import MissingEndpointError, MissingVariableError
from .models import EndpointDescriptor


ENDPOINT_URL_PREFIX = "ENDPOINT_URL_"
ENDPOINT_AUTH_PARAMETER_PREFIX = "ENDPOINT_AUTH_PARAMETER_"

# The agent upper-cases auth parameter keys; map the ones the SDK reads back.
KNOWN_AUTH_PARAMETERS = {
    "ACCESSTOKEN": "AccessToken",
}


class HostEnvironment(Protocol):
    def get_variable(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def require_variable(self, name: str) -> str:
        raise NotImplementedError

    def get_endpoint(self, name: str) -> Optional[EndpointDescriptor]:
        raise NotImplementedError

    def require_endpoint(self, name: str) -> EndpointDescriptor:
        raise NotImplementedError


class _RequireMixin:
    def require_variable(self, name: str) -> str:
        val = self.get_variable(name)  # type: ignore[attr-defined]
        if val is None or not val.strip():
            raise MissingVariableError(name)
        return val

    def require_endpoint(self, name: str) -> EndpointDescriptor:
        ep = self.get_endpoint(name)  # type: ignore[attr-defined]
        if ep is None:
            raise MissingEndpointError(name)
        return ep


def variable_env_key(name: str) -> str:
    """System.TeamFoundationCollectionUri -> SYSTEM_TEAMFOUNDATIONCOLLECTIONURI"""
    return str(name).strip().replace(".", "_").replace(" ", "_").upper()


class ProcessHost(_RequireMixin):
    """Reads variables and endpoints the agent exports into the task process environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get_variable(self, name: str) -> Optional[str]:
        return self._environ.get(variable_env_key(name))

    def get_endpoint(self, name: str) -> Optional[EndpointDescriptor]:
        key = variable_env_key(name)
        url = self._environ.get(ENDPOINT_URL_PREFIX + key)
        if url is None:
            return None

        prefix = f"{ENDPOINT_AUTH_PARAMETER_PREFIX}{key}_"
        params: Dict[str, str] = {}
        for k, v in self._environ.items():
            if not k.startswith(prefix):
                continue
            pk = k[len(prefix):]
            if not pk:
                continue
            params[KNOWN_AUTH_PARAMETERS.get(pk, pk)] = "" if v is None else str(v)

        return EndpointDescriptor(name=name, url=url, auth_parameters=params)


class StaticHost(_RequireMixin):
    """In-memory host, for embedding and tests."""

    def __init__(
        self,
        variables: Optional[Dict[str, str]] = None,
        endpoints: Optional[Dict[str, EndpointDescriptor]] = None,
    ) -> None:
        self.variables: Dict[str, str] = dict(variables or {})
        self.endpoints: Dict[str, EndpointDescriptor] = dict(endpoints or {})

    def get_variable(self, name: str) -> Optional[str]:
        return self.variables.get(name)

    def get_endpoint(self, name: str) -> Optional[EndpointDescriptor]:
        return self.endpoints.get(name)
