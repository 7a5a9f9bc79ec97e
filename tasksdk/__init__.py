"""Task authoring helpers for build-agent tasks.

The main entry point is :class:`tasksdk.clients.ClientFactory`, which resolves a
vendor web API client type (loading its module from the task directory when the
process does not have it yet), builds federated credentials from the
``SystemVssConnection`` endpoint and constructs the client. A construction
failure caused by the vendor SDK's pinned JSON library is retried once with the
library resolved from the task directory.
"""

from __future__ import annotations

from .errors import (
    TaskSdkError,
    MissingVariableError,
    MissingEndpointError,
    TypeResolutionError,
    CredentialError,
    CredentialNotImplementedError,
    ClientConstructionError,
    DependencyConflictError,
    OverrideError,
    ProfileValidationError,
    ClientRequestError,
)

from .models import EndpointDescriptor, ModuleOverride, TypeResolution
from .config import SdkProfile, load_sdk_profile, resolve_sdk_profile_path
from .host import HostEnvironment, ProcessHost, StaticHost
from .paths import entry_point_directory
from .runtime import TypeRegistry, active_override, module_override, with_override
from .credentials import CredentialFactory, FederatedCredential
from .clients import ClientFactory, client_fallback_module_path

__all__ = [
    "TaskSdkError",
    "MissingVariableError",
    "MissingEndpointError",
    "TypeResolutionError",
    "CredentialError",
    "CredentialNotImplementedError",
    "ClientConstructionError",
    "DependencyConflictError",
    "OverrideError",
    "ProfileValidationError",
    "ClientRequestError",
    "EndpointDescriptor",
    "ModuleOverride",
    "TypeResolution",
    "SdkProfile",
    "load_sdk_profile",
    "resolve_sdk_profile_path",
    "HostEnvironment",
    "ProcessHost",
    "StaticHost",
    "entry_point_directory",
    "TypeRegistry",
    "active_override",
    "module_override",
    "with_override",
    "CredentialFactory",
    "FederatedCredential",
    "ClientFactory",
    "client_fallback_module_path",
]
__version__ = "0.1.0"
