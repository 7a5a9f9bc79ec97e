from __future__ import annotations

from typing import Optional


class TaskSdkError(Exception):
    """Base class for task SDK errors."""


class MissingVariableError(TaskSdkError):
    """Raised when a required task variable is not set on the host."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Required variable not set: {name}")
        self.name = name


class MissingEndpointError(TaskSdkError):
    """Raised when a required service endpoint is not configured on the host."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Required endpoint not configured: {name}")
        self.name = name


class TypeResolutionError(TaskSdkError):
    """Raised when a type is not loaded and no usable fallback module provides it."""

    def __init__(self, type_name: str, fallback_module_path: Optional[str] = None) -> None:
        msg = f"Unable to resolve type: {type_name}"
        if fallback_module_path:
            msg += f" (fallback module: {fallback_module_path})"
        super().__init__(msg)
        self.type_name = type_name
        self.fallback_module_path = fallback_module_path


class CredentialError(TaskSdkError):
    """Raised when federated credentials cannot be built."""


class CredentialNotImplementedError(CredentialError):
    """Raised when the runtime lacks the OAuth token credential type."""


class ClientConstructionError(TaskSdkError):
    """Raised when a client type's constructor fails. The original error is the __cause__."""

    def __init__(self, message: str, type_name: str) -> None:
        super().__init__(message)
        self.type_name = type_name


class DependencyConflictError(ClientConstructionError):
    """Raised when construction failed on a recognised dependency version skew."""

    def __init__(self, message: str, type_name: str, dependency: str, requested_name: str) -> None:
        super().__init__(message, type_name)
        self.dependency = dependency
        self.requested_name = requested_name


class OverrideError(TaskSdkError):
    """Raised when a module-resolution override is installed while one is already active."""


class ProfileValidationError(TaskSdkError):
    """Raised when the SDK profile file is missing or fails validation."""


class ClientRequestError(TaskSdkError):
    """Raised by HttpClientBase when the service answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
