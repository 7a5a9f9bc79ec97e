from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from .errors import ProfileValidationError


PROFILE_ENV_VAR = "TASKSDK_PROFILE"


@dataclass(frozen=True)
class SdkProfile:
    """Names of the vendor SDK types and host conventions the factories rely on."""

    extended_credential_type: str = "vss.client.TfsClientCredentials"
    rest_credential_type: str = "vss.common.VssCredentials"
    oauth_credential_type: str = "vss.oauth.VssOAuthAccessTokenCredential"
    # JSON serialization library the vendor SDK is known to pin at two versions.
    conflict_dependency: str = "simplejson"
    module_suffix: str = ".py"
    collection_uri_variable: str = "System.TeamFoundationCollectionUri"
    connection_endpoint: str = "SystemVssConnection"


def _profile_schema() -> Dict[str, Any]:
    props: Dict[str, Any] = {f.name: {"type": "string", "minLength": 1} for f in fields(SdkProfile)}
    props["module_suffix"] = {"type": "string", "pattern": r"^\.[A-Za-z0-9_]+$"}
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": props,
        "additionalProperties": False,
    }


def resolve_sdk_profile_path(cli_path: Optional[str] = None) -> Optional[Path]:
    """Resolve the SDK profile YAML path.

    Precedence:
      1) explicit path argument
      2) TASKSDK_PROFILE
      3) none (built-in defaults)
    """
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()

    env_path = str(os.environ.get(PROFILE_ENV_VAR, "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve()

    return None


def load_sdk_profile(cli_path: Optional[str] = None) -> SdkProfile:
    path = resolve_sdk_profile_path(cli_path)
    if path is None:
        return SdkProfile()
    if not path.exists():
        raise ProfileValidationError(f"SDK profile not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ProfileValidationError(f"SDK profile is not valid YAML: {path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ProfileValidationError(f"SDK profile must be a mapping: {path}")

    try:
        jsonschema.validate(instance=data, schema=_profile_schema())
    except jsonschema.ValidationError as e:
        raise ProfileValidationError(f"SDK profile schema validation failed: {path}: {e.message}") from e

    return replace(SdkProfile(), **{k: str(v).strip() for k, v in data.items()})
