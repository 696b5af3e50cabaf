"""Load the service definition and derive function specs from it."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from resources_env.config.types import FunctionConfig, ServiceConfig
from resources_env.errors import ConfigurationError
from resources_env.models import FunctionSpec

DEFAULT_OUTPUT_DIR = ".serverless-resources-env"


def load_service_config(path: Union[str, Path]) -> ServiceConfig:
    """Read a JSON service definition from ``path``.

    Raises:
        ConfigurationError: the file is unreadable, is not valid JSON, has no
            service name, or declares ``functions`` as something other than a
            mapping.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read service config {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in service config {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Service config {config_path} must be a JSON object")
    validate_service_config(raw)
    return raw  # type: ignore[return-value]


def validate_service_config(config: Mapping[str, Any]) -> None:
    service_name(config)  # type: ignore[arg-type]
    functions = config.get("functions")
    if functions is not None and not isinstance(functions, Mapping):
        raise ConfigurationError("'functions' must be a mapping of function name to definition")
    provider = config.get("provider")
    if provider is not None and not isinstance(provider, Mapping):
        raise ConfigurationError("'provider' must be a mapping")


def service_name(config: ServiceConfig) -> str:
    """Return the service name from either ``service: name`` or ``service: {name: ...}``."""
    value = config.get("service")
    if isinstance(value, Mapping):
        value = value.get("name")
    if not isinstance(value, str) or not value:
        raise ConfigurationError("Service config is missing a service name")
    return value


def provider_environment(config: ServiceConfig) -> Dict[str, str]:
    provider = config.get("provider") or {}
    return _string_map(provider.get("environment"))


def output_directory_override(config: ServiceConfig) -> Optional[str]:
    custom = config.get("custom") or {}
    return custom.get("resource-output-dir") or None


def build_function_spec(name: str, function: Optional[FunctionConfig]) -> FunctionSpec:
    function = function or {}
    custom = function.get("custom") or {}
    requested = custom.get("env-resources") or []
    if isinstance(requested, str):
        requested = [requested]
    return FunctionSpec(
        name=name,
        requested_resource_keys=tuple(str(item) for item in requested),
        static_environment=_string_map(function.get("environment")),
        output_override=custom.get("resource-output-file") or None,
    )


def build_function_specs(config: ServiceConfig) -> List[FunctionSpec]:
    """One spec per declared function, in declaration order."""
    functions = config.get("functions") or {}
    return [build_function_spec(name, definition) for name, definition in functions.items()]


def _string_map(value: Any) -> Dict[str, str]:
    if not value:
        return {}
    return {str(k): _env_value(v) for k, v in value.items()}


def _env_value(value: Any) -> str:
    """Render a config value the way it is spelled in the JSON definition."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
