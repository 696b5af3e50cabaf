from .loader import (
    DEFAULT_OUTPUT_DIR,
    build_function_spec,
    build_function_specs,
    load_service_config,
    output_directory_override,
    provider_environment,
    service_name,
    validate_service_config,
)
from .types import CliOptions, FunctionConfig, ProviderConfig, RuntimeConfig, ServiceConfig

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "CliOptions",
    "FunctionConfig",
    "ProviderConfig",
    "RuntimeConfig",
    "ServiceConfig",
    "build_function_spec",
    "build_function_specs",
    "load_service_config",
    "output_directory_override",
    "provider_environment",
    "service_name",
    "validate_service_config",
]
