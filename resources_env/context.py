"""Stage, region and stack name resolution for one deployment run."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from resources_env.config import (
    CliOptions,
    RuntimeConfig,
    ServiceConfig,
    output_directory_override,
    service_name,
)

DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"


class DeploymentContext:
    """Resolves stage/region with option > cached config > provider > default precedence."""

    def __init__(
        self,
        service_config: ServiceConfig,
        options: Optional[CliOptions] = None,
        runtime_config: Optional[RuntimeConfig] = None,
    ) -> None:
        self.service_config = service_config
        self.options: CliOptions = options or {}
        self.runtime_config: RuntimeConfig = runtime_config or {}

    def _resolve(self, key: str, fallback: str) -> str:
        provider = self.service_config.get("provider") or {}
        for source in (self.options, self.runtime_config, provider):
            value = source.get(key)  # type: ignore[attr-defined]
            if value:
                return str(value)
        return fallback

    @property
    def stage(self) -> str:
        return self._resolve("stage", DEFAULT_STAGE)

    @property
    def region(self) -> str:
        return self._resolve("region", DEFAULT_REGION)

    @property
    def service_name(self) -> str:
        return service_name(self.service_config)

    @property
    def stack_name(self) -> str:
        return f"{self.service_name}-{self.stage}"

    def remote_function_name(self, function_name: str) -> str:
        return f"{self.stack_name}-{function_name}"

    @property
    def service_path(self) -> Path:
        return Path(self.runtime_config.get("service_path") or Path.cwd())

    @property
    def output_dir_override(self) -> Optional[str]:
        return output_directory_override(self.service_config)


def runtime_config_from_env(service_path: Optional[str] = None) -> RuntimeConfig:
    """Collect stage/region already resolved earlier in the run.

    ``RESOURCES_ENV_STAGE`` and ``RESOURCES_ENV_REGION`` sit between explicit
    options and the provider section.
    """
    runtime: RuntimeConfig = {}
    stage = os.environ.get("RESOURCES_ENV_STAGE")
    region = os.environ.get("RESOURCES_ENV_REGION")
    if stage:
        runtime["stage"] = stage
    if region:
        runtime["region"] = region
    if service_path:
        runtime["service_path"] = service_path
    return runtime
