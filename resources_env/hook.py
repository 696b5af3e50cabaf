"""Resolve-publish-write cycle and the local-invocation loader.

``ResourcesEnvHook.after_deploy`` runs once a full deployment finished:

1. List every resource of ``<service>-<stage>`` (sequential pages).
2. Map logical ids to ``CF_<logicalId>`` keys.
3. Per function, select the requested subset and merge static environments.
4. Fan out per function: publish the merged environment to Lambda and
   write the matched subset to the local property file.

Every function's pair settles before the cycle reports; failures are
collected and raised together as ``ResourcesEnvCycleError``.
"""

from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import boto3

from resources_env.config import (
    CliOptions,
    RuntimeConfig,
    ServiceConfig,
    build_function_specs,
    provider_environment,
)
from resources_env.context import DeploymentContext
from resources_env.envfile import (
    LocalFileSystem,
    build_env_file_location,
    env_directory,
    load_local_env,
    prepare_env_directory,
    write_env_file,
)
from resources_env.errors import ConfigurationError, ResourcesEnvCycleError
from resources_env.logger import get_logger
from resources_env.models import EnvFileLocation, FunctionOutcome, FunctionSpec
from resources_env.publisher import publish_environment
from resources_env.resources import fetch_resources, map_resources
from resources_env.selector import select_for_function

_MAX_WORKERS_CAP = 16


class ResourcesEnvHook:
    """Holds configuration and AWS clients for one deployment run."""

    def __init__(
        self,
        service_config: ServiceConfig,
        options: Optional[CliOptions] = None,
        runtime_config: Optional[RuntimeConfig] = None,
        *,
        cloudformation: Optional[Any] = None,
        lambda_client: Optional[Any] = None,
        fs: Optional[LocalFileSystem] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.context = DeploymentContext(service_config, options, runtime_config)
        self.service_config = service_config
        region = self.context.region
        self._cloudformation = cloudformation
        self._lambda_client = lambda_client
        self.fs = fs or LocalFileSystem()
        self.max_workers = max_workers or _env_max_workers()
        self.log = get_logger(__name__, stage=self.context.stage, region=region)

    @property
    def cloudformation(self) -> Any:
        if self._cloudformation is None:
            self._cloudformation = boto3.client("cloudformation", region_name=self.context.region)
        return self._cloudformation

    @property
    def lambda_client(self) -> Any:
        if self._lambda_client is None:
            self._lambda_client = boto3.client("lambda", region_name=self.context.region)
        return self._lambda_client

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------
    @property
    def env_directory(self) -> Path:
        return env_directory(self.context.service_path, self.context.output_dir_override)

    def env_file_location(self, spec: FunctionSpec) -> EnvFileLocation:
        return build_env_file_location(
            service_path=self.context.service_path,
            region=self.context.region,
            stage=self.context.stage,
            function_name=spec.name,
            file_override=spec.output_override,
            directory_override=self.context.output_dir_override,
        )

    def function_spec(self, function_name: str) -> FunctionSpec:
        for spec in build_function_specs(self.service_config):
            if spec.name == function_name:
                return spec
        raise ConfigurationError(f"Function {function_name} is not declared in service {self.context.service_name}")

    # ------------------------------------------------------------------
    # Trigger points
    # ------------------------------------------------------------------
    def after_deploy(self) -> List[FunctionOutcome]:
        stack_name = self.context.stack_name
        log = self.log.bind(stack=stack_name)

        resource_map = map_resources(fetch_resources(self.cloudformation, stack_name, log=log))
        defaults = provider_environment(self.service_config)
        specs = build_function_specs(self.service_config)
        if not specs:
            log.info("No functions declared; nothing to update")
            return []

        # A stray file at the output path is fatal before anything is published.
        prepare_env_directory(self.env_directory, self.fs)

        outcomes: List[FunctionOutcome] = []
        pending: List[Tuple[FunctionOutcome, Future, Future]] = []
        workers = min(self.max_workers, 2 * len(specs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resources-env") as pool:
            for spec in specs:
                fn_log = log.bind(function=spec.name)
                selection = select_for_function(spec, resource_map, defaults, log=fn_log)
                outcome = FunctionOutcome(
                    function_name=spec.name,
                    remote_name=self.context.remote_function_name(spec.name),
                    selection=selection,
                )
                publish = pool.submit(publish_environment, self.lambda_client, outcome.remote_name, selection.environment)
                write = pool.submit(write_env_file, self.env_file_location(spec), selection.matched, self.fs, fn_log)
                outcomes.append(outcome)
                pending.append((outcome, publish, write))

            for outcome, publish, write in pending:
                self._settle(outcome, publish, write, log.bind(function=outcome.function_name))

        if any(not outcome.ok for outcome in outcomes):
            raise ResourcesEnvCycleError(outcomes)
        return outcomes

    def before_local_invoke(self, function_name: Optional[str] = None) -> bool:
        name = function_name or self.context.options.get("function")
        if not name:
            raise ConfigurationError("A function name is required for local invocation")
        location = self.env_file_location(self.function_spec(name))
        return load_local_env(location, log=self.log.bind(function=name))

    # ------------------------------------------------------------------
    def _settle(self, outcome: FunctionOutcome, publish: Future, write: Future, log: Any) -> None:
        try:
            result: Dict[str, Any] = publish.result()
        except Exception as exc:
            outcome.errors.append(exc)
            log.error("ENV update for function %s failed: %s", outcome.remote_name, exc, exc_info=exc)
        else:
            outcome.published = True
            log.info("ENV update for function %s successful", result.get("FunctionName", outcome.remote_name))

        try:
            outcome.env_file = write.result()
        except Exception as exc:
            outcome.errors.append(exc)
            log.error("Writing env file for %s failed: %s", outcome.function_name, exc, exc_info=exc)


def _env_max_workers() -> int:
    raw = os.environ.get("RESOURCES_ENV_MAX_WORKERS", "")
    try:
        value = int(raw)
    except ValueError:
        return _MAX_WORKERS_CAP
    return max(1, value)
