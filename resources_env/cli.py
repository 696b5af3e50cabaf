"""Command line entry points for the deployment trigger points."""

from __future__ import annotations

import argparse
import os
import shlex
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import dotenv_values

from resources_env.config import CliOptions, RuntimeConfig, build_function_specs, load_service_config
from resources_env.context import runtime_config_from_env
from resources_env.errors import ResourcesEnvCycleError, ResourcesEnvError
from resources_env.hook import ResourcesEnvHook
from resources_env.logger import get_logger

LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resources-env",
        description="Expose CloudFormation resource ids to Lambda functions and local invocations",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", required=True, help="Path to the JSON service definition")
    common.add_argument("--stage", "-s", help="Deployment stage (overrides config)")
    common.add_argument("--region", "-r", help="AWS region (overrides config)")
    common.add_argument("--service-path", help="Service root for relative output paths (default: cwd)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("after-deploy", parents=[common], help="Publish resource env vars after a full deploy")

    local = sub.add_parser("load-local", parents=[common], help="Load a function's env file before local invoke")
    local.add_argument("--function", "-f", required=True, help="Function to load the env file for")
    local.add_argument(
        "--format",
        choices=("export", "dotenv"),
        default="export",
        help="How to print the loaded variables; eval the export form in the invoking shell (default: export)",
    )

    sub.add_parser("show", parents=[common], help="Print resolved names without calling AWS")
    return parser


def _options(args: argparse.Namespace) -> CliOptions:
    options: CliOptions = {}
    if args.stage:
        options["stage"] = args.stage
    if args.region:
        options["region"] = args.region
    if getattr(args, "function", None):
        options["function"] = args.function
    return options


def _runtime(args: argparse.Namespace) -> RuntimeConfig:
    return runtime_config_from_env(args.service_path)


def _show(hook: ResourcesEnvHook) -> List[str]:
    ctx = hook.context
    lines = [f"stage={ctx.stage}", f"region={ctx.region}", f"stack={ctx.stack_name}"]
    for spec in build_function_specs(hook.service_config):
        lines.append(f"{spec.name}={hook.env_file_location(spec).path}")
    return lines


def _loaded_lines(path: Path, fmt: str) -> List[str]:
    """Render the variables named in ``path`` with their values in this process."""
    lines = []
    for key in dotenv_values(path, interpolate=False):
        value = os.environ.get(key, "")
        if fmt == "export":
            lines.append(f"export {key}={shlex.quote(value)}")
        else:
            lines.append(f"{key}={value}")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_service_config(args.config)
        hook = ResourcesEnvHook(config, _options(args), _runtime(args))
        if args.command == "show":
            print("\n".join(_show(hook)))
            return 0

        if args.command == "after-deploy":
            outcomes = hook.after_deploy()
            LOGGER.info("Updated %d function(s)", len(outcomes), extra={"count": len(outcomes)})
            return 0

        spec = hook.function_spec(args.function)
        if hook.before_local_invoke(args.function):
            lines = _loaded_lines(hook.env_file_location(spec).path, args.format)
            if lines:
                print("\n".join(lines))
        return 0
    except ResourcesEnvCycleError as exc:
        for outcome in exc.failures:
            for error in outcome.errors:
                LOGGER.error("%s: %s", outcome.function_name, error, extra={"function": outcome.function_name})
        LOGGER.error(str(exc))
        return 1
    except ResourcesEnvError as exc:
        LOGGER.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
