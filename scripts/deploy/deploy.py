#!/usr/bin/env python3
"""Deploy the service stack, then publish its resource ids to the functions."""

import argparse
import os
import shlex
import subprocess
import sys
from typing import List, Mapping, Optional, Sequence

from resources_env.cli import main as resources_env_main
from resources_env.config import CliOptions, load_service_config
from resources_env.context import DeploymentContext, runtime_config_from_env
from resources_env.errors import ResourcesEnvError


def run_command(
    command: Sequence[str], *, check: bool = True, env: Optional[Mapping[str, str]] = None
) -> subprocess.CompletedProcess[str]:
    """Execute a subprocess without shell interpolation."""

    printable = " ".join(shlex.quote(part) for part in command)
    print(f"Running: {printable}")

    result = subprocess.run(command, capture_output=True, text=True, env=env, check=False)

    if check and result.returncode != 0:
        print(f"Command failed with return code {result.returncode}")
        if result.stdout:
            print(f"stdout: {result.stdout}")
        if result.stderr:
            print(f"stderr: {result.stderr}")
        sys.exit(result.returncode)

    return result


def deploy_stack(stack_name: str, region: Optional[str], deploy_command: Optional[str] = None) -> None:
    """Run the infrastructure deploy command for ``stack_name``."""
    print(f"Deploying stack: {stack_name}")

    exec_env = dict(os.environ)
    if region:
        exec_env["CDK_DEFAULT_REGION"] = region

    if deploy_command:
        command = shlex.split(deploy_command)
    else:
        command = ["cdk", "deploy", stack_name, "--require-approval", "never"]

    run_command(command, env=exec_env)
    print(f"Deployment of {stack_name} completed successfully!")


def resources_env_args(args: argparse.Namespace) -> List[str]:
    argv = ["after-deploy", "--config", args.config]
    if args.stage:
        argv.extend(["--stage", args.stage])
    if args.region:
        argv.extend(["--region", args.region])
    if args.service_path:
        argv.extend(["--service-path", args.service_path])
    return argv


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main deployment function."""
    parser = argparse.ArgumentParser(description="Deploy the service stack and refresh function env resources")
    parser.add_argument("--config", "-c", required=True, help="Path to the JSON service definition")
    parser.add_argument("--stage", "-s", help="Target stage")
    parser.add_argument("--region", "-r", help="Target AWS region")
    parser.add_argument("--service-path", help="Service root for the env output directory")
    parser.add_argument("--deploy-command", help="Override the deploy command (default: cdk deploy <stack>)")
    parser.add_argument("--skip-deploy", action="store_true", help="Only refresh env resources")

    args = parser.parse_args(argv)

    options: CliOptions = {}
    if args.stage:
        options["stage"] = args.stage
    if args.region:
        options["region"] = args.region
    try:
        config = load_service_config(args.config)
        context = DeploymentContext(config, options, runtime_config_from_env(args.service_path))
        stack_name = context.stack_name
    except ResourcesEnvError as exc:
        print(f"Invalid service configuration: {exc}")
        sys.exit(1)

    if not args.skip_deploy:
        deploy_stack(stack_name, context.region, args.deploy_command)

    print("Publishing stack resources to function environments...")
    sys.exit(resources_env_main(resources_env_args(args)))


if __name__ == "__main__":
    main()
