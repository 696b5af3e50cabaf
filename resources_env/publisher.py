"""Push a function's merged environment to Lambda."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from resources_env.errors import RemoteUpdateError


def publish_environment(lambda_client: Any, function_name: str, environment: Mapping[str, str]) -> Dict[str, Any]:
    """Replace the full environment variable set of ``function_name``.

    This is a replace at the remote side, so ``environment`` must already hold
    every variable that should survive.
    """
    try:
        return lambda_client.update_function_configuration(
            FunctionName=function_name,
            Environment={"Variables": dict(environment)},
        )
    except ClientError as exc:
        error = exc.response.get("Error", {})
        raise RemoteUpdateError(function_name, f"{error.get('Code')}: {error.get('Message')}") from exc
    except BotoCoreError as exc:
        raise RemoteUpdateError(function_name, str(exc)) from exc
