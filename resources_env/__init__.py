"""Expose CloudFormation stack resource ids to Lambda functions.

After a full deployment, every resource of the ``<service>-<stage>`` stack is
listed, mapped to ``CF_<LogicalId>`` keys, and each declared function receives
the subset it asks for both as remote environment variables and as a local
property file used for local invocation.
"""

from resources_env.errors import (
    ConfigurationError,
    FileSystemError,
    RemoteFetchError,
    RemoteUpdateError,
    ResourcesEnvCycleError,
    ResourcesEnvError,
)
from resources_env.hook import ResourcesEnvHook
from resources_env.models import (
    EnvFileLocation,
    FunctionOutcome,
    FunctionSpec,
    SelectionResult,
    StackResource,
    UnmetResourceRequest,
)

__all__ = [
    "ConfigurationError",
    "EnvFileLocation",
    "FileSystemError",
    "FunctionOutcome",
    "FunctionSpec",
    "RemoteFetchError",
    "RemoteUpdateError",
    "ResourcesEnvCycleError",
    "ResourcesEnvError",
    "ResourcesEnvHook",
    "SelectionResult",
    "StackResource",
    "UnmetResourceRequest",
]
