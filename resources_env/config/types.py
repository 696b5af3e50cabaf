"""Typed configuration contracts for the service definition."""

from __future__ import annotations

from typing import Dict, List, NotRequired, TypedDict, Union

# Custom sections keep the deployment framework's hyphenated key names.
FunctionCustomConfig = TypedDict(
    "FunctionCustomConfig",
    {
        "env-resources": List[str],
        "resource-output-file": str,
    },
    total=False,
)

ServiceCustomConfig = TypedDict(
    "ServiceCustomConfig",
    {
        "resource-output-dir": str,
    },
    total=False,
)


class ProviderConfig(TypedDict, total=False):
    """Provider section: defaults that apply to every function."""

    name: NotRequired[str]
    stage: NotRequired[str]
    region: NotRequired[str]
    environment: NotRequired[Dict[str, str]]


class FunctionConfig(TypedDict, total=False):
    """A single function declaration."""

    handler: NotRequired[str]
    environment: NotRequired[Dict[str, str]]
    custom: NotRequired[FunctionCustomConfig]


class ServiceNameConfig(TypedDict):
    name: str


class ServiceConfig(TypedDict, total=False):
    """Resolved service definition as printed by the deployment framework."""

    service: Union[str, ServiceNameConfig]
    provider: NotRequired[ProviderConfig]
    functions: NotRequired[Dict[str, FunctionConfig]]
    custom: NotRequired[ServiceCustomConfig]


class CliOptions(TypedDict, total=False):
    """Options given explicitly on the command line."""

    stage: NotRequired[str]
    region: NotRequired[str]
    function: NotRequired[str]


class RuntimeConfig(TypedDict, total=False):
    """Values resolved earlier in the same deployment run."""

    service_path: NotRequired[str]
    stage: NotRequired[str]
    region: NotRequired[str]
