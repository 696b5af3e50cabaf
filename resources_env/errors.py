"""Error taxonomy for the resolve-publish-write cycle."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from resources_env.models import FunctionOutcome


class ResourcesEnvError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ResourcesEnvError):
    """Raised when the service definition is missing or malformed."""


class RemoteFetchError(ResourcesEnvError):
    """Raised when listing the stack resources fails."""

    def __init__(self, stack_name: str, message: str) -> None:
        super().__init__(f"Failed to list resources for stack {stack_name}: {message}")
        self.stack_name = stack_name


class RemoteUpdateError(ResourcesEnvError):
    """Raised when publishing a function's environment fails."""

    def __init__(self, function_name: str, message: str) -> None:
        super().__init__(f"Failed to update environment of function {function_name}: {message}")
        self.function_name = function_name


class FileSystemError(ResourcesEnvError):
    """Raised when the env output path is unusable or a write fails."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ResourcesEnvCycleError(ResourcesEnvError):
    """Raised after every function settled and at least one of them failed."""

    def __init__(self, outcomes: Sequence["FunctionOutcome"]) -> None:
        self.outcomes: List["FunctionOutcome"] = list(outcomes)
        failed = [o.function_name for o in self.outcomes if not o.ok]
        super().__init__(f"Resource env update failed for function(s): {', '.join(failed)}")

    @property
    def failures(self) -> List["FunctionOutcome"]:
        return [o for o in self.outcomes if not o.ok]
