"""Data contracts shared by the resolution cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

RESOURCE_KEY_PREFIX = "CF_"


def resource_key(logical_id: str) -> str:
    return f"{RESOURCE_KEY_PREFIX}{logical_id}"


@dataclass(frozen=True)
class StackResource:
    """One provisioned resource as reported by CloudFormation."""

    logical_id: str
    physical_id: str

    @staticmethod
    def from_summary(summary: Mapping[str, object]) -> "StackResource":
        return StackResource(
            logical_id=str(summary["LogicalResourceId"]),
            physical_id=str(summary.get("PhysicalResourceId") or ""),
        )


@dataclass(frozen=True)
class FunctionSpec:
    """A declared function and the resources it wants exposed."""

    name: str
    requested_resource_keys: Tuple[str, ...] = ()
    static_environment: Mapping[str, str] = field(default_factory=dict)
    output_override: Optional[str] = None


@dataclass(frozen=True)
class UnmetResourceRequest:
    """Diagnostic for requested logical ids missing from the stack."""

    function_name: str
    missing_keys: Tuple[str, ...]

    def __str__(self) -> str:
        return f"Could not find cloud formation resources for {self.function_name}: {', '.join(self.missing_keys)}"


@dataclass(frozen=True)
class SelectionResult:
    """Per-function selection: matched resources, final environment, unmet keys."""

    function_name: str
    matched: Dict[str, str]
    environment: Dict[str, str]
    unmet_keys: Tuple[str, ...] = ()

    @property
    def unmet(self) -> Optional[UnmetResourceRequest]:
        if not self.unmet_keys:
            return None
        return UnmetResourceRequest(function_name=self.function_name, missing_keys=self.unmet_keys)


@dataclass(frozen=True)
class EnvFileLocation:
    directory: Path
    file_name: str

    @property
    def path(self) -> Path:
        return self.directory / self.file_name


@dataclass
class FunctionOutcome:
    """Settled result of one function's publish-and-write pair."""

    function_name: str
    remote_name: str
    selection: SelectionResult
    env_file: Optional[Path] = None
    published: bool = False
    errors: List[Exception] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
