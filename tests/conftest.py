import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest

# Ensure project root is importable when running without an editable install
_repo_root_str = str(Path(__file__).resolve().parents[1])
if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Provide a default region and dummy credentials for moto/boto3 clients."""
    monkeypatch.setenv("AWS_REGION", os.environ.get("AWS_REGION", "us-east-1"))
    monkeypatch.setenv("AWS_DEFAULT_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1"))
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.delenv("RESOURCES_ENV_MAX_WORKERS", raising=False)
    monkeypatch.delenv("RESOURCES_ENV_STAGE", raising=False)
    monkeypatch.delenv("RESOURCES_ENV_REGION", raising=False)
    yield


@pytest.fixture
def make_service_config() -> Callable[..., Dict[str, Any]]:
    """Build a service definition.

    Usage: make_service_config(functions={"hello": {...}}, provider={"stage": "prod"}).
    """

    def _apply(
        *,
        service: Any = "unit-test-service",
        provider: Optional[Dict[str, Any]] = None,
        functions: Optional[Dict[str, Any]] = None,
        custom: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "service": service,
            "provider": provider if provider is not None else {"name": "aws"},
            "functions": functions if functions is not None else {"function1": {}, "function2": {}},
        }
        if custom is not None:
            config["custom"] = custom
        return config

    return _apply


@pytest.fixture
def summaries() -> Callable[..., List[Dict[str, Any]]]:
    """Build StackResourceSummaries entries from ``logical=physical`` pairs."""
    from tests.fixtures.clients import resource_summary

    def _apply(**pairs: str) -> List[Dict[str, Any]]:
        return [resource_summary(logical, physical) for logical, physical in pairs.items()]

    return _apply


@pytest.fixture
def make_hook(tmp_path: Path) -> Callable[..., Any]:
    """Construct a ResourcesEnvHook wired to stub clients and tmp_path as service root."""
    from resources_env.hook import ResourcesEnvHook
    from tests.fixtures.clients import CloudFormationStub, LambdaStub

    def _apply(
        config: Dict[str, Any],
        *,
        options: Optional[Dict[str, Any]] = None,
        pages: Optional[List[Dict[str, Any]]] = None,
        cloudformation: Optional[Any] = None,
        lambda_client: Optional[Any] = None,
        fs: Optional[Any] = None,
    ) -> Any:
        return ResourcesEnvHook(
            config,
            options or {},
            {"service_path": str(tmp_path)},
            cloudformation=cloudformation or CloudFormationStub(pages=pages or [{"StackResourceSummaries": []}]),
            lambda_client=lambda_client or LambdaStub(),
            fs=fs,
        )

    return _apply


def pytest_configure(config):
    """Configure pytest with essential markers."""
    config.addinivalue_line("markers", "unit: unit test")
    config.addinivalue_line("markers", "integration: integration test")
