import json
from pathlib import Path

import pytest

from resources_env.config import (
    build_function_specs,
    load_service_config,
    output_directory_override,
    provider_environment,
    service_name,
)
from resources_env.errors import ConfigurationError
from resources_env.models import FunctionSpec

pytestmark = pytest.mark.unit


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "service.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_and_build_specs(tmp_path: Path) -> None:
    """
    Given: a printed service definition with custom env-resources and overrides
    When: loading it and building function specs
    Then: each function maps to a FunctionSpec in declaration order
    """
    path = _write(
        tmp_path,
        {
            "service": {"name": "orders"},
            "provider": {"name": "aws", "environment": {"STAGE": "dev", "RETRIES": 3}},
            "custom": {"resource-output-dir": "env-out"},
            "functions": {
                "api": {
                    "handler": "api.main",
                    "environment": {"LOG_LEVEL": "info"},
                    "custom": {"env-resources": ["Table", "Queue"], "resource-output-file": "api.env"},
                },
                "worker": {"handler": "worker.main"},
                "cron": None,
            },
        },
    )

    config = load_service_config(path)

    assert service_name(config) == "orders"
    assert provider_environment(config) == {"STAGE": "dev", "RETRIES": "3"}
    assert output_directory_override(config) == "env-out"
    assert build_function_specs(config) == [
        FunctionSpec("api", ("Table", "Queue"), {"LOG_LEVEL": "info"}, "api.env"),
        FunctionSpec("worker"),
        FunctionSpec("cron"),
    ]


def test_single_string_resource_request(tmp_path: Path) -> None:
    payload = {"service": "svc", "functions": {"f": {"custom": {"env-resources": "Q"}}}}
    config = load_service_config(_write(tmp_path, payload))
    assert build_function_specs(config)[0].requested_resource_keys == ("Q",)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"provider": {}},
        {"service": ""},
        {"service": {"title": "x"}},
        {"service": "svc", "functions": ["a"]},
        {"service": "svc", "provider": "aws"},
    ],
)
def test_invalid_definitions_raise(tmp_path: Path, payload) -> None:
    with pytest.raises(ConfigurationError):
        load_service_config(_write(tmp_path, payload))


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    """
    Given: a missing file and a file with broken JSON
    When: loading the service definition
    Then: ConfigurationError is raised for both
    """
    with pytest.raises(ConfigurationError):
        load_service_config(tmp_path / "absent.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_service_config(broken)


def test_non_string_environment_values_keep_json_spelling(tmp_path: Path) -> None:
    """
    Given: provider and function environments with boolean, numeric and null values
    When: loading the definition and building specs
    Then: values are rendered as they are written in JSON, not as Python literals
    """
    payload = {
        "service": "svc",
        "provider": {"environment": {"DEBUG": False, "RATIO": 1.5, "EMPTY": None}},
        "functions": {"f": {"environment": {"FLAG": True, "N": 10}}},
    }
    config = load_service_config(_write(tmp_path, payload))

    assert provider_environment(config) == {"DEBUG": "false", "RATIO": "1.5", "EMPTY": ""}
    assert build_function_specs(config)[0].static_environment == {"FLAG": "true", "N": "10"}
