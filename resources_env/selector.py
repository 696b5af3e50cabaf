"""Per-function resource selection and environment merging."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from resources_env.logger import get_logger
from resources_env.models import FunctionSpec, SelectionResult, resource_key


def select_for_function(
    spec: FunctionSpec,
    resource_map: Mapping[str, str],
    provider_defaults: Optional[Mapping[str, str]] = None,
    log: Optional[Any] = None,
) -> SelectionResult:
    """Restrict ``resource_map`` to what ``spec`` requests and layer static environments on top.

    Layering order, later wins: matched resources, provider defaults, function
    environment. Requested keys missing from the map are reported, never filled.
    """
    logger = log or get_logger(__name__, function=spec.name)
    requested = list(dict.fromkeys(resource_key(key) for key in spec.requested_resource_keys))

    matched: Dict[str, str] = {key: resource_map[key] for key in requested if key in resource_map}
    unmet = tuple(key for key in requested if key not in matched)

    environment: Dict[str, str] = {}
    environment.update(matched)
    environment.update(provider_defaults or {})
    environment.update(spec.static_environment)

    result = SelectionResult(
        function_name=spec.name,
        matched=matched,
        environment=environment,
        unmet_keys=unmet,
    )

    if result.unmet is not None:
        logger.warning(
            "%s",
            result.unmet,
            extra={"function": spec.name, "missing": list(unmet)},
        )
    if not matched:
        logger.info("No env resources configured for %s", spec.name, extra={"function": spec.name})
    else:
        logger.info(
            "Setting env vars for %s: %s",
            spec.name,
            ", ".join(matched),
            extra={"function": spec.name, "keys": list(matched)},
        )
    return result
