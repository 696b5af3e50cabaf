"""Stack resource discovery and logical-to-physical mapping."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from resources_env.errors import RemoteFetchError
from resources_env.logger import get_logger
from resources_env.models import StackResource, resource_key


def fetch_resources(cloudformation: Any, stack_name: str, log: Optional[Any] = None) -> List[StackResource]:
    """Return every resource of ``stack_name`` in page arrival order.

    Pages are requested sequentially until a response carries no NextToken.
    Any failing page aborts the whole fetch.
    """
    logger = log or get_logger(__name__, stack=stack_name)
    logger.info("Looking up resources for stack %s", stack_name)

    paginator = cloudformation.get_paginator("list_stack_resources")
    resources: List[StackResource] = []
    try:
        for index, page in enumerate(paginator.paginate(StackName=stack_name)):
            if index:
                logger.info("Getting next resources page")
            resources.extend(StackResource.from_summary(item) for item in page.get("StackResourceSummaries", []))
    except ClientError as exc:
        raise RemoteFetchError(stack_name, exc.response.get("Error", {}).get("Message", str(exc))) from exc
    except BotoCoreError as exc:
        raise RemoteFetchError(stack_name, str(exc)) from exc

    logger.info("Returned %d resource summaries", len(resources), extra={"count": len(resources)})
    return resources


def map_resources(resources: Iterable[StackResource]) -> Dict[str, str]:
    """Key each physical id by ``CF_<logicalId>``; a repeated logical id keeps the last value."""
    return {resource_key(item.logical_id): item.physical_id for item in resources}
