"""Stability check against the ECS services_stable waiter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError, WaiterError  # type: ignore

from ecs_stability_gate.exceptions import FailureCause, StabilityCheckFailure


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

WAITER_NAME = "services_stable"
# DescribeServices accepts at most 10 services per call.
MAX_SERVICES_PER_CALL = 10


def batch_services(
    services: Sequence[str], size: int = MAX_SERVICES_PER_CALL
) -> Iterator[list[str]]:
    for start in range(0, len(services), size):
        yield list(services[start : start + size])


def failure_cause(exception: Exception) -> FailureCause:
    """Extract a provider-neutral cause from a botocore exception."""
    if isinstance(exception, WaiterError):
        error = (exception.last_response or {}).get("Error", {})
        return FailureCause(
            code=error.get("Code", "WaiterError"),
            message=str(exception),
            reason=exception.kwargs.get("reason"),
        )
    if isinstance(exception, ClientError):
        error = exception.response.get("Error", {})
        return FailureCause(
            code=error.get("Code", "ClientError"),
            message=error.get("Message", str(exception)),
        )
    return FailureCause(code=type(exception).__name__, message=str(exception))


def check_stability(
    ecs_client: Any,
    cluster: str,
    services: Sequence[str],
    waiter_config: dict[str, int] | None = None,
) -> None:
    """Block until ECS reports every service in services stable.

    Services are waited on in order, ten at a time.

    Args:
        ecs_client: boto3 ECS client
        cluster: Name or ARN of the cluster
        services: Names or ARNs of the services
        waiter_config: Optional waiter Delay/MaxAttempts override

    Raises:
        StabilityCheckFailure: If the waiter times out or the API call fails
    """
    waiter = ecs_client.get_waiter(WAITER_NAME)
    kwargs: dict[str, Any] = {}
    if waiter_config:
        kwargs["WaiterConfig"] = waiter_config

    for batch in batch_services(services):
        logger.debug("Waiting on %s in cluster %s", ", ".join(batch), cluster)
        try:
            waiter.wait(cluster=cluster, services=batch, **kwargs)
        except (WaiterError, ClientError, BotoCoreError) as e:
            raise StabilityCheckFailure(failure_cause(e)) from e
