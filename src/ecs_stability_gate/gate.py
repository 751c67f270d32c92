from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from ecs_stability_gate.connection import make_connection
from ecs_stability_gate.credentials import assume_role
from ecs_stability_gate.model import outcome_from_attempts
from ecs_stability_gate.retry import retry
from ecs_stability_gate.stability import check_stability


if TYPE_CHECKING:
    from collections.abc import Callable

    from ecs_stability_gate.exceptions import StabilityCheckFailure
    from ecs_stability_gate.model import (
        Credentials,
        InvocationParameters,
        Outcome,
    )

logger = logging.getLogger(__name__)


class StabilityGate:
    """Waits for ECS services to become stable within a bounded number of attempts.

    The STS client is created by the caller and shared for the run. The
    connection factory and stability check can be swapped out for tests.
    """

    def __init__(
        self,
        sts_client: Any,
        connection_factory: Callable[[Credentials], Any] = make_connection,
        stability_check: Callable[..., None] = check_stability,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.sts_client = sts_client
        self.connection_factory = connection_factory
        self.stability_check = stability_check
        self.sleep = sleep

    def run(self, params: InvocationParameters) -> Outcome:
        """Assume the role, connect to ECS and poll until stable or exhausted.

        Raises:
            CredentialError: If the role cannot be assumed
        """
        credentials = assume_role(
            self.sts_client,
            params.role_arn,
            params.region,
            session_name=params.role_session_name,
        )
        ecs_client = self.connection_factory(credentials)

        def check() -> None:
            self.stability_check(
                ecs_client, params.cluster, params.services, params.waiter_config
            )

        attempts = retry(
            params.retries,
            check,
            on_attempt=self._trace_attempt if params.verbose else None,
            on_failure=self._trace_failure if params.verbose else None,
            delay=params.retry_delay,
            sleep=self.sleep,
        )

        outcome = outcome_from_attempts(attempts, params.retries)
        if params.verbose:
            if outcome.succeeded:
                logger.info("%s", outcome.message)
            else:
                logger.error("%s", outcome.message)
        return outcome

    @staticmethod
    def _trace_attempt(attempt: int) -> None:
        logger.info("Waiting for service stability, try #%d", attempt)

    @staticmethod
    def _trace_failure(attempt: int, failure: StabilityCheckFailure) -> None:
        logger.warning(
            "Try #%d failed! Error information: %s",
            attempt,
            json.dumps(failure.cause.to_dict()),
        )
