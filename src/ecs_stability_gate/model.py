"""Model classes for a single stability gate run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ecs_stability_gate.exceptions import ConfigurationError, ExhaustionError


if TYPE_CHECKING:
    from ecs_stability_gate.cli import CliConfig


DEFAULT_ROLE_SESSION_NAME = "ecs-wait-action"
MISSING_CREDENTIALS_MESSAGE = (
    "AWS credentials were not found in inputs or environment variables."
)


def _parse_positive_int(name: str, value: str | None) -> int:
    if value is None or not value.strip():
        msg: str = f"Input required and not supplied: {name}"
        raise ConfigurationError(msg)
    try:
        parsed = int(value, 10)
    except ValueError as e:
        msg = f"Input '{name}' must be a decimal integer, got: {value!r}"
        raise ConfigurationError(msg) from e
    if parsed < 1:
        msg = f"Input '{name}' must be a positive integer, got: {parsed}"
        raise ConfigurationError(msg)
    return parsed


def _parse_optional_positive_int(name: str, value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return _parse_positive_int(name, value)


def _parse_delay(value: str | None) -> float:
    if value is None or not value.strip():
        return 0.0
    try:
        delay = float(value)
    except ValueError as e:
        msg: str = f"Input 'retry-delay' must be a number of seconds, got: {value!r}"
        raise ConfigurationError(msg) from e
    if delay < 0:
        msg = f"Input 'retry-delay' must not be negative, got: {delay}"
        raise ConfigurationError(msg)
    return delay


def parse_services(value: str | None) -> tuple[str, ...]:
    """Parse the ecs-services input, a JSON array of service names."""
    if value is None or not value.strip():
        msg: str = "Input required and not supplied: ecs-services"
        raise ConfigurationError(msg)
    try:
        services = json.loads(value)
    except json.JSONDecodeError as e:
        msg = f"Input 'ecs-services' is not valid JSON: {e}"
        raise ConfigurationError(msg) from e
    if not isinstance(services, list) or not all(
        isinstance(service, str) for service in services
    ):
        msg = "Input 'ecs-services' must be a JSON array of strings"
        raise ConfigurationError(msg)
    if not services:
        msg = "Input 'ecs-services' must name at least one service"
        raise ConfigurationError(msg)
    return tuple(services)


@dataclass(frozen=True)
class InvocationParameters:
    """Everything one run needs, validated once at startup."""

    region: str
    cluster: str
    services: tuple[str, ...]
    retries: int
    role_arn: str
    verbose: bool = False
    retry_delay: float = 0.0
    waiter_delay: int | None = None
    waiter_max_attempts: int | None = None
    role_session_name: str = DEFAULT_ROLE_SESSION_NAME

    @classmethod
    def from_config(cls, config: CliConfig) -> InvocationParameters:
        # Credentials are checked first so nothing else is parsed without them.
        if not config.role_to_assume or not config.aws_region:
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)

        if not config.ecs_cluster:
            msg: str = "Input required and not supplied: ecs-cluster"
            raise ConfigurationError(msg)

        return cls(
            region=config.aws_region,
            cluster=config.ecs_cluster,
            services=parse_services(config.ecs_services),
            retries=_parse_positive_int("retries", config.retries),
            role_arn=config.role_to_assume,
            verbose=config.verbose == "true",
            retry_delay=_parse_delay(config.retry_delay),
            waiter_delay=_parse_optional_positive_int(
                "waiter-delay", config.waiter_delay
            ),
            waiter_max_attempts=_parse_optional_positive_int(
                "waiter-max-attempts", config.waiter_max_attempts
            ),
        )

    @property
    def waiter_config(self) -> dict[str, int] | None:
        waiter_config: dict[str, int] = {}
        if self.waiter_delay is not None:
            waiter_config["Delay"] = self.waiter_delay
        if self.waiter_max_attempts is not None:
            waiter_config["MaxAttempts"] = self.waiter_max_attempts
        return waiter_config or None


@dataclass(frozen=True)
class Credentials:
    """Temporary credentials from a role assumption. Held in memory only."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    region: str

    @classmethod
    def from_assume_role_response(
        cls, response: dict[str, Any], region: str
    ) -> Credentials:
        credentials = response["Credentials"]
        return cls(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials["SessionToken"],
            region=region,
        )


# region Outcome
@dataclass(frozen=True)
class Stable:
    attempts: int

    @property
    def succeeded(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return f"Service is stable after {self.attempts} retries!"


@dataclass(frozen=True)
class Unstable:
    attempts: int
    max_attempts: int

    @property
    def succeeded(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(ExhaustionError(self.attempts, self.max_attempts))


@dataclass(frozen=True)
class ProviderError:
    message: str

    @property
    def succeeded(self) -> bool:
        return False


Outcome = Stable | Unstable | ProviderError


def outcome_from_attempts(attempts: int, max_attempts: int) -> Outcome:
    """Map the retry controller's count to an outcome.

    The controller returns max_attempts + 1 when every attempt failed, so any
    count above max_attempts means the services never became stable.
    """
    if attempts > max_attempts:
        return Unstable(attempts=attempts, max_attempts=max_attempts)
    return Stable(attempts=attempts)


# endregion Outcome
