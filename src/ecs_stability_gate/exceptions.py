"""Exceptions for the ECS stability gate.

Keep this module free of third-party imports, everything else depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class EcsStabilityGateError(Exception):
    """Base class for stability gate exceptions"""


# region Fatal
class ConfigurationError(EcsStabilityGateError):
    pass


class CredentialError(EcsStabilityGateError):
    pass


class ExhaustionError(EcsStabilityGateError):
    """All permitted stability attempts were consumed without success."""

    def __init__(self, attempts: int, max_attempts: int) -> None:
        self.attempts = attempts
        self.max_attempts = max_attempts
        super().__init__(f"Service is not stable after {max_attempts} retries!")


# endregion Fatal


# region Recoverable
@dataclass(frozen=True)
class FailureCause:
    """Provider-neutral description of why a stability attempt failed."""

    code: str
    message: str
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"Code": self.code, "Message": self.message}
        if self.reason is not None:
            result["Reason"] = self.reason
        return result


class StabilityCheckFailure(EcsStabilityGateError):
    """A single stability attempt failed. Absorbed by the retry controller."""

    def __init__(self, cause: FailureCause) -> None:
        self.cause = cause
        super().__init__(cause.message)

    @classmethod
    def from_exception(cls, exception: Exception) -> StabilityCheckFailure:
        if isinstance(exception, StabilityCheckFailure):
            return exception
        return cls(
            FailureCause(code=type(exception).__name__, message=str(exception))
        )


# endregion Recoverable
