"""Report a run's outcome through GitHub Actions workflow commands."""

from __future__ import annotations

import logging
import os
import sys
import uuid
from typing import TYPE_CHECKING, TextIO

from ecs_stability_gate.model import Stable


if TYPE_CHECKING:
    from ecs_stability_gate.model import Outcome

logger = logging.getLogger(__name__)

OUTPUT_NAME = "retries"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def escape_data(value: str) -> str:
    """Escape a workflow command message the way the Actions toolkit does."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsReporter:
    """Writes outputs and failures for the GitHub Actions runner.

    Outputs go to the file named by GITHUB_OUTPUT when the runner provides
    one, otherwise to stdout as the legacy set-output command.
    """

    def __init__(
        self, output_path: str | None = None, stream: TextIO | None = None
    ) -> None:
        self.output_path = output_path
        self.stream = stream

    @classmethod
    def from_environment(cls) -> ActionsReporter:
        return cls(output_path=os.environ.get("GITHUB_OUTPUT") or None)

    def _write(self, line: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(line + os.linesep)
        stream.flush()

    def set_output(self, name: str, value: str) -> None:
        if self.output_path:
            with open(self.output_path, "a", encoding="utf-8") as f:
                if "\n" in value or "\r" in value:
                    delimiter = f"ghadelimiter_{uuid.uuid4()}"
                    f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
                else:
                    f.write(f"{name}={value}\n")
            return
        self._write(f"::set-output name={escape_property(name)}::{escape_data(value)}")

    def set_failed(self, message: str) -> None:
        self._write(f"::error::{escape_data(message)}")

    def report(self, outcome: Outcome) -> int:
        """Publish outcome and return the process exit code for it."""
        if isinstance(outcome, Stable):
            try:
                self.set_output(OUTPUT_NAME, str(outcome.attempts))
            except OSError as e:
                logger.error("Could not write output %s: %s", OUTPUT_NAME, e)  # noqa: TRY400
                self.set_failed(f"Failed to write output '{OUTPUT_NAME}': {e}")
                return EXIT_FAILURE
            return EXIT_SUCCESS
        logger.debug("Reporting failure: %s", outcome.message)
        self.set_failed(outcome.message)
        return EXIT_FAILURE
