"""Command line entry point for the ECS stability gate."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, replace
from typing import Any

from ecs_stability_gate.credentials import create_sts_client
from ecs_stability_gate.exceptions import EcsStabilityGateError
from ecs_stability_gate.gate import StabilityGate
from ecs_stability_gate.model import InvocationParameters, ProviderError
from ecs_stability_gate.reporter import EXIT_FAILURE, ActionsReporter

logger = logging.getLogger(__name__)

EXIT_CANCELLED = 130
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_input(name: str) -> str | None:
    """Read an action input the way the Actions runner exposes it."""
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    return value or None


def log_level_from_environment() -> int:
    value = os.environ.get("ECS_GATE_LOG_LEVEL", "").strip()
    if not value:
        return logging.INFO
    try:
        return int(value)
    except ValueError:
        logger.warning(
            "Ignoring ECS_GATE_LOG_LEVEL=%r, expected a numeric logging level", value
        )
        return logging.INFO


@dataclass(frozen=True)
class CliConfig:
    """Raw inputs for one run. Values stay strings until validated."""

    aws_region: str | None = None
    retries: str | None = None
    ecs_cluster: str | None = None
    ecs_services: str | None = None
    verbose: str | None = None
    role_to_assume: str | None = None
    retry_delay: str | None = None
    waiter_delay: str | None = None
    waiter_max_attempts: str | None = None
    log_level: int = logging.INFO

    @classmethod
    def from_environment(cls) -> CliConfig:
        """Create configuration from action inputs and environment variables."""
        return cls(
            aws_region=get_input("aws-region") or os.environ.get("AWS_REGION"),
            retries=get_input("retries"),
            ecs_cluster=get_input("ecs-cluster"),
            ecs_services=get_input("ecs-services"),
            verbose=get_input("verbose"),
            role_to_assume=get_input("role-to-assume"),
            retry_delay=get_input("retry-delay"),
            waiter_delay=get_input("waiter-delay"),
            waiter_max_attempts=get_input("waiter-max-attempts"),
            log_level=log_level_from_environment(),
        )


class CliApp:
    """Parses arguments, runs the stability gate once and reports the outcome."""

    def __init__(self) -> None:
        self.config = CliConfig.from_environment()

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI and return the process exit code."""
        try:
            parser = self._create_parsers()
            try:
                parsed_args = parser.parse_args(args)
            except SystemExit as e:
                return e.code if isinstance(e.code, int) else EXIT_FAILURE

            config = self._merge_config(parsed_args)
            logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
            return self.gate_command(config)
        except KeyboardInterrupt:
            print("Operation cancelled by user", file=sys.stderr)  # noqa: T201
            return EXIT_CANCELLED

    def _create_parsers(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="ecs-stability-gate",
            description=(
                "Wait for ECS services to become stable, retrying a bounded "
                "number of times. Options default to the action's INPUT_* "
                "environment variables."
            ),
        )
        parser.add_argument("--aws-region", help="AWS region (default: AWS_REGION)")
        parser.add_argument(
            "--retries", help="Maximum number of stability attempts"
        )
        parser.add_argument("--ecs-cluster", help="ECS cluster name or ARN")
        parser.add_argument(
            "--ecs-services", help='JSON array of service names, e.g. \'["web"]\''
        )
        parser.add_argument(
            "--role-to-assume", help="ARN of the IAM role to assume"
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            default=None,
            help="Log every attempt and its failure",
        )
        parser.add_argument(
            "--retry-delay", help="Seconds to sleep between failed attempts"
        )
        parser.add_argument(
            "--waiter-delay", help="Seconds between waiter polls"
        )
        parser.add_argument(
            "--waiter-max-attempts", help="Number of waiter polls per attempt"
        )
        parser.add_argument(
            "--log-level", type=int, help="Numeric logging level (default: 20)"
        )
        return parser

    def _merge_config(self, parsed_args: argparse.Namespace) -> CliConfig:
        overrides: dict[str, Any] = {
            key: value
            for key, value in vars(parsed_args).items()
            if value is not None and key != "verbose"
        }
        if parsed_args.verbose:
            overrides["verbose"] = "true"
        return replace(self.config, **overrides)

    def gate_command(self, config: CliConfig) -> int:
        reporter = ActionsReporter.from_environment()
        try:
            params = InvocationParameters.from_config(config)
            logger.info(
                "Waiting for %d service(s) in cluster %s (%d attempt(s) allowed)",
                len(params.services),
                params.cluster,
                params.retries,
            )
            gate = StabilityGate(self._create_boto3_client(params.region))
            outcome = gate.run(params)
        except EcsStabilityGateError as e:
            logger.error("%s", e)  # noqa: TRY400
            outcome = ProviderError(str(e))
        except Exception as e:
            logger.exception("Unexpected error")
            outcome = ProviderError(str(e))
        return reporter.report(outcome)

    def _create_boto3_client(self, region: str) -> Any:
        """Create the STS client shared by the whole run."""
        return create_sts_client(region)


def main() -> None:
    """Main entry point for the ecs-stability-gate CLI."""
    app = CliApp()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
