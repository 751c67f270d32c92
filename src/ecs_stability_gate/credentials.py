from __future__ import annotations

import logging
from typing import Any

import boto3  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from ecs_stability_gate.exceptions import CredentialError
from ecs_stability_gate.model import DEFAULT_ROLE_SESSION_NAME, Credentials

logger = logging.getLogger(__name__)


def create_sts_client(region: str) -> Any:
    """Create the STS client used for the run's single role assumption."""
    return boto3.client("sts", region_name=region)


def assume_role(
    sts_client: Any,
    role_arn: str,
    region: str,
    session_name: str = DEFAULT_ROLE_SESSION_NAME,
) -> Credentials:
    """Assume role_arn and return its temporary credentials.

    Args:
        sts_client: boto3 STS client
        role_arn: ARN of the role to assume
        region: Region the returned credentials are used in
        session_name: RoleSessionName reported to CloudTrail

    Returns:
        Credentials: Temporary credentials for region

    Raises:
        CredentialError: If the AssumeRole call fails or returns no credentials
    """
    logger.info("Assuming role %s", role_arn)
    try:
        response = sts_client.assume_role(
            RoleArn=role_arn, RoleSessionName=session_name
        )
    except (ClientError, BotoCoreError) as e:
        msg: str = f"Failed to assume role {role_arn}: {e}"
        raise CredentialError(msg) from e

    try:
        return Credentials.from_assume_role_response(response, region)
    except KeyError as e:
        msg = f"AssumeRole response for {role_arn} is missing {e}"
        raise CredentialError(msg) from e
