from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3  # type: ignore


if TYPE_CHECKING:
    from ecs_stability_gate.model import Credentials


def make_connection(credentials: Credentials) -> Any:
    """Create an ECS client from temporary credentials.

    Client construction makes no network call, so bad credentials only show up
    once the client is used.
    """
    return boto3.client(
        "ecs",
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=credentials.region,
    )
