"""Tests for connection module."""

from unittest.mock import Mock, patch

from ecs_stability_gate.connection import make_connection
from ecs_stability_gate.model import Credentials


def test_make_connection_creates_ecs_client_from_credentials():
    credentials = Credentials(
        access_key_id="AKIAEXAMPLE",
        secret_access_key="secret",  # noqa: S106
        session_token="token",  # noqa: S106
        region="ap-southeast-2",
    )

    with patch("ecs_stability_gate.connection.boto3") as mock_boto3:
        mock_client = Mock()
        mock_boto3.client.return_value = mock_client

        client = make_connection(credentials)

        assert client is mock_client
        mock_boto3.client.assert_called_once_with(
            "ecs",
            aws_access_key_id="AKIAEXAMPLE",
            aws_secret_access_key="secret",  # noqa: S106
            aws_session_token="token",  # noqa: S106
            region_name="ap-southeast-2",
        )
        mock_client.assert_not_called()
