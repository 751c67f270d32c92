"""Tests for reporter module."""

import os
from io import StringIO
from unittest.mock import patch

from ecs_stability_gate.model import ProviderError, Stable, Unstable
from ecs_stability_gate.reporter import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    ActionsReporter,
    escape_data,
)


def test_report_stable_writes_retries_output_to_github_output_file(tmp_path):
    output_file = tmp_path / "github_output"
    output_file.write_text("previous=1\n")
    stream = StringIO()
    reporter = ActionsReporter(output_path=str(output_file), stream=stream)

    exit_code = reporter.report(Stable(attempts=3))

    assert exit_code == EXIT_SUCCESS
    assert output_file.read_text() == "previous=1\nretries=3\n"
    assert stream.getvalue() == ""


def test_report_stable_without_output_file_uses_set_output_command():
    stream = StringIO()
    reporter = ActionsReporter(stream=stream)

    exit_code = reporter.report(Stable(attempts=1))

    assert exit_code == EXIT_SUCCESS
    assert stream.getvalue() == f"::set-output name=retries::1{os.linesep}"


def test_report_unstable_sets_failed():
    stream = StringIO()
    reporter = ActionsReporter(stream=stream)

    exit_code = reporter.report(Unstable(attempts=3, max_attempts=2))

    assert exit_code == EXIT_FAILURE
    assert stream.getvalue() == (
        f"::error::Service is not stable after 2 retries!{os.linesep}"
    )


def test_report_provider_error_sets_failed_with_escaped_message(tmp_path):
    output_file = tmp_path / "github_output"
    stream = StringIO()
    reporter = ActionsReporter(output_path=str(output_file), stream=stream)

    exit_code = reporter.report(ProviderError("100% broken\nsee logs"))

    assert exit_code == EXIT_FAILURE
    assert stream.getvalue() == f"::error::100%25 broken%0Asee logs{os.linesep}"
    assert not output_file.exists()


def test_set_output_multiline_value_uses_delimiter(tmp_path):
    output_file = tmp_path / "github_output"
    reporter = ActionsReporter(output_path=str(output_file))

    reporter.set_output("notes", "line one\nline two")

    lines = output_file.read_text().splitlines()
    assert lines[0].startswith("notes<<ghadelimiter_")
    assert lines[1:3] == ["line one", "line two"]
    assert lines[3] == lines[0].split("<<", 1)[1]


def test_from_environment_reads_github_output():
    with patch.dict(os.environ, {"GITHUB_OUTPUT": "/tmp/out"}, clear=True):  # noqa: S108
        reporter = ActionsReporter.from_environment()

    assert reporter.output_path == "/tmp/out"  # noqa: S108


def test_from_environment_without_github_output():
    with patch.dict(os.environ, {}, clear=True):
        reporter = ActionsReporter.from_environment()

    assert reporter.output_path is None


def test_escape_data():
    assert escape_data("a%b\r\nc") == "a%25b%0D%0Ac"


def test_report_stable_fails_when_output_file_cannot_be_written(tmp_path):
    output_file = tmp_path / "missing-dir" / "github_output"
    stream = StringIO()
    reporter = ActionsReporter(output_path=str(output_file), stream=stream)

    exit_code = reporter.report(Stable(attempts=2))

    assert exit_code == EXIT_FAILURE
    assert stream.getvalue().startswith("::error::Failed to write output 'retries':")
    assert not output_file.exists()
