"""
Unit tests for the command-line entry point (booker_suite/main.py)

Most tests patch the HTTP client, authenticator and runner to cover argument
handling, exit codes, the health check and the report file. The verbose-run
test keeps them real and mocks only the requests.Session.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from booker_suite import main as cli
from booker_suite.api.booker_client import BookerAPIError
from booker_suite.runner.lifecycle import LifecycleReport, StepResult, StepStatus
from tests.http_factory import full_run_responses, mock_response, mock_session


def _report(*statuses):
    return LifecycleReport(
        base_url="https://restful-booker.test",
        started_at="2024-01-01T00:00:00Z",
        finished_at="2024-01-01T00:00:02Z",
        authenticated=True,
        booking_id=1234,
        results=[
            StepResult(order=i, name=f"step_{i}", status=status, status_code=200)
            for i, status in enumerate(statuses, start=1)
        ],
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("BOOKER_BASE_URL", "BOOKER_NONEXISTENT_BOOKING_ID", "BOOKER_CONFIG_FILE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "absent.yaml")


@pytest.fixture
def patched():
    """Patch collaborators; yields (client_cls, client, runner_cls)."""
    with patch("booker_suite.main.RestfulBookerClient") as client_cls, patch(
        "booker_suite.main.BookerAuthenticator"
    ), patch("booker_suite.main.BookingLifecycleRunner") as runner_cls:
        client = MagicMock()
        client_cls.return_value.__enter__.return_value = client
        runner_cls.return_value.run.return_value = _report(StepStatus.PASSED, StepStatus.SKIPPED)
        yield client_cls, client, runner_cls


def test_successful_run_returns_zero(patched, config_path, capsys):
    client_cls, _, runner_cls = patched

    exit_code = cli.main(["--config", config_path, "--base-url", "https://restful-booker.test/"])

    assert exit_code == 0
    settings = client_cls.call_args.kwargs["settings"]
    assert settings.base_url == "https://restful-booker.test"
    runner_cls.return_value.run.assert_called_once()
    out = capsys.readouterr().out
    assert "Passed: 1  Failed: 0  Skipped: 1  Total: 2" in out


def test_failed_step_returns_one(patched, config_path, capsys):
    _, _, runner_cls = patched
    runner_cls.return_value.run.return_value = _report(StepStatus.PASSED, StepStatus.FAILED)

    assert cli.main(["--config", config_path]) == 1
    assert "Failed: 1" in capsys.readouterr().out


def test_report_file_is_written(patched, config_path, tmp_path):
    report_path = tmp_path / "reports" / "run.json"

    cli.main(["--config", config_path, "--report", str(report_path)])

    data = json.loads(report_path.read_text(encoding="utf-8"))
    assert data["booking_id"] == 1234
    assert data["summary"]["passed"] == 1
    assert data["steps"][1]["status"] == "skipped"


def test_invalid_configuration_returns_two(patched, tmp_path):
    client_cls, _, _ = patched
    bad_config = tmp_path / "booker.yaml"
    bad_config.write_text("- not\n- a mapping\n", encoding="utf-8")

    assert cli.main(["--config", str(bad_config)]) == 2
    client_cls.assert_not_called()


def test_ping_failure_aborts_run(patched, config_path):
    _, client, runner_cls = patched
    client.ping.return_value = mock_response(503, text="Service Unavailable")

    assert cli.main(["--config", config_path, "--ping"]) == 2
    runner_cls.assert_not_called()


def test_ping_success_runs_lifecycle(patched, config_path):
    _, client, runner_cls = patched
    client.ping.return_value = mock_response(201, text="Created")

    assert cli.main(["--config", config_path, "--ping"]) == 0
    runner_cls.return_value.run.assert_called_once()


def test_check_service_handles_transport_error():
    client = MagicMock()
    client.ping.side_effect = BookerAPIError("GET", "https://restful-booker.test/ping", "timed out")

    assert cli.check_service(client) is False


def test_print_summary_shows_failure_messages(capsys):
    report = _report(StepStatus.PASSED)
    report.results.append(
        StepResult(
            order=2,
            name="get_existing_booking",
            status=StepStatus.FAILED,
            message="field mismatch - firstname: expected 'John', got 'Jane'",
            status_code=200,
        )
    )

    cli.print_summary(report)

    out = capsys.readouterr().out
    assert "✗  2. get_existing_booking [200]" in out
    assert "expected 'John', got 'Jane'" in out


def test_verbose_run_never_prints_the_session_token(config_path, capfd):
    token = "supersecrettoken42"
    session = mock_session(*full_run_responses(token))

    with patch("booker_suite.api.booker_client.requests.Session", return_value=session):
        exit_code = cli.main(
            ["-v", "--config", config_path, "--base-url", "https://restful-booker.test"]
        )

    out, err = capfd.readouterr()
    assert exit_code == 0
    assert session.request.call_count == 12
    assert "POST https://restful-booker.test/auth -> 200" in err
    assert '"token_masked": "supe' in err
    assert token not in err
    assert token not in out
    assert "password123" not in err
