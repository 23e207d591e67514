"""Tests for CLI usage-service commands."""

import json
from unittest.mock import Mock

import pytest
from click.testing import CliRunner

from pricing_model_registry.cli.app import app
from pricing_model_registry.errors import NetworkError
from pricing_model_registry.recorder import RecordedEvent


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def recorder() -> Mock:
    """A stand-in for UsageEventRecorder."""
    return Mock()


class TestUsageTrack:
    """pmr usage track."""

    def test_track(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.record_event.return_value = RecordedEvent("evt_1", "2024-05-01T00:00:00Z", {"total": 1})

        result = cli_runner.invoke(
            app,
            ["--format", "json", "usage", "track", "api_call", "--quantity", "3", "--metadata", '{"plan": "pro"}'],
            obj={"recorder": recorder},
        )

        assert result.exit_code == 0
        recorder.record_event.assert_called_once_with("api_call", 3.0, {"plan": "pro"})
        assert json.loads(result.output)["event_id"] == "evt_1"

    def test_track_table(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.record_event.return_value = RecordedEvent("evt_7", "2024-05-01T00:00:00Z")

        result = cli_runner.invoke(
            app, ["--format", "table", "--no-color", "usage", "track", "api_call"], obj={"recorder": recorder}
        )

        assert result.exit_code == 0
        assert "Recorded event evt_7" in result.output

    @pytest.mark.parametrize("metadata", ["{not json", "[1, 2]"])
    def test_track_bad_metadata(self, cli_runner: CliRunner, recorder: Mock, metadata: str) -> None:
        result = cli_runner.invoke(
            app, ["usage", "track", "api_call", "--metadata", metadata], obj={"recorder": recorder}
        )

        assert result.exit_code == 2
        recorder.record_event.assert_not_called()

    def test_track_service_error(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.record_event.side_effect = NetworkError("Invalid API key", status_code=401)

        result = cli_runner.invoke(app, ["usage", "track", "api_call"], obj={"recorder": recorder})

        assert result.exit_code == 6
        assert "Error: Invalid API key" in result.output

    def test_track_without_api_key(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["usage", "track", "api_call"])

        assert result.exit_code == 6
        assert "PMR_USAGE_API_KEY" in result.output


class TestUsageReads:
    """pmr usage stats / events."""

    def test_stats_json(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.get_usage_stats.return_value = {"total_events": 4, "total_quantity": 120}

        result = cli_runner.invoke(app, ["--format", "json", "usage", "stats"], obj={"recorder": recorder})

        assert result.exit_code == 0
        assert json.loads(result.output) == {"total_events": 4, "total_quantity": 120}

    def test_stats_table(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.get_usage_stats.return_value = {"total_events": 4}

        result = cli_runner.invoke(
            app, ["--format", "table", "--no-color", "usage", "stats"], obj={"recorder": recorder}
        )

        assert result.exit_code == 0
        assert "total_events" in result.output

    def test_events_filters(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.get_usage_events.return_value = {"events": [{"event_id": "e1", "event_type": "api_call"}]}

        result = cli_runner.invoke(
            app,
            [
                "--format",
                "json",
                "usage",
                "events",
                "--event-type",
                "api_call",
                "--start-date",
                "2024-01-01",
                "--limit",
                "5",
            ],
            obj={"recorder": recorder},
        )

        assert result.exit_code == 0
        recorder.get_usage_events.assert_called_once_with(
            event_type="api_call", start_date="2024-01-01", end_date=None, limit=5
        )
        assert json.loads(result.output)["events"][0]["event_id"] == "e1"

    def test_events_table(self, cli_runner: CliRunner, recorder: Mock) -> None:
        recorder.get_usage_events.return_value = [
            {"eventId": "e9", "eventType": "billing_simulation", "quantity": 2500, "timestamp": "t"}
        ]

        result = cli_runner.invoke(
            app, ["--format", "table", "--no-color", "usage", "events"], obj={"recorder": recorder}
        )

        assert result.exit_code == 0
        assert "e9" in result.output
        assert "billing_simulation" in result.output

    def test_events_rejects_zero_limit(self, cli_runner: CliRunner, recorder: Mock) -> None:
        result = cli_runner.invoke(app, ["usage", "events", "--limit", "0"], obj={"recorder": recorder})

        assert result.exit_code == 2
        recorder.get_usage_events.assert_not_called()
