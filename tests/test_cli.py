"""Tests for the pmr CLI: global options, models and calculate."""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import pytest
import yaml
from click.testing import CliRunner

from pricing_model_registry.cli.app import app
from pricing_model_registry.errors import NetworkError
from pricing_model_registry.recorder import RecordedEvent


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def run(cli_runner: CliRunner, catalog_path: Path) -> Callable[..., Any]:
    """Invoke pmr against the sample catalog."""

    def _run(args: List[str], obj: Optional[Dict[str, Any]] = None) -> Any:
        return cli_runner.invoke(app, ["--catalog", str(catalog_path), *args], obj=obj)

    return _run


class TestGlobalOptions:
    """Options handled by the top-level group."""

    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "calculate" in result.output
        assert "models" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "PMR CLI version:" in result.output

    def test_help_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help-json"])

        assert result.exit_code == 0
        help_data = json.loads(result.output)
        assert help_data["command"] == "pmr"
        assert set(help_data["commands"]) == {"models", "calculate", "usage", "data"}
        assert help_data["exit_codes"]["5"] == "Usage exceeds the model's tiers"
        assert "init" in help_data["commands"]["data"]["subcommands"]

    def test_invalid_format(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "csv", "models", "list"])

        assert result.exit_code == 2

    def test_missing_catalog(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["--catalog", str(tmp_path / "missing.yaml"), "models", "list"])

        assert result.exit_code == 4
        assert "Error: Pricing catalog not found" in result.output

    def test_corrupt_catalog(self, cli_runner: CliRunner, write_catalog: Callable[..., Path]) -> None:
        path = write_catalog("models: [unclosed\n", name="broken.yaml")

        result = cli_runner.invoke(app, ["--catalog", str(path), "calculate", "tiered", "10"])

        assert result.exit_code == 4


class TestModelsCommands:
    """pmr models list / get."""

    def test_list_json(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "models", "list"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["count"] == 3
        assert [m["id"] for m in data["models"]] == ["hybrid", "per-unit", "tiered"]
        assert data["models"][0]["base_price"] == "49.99"

    def test_list_filter(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "models", "list", "--filter", "TIER"])

        assert result.exit_code == 0
        assert [m["id"] for m in json.loads(result.output)["models"]] == ["tiered"]

    def test_list_table(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "table", "--no-color", "models", "list"])

        assert result.exit_code == 0
        assert "Pricing Models" in result.output
        assert "per-unit" in result.output

    def test_get_json(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "models", "get", "tiered"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["id"] == "tiered"
        assert [t["end_quantity"] for t in data["tiers"]] == [1000, 10000, None]

    def test_get_yaml_to_file(self, run: Callable[..., Any], tmp_path: Path) -> None:
        output = tmp_path / "hybrid.yaml"

        result = run(["--format", "yaml", "models", "get", "hybrid", "-o", str(output)])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text())
        assert data["id"] == "hybrid"
        assert data["tiers"][1]["name"] == "Overage"

    def test_get_table(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "table", "--no-color", "models", "get", "hybrid"])

        assert result.exit_code == 0
        assert "Included" in result.output
        assert "Overage" in result.output

    def test_get_unknown_model(self, run: Callable[..., Any]) -> None:
        result = run(["models", "get", "enterprise"])

        assert result.exit_code == 3
        assert "Error: Pricing model 'enterprise' not found" in result.output


class TestCalculateCommand:
    """pmr calculate MODEL_ID QUANTITY."""

    def test_tiered_json(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "calculate", "tiered", "2500"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert Decimal(data["total_cost"]) == Decimal("35.00")
        assert [(c["tier_id"], c["units_allocated"]) for c in data["charges"]] == [(1, 1000), (2, 1500)]

    def test_json_amounts_in_cents(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "calculate", "hybrid", "6000"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_cost"] == "57.99"
        assert [c["tier_cost"] for c in data["charges"]] == ["0.00", "8.00"]

    def test_hybrid_yaml(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "yaml", "calculate", "hybrid", "6000"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert Decimal(data["total_cost"]) == Decimal("57.99")
        assert Decimal(data["base_fee"]) == Decimal("49.99")

    def test_table(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "table", "--no-color", "calculate", "per-unit", "2500"])

        assert result.exit_code == 0
        assert "Total" in result.output
        assert "$25.00" in result.output

    def test_negative_quantity(self, run: Callable[..., Any]) -> None:
        result = run(["calculate", "tiered", "-5"])

        assert result.exit_code == 2
        assert "non-negative" in result.output

    def test_negative_quantity_after_options(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "calculate", "per-unit", "-1", "--record"])

        assert result.exit_code == 2
        assert "non-negative" in result.output

    def test_non_integer_quantity(self, run: Callable[..., Any]) -> None:
        result = run(["calculate", "tiered", "lots"])

        assert result.exit_code == 2

    def test_unknown_model(self, run: Callable[..., Any]) -> None:
        result = run(["calculate", "enterprise", "10"])

        assert result.exit_code == 3

    def test_unallocatable_usage(self, cli_runner: CliRunner, write_catalog: Callable[..., Path]) -> None:
        path = write_catalog(
            {
                "version": "1.0.0",
                "models": {
                    "tiered": {
                        "tiers": [
                            {"start_quantity": 0, "end_quantity": 100, "price_per_unit": 1},
                            {"start_quantity": 101, "end_quantity": 200, "price_per_unit": 2},
                        ]
                    }
                },
            },
            name="capped.yaml",
        )

        result = cli_runner.invoke(app, ["--catalog", str(path), "calculate", "tiered", "250"])

        assert result.exit_code == 5
        assert "cannot be allocated" in result.output


class TestCalculateRecord:
    """pmr calculate --record."""

    def test_records_billing_simulation(self, run: Callable[..., Any]) -> None:
        recorder = Mock()
        recorder.record_event.return_value = RecordedEvent("evt_1", "2024-05-01T00:00:00Z")

        result = run(["--format", "json", "calculate", "tiered", "2500", "--record"], obj={"recorder": recorder})

        assert result.exit_code == 0
        recorder.record_event.assert_called_once_with(
            "billing_simulation",
            2500,
            {"pricing_model": "tiered", "calculated_cost": "35.00"},
        )

    def test_custom_event_type(self, run: Callable[..., Any]) -> None:
        recorder = Mock()
        recorder.record_event.return_value = RecordedEvent("evt_1", "t")

        result = run(
            ["--format", "json", "calculate", "per-unit", "10", "--record", "--event-type", "quote"],
            obj={"recorder": recorder},
        )

        assert result.exit_code == 0
        assert recorder.record_event.call_args.args[0] == "quote"

    def test_recording_failure_only_warns(self, run: Callable[..., Any]) -> None:
        recorder = Mock()
        recorder.record_event.side_effect = NetworkError("Usage service returned HTTP 503", status_code=503)

        result = run(["--format", "json", "calculate", "tiered", "2500", "--record"], obj={"recorder": recorder})

        assert result.exit_code == 0
        assert "Warning: usage event was not recorded" in result.output
        assert '"total_cost": "35.00"' in result.output

    def test_recording_without_api_key_only_warns(self, run: Callable[..., Any]) -> None:
        result = run(["--format", "json", "calculate", "tiered", "10", "--record"])

        assert result.exit_code == 0
        assert "PMR_USAGE_API_KEY" in result.output

    def test_no_recording_without_flag(self, run: Callable[..., Any]) -> None:
        recorder = Mock()

        result = run(["--format", "json", "calculate", "tiered", "10"], obj={"recorder": recorder})

        assert result.exit_code == 0
        recorder.record_event.assert_not_called()
