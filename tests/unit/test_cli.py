"""Unit tests for the command-line interface."""

import textwrap
from pathlib import Path
from unittest.mock import MagicMock, patch

import click
import pytest
from click.testing import CliRunner

from pipeline_exporter.cli import main, parse_listen_address
from pipeline_exporter.gitlab import AuthenticationError, ProjectIdentity

CONFIG = textwrap.dedent(
    """
    gitlab:
      url: https://gitlab.example.com
      token: t
    polling_interval_seconds: 10
    projects:
      - name: group/app
        refs: [main]
    wildcards:
      - search: "svc-"
        owner: {name: platform, kind: group}
        refs: [main, develop]
    """
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(CONFIG)
    return path


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.list_group_projects.return_value = [
        ProjectIdentity(id=1, path_with_namespace="platform/svc-a"),
        ProjectIdentity(id=2, path_with_namespace="platform/svc-b"),
    ]
    return client


@pytest.mark.unit
class TestParseListenAddress:
    """Tests for parse_listen_address."""

    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            (":8080", ("0.0.0.0", 8080)),
            ("127.0.0.1:9000", ("127.0.0.1", 9000)),
            ("[::1]:8080", ("::1", 8080)),
        ],
    )
    def test_valid(self, address: str, expected: tuple[str, int]) -> None:
        assert parse_listen_address(address) == expected

    @pytest.mark.parametrize("address", ["8080", "host:", "host:http"])
    def test_invalid(self, address: str) -> None:
        with pytest.raises(click.BadParameter):
            parse_listen_address(address)


@pytest.mark.unit
class TestValidateCommand:
    """Tests for `validate`."""

    def test_lists_resolved_projects(self, config_file: Path, mock_client: MagicMock) -> None:
        with patch("pipeline_exporter.cli.GitlabClient", return_value=mock_client):
            result = CliRunner().invoke(main, ["validate", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "group/app: main" in result.output
        assert "platform/svc-a: main, develop" in result.output
        assert "3 project(s), 5 ref(s)" in result.output
        mock_client.close.assert_called_once()

    def test_missing_config(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["validate", "--config", str(tmp_path / "none.yml")])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_no_targets(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("gitlab:\n  url: https://g\n")

        result = CliRunner().invoke(main, ["validate", "--config", str(path)])

        assert result.exit_code == 1
        assert "at least one project/wildcard" in result.output

    def test_resolver_failure(self, config_file: Path, mock_client: MagicMock) -> None:
        mock_client.list_group_projects.side_effect = AuthenticationError("401")

        with patch("pipeline_exporter.cli.GitlabClient", return_value=mock_client):
            result = CliRunner().invoke(main, ["validate", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Unable to list projects" in result.output


@pytest.mark.unit
class TestRunCommand:
    """Tests for `run`."""

    @pytest.fixture(autouse=True)
    def _no_logging_setup(self):
        with patch("pipeline_exporter.cli.setup_logging"):
            yield

    def test_starts_fleet_and_serves(self, config_file: Path, mock_client: MagicMock) -> None:
        fleet = MagicMock()
        fleet.threads = [MagicMock()] * 5

        with (
            patch("pipeline_exporter.cli.GitlabClient", return_value=mock_client),
            patch("pipeline_exporter.cli.FleetCoordinator", return_value=fleet) as fleet_cls,
            patch("pipeline_exporter.cli.uvicorn.run") as uvicorn_run,
        ):
            result = CliRunner().invoke(
                main,
                ["run", "--config", str(config_file), "--listen-address", "127.0.0.1:9100"],
            )

        assert result.exit_code == 0, result.output
        assert fleet_cls.call_args.kwargs["interval"] == 10
        projects = fleet.start.call_args.args[0]
        assert [p.name for p in projects] == ["group/app", "platform/svc-a", "platform/svc-b"]
        assert uvicorn_run.call_args.kwargs["host"] == "127.0.0.1"
        assert uvicorn_run.call_args.kwargs["port"] == 9100
        fleet.stop.assert_called_once()
        mock_client.close.assert_called_once()

    def test_resolver_failure_is_fatal(self, config_file: Path, mock_client: MagicMock) -> None:
        mock_client.list_group_projects.side_effect = AuthenticationError("401")

        with (
            patch("pipeline_exporter.cli.GitlabClient", return_value=mock_client),
            patch("pipeline_exporter.cli.FleetCoordinator") as fleet_cls,
            patch("pipeline_exporter.cli.uvicorn.run") as uvicorn_run,
        ):
            result = CliRunner().invoke(main, ["run", "--config", str(config_file)])

        assert result.exit_code == 1
        fleet_cls.assert_not_called()
        uvicorn_run.assert_not_called()

    def test_config_error_is_fatal(self, tmp_path: Path) -> None:
        with patch("pipeline_exporter.cli.uvicorn.run") as uvicorn_run:
            result = CliRunner().invoke(main, ["run", "--config", str(tmp_path / "none.yml")])

        assert result.exit_code == 1
        uvicorn_run.assert_not_called()
