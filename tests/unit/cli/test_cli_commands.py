# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the vault-bootstrap CLI.

Commands run end to end through click's CliRunner with hvac.Client patched to
return the shared mocked client.

Tests cover:
    - Environment variable binding for every option
    - Exit code per error classification
    - Init key material output (stdout and --init-output)
    - Secrets never echoed in error output
"""

from __future__ import annotations

import json
import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import hvac.exceptions
import pytest
import requests
from click.testing import CliRunner

from vault_bootstrap import __version__
from vault_bootstrap.cli.commands import _configure_logging, cli

ENV_VARS = (
    "VAULT_API_HOST",
    "VAULT_API_PORT",
    "VAULT_API_SCHEME",
    "VAULT_VERIFY_SSL",
    "POLL_INTERVAL",
    "WAIT_TIMEOUT",
    "REQUEST_TIMEOUT",
    "BOOTSTRAP",
    "SNAPSHOT_URL",
    "UNSEAL_KEY",
    "VAULT_TOKEN",
    "INIT_OUTPUT",
    "SNAPSHOT_DESTINATION_URL",
)

UNSEAL_KEY = "operator-unseal-key-0001"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's Vault environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def hvac_client_cls(mock_hvac_client: MagicMock) -> Iterator[MagicMock]:
    with patch("vault_bootstrap.handlers.handler_vault.hvac.Client") as MockClient:
        MockClient.return_value = mock_hvac_client
        yield MockClient


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def snapshot_url(tmp_path: Path) -> str:
    snapshot_file = tmp_path / "vault.snap"
    snapshot_file.write_bytes(b"raft-snapshot")
    return snapshot_file.as_uri()


class TestCliBasics:
    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "wait-for-server", "restore", "snapshot"):
            assert command in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_run_help_shows_env_vars(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "--help"])
        assert result.exit_code == 0
        assert "UNSEAL_KEY" in result.output
        assert "SNAPSHOT_URL" in result.output


class TestWaitForServerCommand:
    def test_reachable(
        self, runner: CliRunner, hvac_client_cls: MagicMock
    ) -> None:
        result = runner.invoke(cli, ["wait-for-server"])
        assert result.exit_code == 0, result.output
        assert "reachable" in result.output
        hvac_client_cls.assert_called_once_with(
            url="http://localhost:8200", token=None, verify=True, timeout=30.0
        )

    def test_options_from_environment(
        self, runner: CliRunner, hvac_client_cls: MagicMock
    ) -> None:
        with patch.dict(
            os.environ,
            {
                "VAULT_API_HOST": "vault.env",
                "VAULT_API_PORT": "8300",
                "VAULT_API_SCHEME": "https",
                "VAULT_VERIFY_SSL": "false",
                "REQUEST_TIMEOUT": "12",
            },
        ):
            result = runner.invoke(cli, ["wait-for-server"])

        assert result.exit_code == 0, result.output
        hvac_client_cls.assert_called_once_with(
            url="https://vault.env:8300", token=None, verify=False, timeout=12.0
        )

    def test_flag_overrides_environment(
        self, runner: CliRunner, hvac_client_cls: MagicMock
    ) -> None:
        with patch.dict(os.environ, {"VAULT_API_HOST": "vault.env"}):
            result = runner.invoke(
                cli, ["--vault-api-host", "vault.flag", "wait-for-server"]
            )

        assert result.exit_code == 0, result.output
        assert hvac_client_cls.call_args.kwargs["url"] == "http://vault.flag:8200"

    def test_timeout_exit_code(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
    ) -> None:
        mock_hvac_client.sys.read_health_status.side_effect = (
            requests.exceptions.ConnectionError("refused")
        )
        result = runner.invoke(
            cli,
            ["--poll-interval", "0.01", "--wait-timeout", "0.05", "wait-for-server"],
        )
        assert result.exit_code == 7
        assert "did not become reachable" in result.output


class TestConfigurationErrors:
    @pytest.mark.parametrize(
        "args",
        [
            ["--vault-api-port", "70000", "wait-for-server"],
            ["--vault-api-host", "http://vault", "wait-for-server"],
            ["--poll-interval", "0", "wait-for-server"],
        ],
    )
    def test_invalid_configuration(
        self, runner: CliRunner, hvac_client_cls: MagicMock, args: list[str]
    ) -> None:
        result = runner.invoke(cli, args)
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output
        hvac_client_cls.assert_not_called()


class TestBootstrap:
    """``run --bootstrap`` against a mocked empty cluster."""

    @pytest.fixture
    def empty_cluster(
        self,
        mock_hvac_client: MagicMock,
        seal_status,
        init_response: dict[str, object],
    ) -> MagicMock:
        mock_hvac_client.sys.read_seal_status.side_effect = [
            seal_status(initialized=False, sealed=True, t=0, n=0),
            seal_status(),
        ]
        mock_hvac_client.sys.initialize.return_value = init_response
        mock_hvac_client.sys.submit_unseal_key.return_value = seal_status()
        return mock_hvac_client

    def test_bootstrap_prints_key_material(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
        init_response: dict[str, object],
    ) -> None:
        result = runner.invoke(cli, ["run", "--bootstrap"])
        assert result.exit_code == 0, result.output
        assert init_response["root_token"] in result.output
        assert "Bootstrap: OK" in result.output

    def test_bootstrap_from_environment(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
    ) -> None:
        with patch.dict(os.environ, {"BOOTSTRAP": "true"}):
            result = runner.invoke(cli, ["run"])
        assert result.exit_code == 0, result.output
        empty_cluster.sys.initialize.assert_called_once()

    def test_init_output_file(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
        init_response: dict[str, object],
        tmp_path: Path,
    ) -> None:
        output = tmp_path / "init.json"

        result = runner.invoke(
            cli, ["run", "--bootstrap", "--init-output", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text()) == init_response
        assert stat.S_IMODE(output.stat().st_mode) == 0o600
        assert init_response["root_token"] not in result.output

    def test_init_output_written_when_unseal_fails(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
        init_response: dict[str, object],
        tmp_path: Path,
    ) -> None:
        empty_cluster.sys.submit_unseal_key.side_effect = (
            hvac.exceptions.InternalServerError("barrier unseal failed")
        )
        output = tmp_path / "init.json"

        result = runner.invoke(
            cli, ["run", "--bootstrap", "--init-output", str(output)]
        )

        assert result.exit_code == 4
        assert "barrier unseal failed" in result.output
        assert json.loads(output.read_text()) == init_response

    def test_key_material_printed_when_final_read_fails(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
        seal_status,
        init_response: dict[str, object],
    ) -> None:
        empty_cluster.sys.read_seal_status.side_effect = [
            seal_status(initialized=False, sealed=True, t=0, n=0),
            requests.exceptions.ConnectionError("connection reset"),
        ]

        result = runner.invoke(cli, ["run", "--bootstrap"])

        assert result.exit_code == 6
        assert init_response["root_token"] in result.output

    def test_existing_init_output_refused_before_init(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        empty_cluster: MagicMock,
        tmp_path: Path,
    ) -> None:
        output = tmp_path / "init.json"
        output.write_text("{}")

        result = runner.invoke(
            cli, ["run", "--bootstrap", "--init-output", str(output)]
        )

        assert result.exit_code == 2
        assert "already exists" in result.output
        empty_cluster.sys.initialize.assert_not_called()

    def test_already_initialized_exit_code(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
    ) -> None:
        result = runner.invoke(cli, ["run", "--bootstrap"])
        assert result.exit_code == 3
        assert "already initialized" in result.output
        mock_hvac_client.sys.initialize.assert_not_called()


class TestRestore:
    @pytest.fixture
    def sealed_cluster(self, mock_hvac_client: MagicMock, seal_status) -> MagicMock:
        mock_hvac_client.sys.read_seal_status.side_effect = [
            seal_status(sealed=False),
            seal_status(sealed=False),
            seal_status(sealed=True),
            seal_status(sealed=False),
        ]
        mock_hvac_client.sys.submit_unseal_key.return_value = seal_status(sealed=False)
        return mock_hvac_client

    @pytest.mark.parametrize("command", ["run", "restore"])
    def test_restore_from_environment(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        sealed_cluster: MagicMock,
        snapshot_url: str,
        command: str,
    ) -> None:
        with patch.dict(
            os.environ,
            {
                "SNAPSHOT_URL": snapshot_url,
                "UNSEAL_KEY": UNSEAL_KEY,
                "VAULT_TOKEN": "hvs.operatorTOKEN98765",
            },
        ):
            result = runner.invoke(cli, [command])

        assert result.exit_code == 0, result.output
        assert "Restore: OK" in result.output
        sealed_cluster.sys.force_restore_raft_snapshot.assert_called_once()
        sealed_cluster.sys.submit_unseal_key.assert_called_once_with(
            key=UNSEAL_KEY, reset=False, migrate=False
        )
        assert hvac_client_cls.call_args.kwargs["token"] == "hvs.operatorTOKEN98765"

    def test_fresh_server_token_saved_when_restore_fails(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
        seal_status,
        init_response: dict[str, object],
        snapshot_url: str,
        tmp_path: Path,
    ) -> None:
        mock_hvac_client.sys.read_seal_status.side_effect = [
            seal_status(initialized=False, sealed=True, t=0, n=0),
            seal_status(sealed=False),
        ]
        mock_hvac_client.sys.initialize.return_value = init_response
        mock_hvac_client.sys.submit_unseal_key.return_value = seal_status(sealed=False)
        mock_hvac_client.sys.force_restore_raft_snapshot.side_effect = (
            hvac.exceptions.InvalidRequest("unsupported snapshot version")
        )
        output = tmp_path / "init.json"

        result = runner.invoke(
            cli,
            [
                "restore",
                "--snapshot-url",
                snapshot_url,
                "--unseal-key",
                UNSEAL_KEY,
                "--init-output",
                str(output),
            ],
        )

        assert result.exit_code == 4
        saved = json.loads(output.read_text())
        assert saved["root_token"] == init_response["root_token"]

        mock_hvac_client.sys.read_seal_status.side_effect = None
        mock_hvac_client.sys.read_seal_status.return_value = seal_status(sealed=False)
        mock_hvac_client.sys.force_restore_raft_snapshot.side_effect = None
        mock_hvac_client.sys.initialize.reset_mock()

        rerun = runner.invoke(
            cli,
            [
                "restore",
                "--snapshot-url",
                snapshot_url,
                "--unseal-key",
                UNSEAL_KEY,
                "--vault-token",
                saved["root_token"],
            ],
        )

        assert rerun.exit_code == 0, rerun.output
        assert "Restore: OK" in rerun.output
        mock_hvac_client.sys.initialize.assert_not_called()

    def test_missing_snapshot_url(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
    ) -> None:
        result = runner.invoke(cli, ["restore", "--unseal-key", UNSEAL_KEY])
        assert result.exit_code == 2
        assert "snapshot URL" in result.output
        assert mock_hvac_client.sys.method_calls == []

    def test_missing_unseal_key(
        self, runner: CliRunner, hvac_client_cls: MagicMock, snapshot_url: str
    ) -> None:
        result = runner.invoke(cli, ["run", "--snapshot-url", snapshot_url])
        assert result.exit_code == 2
        assert "unseal key" in result.output

    def test_unsupported_scheme(
        self, runner: CliRunner, hvac_client_cls: MagicMock
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "restore",
                "--snapshot-url",
                "s3://bucket/vault.snap",
                "--unseal-key",
                UNSEAL_KEY,
            ],
        )
        assert result.exit_code == 5
        assert "s3 scheme not supported" in result.output

    def test_rejected_key_not_echoed(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
        seal_status,
        snapshot_url: str,
    ) -> None:
        mock_hvac_client.sys.read_seal_status.return_value = seal_status(sealed=True)
        mock_hvac_client.sys.submit_unseal_key.side_effect = (
            hvac.exceptions.InvalidRequest(f"invalid key {UNSEAL_KEY}")
        )

        result = runner.invoke(
            cli,
            [
                "restore",
                "--snapshot-url",
                snapshot_url,
                "--unseal-key",
                UNSEAL_KEY,
                "--vault-token",
                "hvs.operatorTOKEN98765",
            ],
        )

        assert result.exit_code == 4
        assert "invalid key" in result.output
        assert UNSEAL_KEY not in result.output


class TestSnapshotCommand:
    def test_snapshot_saved(
        self,
        runner: CliRunner,
        hvac_client_cls: MagicMock,
        mock_hvac_client: MagicMock,
        tmp_path: Path,
    ) -> None:
        response = MagicMock(spec=requests.Response)
        response.iter_content.return_value = iter([b"raft-snapshot"])
        mock_hvac_client.sys.take_raft_snapshot.return_value = response
        destination = tmp_path / "backup.snap"

        with patch.dict(os.environ, {"VAULT_TOKEN": "hvs.operatorTOKEN98765"}):
            result = runner.invoke(
                cli, ["snapshot", "--destination-url", destination.as_uri()]
            )

        assert result.exit_code == 0, result.output
        assert destination.read_bytes() == b"raft-snapshot"
        assert "13 bytes" in result.output

    def test_snapshot_requires_token(
        self, runner: CliRunner, hvac_client_cls: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli, ["snapshot", "--destination-url", (tmp_path / "x.snap").as_uri()]
        )
        assert result.exit_code == 2
        assert "requires a Vault token" in result.output


class TestConfigureLogging:
    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VAULT_BOOTSTRAP_LOG_LEVEL", "debug")
        with patch("vault_bootstrap.cli.commands.logging.basicConfig") as basic_config:
            _configure_logging()
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_invalid_level_falls_back(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("VAULT_BOOTSTRAP_LOG_LEVEL", "chatty")
        with patch("vault_bootstrap.cli.commands.logging.basicConfig") as basic_config:
            _configure_logging()
        assert basic_config.call_args.kwargs["level"] == logging.WARNING
        assert "Invalid VAULT_BOOTSTRAP_LOG_LEVEL" in capsys.readouterr().err
