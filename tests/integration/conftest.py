# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and fixtures for integration tests.

HTTP Fake:
    Uses pytest-httpserver for local mock server testing without external
    dependencies. Requirements: pip install pytest-httpserver

Real Vault Server:
    Tests using ``vault_server_factory`` start ``vault server`` processes with
    raft storage in temporary directories on free ports. They are skipped when
    the ``vault`` binary is not on PATH. Set VAULT_BINARY to use another path.
"""

from __future__ import annotations

import json
import os
import shutil
import socket
import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

VAULT_BINARY = os.getenv("VAULT_BINARY") or shutil.which("vault")
VAULT_AVAILABLE = VAULT_BINARY is not None


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Add the integration marker to all tests in the integration directory."""
    integration_marker = pytest.mark.integration

    for item in items:
        if "tests/integration" in str(item.fspath):
            if not any(marker.name == "integration" for marker in item.iter_markers()):
                item.add_marker(integration_marker)


def pick_unused_port() -> int:
    """Return a TCP port that was free at the time of the call."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


@dataclass
class VaultServerProcess:
    """A running ``vault server`` with raft storage."""

    process: subprocess.Popen[bytes]
    api_port: int
    log_path: Path

    host: str = "127.0.0.1"

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.api_port}"

    def stop(self) -> None:
        if self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=15)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()


def _start_vault_server(directory: Path) -> VaultServerProcess:
    raft_path = directory / "raft"
    raft_path.mkdir(parents=True)
    api_port = pick_unused_port()
    cluster_port = pick_unused_port()
    config = {
        "api_addr": f"http://127.0.0.1:{api_port}",
        "cluster_addr": f"http://127.0.0.1:{cluster_port}",
        "disable_mlock": True,
        "listener": {
            "tcp": {"address": f"127.0.0.1:{api_port}", "tls_disable": True}
        },
        "storage": {"raft": {"path": str(raft_path), "node_id": "vault_0"}},
    }
    config_path = directory / "vault.json"
    config_path.write_text(json.dumps(config))
    log_path = directory / "vault.log"
    with log_path.open("wb") as log:
        process = subprocess.Popen(
            [str(VAULT_BINARY), "server", f"-config={config_path}"],
            stdout=log,
            stderr=subprocess.STDOUT,
        )
    return VaultServerProcess(process=process, api_port=api_port, log_path=log_path)


@pytest.fixture
def vault_server_factory(
    tmp_path_factory: pytest.TempPathFactory,
) -> Iterator[Callable[[], VaultServerProcess]]:
    """Start fresh, uninitialized Vault servers; all are stopped at teardown."""
    if not VAULT_AVAILABLE:
        pytest.skip("vault binary not found on PATH (set VAULT_BINARY)")

    servers: list[VaultServerProcess] = []

    def factory() -> VaultServerProcess:
        server = _start_vault_server(tmp_path_factory.mktemp("vault"))
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.stop()
