# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Vault Bootstrap CLI Commands.

Provides the ``vault-bootstrap`` command group:

    run               Bootstrap a new Vault (--bootstrap) or restore one from a
                      snapshot (the default)
    wait-for-server   Block until the Vault API answers
    restore           Wait, then run the restore sequence
    snapshot          Save a raft snapshot to a local file

Every option can also be set through the environment variable shown in its
help text (e.g. VAULT_API_HOST, UNSEAL_KEY), so pipelines can inject host,
port and key material without putting them on the command line.

All lifecycle failures propagate as RuntimeHostError subclasses up to
LifecycleGroup.invoke, which prints one message and exits with the code
mapped to the error (see vault_bootstrap.errors.EXIT_CODES).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import SecretStr, ValidationError
from rich.console import Console
from rich.markup import escape

from vault_bootstrap import __version__
from vault_bootstrap.enums import EnumInfraTransportType, EnumLifecycleMode
from vault_bootstrap.errors import (
    ConnectivityError,
    ModelInfraErrorContext,
    ProtocolConfigurationError,
    RuntimeHostError,
)
from vault_bootstrap.models import (
    ModelInitResult,
    ModelLifecycleConfig,
    ModelLifecycleReport,
)
from vault_bootstrap.orchestrators import LifecycleOrchestrator
from vault_bootstrap.utils import sanitize_error_string

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR: str = "VAULT_BOOTSTRAP_LOG_LEVEL"

console = Console(stderr=True, soft_wrap=True)


class LifecycleGroup(click.Group):
    """Command group mapping lifecycle errors to exit codes in one place."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except RuntimeHostError as e:
            _report_error(e)
            ctx.exit(e.exit_code)


def _report_error(error: RuntimeHostError) -> None:
    message = sanitize_error_string(error.message)
    logger.error(
        "Lifecycle run failed",
        extra={
            "error_code": error.error_code.value,
            "exit_code": error.exit_code,
            "correlation_id": str(error.correlation_id)
            if error.correlation_id
            else None,
        },
    )
    console.print(
        f"[bold red]Error ({error.error_code.value}):[/bold red] {escape(message)}",
        highlight=False,
    )


class _ProbeProgress:
    """Print one dot per failed connectivity probe on stderr."""

    def __init__(self) -> None:
        self.dots = 0

    def __call__(self, attempt: int, error: ConnectivityError) -> None:
        if self.dots == 0:
            click.echo("Waiting for Vault", nl=False, err=True)
        click.echo(".", nl=False, err=True)
        self.dots += 1

    def finish(self) -> None:
        if self.dots:
            click.echo("", err=True)
            self.dots = 0


def _build_config(ctx: click.Context, **overrides: object) -> ModelLifecycleConfig:
    """Bind group options and command overrides into the run configuration.

    Raises:
        ProtocolConfigurationError: If pydantic rejects a value.
    """
    values: dict[str, object] = dict(ctx.obj or {})
    values.update({k: v for k, v in overrides.items() if v is not None})
    for secret_field in ("unseal_key", "vault_token"):
        raw = values.get(secret_field)
        if isinstance(raw, str):
            values[secret_field] = SecretStr(raw) if raw else None
    try:
        return ModelLifecycleConfig.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ProtocolConfigurationError(
            f"Invalid configuration: {problems}",
            context=ModelInfraErrorContext(
                transport_type=EnumInfraTransportType.RUNTIME,
                operation="build_config",
            ),
        ) from e


def _run(
    config: ModelLifecycleConfig, init_output: Path | None = None
) -> ModelLifecycleReport:
    """Run the configured flow, writing init key material the moment it exists."""
    _check_init_output(init_output)
    progress = _ProbeProgress()

    def capture(result: ModelInitResult) -> None:
        progress.finish()
        _write_init_output(result, init_output)

    try:
        return LifecycleOrchestrator(
            config, on_retry=progress, on_initialized=capture
        ).run()
    finally:
        progress.finish()


def _check_init_output(path: Path | None) -> None:
    """Refuse to start if the init output cannot be written safely."""
    if path is None:
        return
    context = ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.FILESYSTEM,
        operation="write_init_output",
        target_name=str(path),
    )
    if path.exists():
        raise ProtocolConfigurationError(
            f"Init output '{path}' already exists; refusing to overwrite key material",
            context=context,
        )
    if not path.parent.is_dir():
        raise ProtocolConfigurationError(
            f"Init output directory '{path.parent}' does not exist",
            context=context,
        )


def _write_init_output(result: ModelInitResult, path: Path | None) -> None:
    """Persist the init key material once: to ``path`` (mode 0600) or stdout."""
    payload = json.dumps(result.to_secret_dict(), indent=2)
    if path is None:
        click.echo(payload)
        return
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(payload + "\n")
    console.print(f"[green]Init key material written to {escape(str(path))}[/green]")


def _print_report(report: ModelLifecycleReport) -> None:
    console.print(f"[bold green]{report.mode.value.capitalize()}: OK[/bold green]")
    for line in report.format_summary().splitlines():
        console.print(f"  {escape(line)}", highlight=False)


@click.group(cls=LifecycleGroup)
@click.version_option(__version__, prog_name="vault-bootstrap")
@click.option(
    "--vault-api-host",
    envvar="VAULT_API_HOST",
    default="localhost",
    show_default=True,
    help="Hostname, IPv4 or IPv6 address (e.g. ::1) of the Vault server "
    "[env: VAULT_API_HOST]",
)
@click.option(
    "--vault-api-port",
    "-p",
    envvar="VAULT_API_PORT",
    type=int,
    default=8200,
    show_default=True,
    help="Port that the Vault server API listens to [env: VAULT_API_PORT]",
)
@click.option(
    "--vault-api-scheme",
    envvar="VAULT_API_SCHEME",
    type=click.Choice(["http", "https"]),
    default="http",
    show_default=True,
    help="URL scheme of the Vault API [env: VAULT_API_SCHEME]",
)
@click.option(
    "--verify-ssl/--no-verify-ssl",
    envvar="VAULT_VERIFY_SSL",
    default=True,
    help="Verify TLS certificates [env: VAULT_VERIFY_SSL]",
)
@click.option(
    "--poll-interval",
    envvar="POLL_INTERVAL",
    type=float,
    default=1.0,
    show_default=True,
    help="Seconds between connectivity probes [env: POLL_INTERVAL]",
)
@click.option(
    "--wait-timeout",
    envvar="WAIT_TIMEOUT",
    type=float,
    default=None,
    help="Give up waiting for Vault after this many seconds "
    "(default: wait forever) [env: WAIT_TIMEOUT]",
)
@click.option(
    "--request-timeout",
    envvar="REQUEST_TIMEOUT",
    type=float,
    default=30.0,
    show_default=True,
    help="Per-request timeout in seconds [env: REQUEST_TIMEOUT]",
)
@click.pass_context
def cli(
    ctx: click.Context,
    vault_api_host: str,
    vault_api_port: int,
    vault_api_scheme: str,
    verify_ssl: bool,
    poll_interval: float,
    wait_timeout: float | None,
    request_timeout: float,
) -> None:
    """Bootstrap, restore and unseal HashiCorp Vault clusters."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        vault_api_host=vault_api_host,
        vault_api_port=vault_api_port,
        vault_api_scheme=vault_api_scheme,
        verify_ssl=verify_ssl,
        poll_interval_seconds=poll_interval,
        wait_timeout_seconds=wait_timeout,
        request_timeout_seconds=request_timeout,
    )


_snapshot_url_option = click.option(
    "--snapshot-url",
    "-s",
    envvar="SNAPSHOT_URL",
    default=None,
    help="URL of the snapshot to restore, e.g. file:///backups/vault.snap "
    "[env: SNAPSHOT_URL]",
)
_unseal_key_option = click.option(
    "--unseal-key",
    "-u",
    envvar="UNSEAL_KEY",
    default=None,
    help="Key for unsealing the Vault [env: UNSEAL_KEY]",
)
_vault_token_option = click.option(
    "--vault-token",
    envvar="VAULT_TOKEN",
    default=None,
    help="Token authorizing snapshot operations on an initialized Vault "
    "[env: VAULT_TOKEN]",
)
_init_output_option = click.option(
    "--init-output",
    envvar="INIT_OUTPUT",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write generated keys and root token to this file (mode 0600) "
    "instead of stdout. Written as soon as Vault is initialized, also when a "
    "restore initializes a fresh server [env: INIT_OUTPUT]",
)


@cli.command("run")
@click.option(
    "--bootstrap",
    "-b",
    envvar="BOOTSTRAP",
    is_flag=True,
    default=False,
    help="Create a new, empty Vault [env: BOOTSTRAP]",
)
@_snapshot_url_option
@_unseal_key_option
@_vault_token_option
@_init_output_option
@click.pass_context
def run_cmd(
    ctx: click.Context,
    bootstrap: bool,
    snapshot_url: str | None,
    unseal_key: str | None,
    vault_token: str | None,
    init_output: Path | None,
) -> None:
    """Bootstrap a new Vault, or restore one from a snapshot (default)."""
    config = _build_config(
        ctx,
        mode=EnumLifecycleMode.BOOTSTRAP if bootstrap else EnumLifecycleMode.RESTORE,
        snapshot_url=snapshot_url,
        unseal_key=unseal_key,
        vault_token=vault_token,
    )
    _print_report(_run(config, init_output))


@cli.command("wait-for-server")
@click.pass_context
def wait_for_server_cmd(ctx: click.Context) -> None:
    """Block until the Vault API answers, then exit 0."""
    config = _build_config(ctx, mode=EnumLifecycleMode.WAIT)
    report = _run(config)
    console.print(
        f"[bold green]Vault reachable at {config.base_url} "
        f"after {report.probe_attempts} attempt(s)[/bold green]",
        highlight=False,
    )


@cli.command("restore")
@_snapshot_url_option
@_unseal_key_option
@_vault_token_option
@_init_output_option
@click.pass_context
def restore_cmd(
    ctx: click.Context,
    snapshot_url: str | None,
    unseal_key: str | None,
    vault_token: str | None,
    init_output: Path | None,
) -> None:
    """Wait for Vault, then initialize-or-detect, restore and unseal."""
    config = _build_config(
        ctx,
        mode=EnumLifecycleMode.RESTORE,
        snapshot_url=snapshot_url,
        unseal_key=unseal_key,
        vault_token=vault_token,
    )
    _print_report(_run(config, init_output))


@cli.command("snapshot")
@click.option(
    "--destination-url",
    "-d",
    envvar="SNAPSHOT_DESTINATION_URL",
    required=True,
    help="Where to save the snapshot, e.g. file:///backups/vault.snap "
    "[env: SNAPSHOT_DESTINATION_URL]",
)
@_vault_token_option
@click.pass_context
def snapshot_cmd(
    ctx: click.Context, destination_url: str, vault_token: str | None
) -> None:
    """Save a raft snapshot of a running Vault to a local file."""
    config = _build_config(ctx, mode=EnumLifecycleMode.WAIT, vault_token=vault_token)
    progress = _ProbeProgress()
    try:
        path, size = LifecycleOrchestrator(
            config, on_retry=progress
        ).save_snapshot(destination_url)
    finally:
        progress.finish()
    console.print(
        f"[bold green]Snapshot saved to {escape(str(path))} ({size} bytes)[/bold green]",
        highlight=False,
    )


def _configure_logging() -> None:
    log_level = os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if log_level not in valid_levels:
        print(
            f"Warning: Invalid {LOG_LEVEL_ENV_VAR} '{log_level}', using WARNING. "
            f"Valid levels: {', '.join(sorted(valid_levels))}",
            file=sys.stderr,
        )
        log_level = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    """Entry point for the vault-bootstrap CLI."""
    _configure_logging()
    cli()


__all__ = ["cli", "main"]
