"""elevx CLI - run one command elevated, or inspect elevation readiness."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from elevx import __version__
from elevx.api import exec_elevated
from elevx.config import load_config
from elevx.doctor import run_doctor
from elevx.errors import (
    CommandError,
    ConfigError,
    ElevationError,
    ElevationValidationError,
    MechanismNotFoundError,
    PermissionDeniedError,
)
from elevx.report import canonical_dumps, error_payload, success_payload
from elevx.ui import WaitSpinner, console, print_error, render_doctor, setup_logging

# Shell conventions: 126 "cannot execute", 127 "not found".
EXIT_PERMISSION_DENIED = 126
EXIT_MECHANISM_NOT_FOUND = 127
EXIT_USAGE = 2

cli = typer.Typer(
    name="elevx",
    help="Run a command with administrator privileges and capture its output.",
    no_args_is_help=True,
)


def _parse_env(pairs: list[str]) -> dict[str, str] | None:
    if not pairs:
        return None
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ElevationValidationError(f"--env expects KEY=VALUE, got {pair!r}")
        env[key] = value
    return env


def _exit_code_for(error: ElevationError) -> int:
    if isinstance(error, CommandError):
        return error.code or 1
    if isinstance(error, PermissionDeniedError):
        return EXIT_PERMISSION_DENIED
    if isinstance(error, MechanismNotFoundError):
        return EXIT_MECHANISM_NOT_FOUND
    if isinstance(error, (ElevationValidationError, ConfigError)):
        return EXIT_USAGE
    return 1


@cli.command("run")
def run_cmd(
    command: str = typer.Argument(..., help="Command line to run elevated (no sudo prefix)."),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Name shown in the elevation prompt (letters, digits, spaces; <= 70 chars).",
    ),
    icon: Path | None = typer.Option(None, "--icon", help="macOS .icns file for the prompt."),
    env: list[str] = typer.Option(
        [],
        "--env",
        "-e",
        help="KEY=VALUE to set for the command (repeatable).",
    ),
    config_path: Path | None = typer.Option(None, "--config", help="Path to an elevx YAML config."),
    json_output: bool = typer.Option(False, "--json", help="Emit a canonical JSON envelope."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each elevation step to stderr."),
) -> None:
    """Elevate COMMAND, then relay its stdout, stderr and exit status."""
    setup_logging(verbose)
    try:
        config = load_config(config_path)
        variables = _parse_env(env)
        result = WaitSpinner("Waiting for elevation...").run(
            lambda: exec_elevated(command, name=name or "elevx", icon=icon, env=variables, config=config)
        )
    except ElevationError as exc:
        code = _exit_code_for(exc)
        if json_output:
            typer.echo(canonical_dumps(error_payload(exc)))
        elif isinstance(exc, CommandError):
            sys.stdout.write(exc.stdout)
            sys.stderr.write(exc.stderr)
        else:
            print_error(f"Error: {exc}", hint=f"reason: {exc.reason_code}")
        raise typer.Exit(code) from exc

    if json_output:
        typer.echo(canonical_dumps(success_payload(result)))
        return
    sys.stdout.write(result.stdout)
    sys.stderr.write(result.stderr)


@cli.command("doctor")
def doctor_cmd(
    config_path: Path | None = typer.Option(None, "--config", help="Path to an elevx YAML config."),
    json_output: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Check whether this machine can elevate, without prompting."""
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        print_error(f"Error: {exc}", hint=f"reason: {exc.reason_code}")
        raise typer.Exit(EXIT_USAGE) from exc

    report = run_doctor(config=config)
    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        render_doctor(
            {
                "status": report.status,
                "platform": report.platform,
                "strategy": report.strategy or "(none)",
                "user": report.user,
                "version": report.version,
            }
        )
        for item in report.checks:
            style = {"pass": "green", "warn": "yellow", "fail": "red"}[item.status]
            console.print(f"[{style}]{item.status.upper():4}[/{style}] {item.id}: {item.message}")
            for step in item.remediation:
                console.print(f"       [dim]{step}[/dim]")
    if report.status != "passed":
        raise typer.Exit(1)


@cli.command("version")
def version_cmd() -> None:
    """Print the elevx version."""
    typer.echo(f"elevx {__version__}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
