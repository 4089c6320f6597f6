"""CLI adapter for ``prest_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect what a pREST process would resolve at startup (which
file is read, which source won each key) without starting the service.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_locate` – prints the configuration file path that would be read.
* :func:`cli_show` – resolves the configuration and prints it as JSON.
* :func:`cli_parse_url` – splits a connection URL into its fields.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: calls :func:`prest_config.core.parse` and the URL adapter and
never reaches into the resolver directly. Secrets are masked unless
``--reveal`` is passed.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.url.postgres import parse_database_url
from .core import get_default_prest_conf, parse

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_MASK: Final[str] = "********"
_SECRET_FIELDS: Final[tuple[str, ...]] = ("pg_pass", "jwt_key", "pg_url")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("prest-config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Resolve and inspect pREST runtime configuration",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="prest-config",
    message="prest-config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("prest-config")
    except metadata.PackageNotFoundError:
        click.echo("prest-config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'prest-config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("locate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path", required=False, default=None, envvar="PREST_CONF")
def cli_locate(path: Optional[str]) -> None:
    """Print the configuration file that would be read.

    PATH defaults to ``$PREST_CONF``; when both are empty ``./prest.toml`` is used.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> CliRunner().invoke(cli, ["locate", ""], env={"PREST_CONF": None}).output.strip()
    './prest.toml'
    """

    click.echo(get_default_prest_conf(path))


@cli.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Configuration file to read instead of $PREST_CONF / ./prest.toml",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the source layer of every key in the output",
)
@click.option(
    "--reveal/--no-reveal",
    default=False,
    help="Print passwords and JWT keys instead of masking them",
)
def cli_show(config_path: Optional[str], indent: Optional[int], provenance: bool, reveal: bool) -> None:
    """Resolve the configuration from the current environment and print it as JSON."""

    config = parse(config_path=config_path)
    data = config.as_dict()
    if not reveal:
        _mask_secrets(data)
    payload: Any = data
    if provenance:
        payload = {"config": data, "provenance": dict(config.sources)}
    click.echo(json.dumps(payload, indent=indent, separators=(",", ":")))


@cli.command("parse-url", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("url")
@click.option(
    "--reveal/--no-reveal",
    default=False,
    help="Print the password instead of masking it",
)
def cli_parse_url(url: str, reveal: bool) -> None:
    """Split a connection URL into host, port, user, password, database and SSL mode."""

    parsed = parse_database_url(url, source="url")
    fields = {
        "host": parsed.host,
        "port": parsed.port,
        "user": parsed.user,
        "password": parsed.password if reveal or not parsed.password else _MASK,
        "database": parsed.database,
        "sslmode": parsed.ssl_mode,
    }
    click.echo(json.dumps(fields, indent=2))


def _mask_secrets(data: dict[str, Any]) -> None:
    """Replace non-empty secret values in *data* with :data:`_MASK`."""

    for name in _SECRET_FIELDS:
        if data.get(name):
            data[name] = _MASK


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="prest-config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
