"""CLI adapter for ``lib_npmrc_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the layered ``.npmrc`` reader through a read-only command line interface
so operators can check which registry and which credentials a package install
would use, without writing Python.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command collecting load options and traceback handling.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_get` / :func:`cli_show` / :func:`cli_layers` – raw value views.
* :func:`cli_registry` / :func:`cli_scopes` – registry resolution.
* :func:`cli_credentials` – redacted credential summary for a registry.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: calls the composition root (:func:`load_config`) and never
reaches into adapters. ``lib_cli_exit_tools`` centralises exit-code handling.
Secrets are never printed; credential output names the auth kind, the username
and the certificate paths only.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.registry import nerf_dart
from .application.resolved import NpmrcConfig
from .core import LoadOptions, load_config, load_config_file
from .domain.credentials import Credentials
from .observability import redact

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DIST_NAME: Final[str] = "lib_npmrc_config"


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Inspect layered .npmrc configuration, registries and credentials",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DIST_NAME,
    message="lib_npmrc_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--cwd",
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Starting directory for project discovery (defaults to CWD)",
)
@click.option(
    "--global-prefix",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
    help="Override the global prefix ({prefix}/etc/npmrc)",
)
@click.option(
    "--userconfig",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Override the user config file (default: ~/.npmrc)",
)
@click.option(
    "--file",
    "single_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Load only this file, bypassing layer discovery",
)
@click.option("--skip-project", is_flag=True, default=False, help="Ignore the project .npmrc")
@click.option("--skip-user", is_flag=True, default=False, help="Ignore the user .npmrc")
@click.option("--skip-global", is_flag=True, default=False, help="Ignore the global npmrc")
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    cwd: Optional[Path],
    global_prefix: Optional[Path],
    userconfig: Optional[Path],
    single_file: Optional[Path],
    skip_project: bool,
    skip_user: bool,
    skip_global: bool,
) -> None:
    """Root command storing load options and the traceback preference.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["file"] = single_file
    ctx.obj["options"] = LoadOptions(
        cwd=cwd,
        global_prefix=global_prefix,
        user_config=userconfig,
        skip_project=skip_project,
        skip_user=skip_user,
        skip_global=skip_global,
    )
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


def _config(ctx: click.Context) -> NpmrcConfig:
    """Load the configuration described by the root command's options."""

    obj = ctx.ensure_object(dict)
    single_file = obj.get("file")
    if single_file is not None:
        return load_config_file(single_file)
    return load_config(obj.get("options"))


def _echo_json(payload: Any, indent: Optional[int] = 2) -> None:
    click.echo(json.dumps(payload, indent=indent, ensure_ascii=False))


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DIST_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DIST_NAME} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DIST_NAME)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.pass_context
def cli_get(ctx: click.Context, key: str) -> None:
    """Print the raw effective value of KEY; exit code 1 when unset.

    Values are printed exactly as stored, without ``${VAR}`` expansion.
    """

    value = _config(ctx).get(key)
    if value is None:
        ctx.exit(1)
    click.echo(value)


@cli.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the layer and file that supplied each key",
)
@click.pass_context
def cli_show(ctx: click.Context, provenance: bool) -> None:
    """Print the effective raw configuration as JSON.

    Credential keys (``_authToken``, ``_password``, ``_auth``) are redacted.
    """

    config = _config(ctx)
    data = {key: redact(key, value) for key, value in sorted(config.as_dict().items())}
    if provenance:
        _echo_json({"config": data, "provenance": config.provenance()})
        return
    _echo_json(data)


@cli.command("layers", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_layers(ctx: click.Context) -> None:
    """List which configuration levels were loaded and from where."""

    config = _config(ctx)
    _echo_json(
        {
            "project": _path_or_none(config.project_config_path()),
            "user": _path_or_none(config.user_config_path()),
            "global": _path_or_none(config.global_config_path()),
            "local_prefix": _path_or_none(config.local_prefix),
            "global_prefix": _path_or_none(config.global_prefix),
        }
    )


@cli.command("registry", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("package", required=False)
@click.pass_context
def cli_registry(ctx: click.Context, package: Optional[str]) -> None:
    """Print the registry URL serving PACKAGE (or the default registry)."""

    config = _config(ctx)
    click.echo(config.registry_for(package) if package else config.default_registry())


@cli.command("scopes", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_scopes(ctx: click.Context) -> None:
    """Print every configured scope → registry mapping as JSON."""

    _echo_json(dict(sorted(_config(ctx).scoped_registries().items())))


@cli.command("credentials", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("registry")
@click.pass_context
def cli_credentials(ctx: click.Context, registry: str) -> None:
    """Describe the credentials configured for REGISTRY without revealing secrets."""

    credentials = _config(ctx).credentials_for(registry)
    _echo_json({"registry": nerf_dart(registry), **_describe(credentials)})


def _describe(credentials: Credentials | None) -> dict[str, Any]:
    """Summarise *credentials* for display; secrets are never included."""

    if credentials is None:
        return {"kind": None}
    summary: dict[str, Any] = {"kind": credentials.kind}
    pair = credentials.username_password()
    if pair is not None:
        summary["username"] = pair[0]
    cert = credentials.client_cert()
    if cert is not None:
        summary["certfile"] = str(cert.certfile)
        summary["keyfile"] = str(cert.keyfile)
    return summary


def _path_or_none(path: Optional[Path]) -> Optional[str]:
    return str(path) if path is not None else None


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DIST_NAME,
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
