"""
plcpack — CLI entrypoint.

Usage:
    python -m plcpack.main --help
    python -m plcpack.main pack PLC1/PLC1.plcproj -o out
    python -m plcpack.main adapters
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from plcpack import __version__
from plcpack.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="plcpack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to plcpack.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """plcpack — package TwinCAT PLC projects as NuGet packages."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )


def _load_settings(ctx: click.Context):
    from plcpack.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=False))
@click.option(
    "--output-directory",
    "-o",
    "output_directory",
    default=".",
    show_default=True,
    help="Directory the package is written to.",
)
@click.option("--solution", "-s", default="", help="Solution file (default: auto-detect).")
@click.option("--mock", is_flag=True, help="Use mock adapter (no TwinCAT needed).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def pack(
    ctx: click.Context,
    path: str,
    output_directory: str,
    solution: str,
    mock: bool,
    as_json: bool,
) -> None:
    """Pack a PLC project into a NuGet package.

    Examples:

        plcpack pack PLC1/PLC1.plcproj -o out

        plcpack pack PLC1/PLC1.plcproj -o out --solution Machine.sln
    """
    from plcpack.adapters.registry import default_registry
    from plcpack.core.models.package import PackRequest
    from plcpack.core.services.errors import UnsupportedOperationError
    from plcpack.core.use_cases.pack import PackageService

    settings = _load_settings(ctx)
    registry = default_registry(
        prog_id=settings.automation.prog_id,
        suppress_ui=settings.automation.suppress_ui,
        mock_mode=mock or settings.automation.adapter == "mock",
    )
    service = PackageService(
        registry=registry,
        adapter_name=settings.automation.adapter,
        library_target=settings.package.library_target,
    )
    request = PackRequest(path=path, output_directory=output_directory, solution=solution)

    try:
        ok = service.pack(request)
    except UnsupportedOperationError as e:
        if as_json:
            click.echo(json.dumps({"ok": False, "path": path, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(2)

    if as_json:
        click.echo(json.dumps({
            "ok": ok,
            "path": path,
            "output_directory": str(Path(output_directory).resolve()),
        }, indent=2))
    elif ok:
        if not ctx.obj.get("quiet"):
            click.secho(f"✅ Packed {path}", fg="green", bold=True)
    else:
        click.secho(f"❌ Failed to pack {path}", fg="red")

    if not ok:
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def adapters(ctx: click.Context, as_json: bool) -> None:
    """Show automation adapters and whether they can run here."""
    from plcpack.adapters.registry import default_registry

    settings = _load_settings(ctx)
    registry = default_registry(
        prog_id=settings.automation.prog_id,
        suppress_ui=settings.automation.suppress_ui,
    )
    status = registry.adapter_status()

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    click.secho("🔌 Automation adapters:", fg="cyan", bold=True)
    for name, info in status.items():
        icon = "✅" if info["available"] else "❌"
        active = " ← configured" if name == settings.automation.adapter else ""
        click.echo(f"   {icon} {name} ({info['type']}){active}")
    click.echo()


if __name__ == "__main__":
    cli()
