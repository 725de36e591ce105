"""
Operator bundle validator — CLI entrypoint.

Usage:
    python -m bundle_validator.main --help
    python -m bundle_validator.main bundle validate ./my-bundle
    python -m bundle_validator.main bundle validate --image quay.io/example/bundle:0.0.1
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from bundle_validator import __version__
from bundle_validator.core.config.loader import ConfigError, load_config
from bundle_validator.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="bundle-validator")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to bundle-validator.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Operator bundle validator — check bundles before they enter a catalog."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)
    ctx.obj["config"] = config

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("BV_LOG_LEVEL") or config.log_level or "WARNING"

    setup_logging(
        level=level,
        log_file=os.environ.get("BV_LOG_FILE") or config.log_file,
        log_file_level=os.environ.get("BV_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


# ── Register sub-command groups from bundle_validator/ui/cli/ ─────

from bundle_validator.ui.cli.bundle import bundle  # noqa: E402

cli.add_command(bundle)


if __name__ == "__main__":
    cli()
