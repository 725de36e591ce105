"""
CLI commands for operator bundles.

Thin wrappers over ``bundle_validator.core.services.image_validator``.
"""

from __future__ import annotations

import json
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path

import click

from bundle_validator.core.config.loader import ValidatorConfig
from bundle_validator.core.errors import ValidationError
from bundle_validator.core.services.bundle_common import MEDIA_TYPES, REGISTRY_V1_TYPE

_MAX_SHOWN = 50


@click.group("bundle")
@click.pass_context
def bundle(ctx: click.Context) -> None:
    """Operator bundles — format and content validation."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = ValidatorConfig()


# ── Validate ────────────────────────────────────────────────────


@bundle.command("validate")
@click.argument("directory", required=False, type=click.Path(file_okay=False))
@click.option("--image", "-i", default=None, help="Pull this bundle image and validate it.")
@click.option(
    "--container-tool",
    "-b",
    type=click.Choice(["docker", "podman"]),
    default=None,
    help="Tool used to pull --image (default: from config, else docker).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(
    ctx: click.Context,
    directory: str | None,
    image: str | None,
    container_tool: str | None,
    as_json: bool,
) -> None:
    """Validate a bundle's format and content.

    With --image, the image is unpacked into DIRECTORY (or a temporary
    directory) first.

    Examples:

        bundle-validator bundle validate ./etcd-bundle

        bundle-validator bundle validate --image quay.io/example/bundle:0.0.1
    """
    from bundle_validator.adapters.base import ImageReaderError
    from bundle_validator.adapters.containers.container_tool import ContainerToolImageReader
    from bundle_validator.core.observability.logging_config import bundle_logger
    from bundle_validator.core.services.image_validator import new_image_validator

    if not directory and not image:
        raise click.UsageError("Specify a bundle DIRECTORY or --image.")

    if not image:
        validator = new_image_validator(logger=bundle_logger(directory))
        _report(ctx, validator.validate_bundle, Path(directory), as_json)
        return

    tool = container_tool or ctx.obj["config"].container_tool
    validator = new_image_validator(
        image_reader=ContainerToolImageReader(tool),
        logger=bundle_logger(image),
    )

    with tempfile.TemporaryDirectory(prefix="bundle-") as tmp:
        target = Path(directory) if directory else Path(tmp)
        if not as_json:
            click.secho(f"📥 Pulling {image} with {tool}...", fg="cyan")
        try:
            validator.pull_bundle_image(image, target)
        except ImageReaderError as e:
            if as_json:
                click.echo(json.dumps({"ok": False, "pull_error": str(e)}, indent=2))
            else:
                click.secho(f"❌ Unable to pull {image}: {e}", fg="red")
            sys.exit(1)
        _report(ctx, validator.validate_bundle, target, as_json)


@bundle.command("validate-format")
@click.argument("directory", type=click.Path(file_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate_format(ctx: click.Context, directory: str, as_json: bool) -> None:
    """Validate bundle layout, annotations and dependencies only."""
    from bundle_validator.core.observability.logging_config import bundle_logger
    from bundle_validator.core.services.image_validator import new_image_validator

    validator = new_image_validator(logger=bundle_logger(directory))
    _report(ctx, validator.validate_bundle_format, Path(directory), as_json)


@bundle.command("validate-content")
@click.argument("manifests_dir", type=click.Path(file_okay=False))
@click.option(
    "--media-type",
    type=click.Choice(sorted(MEDIA_TYPES)),
    default=REGISTRY_V1_TYPE,
    show_default=True,
    help="Bundle media type of the manifests.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate_content(
    ctx: click.Context,
    manifests_dir: str,
    media_type: str,
    as_json: bool,
) -> None:
    """Validate the objects in a manifests directory."""
    from bundle_validator.core.observability.logging_config import bundle_logger
    from bundle_validator.core.services.image_validator import new_image_validator

    validator = new_image_validator(logger=bundle_logger(manifests_dir))
    _report(
        ctx,
        lambda path: validator.validate_bundle_content(path, media_type=media_type),
        Path(manifests_dir),
        as_json,
    )


# ── Output ──────────────────────────────────────────────────────


def _report(
    ctx: click.Context,
    check: Callable[[Path], None],
    path: Path,
    as_json: bool,
) -> None:
    """Run ``check`` on ``path``, print the outcome, exit 1 on failure."""
    try:
        check(path)
    except ValidationError as e:
        if as_json:
            click.echo(json.dumps(e.to_dict(), indent=2))
        else:
            click.secho(f"❌ {len(e.errors)} error(s) in {path}", fg="red", bold=True)
            click.echo()
            for err in e.errors[:_MAX_SHOWN]:
                click.echo(f"   • [{err.category}] {err}")
            if len(e.errors) > _MAX_SHOWN:
                click.echo(f"   … and {len(e.errors) - _MAX_SHOWN} more")
            click.echo()
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"ok": True, "error_count": 0, "errors": []}, indent=2))
    elif not ctx.obj.get("quiet"):
        click.secho(f"✅ Bundle is valid: {path}", fg="green", bold=True)
