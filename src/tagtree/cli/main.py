"""Command line entry point: ``tagtree info|dump|rewrite``."""

from __future__ import annotations

import gzip
import io
import json
import sys
from typing import Optional

import click

from tagtree.config.config import CodecConfig, GzipMode
from tagtree.core.constants import EndiannessType, HeaderType
from tagtree.core.exceptions import NbtError
from tagtree.core.tree import NbtTree
from tagtree.utils.logging import configure_logging, get_logger, log_context

GZIP_MAGIC = b"\x1f\x8b"

logger = get_logger(__name__)


def _load(path: str, config: CodecConfig) -> tuple[NbtTree, bool]:
    """Read a tree from ``path``; returns (tree, was_gzipped)."""
    with open(path, "rb") as f:
        raw = f.read()

    gzipped = config.gzip is GzipMode.ALWAYS or (
        config.gzip is GzipMode.AUTO and raw[:2] == GZIP_MAGIC
    )
    if gzipped:
        try:
            raw = gzip.decompress(raw)
        except OSError as e:
            raise click.ClickException(f"{path}: not gzip data: {e}") from e

    tree = NbtTree()
    try:
        ok = tree.read_from(io.BytesIO(raw), config.endianness)
    except NbtError as e:
        raise click.ClickException(f"{path}: {e}") from e
    if not ok:
        click.echo(f"Error: {path}: corrupt header, no tree read", err=True)
        sys.exit(1)

    logger.info(
        "tree_loaded",
        root_name=tree.name,
        header_type=tree.header_type.value,
        gzipped=gzipped,
        size_bytes=len(raw),
    )
    return tree, gzipped


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Inspect and rewrite named binary tag trees."""
    config = CodecConfig.from_env()
    configure_logging(level=config.log_level, json_output=config.log_json)
    ctx.obj = config


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def info(config: CodecConfig, path: str) -> None:
    """Show root name and header metadata of PATH."""
    with log_context(path=path):
        tree, gzipped = _load(path, config)

    click.echo(f"Root name:  {tree.name!r}")
    click.echo(f"Header:     {tree.header_type.value}")
    click.echo(f"Version:    {tree.version_saved}")
    click.echo(f"Endianness: {tree.endianness.value}")
    click.echo(f"Gzipped:    {gzipped}")
    click.echo(f"Members:    {len(tree.root)}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--indent", default=2, show_default=True, help="JSON indent")
@click.pass_obj
def dump(config: CodecConfig, path: str, indent: int) -> None:
    """Print the tree in PATH as JSON."""
    with log_context(path=path):
        tree, _ = _load(path, config)
    click.echo(json.dumps({tree.name: tree.root.to_python()}, indent=indent))


@cli.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False))
@click.argument("dst", type=click.Path(dir_okay=False, writable=True))
@click.option(
    "--endianness",
    type=click.Choice(["big", "little"]),
    default=None,
    help="Payload byte order for output (default: as read)",
)
@click.pass_obj
def rewrite(config: CodecConfig, src: str, dst: str, endianness: Optional[str]) -> None:
    """Read SRC and write it back to DST with the same header layout."""
    with log_context(path=src):
        tree, gzipped = _load(src, config)

    target = EndiannessType.parse(endianness) if endianness else None
    if (
        target is not None
        and tree.header_type is not HeaderType.NONE
        and target is not EndiannessType.LITTLE
    ):
        # headered payloads are always read back as little-endian
        raise click.UsageError(
            f"{src} has a {tree.header_type.value} header; "
            f"its payload can only be written little-endian"
        )
    try:
        data = tree.to_bytes(target)
    except NbtError as e:
        raise click.ClickException(f"{src}: {e}") from e
    if config.gzip is not GzipMode.NEVER and (gzipped or config.gzip is GzipMode.ALWAYS):
        data = gzip.compress(data)

    with open(dst, "wb") as f:
        f.write(data)

    logger.info("tree_rewritten", src=src, dst=dst, size_bytes=len(data))
    click.echo(f"Wrote {len(data)} bytes to {dst}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
