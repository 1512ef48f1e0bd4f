"""
incmerkle CLI - Command Line Interface for the incremental Merkle tree

Main entry point for all CLI commands.
"""

import click

from incmerkle.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


def _decode_items(items, as_hex: bool):
    """Turn command-line items into bytes."""
    from incmerkle.crypto import hex_to_bytes
    from incmerkle.utils.validation import validate_hex_string

    decoded = []
    for i, item in enumerate(items):
        if as_hex:
            valid, err = validate_hex_string(item, f"item {i}")
            if not valid:
                raise click.BadParameter(err, param_hint="ITEMS")
            decoded.append(hex_to_bytes(item))
        else:
            decoded.append(item.encode("utf-8"))
    return decoded


def _build(ctx, items, height, hash_algorithm, as_hex):
    from incmerkle.core.tree import MerkleTree, HashProviderError
    from incmerkle.crypto import get_hasher
    from incmerkle.utils.validation import validate_data_items

    cfg = ctx.obj["config"]
    height = cfg.initial_height if height is None else height
    hash_algorithm = hash_algorithm or cfg.hash_algorithm

    try:
        hasher = get_hasher(hash_algorithm)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--hash")

    decoded = _decode_items(items, as_hex)
    valid, err = validate_data_items(decoded)
    if not valid:
        raise click.BadParameter(err, param_hint="ITEMS")

    try:
        tree = MerkleTree(height, hasher)
    except (TypeError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="--height")

    try:
        for data in decoded:
            tree.insert(data)
    except HashProviderError as e:
        raise click.ClickException(str(e))

    logger.info(f"Built tree with {tree.size} item(s) using {hash_algorithm}")
    return tree


_tree_options = [
    click.argument("items", nargs=-1),
    click.option("--height", type=int, default=None, help="Initial tree height"),
    click.option("--hash", "hash_algorithm", default=None, help="Hash algorithm"),
    click.option("--hex", "as_hex", is_flag=True, help="Items are hex-encoded bytes"),
]


def tree_options(func):
    for option in reversed(_tree_options):
        func = option(func)
    return func


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, help="Path to a .env file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """incmerkle - incremental, self-growing Merkle tree"""
    import logging
    from pydantic import ValidationError
    from incmerkle.core.config import load_config

    try:
        cfg = load_config(env_file)
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    level = logging.DEBUG if debug else cfg.log_level_value
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=cfg.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


# =============================================================================
# Tree Commands
# =============================================================================


@cli.command("root")
@tree_options
@click.pass_context
def root_cmd(ctx, items, height, hash_algorithm, as_hex):
    """Insert ITEMS and print the root"""
    from incmerkle.crypto import bytes_to_hex

    tree = _build(ctx, items, height, hash_algorithm, as_hex)

    click.echo(f"Root:       {bytes_to_hex(tree.root())}")
    click.echo(f"Height:     {tree.height}")
    click.echo(f"Leaf count: {tree.leaf_count}")
    click.echo(f"Size:       {tree.size}")


@cli.command("leaves")
@tree_options
@click.pass_context
def leaves_cmd(ctx, items, height, hash_algorithm, as_hex):
    """Insert ITEMS and print every leaf slot"""
    from incmerkle.crypto import bytes_to_hex

    tree = _build(ctx, items, height, hash_algorithm, as_hex)

    for i in range(tree.leaf_count):
        if tree.is_empty_slot(i):
            click.echo(f"  [{i}] <empty>")
        else:
            click.echo(f"  [{i}] {bytes_to_hex(tree.leaf(i))}")


@cli.command("hashers")
def hashers_cmd():
    """List available hash algorithms"""
    from incmerkle.crypto import available_hashers

    for name in available_hashers():
        click.echo(f"  {name}")


@cli.command("bench")
@click.option("--count", default=1024, show_default=True, help="Items for the growth benchmark")
def bench_cmd(count):
    """Run performance benchmarks"""
    from incmerkle.utils.benchmark import run_all_benchmarks

    if count < 1:
        raise click.BadParameter("must be >= 1", param_hint="--count")
    run_all_benchmarks(count=count)


if __name__ == "__main__":
    cli()
