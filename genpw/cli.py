"""
genpw CLI
=========

Click-based command-line wrapper around the password builder.

Usage::

    python -m genpw generate --bits 96 --upper --symbol
    python -m genpw length 20 --count 5
    python -m genpw strengths
    python -m genpw init-config
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import click

from genpw import __version__
from genpw.config import Config, Settings
from genpw.generator import GenFlags, GenResult, generate, generate_by_length
from genpw.strength import (
    FULL_RANGE_TARGETS,
    MAX_BASE_LENGTH,
    MIN_BASE_LENGTH,
    TARGETS,
    get_base_length,
    get_bit_strength,
)

logger = logging.getLogger("genpw.cli")


def _flags(upper: bool, symbol: bool) -> GenFlags:
    flags = GenFlags.NONE
    if upper:
        flags |= GenFlags.NEED_UPPERCASE
    if symbol:
        flags |= GenFlags.NEED_SYMBOL
    return flags


def _emit(results: List[GenResult]) -> None:
    for result in results:
        click.echo(result.password)


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--data-dir", "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.ini and genpw.log.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Log at DEBUG level.",
)
@click.version_option(__version__, prog_name="genpw")
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[Path], verbose: bool) -> None:
    """genpw -- random passwords of known bit strength.

    Passwords are lowercase letters and digits with no repeated characters
    and the digits never all adjacent.
    """
    from genpw.logging_setup import setup_secure_logging
    from genpw.paths import get_data_dir
    from genpw.util.platform_harden import apply_platform_hardening, check_memory_locking

    if data_dir is None:
        data_dir = get_data_dir()

    setup_secure_logging(data_dir, logging.DEBUG if verbose else logging.INFO)
    apply_platform_hardening()
    check_memory_locking()

    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["settings"] = Config.load(data_dir)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command("generate")
@click.option("--bits", "-b", type=int, default=None,
              help="Minimum bit strength (at most 128).")
@click.option("--upper/--no-upper", default=None,
              help="Uppercase the first letter.")
@click.option("--symbol/--no-symbol", default=None,
              help="Append '!'.")
@click.option("--count", "-n", type=click.IntRange(1, Config.MAX_COUNT), default=None,
              help="Number of passwords to print.")
@click.option("--full-range/--suggested", default=None,
              help="Map strengths onto every base length instead of the suggested targets.")
@click.option("--exact/--table", default=None,
              help="Compute extra-character odds instead of using the table.")
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    bits: Optional[int],
    upper: Optional[bool],
    symbol: Optional[bool],
    count: Optional[int],
    full_range: Optional[bool],
    exact: Optional[bool],
) -> None:
    """Generate passwords of at least the requested bit strength."""
    settings: Settings = ctx.obj["settings"]
    bits_from_config = bits is None
    bits = settings.bit_strength if bits_from_config else bits
    full_range = settings.full_range if full_range is None else full_range
    flags = _flags(
        settings.uppercase if upper is None else upper,
        settings.symbol if symbol is None else symbol,
    )
    count = settings.count if count is None else count
    exact = settings.calculate_probability if exact is None else exact

    results = []
    for _ in range(count):
        result = generate(bits, flags, full_range=full_range, calculate_probability=exact)
        if not result.ok:
            limit = FULL_RANGE_TARGETS[-1] if full_range else TARGETS[-1][0]
            if bits_from_config:
                raise click.UsageError(
                    f"bit_strength = {bits} in {Config.config_path(ctx.obj['data_dir'])} "
                    f"is out of range (0 to {limit}); pass --bits or --full-range."
                )
            raise click.BadParameter(
                f"{bits} bits is out of range (0 to {limit}).", param_hint="'--bits'"
            )
        results.append(result)

    base_length = get_base_length(bits, full_range=full_range)
    logger.info(
        "Generated %d password(s): base length %d, %.4f bits",
        count,
        base_length,
        get_bit_strength(base_length),
    )
    _emit(results)


@cli.command("length")
@click.argument("base_length", type=int)
@click.option("--upper/--no-upper", default=None, help="Uppercase the first letter.")
@click.option("--symbol/--no-symbol", default=None, help="Append '!'.")
@click.option("--count", "-n", type=click.IntRange(1, Config.MAX_COUNT), default=None,
              help="Number of passwords to print.")
@click.option("--exact/--table", default=None,
              help="Compute extra-character odds instead of using the table.")
@click.pass_context
def length_cmd(
    ctx: click.Context,
    base_length: int,
    upper: Optional[bool],
    symbol: Optional[bool],
    count: Optional[int],
    exact: Optional[bool],
) -> None:
    """Generate passwords with BASE_LENGTH (8-36) base characters."""
    settings: Settings = ctx.obj["settings"]
    flags = _flags(
        settings.uppercase if upper is None else upper,
        settings.symbol if symbol is None else symbol,
    )
    count = settings.count if count is None else count
    exact = settings.calculate_probability if exact is None else exact

    results = []
    for _ in range(count):
        result = generate_by_length(base_length, flags, calculate_probability=exact)
        if not result.ok:
            raise click.BadParameter(
                f"{base_length} is out of range ({MIN_BASE_LENGTH} to {MAX_BASE_LENGTH}).",
                param_hint="'BASE_LENGTH'",
            )
        results.append(result)

    logger.info(
        "Generated %d password(s): base length %d, %.4f bits",
        count,
        base_length,
        get_bit_strength(base_length),
    )
    _emit(results)


@cli.command("strengths")
@click.option("--full-range/--suggested", default=False,
              help="List every base length instead of the suggested targets.")
def strengths_cmd(full_range: bool) -> None:
    """Show bit strength per base length."""
    if full_range:
        click.echo(f"{'length':>6}  {'bits':>9}")
        for base_length in range(MIN_BASE_LENGTH, MAX_BASE_LENGTH + 1):
            click.echo(f"{base_length:>6}  {get_bit_strength(base_length):>9.4f}")
        return

    click.echo(f"{'target':>6}  {'length':>6}  {'actual':>9}")
    for bits, base_length in TARGETS:
        click.echo(f"{bits:>6}  {base_length:>6}  {get_bit_strength(base_length):>9.4f}")


@cli.command("init-config")
@click.option("--force", is_flag=True, default=False,
              help="Overwrite an existing config.ini.")
@click.pass_context
def init_config_cmd(ctx: click.Context, force: bool) -> None:
    """Write a config.ini with default settings."""
    data_dir: Path = ctx.obj["data_dir"]
    if Config.config_exists(data_dir) and not force:
        raise click.ClickException(
            f"{Config.config_path(data_dir)} already exists (use --force)."
        )
    path = Config.write_default(data_dir)
    click.echo(f"Configuration written to: {path}")


def main() -> None:
    """Console-script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
