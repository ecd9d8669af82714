"""
Command line interface for memory page signatures.

Example:
    memsig -s nginx -d ./nginx -b nginx vsigs
    memsig -s nginx -d ./nginx -b nginx groups --strategy similarity
"""

import functools
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .config import AnalysisSettings, Config
from .core.errors import MemSigError, is_fatal_io_error
from .core.loader import load_product
from .core.product import Product
from .extract import ELFSegmentExtractor
from .grouping import STRATEGIES, get_group_finder
from .reporting import (
    comparison_table,
    print_groups,
    print_signatures,
    write_comparison_tables,
    write_group_signatures,
    write_version_signatures,
)
from .utils.logging_setup import get_logger, log_operation, setup_logging

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

VERBOSITY_LEVELS = ["WARNING", "INFO", "DEBUG"]


def handle_errors(func):
    """Turn library errors into a message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MemSigError as e:
            kind = "I/O error" if is_fatal_io_error(e) else "Error"
            logger.error("%s: %s", kind, e.message, extra={'extra_fields': e.details})
            err_console.print(f"[red]{kind}: {e.message}[/red]")
            click.get_current_context().exit(1)

    return wrapper


class RunContext:
    """State shared by all subcommands of one invocation."""

    def __init__(self, config: Config, name: Optional[str], swpath: Optional[Path],
                 binary: Optional[str], page_size: Optional[int]):
        self.config = config
        self.name = name
        self.swpath = swpath
        self.binary = binary
        self.page_size = page_size
        self._product: Optional[Product] = None

    def settings(self, **overrides) -> AnalysisSettings:
        return AnalysisSettings.from_config(self.config, page_size=self.page_size, **overrides)

    def product(self) -> Product:
        missing = [flag for flag, value in
                   (("-s/--software", self.name), ("-d/--swpath", self.swpath),
                    ("-b/--binary", self.binary))
                   if not value]
        if missing:
            raise click.UsageError(f"Missing option(s): {', '.join(missing)}")

        if self._product is None:
            settings = self.settings()
            log_operation(logger, "load_product", product=self.name, swpath=str(self.swpath))
            self._product = load_product(
                self.name,
                self.swpath,
                self.binary,
                page_size=settings.page_size,
                extractor=ELFSegmentExtractor(),
                versions_dir=self.config.get("paths.versions_dir", "versions"),
            )
        return self._product

    def output_dir(self, outdir: Optional[str], config_key: str, default: str) -> Path:
        if outdir:
            return Path(outdir)
        return Path(self.swpath) / self.config.get(config_key, default)


@click.group()
@click.version_option(__version__, prog_name="memsig")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML or JSON config file (default: search .memsig.yml upwards)")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
@click.option("-s", "--software", "name", help="Software name, used in output file names")
@click.option("-d", "--swpath", type=click.Path(file_okay=False, path_type=Path),
              help="Software directory containing versions/")
@click.option("-b", "--binary", help="Binary file name inside each version directory")
@click.option("-p", "--pagesize", "page_size", type=int, help="Page size in bytes")
@click.pass_context
@handle_errors
def cli(ctx, config_path, verbose, name, swpath, binary, page_size):
    """Generate memory page signatures for software version detection."""
    config = Config.from_file(config_path) if config_path else Config.find_and_load(Path.cwd())
    config.apply_environment_overrides()

    level = config.get("logging.level", "WARNING")
    if verbose:
        level = VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]
    try:
        setup_logging(
            "memsig",
            level=level,
            log_dir=Path(config.get("logging.dir", "logs")),
            file=bool(config.get("logging.file", False)),
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="logging.level") from e

    ctx.obj = RunContext(config, name, swpath, binary, page_size)


@cli.command()
@click.option("--outdir", type=click.Path(file_okay=False),
              help="Output directory (default: <swpath>/vsigs)")
@click.pass_obj
@handle_errors
def vsigs(run: RunContext, outdir):
    """Generate one signature per version."""
    product = run.product()
    page_size = run.settings().page_size
    target = run.output_dir(outdir, "output.vsigs_dir", "vsigs")

    signatures = product.generate_signatures(page_size)
    written = write_version_signatures(product, signatures, target, page_size)

    print_signatures(product, signatures, console)
    console.print(f"[green]✓ Wrote {len(written)} signatures to {target}[/green]")


@cli.command()
@click.option("--outdir", type=click.Path(file_okay=False),
              help="Output directory (default: <swpath>/comp)")
@click.option("--show/--no-show", default=False, help="Print the match matrix")
@click.pass_obj
@handle_errors
def compare(run: RunContext, outdir, show):
    """Compare every version with every other version."""
    product = run.product()
    page_size = run.settings().page_size
    target = run.output_dir(outdir, "output.comparison_dir", "comp")

    matrix = product.compare_all_versions(page_size)
    write_comparison_tables(product, matrix, target, page_size)

    if show:
        console.print(comparison_table(product, matrix, page_size))
    console.print(f"[green]✓ Wrote comparison of {len(product)} versions to {target}[/green]")


@cli.command()
@click.option("--strategy", type=click.Choice(sorted(STRATEGIES)), help="Grouping strategy")
@click.option("--threshold", type=float,
              help="Versions whose signature keeps at least this share of their pages stay alone")
@click.option("--max-dist", "max_distance", type=int,
              help="Maximum canonical distance between group members")
@click.option("--outdir", type=click.Path(file_okay=False),
              help="Output directory (default: <swpath>/groups)")
@click.pass_obj
@handle_errors
def groups(run: RunContext, strategy, threshold, max_distance, outdir):
    """Find version groups with shared signatures."""
    settings = run.settings(strategy=strategy, sigsize_threshold=threshold,
                            max_distance=max_distance)
    product = run.product()
    target = run.output_dir(outdir, "output.groups_dir", "groups")

    finder = get_group_finder(settings.strategy, product, settings.page_size,
                              settings.sigsize_threshold, settings.max_distance)
    assignments = finder.find_groups()
    write_group_signatures(product, assignments, target)

    print_groups(product, assignments, finder.average_signature_size(), console)
    console.print(f"[green]✓ Wrote {len(assignments)} group signatures to {target}[/green]")


@cli.command()
@click.argument("binary", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("outdir", type=click.Path(file_okay=False, path_type=Path))
@click.option("-p", "--pagesize", "page_size", type=int, help="Page size in bytes")
@click.pass_obj
@handle_errors
def extract(run: RunContext, binary, outdir, page_size):
    """Split an ELF binary into page-padded loadable segments."""
    if page_size is not None:
        run.page_size = page_size
    settings = run.settings()

    outdir.mkdir(parents=True, exist_ok=True)
    written = ELFSegmentExtractor().extract(binary, outdir, settings.page_size)
    for path in written:
        console.print(f"  {path.name} ({path.stat().st_size} bytes)")
    console.print(f"[green]✓ Extracted {len(written)} segments to {outdir}[/green]")


def main():
    """Main entry point."""
    cli(prog_name="memsig")


if __name__ == "__main__":
    main()
