"""Command line entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click

from . import __version__
from .config import OUTPUT_FORMATS, ScanConfig, resolve_log_level
from .log import configure_logging
from .models import StatusOptions
from .orchestrator import run

logger = logging.getLogger(__name__)


def _build_config(
    start_dir: Path,
    ignore_branches: tuple[str, ...],
    output_format: str,
    jobs: int,
    include_ignored: bool,
    renames: bool,
    debug: bool,
) -> ScanConfig:
    return ScanConfig(
        start_dir=start_dir,
        ignore_branches=tuple(dict.fromkeys(ignore_branches)),
        output_format=output_format,
        jobs=jobs,
        options=StatusOptions(include_ignored=include_ignored, detect_renames=renames),
        log=resolve_log_level(debug),
    )


@click.command()
@click.option("-d", "--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "-s", "--start-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to scan for repositories.",
)
@click.option(
    "-i", "--ignore-branch", "ignore_branches",
    multiple=True,
    envvar="GIT_SURVEY_IGNORE_BRANCH",
    help="Branch that does not need highlighting (repeatable).",
)
@click.option("--include-ignored", is_flag=True, help="Count ignored files.")
@click.option(
    "--renames/--no-renames",
    default=True,
    show_default=True,
    help="Detect staged renames.",
)
@click.option(
    "-j", "--jobs",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Repositories to process in parallel.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="line",
    show_default=True,
    help="Output format.",
)
@click.version_option(version=__version__, prog_name="git-survey")
def main(
    debug: bool,
    start_dir: Path,
    ignore_branches: tuple[str, ...],
    include_ignored: bool,
    renames: bool,
    jobs: int,
    output_format: str,
) -> None:
    """Print a status summary for every git repository under a directory."""
    config = _build_config(
        start_dir, ignore_branches, output_format, jobs, include_ignored, renames, debug
    )
    configure_logging(config.log)
    logger.debug("using command line parameters: %s", config)
    asyncio.run(run(config))
