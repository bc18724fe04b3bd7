"""Scan orchestration: walk, summarize and render every repository."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from pathlib import Path

from rich.console import Console

from .aggregator import describe
from .config import ScanConfig
from .models import RepoResult
from .renderer import print_line, render_done, render_json
from .walker import find_repositories

logger = logging.getLogger(__name__)


async def _describe(root: Path, config: ScanConfig) -> RepoResult:
    logger.debug("processing %s", root)
    return await asyncio.to_thread(
        describe, root, config.ignore_branches, config.options, str(root)
    )


async def run(config: ScanConfig, console: Console | None = None) -> list[RepoResult]:
    """Scan ``config.start_dir`` and print one line per repository.

    At most ``config.jobs`` repositories are processed at once. Output always
    follows discovery order.
    """
    console = console or Console(highlight=False)
    started = time.perf_counter()

    results: list[RepoResult] = []
    pending: deque[asyncio.Task[RepoResult]] = deque()

    async def _emit_next() -> None:
        result = await pending.popleft()
        results.append(result)
        if config.output_format == "line":
            print_line(result, console)

    walk = find_repositories(config.start_dir)
    while True:
        # Directory listing blocks; keep it off the event loop.
        root = await asyncio.to_thread(next, walk, None)
        if root is None:
            break
        pending.append(asyncio.create_task(_describe(root, config)))
        if len(pending) >= config.jobs:
            await _emit_next()
    while pending:
        await _emit_next()

    elapsed = time.perf_counter() - started
    if config.output_format == "json":
        console.out(render_json(results, elapsed), highlight=False)
    else:
        render_done(elapsed, console)

    failures = sum(1 for r in results if not r.ok)
    logger.debug("scanned %d repositories, %d failed", len(results), failures)
    return results
