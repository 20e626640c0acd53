"""Batch runner — analyze repositories one at a time and fold the stats."""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

import structlog

from uiadoption.engines.usage_scanner.models import LibraryVariant, Repo, Report, Result, Stats
from uiadoption.progress import ProgressTracker

log = structlog.get_logger("uiadoption.engine")

Analyze = Callable[[Repo], Awaitable[Result]]


@dataclass
class BatchOutcome:
    results: list[Result] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    visited: int = 0
    failed: list[str] = field(default_factory=list)

    def report(self) -> Report:
        return Report.build(self.stats, self.results)


async def run_batch(
    repos: Sequence[Repo],
    analyze: Analyze,
    *,
    limit: int | None = None,
    progress: ProgressTracker | None = None,
) -> BatchOutcome:
    """Analyze *repos* sequentially, in order.

    Stops once *limit* repositories have been analyzed (``None`` means no
    limit). Only results with a variant other than ``none`` are collected,
    but every analyzed repo is folded into the stats and reported to
    *progress*.
    """
    if progress is None:
        progress = ProgressTracker(total=len(repos))
    elif not progress.total:
        progress.total = len(repos)

    outcome = BatchOutcome()
    for repo in repos:
        if limit is not None and outcome.visited >= limit:
            log.info("runner.limit_reached", limit=limit, remaining=len(repos) - outcome.visited)
            break

        result = await analyze(repo)
        outcome.visited += 1
        outcome.stats = outcome.stats.add(result.lib)
        if result.error is not None:
            outcome.failed.append(repo.name)

        included = result.lib is not LibraryVariant.NONE
        if included:
            outcome.results.append(dataclasses.replace(result, html_url=repo.html_url))

        progress.advance(repo.name, result.lib.value, included)

    log.info(
        "runner.done",
        visited=outcome.visited,
        collected=len(outcome.results),
        failed=len(outcome.failed),
        total_lib_count=outcome.stats.total,
    )
    return outcome
