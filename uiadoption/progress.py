"""Progress tracking for batch scans."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class RepoProgress:
    repo: str
    visited: int
    total: int
    lib: str
    included: bool
    timestamp: float

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return self.visited / self.total


class ProgressTracker:
    """Record each visited repository and notify callbacks."""

    def __init__(self, total: int = 0) -> None:
        self.total = total
        self.steps: list[RepoProgress] = []
        self.callbacks: list[Callable[[RepoProgress], None]] = []
        self._started = time.monotonic()

    def advance(self, repo: str, lib: str, included: bool) -> RepoProgress:
        p = RepoProgress(
            repo=repo,
            visited=len(self.steps) + 1,
            total=self.total,
            lib=lib,
            included=included,
            timestamp=time.monotonic(),
        )
        self.steps.append(p)
        self._notify(p)
        return p

    @property
    def fraction(self) -> float:
        return self.steps[-1].fraction if self.steps else 0.0

    def get_summary(self) -> dict[str, Any]:
        return {
            "visited": len(self.steps),
            "total": self.total,
            "included": sum(1 for p in self.steps if p.included),
            "fraction": round(self.fraction, 4),
            "duration": round(time.monotonic() - self._started, 2),
        }

    def _notify(self, p: RepoProgress) -> None:
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                logger.debug("Progress callback error for repo %s", p.repo, exc_info=True)
