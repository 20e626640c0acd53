"""On-disk cache of the org's repository list."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from uiadoption.engines.usage_scanner.models import Repo

log = structlog.get_logger("uiadoption.cache")


class RepoCache:
    """JSON file holding the last fetched repository descriptors.

    A limited run reads and writes a separate file so a partial list never
    replaces the full one.
    """

    def __init__(self, cache_dir: Path, *, limited: bool = False) -> None:
        self.cache_dir = cache_dir
        self.path = cache_dir / ("data.limit.json" if limited else "data.json")

    def load(self) -> list[Repo]:
        """Return cached repos; any miss (absent, unreadable, malformed) is ``[]``."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            log.debug("cache.miss", path=str(self.path))
            return []
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("cache.unreadable", path=str(self.path), error=str(exc))
            return []

        if not isinstance(raw, list):
            log.warning("cache.unreadable", path=str(self.path), error="expected a JSON list")
            return []

        repos: list[Repo] = []
        for item in raw:
            if isinstance(item, dict) and "name" in item:
                repos.append(Repo.from_api(item))
        log.info("cache.hit", path=str(self.path), count=len(repos))
        return repos

    def save(self, repos: list[Repo]) -> None:
        """Write *repos*; failures are logged, not raised."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps([r.to_dict() for r in repos]), encoding="utf-8")
        except OSError as exc:
            log.warning("cache.write_failed", path=str(self.path), error=str(exc))
            return
        log.debug("cache.saved", path=str(self.path), count=len(repos))
