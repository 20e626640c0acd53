"""RepositoryAnalyzer — checkout -> manifests -> variant -> versions -> component counts."""

from __future__ import annotations

from pathlib import Path

import structlog

from uiadoption.core.config import LineagePatterns, Settings
from uiadoption.engines.usage_scanner.catalog import scan_profile
from uiadoption.engines.usage_scanner.classifier import LibraryClassifier, build_rules
from uiadoption.engines.usage_scanner.counter import ComponentCounter
from uiadoption.engines.usage_scanner.manifests import load_manifests
from uiadoption.engines.usage_scanner.models import LibraryVariant, Outcome, Repo, Result
from uiadoption.engines.usage_scanner.repo import Fetcher, LocalCheckout
from uiadoption.engines.usage_scanner.versions import get_versions
from uiadoption.exceptions import FetchError

log = structlog.get_logger("uiadoption.engine")


class RepositoryAnalyzer:
    """Produce exactly one :class:`Result` per repository.

    A repo whose checkout cannot be fetched yields a ``none`` result with
    the failure recorded in ``Result.error``; nothing is raised. The
    checkout is removed after every analysis, successful or not.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        patterns: LineagePatterns | None = None,
        counter: ComponentCounter | None = None,
        classifier: LibraryClassifier | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._patterns = patterns or LineagePatterns()
        self._counter = counter or ComponentCounter()
        self._classifier = classifier or LibraryClassifier(build_rules(self._patterns))

    async def analyze(self, repo: Repo) -> Result:
        try:
            checkout = await self._fetch(repo)
            if not checkout.ok or checkout.value is None:
                log.warning("analyzer.fetch_failed", repo=repo.name, error=checkout.error)
                return self._empty(repo, error=checkout.error)
            return self.analyze_tree(checkout.value, repo)
        finally:
            self._fetcher.cleanup()

    async def _fetch(self, repo: Repo) -> Outcome[Path]:
        try:
            return Outcome.success(await self._fetcher.fetch(repo))
        except (FetchError, OSError) as exc:
            return Outcome.failure(str(exc))

    def analyze_tree(self, root: Path, repo: Repo) -> Result:
        """Analyze an already materialised tree."""
        manifests = load_manifests(root)
        variant = self._classifier.classify(manifests)
        profile = scan_profile(variant, self._patterns)

        if profile is None:
            log.info(
                "analyzer.classified",
                repo=repo.name,
                lib=variant.value,
                manifests=len(manifests),
            )
            return self._empty(repo, variant)

        versions = get_versions(manifests, profile.package, profile.pattern)
        counts = self._counter.count(root, profile)
        log.info(
            "analyzer.classified",
            repo=repo.name,
            lib=variant.value,
            manifests=len(manifests),
            versions=versions,
            files_scanned=counts.files_scanned,
            count=counts.total,
        )
        return Result(
            repo=repo.name,
            lib=variant,
            versions=tuple(versions),
            count=counts.total,
            elements=counts.elements,
            created_at=repo.created_at,
            updated_at=repo.updated_at,
            pushed_at=repo.pushed_at,
        )

    @staticmethod
    def _empty(
        repo: Repo, variant: LibraryVariant = LibraryVariant.NONE, error: str | None = None
    ) -> Result:
        return Result(
            repo=repo.name,
            lib=variant,
            created_at=repo.created_at,
            updated_at=repo.updated_at,
            pushed_at=repo.pushed_at,
            error=error,
        )


async def analyze_repo(repo: Repo, fetcher: Fetcher, settings: Settings | None = None) -> Result:
    """Fetch and analyze a single repository."""
    patterns = settings.patterns if settings is not None else None
    return await RepositoryAnalyzer(fetcher, patterns).analyze(repo)


async def analyze_path(
    path: Path, repo: Repo | None = None, settings: Settings | None = None
) -> Result:
    """Analyze a local checkout in place; the tree is left untouched."""
    return await analyze_repo(repo or Repo.local(path), LocalCheckout(path), settings)
