"""Usage scanner engine — classify a repo's UI library and count component usage."""

from uiadoption.engines.usage_scanner.analyzer import RepositoryAnalyzer, analyze_path, analyze_repo
from uiadoption.engines.usage_scanner.models import (
    LibraryVariant,
    Manifest,
    Repo,
    Report,
    Result,
    Stats,
)
from uiadoption.engines.usage_scanner.runner import BatchOutcome, run_batch

__all__ = [
    "BatchOutcome",
    "LibraryVariant",
    "Manifest",
    "Repo",
    "Report",
    "RepositoryAnalyzer",
    "Result",
    "Stats",
    "analyze_path",
    "analyze_repo",
    "run_batch",
]
