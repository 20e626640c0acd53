"""Textual usage counts of catalog components.

Matching is textual. By default a component is counted
once per *line* that contains an opening tag ``<Tag`` followed by a space
or ``>``, the same way ``grep <Tag[ >] | wc -l`` would. Several usages on
one line count once. :class:`OccurrenceTagMatcher` counts every occurrence
instead and can be swapped in through the :class:`TagMatcher` interface.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from uiadoption.engines.usage_scanner.catalog import COMPONENTS, ScanProfile

log = structlog.get_logger("uiadoption.engine")

SKIP_DIRS = frozenset({".git", "node_modules"})


@lru_cache(maxsize=256)
def _opening_tag(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}[ >]")


@runtime_checkable
class TagMatcher(Protocol):
    """Interface for counting usages of *tag* in one file's contents."""

    def count(self, contents: str, tag: str) -> int: ...


class LineTagMatcher:
    """Counts lines containing at least one opening tag."""

    def count(self, contents: str, tag: str) -> int:
        regex = _opening_tag(tag)
        return sum(1 for line in contents.split("\n") if regex.search(line))


class OccurrenceTagMatcher:
    """Counts every opening tag, including several on one line."""

    def count(self, contents: str, tag: str) -> int:
        return len(_opening_tag(tag).findall(contents))


@dataclass(frozen=True)
class ComponentCounts:
    elements: dict[str, int] = field(default_factory=dict)
    files_scanned: int = 0

    @property
    def total(self) -> int:
        return sum(self.elements.values())


def iter_source_files(root: Path, extensions: Sequence[str]) -> Iterator[Path]:
    """Yield files under *root* with one of *extensions*, in a stable order."""
    suffixes = {ext.lower() for ext in extensions}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for name in sorted(filenames):
            if Path(name).suffix.lower() in suffixes:
                yield Path(dirpath) / name


class ComponentCounter:
    """Count catalog components in a checkout for a given scan profile."""

    def __init__(
        self,
        matcher: TagMatcher | None = None,
        components: Iterable[str] = COMPONENTS,
    ) -> None:
        self.matcher = matcher or LineTagMatcher()
        self.components = tuple(components)

    def count(self, root: Path, profile: ScanProfile) -> ComponentCounts:
        tags = {component: profile.tag_for(component) for component in self.components}
        elements = dict.fromkeys(self.components, 0)
        files_scanned = 0

        for file_path in iter_source_files(root, profile.extensions):
            try:
                contents = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                log.debug("counter.unreadable", path=str(file_path), error=str(exc))
                continue
            files_scanned += 1
            for component, tag in tags.items():
                elements[component] += self.matcher.count(contents, tag)

        return ComponentCounts(elements=elements, files_scanned=files_scanned)
