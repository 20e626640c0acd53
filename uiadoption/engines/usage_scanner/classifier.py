"""Library classifier — ranked rules deciding a repo's LibraryVariant.

Rules are evaluated in order and the first match wins, so a repo that
declares both ``@abgov/react-components@4.x`` and ``react`` is a
``react-uic`` repo, never a plain ``react`` one.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from uiadoption.core.config import LineagePatterns
from uiadoption.engines.usage_scanner.catalog import (
    ANGULAR_PACKAGES,
    ANGULAR_UI_PACKAGE,
    REACT_PACKAGES,
    REACT_UI_PACKAGE,
    VUE_PACKAGES,
    VUE_UI_PACKAGE,
    WEB_COMPONENTS_PACKAGE,
)
from uiadoption.engines.usage_scanner.models import LibraryVariant, Manifest
from uiadoption.engines.usage_scanner.versions import uses_library

Predicate = Callable[[Sequence[Manifest]], bool]


@dataclass(frozen=True)
class Rule:
    variant: LibraryVariant
    predicate: Predicate
    description: str = ""

    def matches(self, manifests: Sequence[Manifest]) -> bool:
        return self.predicate(manifests)


def declares(*prefixes: str, pattern: re.Pattern[str] | None = None) -> Predicate:
    """Predicate: any manifest declares a dependency starting with one of *prefixes*."""

    def _check(manifests: Sequence[Manifest]) -> bool:
        return any(uses_library(manifests, prefix, pattern) for prefix in prefixes)

    return _check


def all_of(*predicates: Predicate) -> Predicate:
    def _check(manifests: Sequence[Manifest]) -> bool:
        return all(p(manifests) for p in predicates)

    return _check


def build_rules(patterns: LineagePatterns | None = None) -> list[Rule]:
    """The ranked rule list; order is part of the contract."""
    patterns = patterns or LineagePatterns()
    return [
        Rule(
            LibraryVariant.REACT_UIC,
            declares(REACT_UI_PACKAGE, pattern=patterns.react),
            "react components, current lineage",
        ),
        Rule(
            LibraryVariant.ANGULAR_UIC,
            declares(ANGULAR_UI_PACKAGE, pattern=patterns.angular),
            "angular components, current lineage",
        ),
        Rule(
            LibraryVariant.VUE_UIC,
            all_of(declares(WEB_COMPONENTS_PACKAGE), declares(*VUE_PACKAGES)),
            "web components consumed from vue",
        ),
        Rule(
            LibraryVariant.WC_UIC,
            declares(WEB_COMPONENTS_PACKAGE),
            "web components",
        ),
        Rule(LibraryVariant.REACT_UIC_OLD, declares(REACT_UI_PACKAGE), "react components, legacy"),
        Rule(
            LibraryVariant.ANGULAR_UIC_OLD,
            declares(ANGULAR_UI_PACKAGE),
            "angular components, legacy",
        ),
        Rule(LibraryVariant.VUE_UIC_OLD, declares(VUE_UI_PACKAGE), "vue components, legacy"),
        Rule(LibraryVariant.REACT, declares(*REACT_PACKAGES), "plain react"),
        Rule(LibraryVariant.ANGULAR, declares(*ANGULAR_PACKAGES), "plain angular"),
        Rule(LibraryVariant.VUE, declares(*VUE_PACKAGES), "plain vue"),
    ]


class LibraryClassifier:
    """Assign exactly one :class:`LibraryVariant` to a set of manifests."""

    def __init__(self, rules: list[Rule] | None = None) -> None:
        self.rules = rules if rules is not None else build_rules()

    def classify(self, manifests: Sequence[Manifest]) -> LibraryVariant:
        for rule in self.rules:
            if rule.matches(manifests):
                return rule.variant
        return LibraryVariant.NONE


def classify(
    manifests: Sequence[Manifest], patterns: LineagePatterns | None = None
) -> LibraryVariant:
    return LibraryClassifier(build_rules(patterns)).classify(manifests)
