"""Data models for the usage scanner engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class LibraryVariant(str, Enum):
    """Framework + component-library combination a repo is classified as."""

    REACT_UIC = "react-uic"
    ANGULAR_UIC = "angular-uic"
    VUE_UIC = "vue-uic"
    WC_UIC = "wc-uic"
    REACT_UIC_OLD = "react-uic-old"
    ANGULAR_UIC_OLD = "angular-uic-old"
    VUE_UIC_OLD = "vue-uic-old"
    REACT = "react"
    ANGULAR = "angular"
    VUE = "vue"
    NONE = "none"

    @property
    def is_ui_library(self) -> bool:
        """True for the variants whose component usage gets counted."""
        return self in _UI_LIBRARY_VARIANTS


_UI_LIBRARY_VARIANTS = frozenset(
    {
        LibraryVariant.REACT_UIC,
        LibraryVariant.ANGULAR_UIC,
        LibraryVariant.VUE_UIC,
        LibraryVariant.WC_UIC,
    }
)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a non-fatal failure marker.

    Callers decide explicitly whether a failure is dropped or surfaced.
    """

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> Outcome[T]:
        return cls(error=error)


@dataclass(frozen=True)
class Manifest:
    """A parsed ``package.json``."""

    name: str
    dependencies: Mapping[str, str]
    dev_dependencies: Mapping[str, str]
    source_file: str = "package.json"

    def declared(self) -> list[tuple[str, str]]:
        """All ``(name, version)`` pairs; ``dependencies`` win over ``devDependencies``."""
        pairs = list(self.dependencies.items())
        pairs.extend(
            (name, version)
            for name, version in self.dev_dependencies.items()
            if name not in self.dependencies
        )
        return pairs


@dataclass(frozen=True)
class Repo:
    """Repository descriptor as listed by the hosting provider."""

    name: str
    html_url: str
    ssh_url: str
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    archived: bool = False
    disabled: bool = False
    visibility: str = "public"

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Repo:
        return cls(
            name=data["name"],
            html_url=data.get("html_url", ""),
            ssh_url=data.get("ssh_url", ""),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            pushed_at=data.get("pushed_at"),
            archived=bool(data.get("archived", False)),
            disabled=bool(data.get("disabled", False)),
            visibility=data.get("visibility") or "public",
        )

    @classmethod
    def local(cls, path: Path) -> Repo:
        """Descriptor for an already checked-out tree (no remote)."""
        resolved = path.resolve()
        return cls(name=resolved.name, html_url="", ssh_url=str(resolved))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "html_url": self.html_url,
            "ssh_url": self.ssh_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "pushed_at": self.pushed_at,
            "archived": self.archived,
            "disabled": self.disabled,
            "visibility": self.visibility,
        }


@dataclass(frozen=True)
class Result:
    """Analysis outcome for one repository."""

    repo: str
    lib: LibraryVariant
    versions: tuple[str, ...] = ()
    count: int = 0
    elements: Mapping[str, int] = field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    html_url: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "repo": self.repo,
            "html_url": self.html_url,
            "lib": self.lib.value,
            "versions": list(self.versions),
            "count": self.count,
            "elements": dict(self.elements),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "pushedAt": self.pushed_at,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


# Report keys for each variant counter.
_STATS_KEYS: dict[LibraryVariant, str] = {
    LibraryVariant.REACT: "reactCount",
    LibraryVariant.ANGULAR: "angularCount",
    LibraryVariant.VUE: "vueCount",
    LibraryVariant.REACT_UIC: "reactUICLibCount",
    LibraryVariant.ANGULAR_UIC: "angularUICLibCount",
    LibraryVariant.VUE_UIC: "vueUICLibCount",
    LibraryVariant.WC_UIC: "wcUICLibCount",
    LibraryVariant.REACT_UIC_OLD: "reactUICLibCountOld",
    LibraryVariant.ANGULAR_UIC_OLD: "angularUICLibCountOld",
    LibraryVariant.VUE_UIC_OLD: "vueUICLibCountOld",
    LibraryVariant.NONE: "noneCount",
}


@dataclass(frozen=True)
class Stats:
    """Immutable per-variant counters; :meth:`add` returns a new accumulator."""

    counts: Mapping[LibraryVariant, int] = field(
        default_factory=lambda: MappingProxyType({v: 0 for v in LibraryVariant})
    )

    def add(self, variant: LibraryVariant) -> Stats:
        counts = dict(self.counts)
        counts[variant] = counts.get(variant, 0) + 1
        return Stats(counts=MappingProxyType(counts))

    def __getitem__(self, variant: LibraryVariant) -> int:
        return self.counts.get(variant, 0)

    @property
    def total(self) -> int:
        """Repositories that resolved to any variant other than ``none``."""
        return sum(n for v, n in self.counts.items() if v is not LibraryVariant.NONE)

    @property
    def processed(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict[str, int]:
        data = {"totalLibCount": self.total}
        for variant, key in _STATS_KEYS.items():
            data[key] = self[variant]
        return data


@dataclass(frozen=True)
class Report:
    stats: Stats
    data: tuple[Result, ...]

    @classmethod
    def build(cls, stats: Stats, results: list[Result]) -> Report:
        ordered = sorted(results, key=lambda r: r.count, reverse=True)
        return cls(stats=stats, data=tuple(ordered))

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "data": [r.to_dict() for r in self.data],
        }
