"""Manifest loader — discover and parse every package.json in a checkout."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog

from uiadoption.engines.usage_scanner.models import Manifest, Outcome

log = structlog.get_logger("uiadoption.engine")

MANIFEST_NAME = "package.json"
EXCLUDED_DIRS = frozenset({"node_modules"})


def discover_manifests(repo_path: Path) -> list[Path]:
    """Walk the repo and return every ``package.json`` outside ``node_modules``."""
    matches: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(repo_path):
        dirnames[:] = [d for d in dirnames if d not in EXCLUDED_DIRS]
        if MANIFEST_NAME in filenames:
            matches.append(Path(dirpath) / MANIFEST_NAME)
    return sorted(matches)


def _dependency_map(raw: Any) -> Mapping[str, str]:
    if not isinstance(raw, dict):
        return MappingProxyType({})
    return MappingProxyType(
        {str(name): str(version) for name, version in raw.items() if isinstance(version, str)}
    )


def parse_manifest(file_path: Path, content: str, source_file: str | None = None) -> Outcome[Manifest]:
    """Parse manifest text into a :class:`Manifest`, or a failure outcome."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        return Outcome.failure(f"{file_path}: invalid JSON ({exc.msg})")
    except (ValueError, RecursionError) as exc:
        return Outcome.failure(f"{file_path}: invalid JSON ({type(exc).__name__})")
    if not isinstance(data, dict):
        return Outcome.failure(f"{file_path}: top-level value is not an object")

    name = data.get("name")
    return Outcome.success(
        Manifest(
            name=name if isinstance(name, str) else "",
            dependencies=_dependency_map(data.get("dependencies")),
            dev_dependencies=_dependency_map(data.get("devDependencies")),
            source_file=source_file or file_path.name,
        )
    )


def load_manifest(file_path: Path, repo_path: Path | None = None) -> Outcome[Manifest]:
    """Read and parse one manifest file."""
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return Outcome.failure(f"{file_path}: {exc.strerror or exc}")
    rel = str(file_path.relative_to(repo_path)) if repo_path is not None else None
    return parse_manifest(file_path, content, rel)


def load_manifests(repo_path: Path) -> list[Manifest]:
    """Load every manifest under *repo_path*; unreadable ones are skipped."""
    manifests: list[Manifest] = []
    for file_path in discover_manifests(repo_path):
        outcome = load_manifest(file_path, repo_path)
        if outcome.ok and outcome.value is not None:
            manifests.append(outcome.value)
        else:
            log.debug("manifests.skipped", error=outcome.error)
    return manifests
