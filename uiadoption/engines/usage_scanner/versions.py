"""Declared versions of a dependency across manifests."""

from __future__ import annotations

import re
from collections.abc import Iterable

from uiadoption.engines.usage_scanner.models import Manifest

_QUOTING_CHARS = "\"'`,; \t\r\n"


def clean_version(raw: str) -> str:
    """Strip quoting and punctuation left over from raw-text extraction."""
    return raw.strip(_QUOTING_CHARS)


def get_versions(
    manifests: Iterable[Manifest],
    prefix: str,
    pattern: re.Pattern[str] | None = None,
) -> list[str]:
    """Return every declared version of dependencies whose name starts with *prefix*.

    Order follows the manifests, then ``dependencies`` before
    ``devDependencies``. When *pattern* is given only versions it matches
    (anywhere in the string) are kept.
    """
    versions: list[str] = []
    for manifest in manifests:
        for name, raw in manifest.declared():
            if not name.startswith(prefix):
                continue
            version = clean_version(raw)
            if not version:
                continue
            if pattern is not None and not pattern.search(version):
                continue
            versions.append(version)
    return versions


def uses_library(
    manifests: Iterable[Manifest],
    prefix: str,
    pattern: re.Pattern[str] | None = None,
) -> bool:
    return bool(get_versions(manifests, prefix, pattern))
