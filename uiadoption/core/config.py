"""Runtime configuration from environment variables, optionally seeded from ``.env``."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from dotenv import find_dotenv, load_dotenv

log = structlog.get_logger("uiadoption.config")

# Current major lineages of the @abgov component libraries.
DEFAULT_REACT_PATTERN = r"4\.\d{1,2}\.\d{1,2}"
DEFAULT_ANGULAR_PATTERN = r"2\.\d{1,2}\.\d{1,2}"
DEFAULT_VUE_PATTERN = r"1\.\d{1,2}\.\d{1,2}"

DEFAULT_ORG = "govalta"
DEFAULT_CLONE_TIMEOUT = 300.0


def parse_limit(raw: str | None) -> int | None:
    """Parse the ``LIMIT`` setting.

    Returns ``None`` (unbounded) when the value is unset, not an integer,
    or negative.
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        log.warning("config.invalid_limit", value=raw)
        return None
    if value < 0:
        log.warning("config.invalid_limit", value=raw)
        return None
    return value


def _compile(env_name: str, default: str) -> re.Pattern[str]:
    raw = os.environ.get(env_name) or default
    try:
        return re.compile(raw)
    except re.error:
        log.warning("config.invalid_pattern", name=env_name, value=raw)
        return re.compile(default)


def _float(env_name: str, default: float) -> float:
    raw = os.environ.get(env_name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("config.invalid_number", name=env_name, value=raw)
        return default


@dataclass(frozen=True)
class LineagePatterns:
    """Version patterns identifying the current major lineage of each library."""

    react: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_REACT_PATTERN))
    angular: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_ANGULAR_PATTERN))
    vue: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_VUE_PATTERN))


@dataclass(frozen=True)
class Settings:
    limit: int | None = None
    github_token: str | None = None
    github_org: str = DEFAULT_ORG
    report_dir: Path = Path("report")
    cache_dir: Path = Path(".cache")
    workdir: Path = Path("tmp")
    clone_timeout: float = DEFAULT_CLONE_TIMEOUT
    patterns: LineagePatterns = field(default_factory=LineagePatterns)


def load_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment.

    A ``.env`` file (``env_file`` or the one found from the working
    directory) is loaded first; real environment variables take precedence.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True), override=False)

    return Settings(
        limit=parse_limit(os.environ.get("LIMIT")),
        github_token=os.environ.get("GITHUB_API_TOKEN") or os.environ.get("GITHUB_TOKEN"),
        github_org=os.environ.get("GITHUB_ORG") or DEFAULT_ORG,
        report_dir=Path(os.environ.get("UIADOPTION_REPORT_DIR") or "report"),
        cache_dir=Path(os.environ.get("UIADOPTION_CACHE_DIR") or ".cache"),
        workdir=Path(os.environ.get("UIADOPTION_WORKDIR") or "tmp"),
        clone_timeout=_float("UIADOPTION_CLONE_TIMEOUT", DEFAULT_CLONE_TIMEOUT),
        patterns=LineagePatterns(
            react=_compile("UIADOPTION_REACT_PATTERN", DEFAULT_REACT_PATTERN),
            angular=_compile("UIADOPTION_ANGULAR_PATTERN", DEFAULT_ANGULAR_PATTERN),
            vue=_compile("UIADOPTION_VUE_PATTERN", DEFAULT_VUE_PATTERN),
        ),
    )
