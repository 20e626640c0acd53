"""Git checkout helper: one shared working directory, cloned and removed per repo."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Protocol

import structlog

from uiadoption.core.config import DEFAULT_CLONE_TIMEOUT
from uiadoption.engines.usage_scanner.models import Repo
from uiadoption.exceptions import FetchError

log = structlog.get_logger("uiadoption.engine")


class Fetcher(Protocol):
    """Materialises a readable tree for a repo and tears it down again."""

    async def fetch(self, repo: Repo) -> Path: ...

    def cleanup(self) -> None: ...


async def shallow_clone(
    repo_url: str, target: Path, *, timeout: float | None = DEFAULT_CLONE_TIMEOUT
) -> Path:
    """Clone the default branch of *repo_url* into *target* (depth 1).

    Raises :class:`FetchError` on a non-zero exit code or when *timeout*
    seconds elapse.
    """
    cmd = ["git", "clone", "--depth", "1", "--", repo_url, str(target)]
    await _run(cmd, repo_url, timeout)
    return target


async def _run(cmd: list[str], repo_url: str, timeout: float | None) -> None:
    """Run a git command, raising FetchError on failure."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise FetchError(repo_url, f"cannot start git: {exc}") from exc

    try:
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        proc.kill()
        await proc.wait()
        raise FetchError(repo_url, f"git clone timed out after {timeout}s") from exc

    if proc.returncode != 0:
        raise FetchError(
            repo_url,
            f"git command failed (exit {proc.returncode}): {stderr.decode(errors='replace').strip()}",
        )


class GitCheckout:
    """Fetcher that shallow-clones into a single well-known directory."""

    def __init__(self, workdir: Path, *, timeout: float | None = DEFAULT_CLONE_TIMEOUT) -> None:
        self.workdir = workdir
        self.timeout = timeout

    async def fetch(self, repo: Repo) -> Path:
        url = repo.ssh_url or repo.html_url
        if not url:
            raise FetchError(repo.name, "repository has no clone URL")
        # A leftover tree from an interrupted run would make git refuse the clone.
        self.cleanup()
        log.info("analyzer.cloning", repo=repo.name, url=url)
        return await shallow_clone(url, self.workdir, timeout=self.timeout)

    def cleanup(self) -> None:
        shutil.rmtree(self.workdir, ignore_errors=True)


class LocalCheckout:
    """Fetcher for a tree that already exists on disk; never removes it."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch(self, repo: Repo) -> Path:
        if not self.path.is_dir():
            raise FetchError(str(self.path), "not a directory")
        return self.path

    def cleanup(self) -> None:
        return None
