"""CLI entry point: uiadoption.

Subcommands:
    uiadoption run [--limit N] [--org ORG]   # scan every org repo, write + render the report
    uiadoption scan /path/to/checkout        # analyze one local tree
    uiadoption render                        # rebuild index.html from existing data files
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path

import click
import httpx
import structlog

from uiadoption.core.config import Settings, load_settings
from uiadoption.core.github import GitHubClient
from uiadoption.core.logging import setup_logging
from uiadoption.engines.usage_scanner.analyzer import RepositoryAnalyzer, analyze_path
from uiadoption.engines.usage_scanner.models import Repo, Result
from uiadoption.engines.usage_scanner.repo import GitCheckout
from uiadoption.engines.usage_scanner.runner import BatchOutcome, run_batch
from uiadoption.exceptions import GitHubError, ReportWriteError
from uiadoption.progress import ProgressTracker
from uiadoption.storage.cache import RepoCache
from uiadoption.storage.report import ReportWriter

log = structlog.get_logger("uiadoption.cli")


async def _collect_repos(settings: Settings, use_cache: bool) -> list[Repo]:
    cache = RepoCache(settings.cache_dir, limited=settings.limit is not None)
    if use_cache:
        repos = cache.load()
        if repos:
            return repos

    async with GitHubClient(settings.github_token) as client:
        repos = await client.list_org_repos(settings.github_org)
    cache.save(repos)
    return repos


async def _scan_repos(settings: Settings, repos: list[Repo]) -> BatchOutcome:
    analyzer = RepositoryAnalyzer(
        GitCheckout(settings.workdir, timeout=settings.clone_timeout),
        settings.patterns,
    )
    tracker = ProgressTracker(total=len(repos))
    length = len(repos) if settings.limit is None else min(settings.limit, len(repos))
    with click.progressbar(length=length, label="Scanning repos", file=sys.stderr) as bar:
        tracker.callbacks.append(lambda _p: bar.update(1))
        return await run_batch(repos, analyzer.analyze, limit=settings.limit, progress=tracker)


async def _run_pipeline(settings: Settings, use_cache: bool) -> Path:
    repos = await _collect_repos(settings, use_cache)
    outcome = await _scan_repos(settings, repos)

    writer = ReportWriter(settings.report_dir)
    path = writer.write(outcome.report())
    writer.render()
    return path


def _print_result(result: Result, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"{result.repo}: {result.lib.value}")
    if result.error:
        click.echo(f"  error: {result.error}")
    if result.versions:
        click.echo(f"  versions: {', '.join(result.versions)}")
    if result.elements:
        click.echo(f"  components: {result.count}")
        for name, n in sorted(result.elements.items(), key=lambda kv: (-kv[1], kv[0])):
            if n:
                click.echo(f"    {name:<20} {n}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help=".env file to load")
@click.pass_context
def main(ctx: click.Context, verbose: bool, env_file: str | None) -> None:
    """uiadoption: UI framework and component-library adoption across an org's repos."""
    setup_logging(verbose)
    ctx.obj = load_settings(env_file)


@main.command("run")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Analyze at most N repos")
@click.option("--org", default=None, help="GitHub organisation to inventory")
@click.option("--no-cache", is_flag=True, help="Ignore the cached repository list")
@click.pass_obj
def run(settings: Settings, limit: int | None, org: str | None, no_cache: bool) -> None:
    """Scan every repository of the org and write the report."""
    overrides: dict[str, object] = {}
    if limit is not None:
        overrides["limit"] = limit
    if org:
        overrides["github_org"] = org
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    try:
        path = asyncio.run(_run_pipeline(settings, use_cache=not no_cache))
    except (httpx.HTTPError, GitHubError) as e:
        log.error("github.list_failed", org=settings.github_org, error=str(e))
        click.echo(f"Error: could not list repositories of {settings.github_org}: {e}", err=True)
        sys.exit(1)
    except ReportWriteError as e:
        log.error("report.write_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Report written to {path}")


@main.command("scan")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def scan(settings: Settings, path: Path, as_json: bool) -> None:
    """Analyze a local checkout without cloning anything."""
    result = asyncio.run(analyze_path(path, settings=settings))
    _print_result(result, as_json)


@main.command("render")
@click.pass_obj
def render(settings: Settings) -> None:
    """Regenerate index.html from the data files on disk."""
    try:
        path = ReportWriter(settings.report_dir).render()
    except ReportWriteError as e:
        log.error("report.write_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Report rendered to {path}")
