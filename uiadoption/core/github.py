"""GitHub organisation listing: ``GET /orgs/{org}/repos`` across every page."""

from __future__ import annotations

import asyncio
import re
import time

import httpx
import structlog

from uiadoption.engines.usage_scanner.models import Repo
from uiadoption.exceptions import GitHubError, RateLimitError

log = structlog.get_logger("uiadoption.github")

_NEXT_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="next"')

PAGE_SIZE = 100
MAX_ATTEMPTS = 3
BACKOFF_SECONDS = 1.0
DEFAULT_RATE_LIMIT_WAIT = 60


def next_page_url(link_header: str) -> str | None:
    """The ``rel="next"`` target of a ``Link`` header, if any."""
    match = _NEXT_LINK_RE.search(link_header)
    return match.group(1) if match else None


def _header_int(headers: httpx.Headers, name: str) -> int | None:
    try:
        return int(headers[name])
    except (KeyError, ValueError):
        return None


def rate_limit_wait(headers: httpx.Headers, now: float | None = None) -> int:
    """Seconds to wait before the quota is back: ``Retry-After``, else ``X-RateLimit-Reset``."""
    retry_after = _header_int(headers, "Retry-After")
    if retry_after is not None:
        return max(retry_after, 1)
    reset = _header_int(headers, "X-RateLimit-Reset")
    if reset is not None:
        return max(reset - int(now if now is not None else time.time()), 1)
    return DEFAULT_RATE_LIMIT_WAIT


def is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code not in (403, 429):
        return False
    # Secondary limits only send Retry-After.
    return _header_int(response.headers, "X-RateLimit-Remaining") == 0 or "Retry-After" in response.headers


class GitHubClient:
    """Lists the repositories of one organisation."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = "https://api.github.com",
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"token {token}"
        self.max_attempts = max_attempts
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, timeout=30.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def list_org_repos(self, org: str, *, max_pages: int = 100) -> list[Repo]:
        """Return every repository of *org* in API order.

        The first request asks for ``per_page`` results; later ones follow the
        ``next`` link verbatim, which already carries the query. When the
        quota runs out between pages the listing sleeps until it resets.
        """
        repos: list[Repo] = []
        url: str | None = f"/orgs/{org}/repos"
        params: dict[str, int] | None = {"per_page": PAGE_SIZE}
        pages = 0

        while url is not None and pages < max_pages:
            response = await self._get(url, params)
            repos.extend(self._page_repos(org, response))
            pages += 1
            url = next_page_url(response.headers.get("Link", ""))
            params = None
            if url is not None and _header_int(response.headers, "X-RateLimit-Remaining") == 0:
                wait = rate_limit_wait(response.headers)
                log.warning("github.rate_limit_wait", org=org, wait_seconds=wait)
                await asyncio.sleep(wait)

        log.info("github.repos_listed", org=org, count=len(repos), pages=pages)
        return repos

    @staticmethod
    def _page_repos(org: str, response: httpx.Response) -> list[Repo]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise GitHubError(f"repository listing of {org} is not JSON") from exc
        if not isinstance(payload, list):
            raise GitHubError(f"repository listing of {org} is not a JSON array")
        return [Repo.from_api(item) for item in payload if isinstance(item, dict)]

    async def _get(self, url: str, params: dict[str, int] | None) -> httpx.Response:
        """GET one page, retrying timeouts, 5xx answers and rate-limit refusals."""
        failure: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            wait: float = BACKOFF_SECONDS * 2 ** (attempt - 1)
            try:
                response = await self._client.get(url, params=params)
            except httpx.TimeoutException as exc:
                log.warning("github.timeout", url=url, attempt=attempt)
                failure = exc
            else:
                if is_rate_limited(response):
                    wait = rate_limit_wait(response.headers)
                    log.warning("github.rate_limit", url=url, wait_seconds=wait, attempt=attempt)
                    failure = RateLimitError(int(wait))
                elif response.status_code >= 500:
                    log.warning("github.server_error", url=url, status=response.status_code, attempt=attempt)
                    failure = httpx.HTTPStatusError(
                        f"server error {response.status_code}", request=response.request, response=response
                    )
                else:
                    response.raise_for_status()
                    return response

            if attempt < self.max_attempts:
                await asyncio.sleep(wait)

        assert failure is not None
        raise failure
