"""Custom exceptions for uiadoption."""


class UIAdoptionError(Exception):
    """Base exception for all uiadoption errors."""


class FetchError(UIAdoptionError):
    """Raised when a repository checkout cannot be produced."""

    def __init__(self, repo_url: str, reason: str):
        self.repo_url = repo_url
        self.reason = reason
        super().__init__(f"could not fetch {repo_url}: {reason}")


class ReportWriteError(UIAdoptionError):
    """Raised when the report sink cannot persist a report."""


class GitHubError(UIAdoptionError):
    """Raised when the GitHub API returns something other than a repo listing."""


class RateLimitError(GitHubError):
    """Raised when the rate limit is still exhausted after every retry."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"rate limit exceeded, retry after {retry_after}s")
