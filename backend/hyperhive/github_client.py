"""GitHub REST client and the developer analysis service built on it."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .config import Settings, get_settings
from .github_models import DeveloperStrongAreas, GitHubAnalysisRequest, GitHubCommit, GitHubPullRequest
from .pattern_analyzer import analyze_developer

logger = logging.getLogger(__name__)

PER_PAGE = 100
COMMIT_DETAIL_LIMIT = 50
USER_AGENT = "HyperHiveBackend/1.0"


class GitHubClientError(RuntimeError):
    """Raised when GitHub answers with an unexpected status or payload."""


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _has_next_page(response: httpx.Response) -> bool:
    link = response.headers.get("Link")
    return bool(link) and 'rel="next"' in link


def _validate_items(model: Any, raw: List[Any], path: str) -> List[Any]:
    try:
        return [model.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise GitHubClientError(f"GitHub returned an unexpected payload for {path}: {exc}") from exc


class GitHubClient:
    """Paginated access to commits and pull requests of one repository."""

    def __init__(self, settings: Optional[Settings] = None, *, client: Optional[httpx.AsyncClient] = None) -> None:
        settings = settings or get_settings()
        headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
        if settings.github_access_token:
            headers["Authorization"] = f"Bearer {settings.github_access_token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.github_api_url.rstrip("/"),
            timeout=settings.http_timeout_seconds,
            follow_redirects=True,
        )
        self._headers = headers

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            return await self._client.get(path, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise GitHubClientError(f"GitHub request to {path} failed: {exc}") from exc

    async def _paginate(self, path: str, params: Dict[str, Any]) -> List[Any]:
        """Collect every page; a 404 yields whatever was gathered so far."""
        items: List[Any] = []
        page = 1
        while True:
            response = await self._get(path, {**params, "per_page": PER_PAGE, "page": page})
            if response.status_code == 404:
                logger.warning("GitHub resource %s not found", path)
                break
            if response.is_error or response.is_redirect:
                raise GitHubClientError(f"GitHub returned {response.status_code} for {path}")
            try:
                batch = response.json()
            except ValueError as exc:
                raise GitHubClientError(f"GitHub returned invalid JSON for {path}: {exc}") from exc
            if not isinstance(batch, list):
                raise GitHubClientError(f"GitHub returned a {type(batch).__name__} instead of a list for {path}")
            if not batch:
                break
            items.extend(batch)
            if not _has_next_page(response):
                break
            page += 1
        return items

    async def list_commits(
        self,
        owner: str,
        repository: str,
        author: str,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[GitHubCommit]:
        params: Dict[str, Any] = {"author": author}
        if since is not None:
            params["since"] = _format_timestamp(since)
        if until is not None:
            params["until"] = _format_timestamp(until)

        path = f"/repos/{owner}/{repository}/commits"
        raw = await self._paginate(path, params)
        commits = _validate_items(GitHubCommit, raw, path)

        for commit in commits[:COMMIT_DETAIL_LIMIT]:
            try:
                detail = await self.get_commit(owner, repository, commit.sha)
            except (GitHubClientError, ValidationError) as exc:
                logger.warning("Failed to fetch stats for commit %s: %s", commit.sha, exc)
                continue
            if detail is None:
                continue
            if detail.stats is not None:
                commit.stats = detail.stats
            if detail.files is not None:
                commit.files = detail.files
        return commits

    async def get_commit(self, owner: str, repository: str, sha: str) -> Optional[GitHubCommit]:
        response = await self._get(f"/repos/{owner}/{repository}/commits/{sha}")
        if response.is_error:
            logger.warning("GitHub returned %s for commit %s", response.status_code, sha)
            return None
        try:
            return GitHubCommit.model_validate(response.json())
        except ValueError as exc:
            raise GitHubClientError(f"GitHub returned invalid commit payload for {sha}: {exc}") from exc

    async def list_pull_requests(self, owner: str, repository: str, username: str) -> List[GitHubPullRequest]:
        """Pull requests in any state opened by ``username`` (login compared case-insensitively)."""
        path = f"/repos/{owner}/{repository}/pulls"
        raw = await self._paginate(path, {"state": "all"})
        login = username.lower()
        pull_requests = _validate_items(GitHubPullRequest, raw, path)
        return [pr for pr in pull_requests if pr.user is not None and pr.user.login.lower() == login]


class GitHubService:
    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def get_commits(self, request: GitHubAnalysisRequest) -> List[GitHubCommit]:
        return await self._client.list_commits(
            request.owner,
            request.repository,
            request.username,
            since=request.since,
            until=request.until,
        )

    async def get_pull_requests(self, request: GitHubAnalysisRequest) -> List[GitHubPullRequest]:
        return await self._client.list_pull_requests(request.owner, request.repository, request.username)

    async def analyze(self, request: GitHubAnalysisRequest) -> DeveloperStrongAreas:
        logger.info("Analyzing developer strong areas for %s in %s/%s", request.username, request.owner, request.repository)
        commits = await self.get_commits(request)
        pull_requests = await self.get_pull_requests(request)
        analysis = analyze_developer(request.username, commits, pull_requests)
        logger.info(
            "Analysis completed for %s: %d languages, %d technologies",
            request.username,
            len(analysis.languages),
            len(analysis.technologies),
        )
        return analysis


__all__ = [
    "COMMIT_DETAIL_LIMIT",
    "GitHubClient",
    "GitHubClientError",
    "GitHubService",
    "PER_PAGE",
]
