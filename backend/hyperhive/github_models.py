"""GitHub REST payloads and the developer analysis result models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from .learner_models import CamelInputModel


class GitHubUser(BaseModel):
    login: str = ""
    id: int = 0
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class GitHubCommitAuthor(BaseModel):
    name: str = ""
    email: str = ""
    date: Optional[datetime] = None


class GitHubCommitDetails(BaseModel):
    message: str = ""
    author: Optional[GitHubCommitAuthor] = None
    committer: Optional[GitHubCommitAuthor] = None


class GitHubCommitStats(BaseModel):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class GitHubCommitFile(BaseModel):
    filename: str = ""
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    status: str = ""


class GitHubCommit(BaseModel):
    sha: str = ""
    commit: Optional[GitHubCommitDetails] = None
    author: Optional[GitHubUser] = None
    committer: Optional[GitHubUser] = None
    stats: Optional[GitHubCommitStats] = None
    files: Optional[List[GitHubCommitFile]] = None

    @property
    def message(self) -> str:
        return self.commit.message if self.commit is not None else ""


class GitHubBranch(BaseModel):
    ref: str = ""
    sha: str = ""


class GitHubPullRequest(BaseModel):
    id: int = 0
    number: int = 0
    title: str = ""
    body: Optional[str] = None
    state: str = ""
    user: Optional[GitHubUser] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    head: Optional[GitHubBranch] = None
    base: Optional[GitHubBranch] = None


class LanguageUsage(BaseModel):
    language: str
    file_count: int = 0
    lines_of_code: int = 0
    percentage: float = 0.0


class TechnologyUsage(BaseModel):
    technology: str
    usage_count: int = 0
    percentage: float = 0.0
    files: List[str] = Field(default_factory=list)


class DomainArea(BaseModel):
    area: str
    contribution_count: int = 0
    percentage: float = 0.0
    examples: List[str] = Field(default_factory=list)


class ConceptUsage(BaseModel):
    concept: str
    occurrence_count: int = 0
    percentage: float = 0.0
    examples: List[str] = Field(default_factory=list)


class DeveloperStrongAreas(BaseModel):
    developer_username: str
    developer_name: str = ""
    total_commits: int = 0
    total_pull_requests: int = 0
    total_lines_added: int = 0
    total_lines_deleted: int = 0
    languages: List[LanguageUsage] = Field(default_factory=list)
    technologies: List[TechnologyUsage] = Field(default_factory=list)
    domain_areas: List[DomainArea] = Field(default_factory=list)
    concepts: List[ConceptUsage] = Field(default_factory=list)
    analysis_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GitHubAnalysisRequest(CamelInputModel):
    owner: str = ""
    repository: str = ""
    username: str = ""
    since: Optional[datetime] = None
    until: Optional[datetime] = None


__all__ = [
    "ConceptUsage",
    "DeveloperStrongAreas",
    "DomainArea",
    "GitHubAnalysisRequest",
    "GitHubBranch",
    "GitHubCommit",
    "GitHubCommitAuthor",
    "GitHubCommitDetails",
    "GitHubCommitFile",
    "GitHubCommitStats",
    "GitHubPullRequest",
    "GitHubUser",
    "LanguageUsage",
    "TechnologyUsage",
]
