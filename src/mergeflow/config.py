"""Configuration loading for mergeflow.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.  The object is built once
at startup and passed explicitly to every collaborator; nothing below the
CLI or server entrypoints reads the environment.

Issue tracker variables (all required to use the issue tracker):
- JIRA_BASE_URL
- JIRA_EMAIL
- JIRA_API_TOKEN

Pull request service variables (all required to open pull requests):
- GITHUB_TOKEN
- GITHUB_OWNER (default: derived from the remote URL by the CLI)
- GITHUB_REPO (default: derived from the remote URL by the CLI)

Optional variables with defaults:
- GITHUB_API_URL (default: 'https://api.github.com')
- GIT_REMOTE (default: 'origin')
- PROJECT_TYPE (default: unset)
- REVIEWERS_<TYPE> (comma separated logins, e.g. REVIEWERS_BACKEND)
- HTTP_TIMEOUT_S (default: 30)
- COMMAND_TIMEOUT_S (default: 300)
- LOG_LEVEL (default: 'INFO')
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

from .constants import (
    COMMAND_TIMEOUT_S,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_REMOTE,
    HTTP_TIMEOUT_S,
)
from .errors import NotConfigured

_REVIEWERS_PREFIX = "REVIEWERS_"


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Config:
    """Configuration values loaded from the environment."""

    jira_base_url: str | None = None
    jira_email: str | None = None
    jira_api_token: str | None = None
    github_token: str | None = None
    github_owner: str | None = None
    github_repo: str | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    git_remote: str = DEFAULT_REMOTE
    project_type: str | None = None
    reviewers: dict[str, list[str]] = field(default_factory=dict)
    http_timeout_s: float = HTTP_TIMEOUT_S
    command_timeout_s: int = COMMAND_TIMEOUT_S
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def load_from_env(cls, env: Mapping[str, str] | None = None, dotenv: bool = True) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present (unless ``dotenv`` is False).
        Missing credentials are not an error here; ``require_jira`` and
        ``require_github`` raise ``NotConfigured`` when a client is used.
        """
        if dotenv:
            load_dotenv()
        if env is None:
            env = os.environ

        reviewers: dict[str, list[str]] = {}
        for name, value in env.items():
            if name.startswith(_REVIEWERS_PREFIX) and len(name) > len(_REVIEWERS_PREFIX):
                reviewers[name[len(_REVIEWERS_PREFIX) :].lower()] = _split_csv(value)

        jira_base_url = env.get("JIRA_BASE_URL") or None
        if jira_base_url:
            jira_base_url = jira_base_url.rstrip("/")

        return cls(
            jira_base_url=jira_base_url,
            jira_email=env.get("JIRA_EMAIL") or None,
            jira_api_token=env.get("JIRA_API_TOKEN") or None,
            github_token=env.get("GITHUB_TOKEN") or None,
            github_owner=env.get("GITHUB_OWNER") or None,
            github_repo=env.get("GITHUB_REPO") or None,
            github_api_url=(env.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).rstrip("/"),
            git_remote=env.get("GIT_REMOTE") or DEFAULT_REMOTE,
            project_type=env.get("PROJECT_TYPE") or None,
            reviewers=reviewers,
            http_timeout_s=float(env.get("HTTP_TIMEOUT_S") or HTTP_TIMEOUT_S),
            command_timeout_s=int(env.get("COMMAND_TIMEOUT_S") or COMMAND_TIMEOUT_S),
            log_level=(env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )

    def with_repo_slug(self, slug: str | None) -> Config:
        """Return a copy with owner/repo filled from ``slug`` where unset."""
        if not slug or (self.github_owner and self.github_repo):
            return self
        owner, _, repo = slug.partition("/")
        return replace(
            self,
            github_owner=self.github_owner or owner,
            github_repo=self.github_repo or repo,
        )

    @property
    def repo_slug(self) -> str | None:
        if self.github_owner and self.github_repo:
            return f"{self.github_owner}/{self.github_repo}"
        return None

    @property
    def secrets(self) -> list[str]:
        """Credential values that must never appear in logs or errors."""
        return [s for s in (self.jira_api_token, self.github_token) if s]

    def require_jira(self) -> None:
        missing = [
            name
            for name, value in (
                ("JIRA_BASE_URL", self.jira_base_url),
                ("JIRA_EMAIL", self.jira_email),
                ("JIRA_API_TOKEN", self.jira_api_token),
            )
            if not value
        ]
        if missing:
            raise NotConfigured("issue tracker", missing)

    def require_github(self) -> None:
        missing = [
            name
            for name, value in (
                ("GITHUB_TOKEN", self.github_token),
                ("GITHUB_OWNER", self.github_owner),
                ("GITHUB_REPO", self.github_repo),
            )
            if not value
        ]
        if missing:
            raise NotConfigured("pull request service", missing)
