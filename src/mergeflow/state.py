"""Shared state module for the mergeflow MCP server.

The configuration is loaded once when the server starts and shared by all
tool modules.  Tool modules import ``CONFIG`` from here instead of reading
the environment themselves.
"""

from __future__ import annotations

from pathlib import Path

from .config import Config
from .git import inspector
from .git.parsing import parse_github_slug
from .git.runner import GitRunner

# Single shared configuration loaded once at import time
CONFIG: Config = Config.load_from_env()


def git_for(repo_path: str) -> GitRunner:
    """Return a runner for ``repo_path`` using the shared timeout."""
    return GitRunner(Path(repo_path), timeout_s=CONFIG.command_timeout_s)


def config_for(git: GitRunner) -> Config:
    """Return the shared configuration, with owner/repo derived from the remote if unset."""
    if CONFIG.repo_slug is not None:
        return CONFIG
    url = inspector.remote_url(git, CONFIG.git_remote)
    return CONFIG.with_repo_slug(parse_github_slug(url)) if url else CONFIG
