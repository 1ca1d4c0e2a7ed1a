"""Authentication helpers for the pull request service API."""

from __future__ import annotations

import httpx

from .. import __version__
from ..config import Config


def get_github_client(config: Config) -> httpx.Client:
    """Return a configured httpx client with the bearer token set."""
    return httpx.Client(
        base_url=config.github_api_url,
        headers={
            "Authorization": f"Bearer {config.github_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"mergeflow/{__version__}",
        },
        timeout=config.http_timeout_s,
    )
