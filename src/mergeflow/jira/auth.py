"""Authentication helpers for the issue tracker API."""

from __future__ import annotations

import httpx

from .. import __version__
from ..config import Config
from ..constants import JIRA_API_PATH


def get_jira_client(config: Config) -> httpx.Client:
    """Return an httpx client using basic auth (account email + API token)."""
    return httpx.Client(
        base_url=f"{config.jira_base_url}/{JIRA_API_PATH}",
        auth=(config.jira_email or "", config.jira_api_token or ""),
        headers={
            "Accept": "application/json",
            "User-Agent": f"mergeflow/{__version__}",
        },
        timeout=config.http_timeout_s,
    )
