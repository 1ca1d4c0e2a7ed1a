"""Pull request service REST API wrapper."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from ..config import Config
from ..errors import RemoteError
from ..policy.redaction import redact_secrets
from .auth import get_github_client

logger = logging.getLogger(__name__)

_SERVICE = "pull request service"


@dataclass
class PullRequest:
    """A pull request created by ``create_pull_request``."""

    url: str
    number: int
    requested_reviewers: list[str] = field(default_factory=list)
    reviewer_error: str | None = None


def _github_request(
    config: Config,
    method: str,
    path: str,
    *,
    json: dict[str, object] | None = None,
) -> object | None:
    """Perform an HTTP request against ``/repos/{owner}/{repo}/{path}``.

    Transport failures and non-2xx responses raise ``RemoteError`` with any
    credentials redacted from the message.
    """
    config.require_github()
    url = f"/repos/{config.github_owner}/{config.github_repo}/{path.lstrip('/')}"

    try:
        with get_github_client(config) as client:
            resp = client.request(method, url, json=json)
    except httpx.HTTPError as exc:
        logger.error("Pull request API request failed: %s", exc)
        raise RemoteError(_SERVICE, None, redact_secrets(str(exc), config.secrets)) from exc

    if 200 <= resp.status_code < 300:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    detail = redact_secrets(resp.text, config.secrets)
    logger.error("Pull request API error %s: %s", resp.status_code, detail)
    raise RemoteError(_SERVICE, resp.status_code, detail)


def request_reviewers(config: Config, number: int, reviewers: Iterable[str]) -> list[str]:
    """Request reviews on an existing pull request and return the logins sent."""
    logins = sorted(set(reviewers))
    _github_request(config, "POST", f"pulls/{number}/requested_reviewers", json={"reviewers": logins})
    return logins


def create_pull_request(
    config: Config,
    title: str,
    head: str,
    base: str,
    body: str,
    reviewers: Iterable[str] = (),
) -> PullRequest:
    """Open a pull request and then request reviewers.

    Reviewer assignment is a separate call.  If it fails the pull request is
    kept and the failure is recorded on ``PullRequest.reviewer_error``.
    """
    payload: dict[str, object] = {"title": title, "head": head, "base": base, "body": body}
    data = _github_request(config, "POST", "pulls", json=payload)
    if not isinstance(data, dict):
        raise RemoteError(_SERVICE, None, "unexpected response to pull request creation")
    html_url = data.get("html_url")
    number = data.get("number")
    if not html_url or not isinstance(number, int) or isinstance(number, bool):
        raise RemoteError(_SERVICE, None, "pull request response missing html_url/number")
    pr = PullRequest(url=str(html_url), number=number)
    logger.info("Created pull request #%s: %s", pr.number, pr.url)

    logins = sorted(set(reviewers))
    if logins:
        try:
            pr.requested_reviewers = request_reviewers(config, pr.number, logins)
            logger.info("Requested reviews from %s", ", ".join(pr.requested_reviewers))
        except RemoteError as exc:
            pr.reviewer_error = str(exc)
            logger.warning("Pull request created but reviewer assignment failed: %s", exc)
    return pr
