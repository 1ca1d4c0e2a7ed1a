"""Issue tracker REST API wrapper.

Known limitation: the API has no append operation, so ``append_description``
reads the description, concatenates locally and writes the whole field
back.  There is no concurrency control; an edit made by someone else
between the read and the write is overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import Config
from ..errors import NotFound, RemoteError
from ..policy.redaction import redact_secrets
from .auth import get_jira_client

logger = logging.getLogger(__name__)

_SERVICE = "issue tracker"


@dataclass
class Issue:
    """Fields of an issue that mergeflow reads or rewrites."""

    key: str
    summary: str
    issue_type: str | None
    status: str | None
    description: str
    url: str | None = None


def _jira_request(
    config: Config,
    method: str,
    path: str,
    *,
    json: dict[str, object] | None = None,
    not_found: tuple[str, str] | None = None,
) -> object | None:
    """Perform an HTTP request against the issue tracker API.

    ``not_found`` names the entity for a ``NotFound`` error on 404; without
    it a 404 is an ordinary ``RemoteError``.
    """
    config.require_jira()
    try:
        with get_jira_client(config) as client:
            resp = client.request(method, path, json=json)
    except httpx.HTTPError as exc:
        logger.error("Issue tracker request failed: %s", exc)
        raise RemoteError(_SERVICE, None, redact_secrets(str(exc), config.secrets)) from exc

    if not_found is not None and resp.status_code == 404:
        raise NotFound(*not_found)

    if 200 <= resp.status_code < 300:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    detail = redact_secrets(resp.text, config.secrets)
    logger.error("Issue tracker error %s: %s", resp.status_code, detail)
    raise RemoteError(_SERVICE, resp.status_code, detail)


def _name_of(value: object) -> str | None:
    if isinstance(value, dict):
        name = value.get("name")
        return str(name) if name is not None else None
    return None


def get_issue(config: Config, key: str) -> Issue:
    data = _jira_request(config, "GET", f"issue/{key}", not_found=("issue", key))
    if not isinstance(data, dict):
        raise RemoteError(_SERVICE, None, f"unexpected response for issue {key}")
    fields = data.get("fields") or {}
    return Issue(
        key=str(data.get("key") or key),
        summary=str(fields.get("summary") or ""),
        issue_type=_name_of(fields.get("issuetype")),
        status=_name_of(fields.get("status")),
        description=str(fields.get("description") or ""),
        url=f"{config.jira_base_url}/browse/{data.get('key') or key}",
    )


def update_description(config: Config, key: str, description: str) -> None:
    _jira_request(
        config,
        "PUT",
        f"issue/{key}",
        json={"fields": {"description": description}},
        not_found=("issue", key),
    )


def append_text(existing: str | None, text: str) -> str:
    """Join ``text`` to ``existing`` with a blank line, or return it alone."""
    if not existing or not existing.strip():
        return text
    return f"{existing}\n\n{text}"


def append_description(config: Config, key: str, text: str) -> str:
    """Append ``text`` to the issue description and return the new description."""
    issue = get_issue(config, key)
    description = append_text(issue.description, text)
    update_description(config, key, description)
    logger.info("Updated description of issue %s", key)
    return description
