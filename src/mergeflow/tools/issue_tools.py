"""Issue tracker tool implementations."""

from __future__ import annotations

from dataclasses import asdict

from .. import state
from ..jira import api as jira_api


def get_issue(key: str) -> dict[str, object]:
    """Get the summary, type, status and description of an issue."""
    return asdict(jira_api.get_issue(state.CONFIG, key))


def append_issue_note(key: str, text: str) -> dict[str, object]:
    """Append ``text`` to an issue description, separated by a blank line.

    The tracker has no append operation: the description is read, extended
    and written back, so a concurrent edit can be lost.
    """
    description = jira_api.append_description(state.CONFIG, key, text)
    return {"key": key, "description": description}
