"""Issue tracker integration."""

from .api import Issue, append_description, append_text, get_issue, update_description
from .auth import get_jira_client
from .templates import format_pr_note

__all__ = [
    "Issue",
    "append_description",
    "append_text",
    "format_pr_note",
    "get_issue",
    "get_jira_client",
    "update_description",
]
