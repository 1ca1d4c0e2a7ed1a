"""Text blocks written into issue descriptions."""

from __future__ import annotations

from datetime import date


def format_pr_note(day: date, source_branch: str, target_branch: str, pr_url: str) -> str:
    """Return the note appended to an issue after a merge pull request is opened."""
    return (
        f"*Merge pull request* ({day.isoformat()})\n"
        f"Source branch: {source_branch}\n"
        f"Target branch: {target_branch}\n"
        f"Pull request: {pr_url}"
    )
