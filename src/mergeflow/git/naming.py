"""Branch naming conventions.

Branches are grouped by prefix: everything before the last ``/``.  Merge
branches are created next to the branch they were cut from, so
``Bug/HKBP-222/fix`` merged with ``develop`` becomes
``Bug/HKBP-222/merge_develop_<timestamp>``.  All helpers here are pure.
"""

from __future__ import annotations

import re
from datetime import datetime

from ..constants import MAX_SLUG_LENGTH, MERGE_TIMESTAMP_FORMAT

_ISSUE_KEY_PATTERNS = (
    re.compile(r"^Bug/([A-Z]+-\d+)"),
    re.compile(r"^([A-Z]+-\d+)"),
)
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def prefix(branch_name: str) -> str:
    """Return the part of ``branch_name`` before its last ``/``.

    A name without ``/`` is its own prefix (``"main"`` -> ``"main"``).
    """
    head, sep, _ = branch_name.rpartition("/")
    return head if sep else branch_name


def merge_timestamp(now: datetime) -> str:
    return now.strftime(MERGE_TIMESTAMP_FORMAT)


def new_merge_branch_name(original_branch: str, target_branch: str, timestamp: str) -> str:
    return f"{prefix(original_branch)}/merge_{target_branch}_{timestamp}"


def derive_issue_key(branch_name: str) -> str | None:
    """Extract an issue key such as ``HKBP-222`` from a branch name."""
    for pattern in _ISSUE_KEY_PATTERNS:
        match = pattern.match(branch_name)
        if match:
            return match.group(1)
    return None


def slugify(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    slug = _NON_SLUG.sub("-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def issue_branch_name(key: str, issue_type: str | None, summary: str) -> str:
    """Name a work branch for an issue.

    Bugs live under ``Bug/KEY/...``; everything else under ``KEY/...``.  Both
    shapes are recognised again by ``derive_issue_key``.
    """
    slug = slugify(summary) or "work"
    if (issue_type or "").strip().lower() == "bug":
        return f"Bug/{key}/{slug}"
    return f"{key}/{slug}"
