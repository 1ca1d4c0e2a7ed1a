"""Reviewer lookup by project type."""

from __future__ import annotations

import logging
from enum import Enum

from ..config import Config

logger = logging.getLogger(__name__)


class ProjectType(str, Enum):
    BACKEND = "backend"
    FRONTEND = "frontend"
    MOBILE = "mobile"
    INFRA = "infra"


def reviewers_for_project(config: Config, project_type: str | ProjectType | None) -> set[str]:
    """Return the reviewer logins configured for ``project_type``.

    The table comes from the ``REVIEWERS_<TYPE>`` variables.  An unknown or
    missing project type yields an empty set and a warning, never an error.
    """
    if project_type is None:
        logger.warning("No project type given; the pull request will have no reviewers")
        return set()
    try:
        kind = ProjectType(str(getattr(project_type, "value", project_type)).strip().lower())
    except ValueError:
        known = ", ".join(t.value for t in ProjectType)
        logger.warning("Unknown project type '%s' (known: %s); no reviewers assigned", project_type, known)
        return set()
    reviewers = set(config.reviewers.get(kind.value, []))
    if not reviewers:
        logger.warning("No reviewers configured for project type '%s'", kind.value)
    return reviewers
