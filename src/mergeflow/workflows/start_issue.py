"""Start work on an issue by creating a branch named after it."""

from __future__ import annotations

import logging

from ..config import Config
from ..errors import DirtyWorkingTree, NotARepository, VcsOperationFailed
from ..git import inspector
from ..git.naming import issue_branch_name
from ..git.runner import GitRunner
from ..jira import api as jira_api

logger = logging.getLogger(__name__)


def start_issue_branch(git: GitRunner, config: Config, key: str, base: str | None = None) -> str:
    """Create and check out the work branch for issue ``key``.

    With ``base`` the branch is cut from a freshly pulled ``base``;
    otherwise from the current branch.  Returns the new branch name.
    """
    if not inspector.is_repository(git):
        raise NotARepository()
    if not inspector.is_working_tree_clean(git):
        raise DirtyWorkingTree()

    issue = jira_api.get_issue(config, key)
    branch = issue_branch_name(issue.key, issue.issue_type, issue.summary)
    if inspector.local_branch_exists(git, branch):
        raise VcsOperationFailed(["checkout", "-b", branch], f"branch '{branch}' already exists")

    if base:
        git.check(["checkout", base])
        git.check(["pull"])
    git.check(["checkout", "-b", branch])
    logger.info("Created branch %s for %s: %s", branch, issue.key, issue.summary)
    return branch
