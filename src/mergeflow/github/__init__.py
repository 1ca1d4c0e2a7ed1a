"""Pull request service integration."""

from .api import PullRequest, create_pull_request, request_reviewers
from .auth import get_github_client
from .reviewers import ProjectType, reviewers_for_project
from .templates import generate_merge_pr_body, merge_pr_title

__all__ = [
    "PullRequest",
    "ProjectType",
    "create_pull_request",
    "generate_merge_pr_body",
    "get_github_client",
    "merge_pr_title",
    "request_reviewers",
    "reviewers_for_project",
]
