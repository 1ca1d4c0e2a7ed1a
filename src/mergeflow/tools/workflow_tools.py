"""Merge branch workflow tool implementation."""

from __future__ import annotations

from .. import state
from ..workflows.merge_branch import MergeBranchWorkflow


def merge_branch(
    target_branch: str,
    push_unpushed: bool = False,
    project_type: str | None = None,
    repo_path: str = ".",
) -> dict[str, object]:
    """Merge ``target_branch`` into a new merge branch and open a pull request.

    ``push_unpushed`` answers the question the CLI would ask interactively:
    whether unpushed commits on the current branch may be pushed first.
    """
    git = state.git_for(repo_path)
    workflow = MergeBranchWorkflow(
        git,
        state.config_for(git),
        confirm=lambda prompt: push_unpushed,
        project_type=project_type,
    )
    result = workflow.run(target_branch)
    return {
        "state": result.state.value,
        "original_branch": result.original_branch,
        "merge_branch": result.new_branch,
        "pr_url": result.pr_url,
        "issue_key": result.issue_key,
        "diff_stat": str(result.diff_stat) if result.diff_stat else None,
        "warnings": result.warnings,
    }
