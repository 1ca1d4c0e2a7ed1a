"""Mutating workflows built on the repository inspector and service clients."""

from .cleanup import DeletionOutcome, delete_branches, find_matching, remove_branches, summarize
from .merge_branch import MergeBranchWorkflow, MergeState, MergeWorkflowState
from .start_issue import start_issue_branch

__all__ = [
    "DeletionOutcome",
    "MergeBranchWorkflow",
    "MergeState",
    "MergeWorkflowState",
    "delete_branches",
    "find_matching",
    "remove_branches",
    "start_issue_branch",
    "summarize",
]
