"""Git integration.

All repository access goes through the git command-line interface via
``GitRunner``.  ``naming`` and ``parsing`` are pure; ``inspector`` only
reads; the workflows in ``mergeflow.workflows`` perform the mutations.
"""

from .naming import derive_issue_key, new_merge_branch_name, prefix
from .runner import GitRunner

__all__ = ["GitRunner", "derive_issue_key", "new_merge_branch_name", "prefix"]
