"""Tool module exports for the mergeflow MCP server.

Each submodule exposes plain functions returning JSON-serializable
dictionaries; ``mergeflow.server`` registers them as MCP tools.

Usage:

    from mergeflow.tools import branch_tools
    branch_tools.find_branches("merge_", include_remote=True)
"""

from . import (
    branch_tools,  # noqa: F401
    issue_tools,  # noqa: F401
    workflow_tools,  # noqa: F401
)

__all__ = [
    "branch_tools",
    "issue_tools",
    "workflow_tools",
]
