"""MCP stdio server entrypoint for mergeflow.

The server runs over standard input/output using the Model Context Protocol
and registers the branch, merge and issue tools so an assistant can drive
the same workflows as the ``mergeflow`` command.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from .constants import DEFAULT_LOG_LEVEL
from .telemetry.logger import configure_logging
from .tools import branch_tools, issue_tools, workflow_tools


def build_tools_dispatch() -> dict[str, Callable[..., dict[str, Any]]]:
    """Return a mapping from tool names to callables.

    Each callable accepts keyword arguments and returns a JSON-serializable
    dictionary.
    """
    return {
        # Repository / branches
        "current_branch": branch_tools.current_branch,
        "repository_status": branch_tools.repository_status,
        "find_branches": branch_tools.find_branches,
        "topic_branches": branch_tools.topic_branches,
        "remove_branches": branch_tools.remove_branches,
        # Workflows
        "merge_branch": workflow_tools.merge_branch,
        # Issue tracker
        "get_issue": issue_tools.get_issue,
        "append_issue_note": issue_tools.append_issue_note,
    }


def main() -> None:
    """Entrypoint for the mergeflow MCP server."""
    # stdout carries the MCP protocol, so all logging goes to stderr
    configure_logging(DEFAULT_LOG_LEVEL, split_streams=False)
    logger = logging.getLogger("mergeflow.server")
    logger.info("Starting mergeflow MCP server")

    mcp = FastMCP("mergeflow")

    dispatch = build_tools_dispatch()
    for name, func in dispatch.items():
        mcp.add_tool(func, name=name)

    logger.info("Registered %d tools", len(dispatch))

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
