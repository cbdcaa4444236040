"""
MCP tool handlers for plan progress operations.
"""

import json
import logging

from mcp.server.fastmcp import FastMCP

from doplan.api.handlers import handle_dashboard, handle_next, handle_progress
from doplan.config import PlanConfig
from doplan.errors import StateFileError

log = logging.getLogger(__name__)


def register_plan_tools(mcp: FastMCP, config: PlanConfig) -> None:
    """Register all plan progress MCP tools onto the FastMCP instance."""

    @mcp.tool()
    def plan_progress(dry_run: bool = False) -> str:
        """
        Recompute progress for every feature and phase and regenerate the dashboard.

        Args:
            dry_run: If True, compute everything but write no files

        Returns:
            JSON object with the dashboard snapshot and the files written
        """
        return json.dumps(handle_progress(config, dry_run=dry_run), indent=2)

    @mcp.tool()
    def plan_next() -> str:
        """
        Recommend the next task to work on.

        High priority first, then in-progress before not-started before
        blocked. Read-only.

        Returns:
            JSON object with the recommendation (null when all tasks are
            complete) and a summary of open work
        """
        return json.dumps(handle_next(config), indent=2)

    @mcp.tool()
    def plan_dashboard() -> str:
        """
        Return the last generated dashboard snapshot without recomputing.

        Returns:
            JSON dashboard snapshot, or an error object when it has not been
            generated or cannot be parsed
        """
        try:
            return json.dumps(handle_dashboard(config), indent=2)
        except StateFileError as e:
            log.error("Dashboard snapshot unreadable: %s", e)
            return json.dumps({"error": str(e)})
