"""
doplan MCP server entry point.

Startup sequence:
1. Read DOPLAN_ROOT (and optional DOPLAN_PROJECT_NAME / DOPLAN_WORKERS)
2. Start REST API server in background thread (if API_ENABLED)
3. Register all MCP tools
4. Run MCP server (stdio transport)

Nothing is cached between calls: every tool invocation rescans the plan tree.
"""

import logging
import os
import sys
import threading
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from doplan.config import PlanConfig
from doplan.tools import register_plan_tools

log = logging.getLogger(__name__)


def _start_api_server(config: PlanConfig, port: int) -> None:
    """Run the FastAPI/uvicorn server in a daemon thread."""
    import uvicorn

    from doplan.api.app import create_app

    app = create_app(config)
    log.info("Starting REST API on port %d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="warning")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    root_env = os.environ.get("DOPLAN_ROOT", "")
    if not root_env:
        log.error("DOPLAN_ROOT environment variable is not set")
        sys.exit(1)

    root = Path(root_env).expanduser()
    if not root.is_dir():
        log.error("DOPLAN_ROOT does not exist or is not a directory: %s", root)
        sys.exit(1)

    config = PlanConfig.from_env(root=root)
    log.info("Project root: %s", config.root)
    log.info("Plan directory: %s", config.plan_dir)

    api_enabled = os.environ.get("API_ENABLED", "false").lower() in ("true", "1", "yes")
    if api_enabled:
        api_port = int(os.environ.get("API_PORT", "9410"))
        api_thread = threading.Thread(
            target=_start_api_server, args=(config, api_port), daemon=True
        )
        api_thread.start()

    mcp = FastMCP("doplan")
    register_plan_tools(mcp, config)

    log.info("Starting doplan MCP server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
