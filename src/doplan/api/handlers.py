"""Progress handler functions shared by MCP tools and REST API."""

import logging

from doplan.config import PlanConfig
from doplan.errors import DashboardNotFoundError
from doplan.operations import recommend_next, recompute_progress, show_dashboard
from doplan.state.writer import dashboard_record

log = logging.getLogger(__name__)

_NO_PLAN = "No plan structure found. Create doplan/plan/ first."


def handle_progress(config: PlanConfig, dry_run: bool = False) -> dict:
    result = recompute_progress(config, dry_run=dry_run)
    if result is None:
        return {"error": _NO_PLAN, "plan_dir": str(config.plan_dir)}

    return {
        "dry_run": result.dry_run,
        "dashboard": dashboard_record(result.dashboard),
        "files": [str(p) for p in result.files],
    }


def handle_next(config: PlanConfig) -> dict:
    result = recommend_next(config)
    if result is None:
        return {"error": _NO_PLAN, "plan_dir": str(config.plan_dir)}

    return {
        "all_complete": result.all_complete,
        "recommendation": result.recommendation.to_dict() if result.recommendation else None,
        "summary": result.summary.to_dict(),
    }


def handle_dashboard(config: PlanConfig) -> dict:
    """
    Return the stored snapshot, or an error entry when it was never generated.

    A malformed snapshot raises StateFileError; callers decide how to surface it.
    """
    try:
        return show_dashboard(config)
    except DashboardNotFoundError as e:
        return {"error": str(e), "not_generated": True}
