"""REST API routes for plan progress."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from doplan.api.handlers import handle_dashboard, handle_next, handle_progress
from doplan.config import PlanConfig
from doplan.errors import StateFileError


# ---------------------------------------------------------------------------
# Request body models
# ---------------------------------------------------------------------------


class ProgressBody(BaseModel):
    dry_run: bool = False


# ---------------------------------------------------------------------------
# Route registration
# ---------------------------------------------------------------------------


def register_routes(app_router: APIRouter, config: PlanConfig) -> None:
    """Attach all REST routes for the configured project root."""

    @app_router.post("/progress")
    def recompute(body: Optional[ProgressBody] = None):
        result = handle_progress(config, dry_run=body.dry_run if body else False)
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.get("/next")
    def next_task():
        result = handle_next(config)
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.get("/dashboard")
    def dashboard():
        try:
            result = handle_dashboard(config)
        except StateFileError as e:
            raise HTTPException(status_code=500, detail=str(e))
        if result.get("not_generated"):
            raise HTTPException(status_code=404, detail=result["error"])
        return result
