"""FastAPI application factory for the progress REST API."""

from fastapi import APIRouter, FastAPI

from doplan.api.routes import register_routes
from doplan.config import PlanConfig


def create_app(config: PlanConfig) -> FastAPI:
    """Build and return a FastAPI app serving the given project root."""
    app = FastAPI(title="doplan", docs_url="/api/docs", openapi_url="/api/openapi.json")

    api = APIRouter(prefix="/api")
    register_routes(api, config)
    app.include_router(api)

    return app
