"""
Main application module for the search-path planner backend.

This file sets up the FastAPI application, configures CORS so a web
client can make cross-origin requests, and exposes a simple health
check endpoint.

The search-plan router is included under the `/api` namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_search import router as search_router


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="Search path planner")

    # Allow all origins by default.  In production you should restrict
    # this to the domains that are allowed to access your API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(search_router, prefix="/api", tags=["search-paths"])

    return app


# Create the application instance.  Uvicorn will import this when
# running `uvicorn searchpath.main:app` from within backend/
app = create_app()
