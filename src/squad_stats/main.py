"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from squad_stats.api.routes.players import router as players_router
from squad_stats.config import settings
from squad_stats.repositories import create_table_store
from squad_stats.services.player_service import PlayerService

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# CSV resource path - absolute as given, relative paths resolve from repo root
def get_csv_import_path() -> Path:
    """Get the CSV import path from settings."""
    csv_path = Path(settings.csv_import_path)
    if csv_path.is_absolute():
        return csv_path
    repo_root = Path(__file__).parent.parent.parent
    return repo_root / csv_path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: Initialize store and service unless already provided
    if not hasattr(app.state, "store"):
        app.state.store = create_table_store(settings)
    if not hasattr(app.state, "service"):
        app.state.service = PlayerService(app.state.store, get_csv_import_path())
    yield
    # Shutdown: Close the store's HTTP client
    await app.state.store.close()


app = FastAPI(
    title="Squad Stats",
    description="Player statistics dashboard - totals, history and team comparisons",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "squad-stats"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Squad Stats API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(players_router)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "squad_stats.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
