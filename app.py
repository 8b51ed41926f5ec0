"""Main FastAPI application for the launcher plugin runtime."""

import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv('.env')

# Configure logging BEFORE importing any modules that use logger
log_level = os.getenv('LOG_LEVEL', 'INFO')
logging.basicConfig(
    level=getattr(logging, log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Import after logging is configured
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from launcher.dependencies import get_plugin_manager
from launcher.routers import plugins_router

# Create FastAPI app
app = FastAPI(
    title="Launcher Plugin Runtime",
    description="Plugin discovery and query execution for the launcher",
    version="1.0.0"
)

# CORS middleware (the launcher UI is served from a local origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plugins_router)  # /api/plugins, /api/query


@app.get("/")
async def root():
    return {"message": "Launcher Plugin Runtime API", "docs": "/docs"}


@app.on_event("startup")
async def startup_event():
    """Discover and resolve plugins."""
    manager = get_plugin_manager()
    logger.info("Starting launcher plugin runtime")
    for path in manager.search_paths:
        logger.info(f"  - Plugin search path: {path}")
    await manager.load_all()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event."""
    logger.info("Shutting down launcher plugin runtime")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "9090"))
    uvicorn.run("app:app", host="127.0.0.1", port=port, reload=True)
