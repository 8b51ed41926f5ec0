"""Plugin query REST API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from launcher.dependencies import get_plugin_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["plugins"])


class PluginQueryRequest(BaseModel):
    """Request body for querying a single plugin."""

    args: List[str] = Field(default_factory=list, description="Query tokens after the keyword")


@router.get("/plugins")
async def list_plugins():
    """List all resolved plugins and skipped themes."""
    manager = get_plugin_manager()
    return {"plugins": manager.list_plugins(), "themes": manager.list_themes()}


@router.get("/plugins/{name}")
async def get_plugin(name: str):
    """Get the resolved descriptor of a specific plugin."""
    manager = get_plugin_manager()
    info = manager.get_plugin_info(name)
    if not info:
        raise HTTPException(status_code=404, detail=f"Plugin '{name}' not found")
    return info


@router.post("/plugins/{name}/query")
async def query_plugin(name: str, body: PluginQueryRequest):
    """Run a query against one plugin, bypassing keyword dispatch."""
    manager = get_plugin_manager()
    results = await manager.query_plugin(name, body.args)
    if results is None:
        raise HTTPException(status_code=404, detail=f"Plugin '{name}' not found")
    return results.to_dict()


@router.get("/query")
async def search(q: str = Query("", description="Text typed into the launcher")):
    """Dispatch the typed text to keyword or fallback plugins."""
    manager = get_plugin_manager()
    response = await manager.search(q)
    logger.debug(f"Query {response.query!r} -> {len(response.items)} item(s)")
    return response.to_dict()
