"""Public placeholder API endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

if TYPE_CHECKING:
    from nutriempower.containers import AppContainer

API_VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/test")
async def api_test() -> dict[str, str]:
    """Confirm the API is reachable."""
    return {
        "message": "NutriEmpower API is working!",
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "version": API_VERSION,
    }


@router.get("/nutrition")
async def nutrition(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.catalog_service.nutrition_summary()}


@router.get("/recipes")
async def recipes(
    request: Request,
    category: str | None = None,
    budget: str | None = None,
    time: int | None = None,
) -> dict[str, object]:
    """Return recipes, filtered by category, budget and max prep minutes."""
    container: AppContainer = request.app.state.container
    return {
        "success": True,
        "data": container.catalog_service.list_recipes(
            category=category, budget=budget, max_prep_minutes=time
        ),
        "filters": {"category": category, "budget": budget, "time": time},
    }


@router.get("/specialists")
async def specialists(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.catalog_service.list_specialists()}
