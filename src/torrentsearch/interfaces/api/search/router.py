"""Search endpoint: fan-out across every enabled provider."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from torrentsearch.application.reactive import first
from torrentsearch.domain.entities.category import Category
from torrentsearch.interfaces.api.presenter import present_outcome
from torrentsearch.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["search"])


def parse_category(raw: str) -> Category:
    """Map a query/body value to a ``Category`` or answer 400."""
    try:
        return Category.parse(raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/search")
async def search(
    request: Request,
    q: str = Query(default="", description="Search query."),
    category: str | None = Query(
        default=None,
        description="Category name; defaults to the stored default category.",
    ),
) -> JSONResponse:
    """Search all enabled providers.

    Provider failures do not fail the request; they are listed under
    ``failures`` next to the merged results.
    """
    state = cast(AppState, request.app.state)

    if category is None:
        general = await first(state.settings.observe_general())
        selected = general.default_category
    else:
        selected = parse_category(category)

    outcome = await state.search_uc.execute(q, selected)
    return JSONResponse(content=present_outcome(outcome))
