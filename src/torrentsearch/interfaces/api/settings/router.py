"""Settings endpoints: one snapshot read plus pass-through writes."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from torrentsearch.application.reactive import first
from torrentsearch.domain.entities.settings import UNLIMITED, MaxNumResults
from torrentsearch.domain.entities.sorting import SortCriteria, SortOptions, SortOrder
from torrentsearch.interfaces.api.presenter import present_settings
from torrentsearch.interfaces.api.search.router import parse_category
from torrentsearch.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class FlagBody(BaseModel):
    enabled: bool


class SortBody(BaseModel):
    criteria: SortCriteria
    order: SortOrder


class MaxResultsBody(BaseModel):
    # null means unlimited
    max_num_results: int | None = None


class CategoryBody(BaseModel):
    category: str


@router.get("")
async def get_settings(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    general = await first(state.settings.observe_general())
    search = await first(state.settings.observe_search())
    sort = await first(state.settings.observe_sort())
    return JSONResponse(content=present_settings(general, search, sort))


@router.put("/nsfw", status_code=204)
async def update_nsfw_mode(request: Request, body: FlagBody) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.update_enable_nsfw_mode(body.enabled)
    return Response(status_code=204)


@router.put("/hide-zero-seeders", status_code=204)
async def update_hide_zero_seeders(request: Request, body: FlagBody) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.update_hide_results_with_zero_seeders(body.enabled)
    return Response(status_code=204)


@router.put("/sort", status_code=204)
async def update_sort(request: Request, body: SortBody) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.update_sort_options(
        SortOptions(criteria=body.criteria, order=body.order)
    )
    return Response(status_code=204)


@router.put("/max-results", status_code=204)
async def update_max_results(request: Request, body: MaxResultsBody) -> Response:
    state = cast(AppState, request.app.state)
    if body.max_num_results is None:
        cap = UNLIMITED
    else:
        try:
            cap = MaxNumResults(body.max_num_results)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    await state.settings.update_max_num_results(cap)
    return Response(status_code=204)


@router.put("/default-category", status_code=204)
async def update_default_category(request: Request, body: CategoryBody) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.update_default_category(parse_category(body.category))
    return Response(status_code=204)


@router.post("/providers/enable-all", status_code=204)
async def enable_all_providers(request: Request) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.enable_all_search_providers()
    return Response(status_code=204)


@router.post("/providers/disable-all", status_code=204)
async def disable_all_providers(request: Request) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.disable_all_search_providers()
    return Response(status_code=204)


@router.post("/providers/reset", status_code=204)
async def reset_providers(request: Request) -> Response:
    state = cast(AppState, request.app.state)
    await state.settings.reset_search_providers_to_default()
    return Response(status_code=204)
