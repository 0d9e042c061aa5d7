"""Provider catalogue endpoints: listing, Torznab CRUD and enablement."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.providers.base import ProviderId, TorznabConfig
from torrentsearch.domain.providers.exceptions import ProviderNotFoundError
from torrentsearch.interfaces.api.presenter import (
    present_provider_info,
    present_torznab_config,
)
from torrentsearch.interfaces.api.search.router import parse_category
from torrentsearch.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])


class TorznabConfigBody(BaseModel):
    name: str
    url: str
    api_key: str | None = None
    category: str = Category.ALL.value
    unsafe_reason: str | None = None
    category_map: dict[int, str] = Field(default_factory=dict)

    def to_config(self, provider_id: ProviderId = "") -> TorznabConfig:
        return TorznabConfig(
            id=provider_id,
            name=self.name,
            url=self.url,
            api_key=self.api_key,
            category=parse_category(self.category),
            unsafe_reason=self.unsafe_reason,
            category_map={k: parse_category(v) for k, v in self.category_map.items()},
        )


class EnabledProvidersBody(BaseModel):
    ids: list[ProviderId]


class ProviderToggleBody(BaseModel):
    enabled: bool


@router.get("")
async def list_providers(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    providers = await state.catalogue.list_all()
    enabled = await state.enablement.current()
    return JSONResponse(
        content={
            "providers": [
                present_provider_info(p, enabled=p.id in enabled) for p in providers
            ],
            "total": len(providers),
            "enabled": len(enabled),
        }
    )


@router.put("/enabled")
async def set_enabled_providers(
    request: Request, body: EnabledProvidersBody
) -> JSONResponse:
    """Replace the enabled set; every id must be known to the catalogue."""
    state = cast(AppState, request.app.state)
    known = {p.id for p in await state.catalogue.list_all()}
    unknown = sorted(set(body.ids) - known)
    if unknown:
        raise ProviderNotFoundError(f"unknown providers: {', '.join(unknown)}")

    await state.enablement.set_enabled(body.ids)
    enabled = await state.enablement.current()
    log.info("enabled_providers_replaced", count=len(enabled))
    return JSONResponse(content={"enabled": sorted(enabled)})


@router.put("/{provider_id}/enabled")
async def toggle_provider(
    provider_id: str, request: Request, body: ProviderToggleBody
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    await state.settings.enable_search_provider(provider_id, body.enabled)
    return JSONResponse(content={"id": provider_id, "enabled": body.enabled})


@router.post("/torznab", status_code=201)
async def add_torznab_provider(
    request: Request, body: TorznabConfigBody
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    config = await state.catalogue.add_torznab(body.to_config())
    return JSONResponse(status_code=201, content=present_torznab_config(config))


@router.get("/torznab/{provider_id}")
async def get_torznab_provider(provider_id: str, request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    config = await state.catalogue.find_torznab(provider_id)
    if config is None:
        raise ProviderNotFoundError(f"unknown torznab provider {provider_id!r}")
    return JSONResponse(content=present_torznab_config(config))


@router.put("/torznab/{provider_id}")
async def update_torznab_provider(
    provider_id: str, request: Request, body: TorznabConfigBody
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    config = await state.catalogue.update_torznab(body.to_config(provider_id))
    return JSONResponse(content=present_torznab_config(config))


@router.delete("/torznab/{provider_id}", status_code=204)
async def delete_torznab_provider(provider_id: str, request: Request) -> Response:
    state = cast(AppState, request.app.state)
    await state.catalogue.delete_torznab(provider_id)
    return Response(status_code=204)
