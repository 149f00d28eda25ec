"""Merchant storefront theme endpoints.

Reads need the member role, writes the admin role.
"""

from fastapi import APIRouter, Depends

from storefront.core.dependencies import StoreContext, require_store_role
from storefront.services import theme_service
from storefront.themes.customization import resolve_store_style
from storefront.themes.presets import ThemeCatalogEntry, merge_presets
from storefront.themes.registry import get_selectable_themes
from storefront.themes.types import EffectiveStyle, StoreTheme, ThemeCustomization

router = APIRouter()

can_view = require_store_role("member")
can_edit = require_store_role("admin")


@router.get("/theme", response_model=StoreTheme)
async def get_store_theme(ctx: StoreContext = Depends(can_view)):
    """Current theme selection; the default theme if none was saved."""
    return await theme_service.get_store_theme(ctx.db, ctx.tenant_id)


@router.put("/theme", response_model=StoreTheme)
async def replace_store_theme(body: StoreTheme, ctx: StoreContext = Depends(can_edit)):
    """Overwrite the theme selection and its customizations."""
    return await theme_service.replace_store_theme(ctx.db, ctx.tenant_id, body)


@router.patch("/theme/customizations", response_model=StoreTheme)
async def patch_theme_customizations(
    body: ThemeCustomization,
    ctx: StoreContext = Depends(can_edit),
):
    """Deep-merge a partial customization; keys not sent are kept."""
    return await theme_service.update_customizations(ctx.db, ctx.tenant_id, body)


@router.post("/theme/presets/{preset_id}", response_model=StoreTheme)
async def apply_theme_preset(preset_id: str, ctx: StoreContext = Depends(can_edit)):
    return await theme_service.apply_store_preset(ctx.db, ctx.tenant_id, preset_id)


@router.get("/theme/preview", response_model=EffectiveStyle)
async def preview_store_theme(ctx: StoreContext = Depends(can_view)):
    return resolve_store_style(await theme_service.get_store_theme(ctx.db, ctx.tenant_id))


@router.get("/themes", response_model=list[ThemeCatalogEntry])
async def list_theme_catalog(ctx: StoreContext = Depends(can_view)):
    """Selectable themes followed by presets, for the theme picker."""
    return merge_presets(get_selectable_themes())
