"""Load and persist a tenant's storefront theme."""

import logging
import uuid

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ProblemDetailError, problem_type
from storefront.models.store_theme import StoreThemeRecord
from storefront.themes.customization import merge_customizations
from storefront.themes.presets import PresetNotFoundError, apply_preset
from storefront.themes.registry import DEFAULT_THEME, get_theme_config, is_legacy_theme
from storefront.themes.types import StoreTheme, ThemeCustomization

logger = logging.getLogger(__name__)


def default_store_theme() -> StoreTheme:
    return StoreTheme(name=DEFAULT_THEME)


def record_to_store_theme(record: StoreThemeRecord | None) -> StoreTheme:
    if record is None:
        return default_store_theme()
    try:
        customizations = ThemeCustomization.model_validate(record.customizations or {})
    except ValidationError:
        logger.warning(
            "Discarding invalid customizations for tenant %s", record.tenant_id, exc_info=True
        )
        customizations = ThemeCustomization()
    return StoreTheme(name=record.theme_name, customizations=customizations)


def check_theme_selection(name: str, current_name: str | None) -> None:
    """Reject unknown themes and new selections of legacy themes."""
    if get_theme_config(name) is None:
        raise ProblemDetailError(
            status=422,
            title="Unknown theme",
            detail=f"Theme '{name}' does not exist",
            error_type=problem_type("unknown-theme"),
        )
    if is_legacy_theme(name) and name != current_name:
        raise ProblemDetailError(
            status=422,
            title="Legacy theme",
            detail=f"Theme '{name}' is retired and can no longer be selected",
            error_type=problem_type("legacy-theme"),
        )


async def _get_record(db: AsyncSession, tenant_id: uuid.UUID) -> StoreThemeRecord | None:
    result = await db.execute(
        select(StoreThemeRecord).where(StoreThemeRecord.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def get_store_theme(db: AsyncSession, tenant_id: uuid.UUID) -> StoreTheme:
    return record_to_store_theme(await _get_record(db, tenant_id))


async def save_store_theme(
    db: AsyncSession, tenant_id: uuid.UUID, theme: StoreTheme
) -> StoreTheme:
    record = await _get_record(db, tenant_id)
    customizations = theme.customizations.model_dump(by_alias=True, exclude_none=True)

    if record is None:
        record = StoreThemeRecord(
            tenant_id=tenant_id, theme_name=theme.name, customizations=customizations
        )
        db.add(record)
    else:
        record.theme_name = theme.name
        record.customizations = customizations

    await db.flush()
    logger.info("Saved theme %r for tenant %s", theme.name, tenant_id)
    return record_to_store_theme(record)


async def replace_store_theme(
    db: AsyncSession, tenant_id: uuid.UUID, theme: StoreTheme
) -> StoreTheme:
    current = await _get_record(db, tenant_id)
    check_theme_selection(theme.name, current.theme_name if current else None)
    return await save_store_theme(db, tenant_id, theme)


async def update_customizations(
    db: AsyncSession, tenant_id: uuid.UUID, patch: ThemeCustomization
) -> StoreTheme:
    current = await get_store_theme(db, tenant_id)
    merged = merge_customizations(current.customizations, patch)
    return await save_store_theme(
        db, tenant_id, StoreTheme(name=current.name, customizations=merged)
    )


async def apply_store_preset(
    db: AsyncSession, tenant_id: uuid.UUID, preset_id: str
) -> StoreTheme:
    current = await get_store_theme(db, tenant_id)
    try:
        theme = apply_preset(preset_id, current)
    except PresetNotFoundError as exc:
        raise ProblemDetailError(
            status=404,
            title="Preset not found",
            detail=str(exc),
            error_type=problem_type("preset-not-found"),
        ) from exc
    return await save_store_theme(db, tenant_id, theme)
