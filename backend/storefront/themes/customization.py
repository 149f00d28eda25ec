"""Layer a store's saved customizations over its theme's defaults.

Merging is per field: an override only replaces the keys it actually sets,
so a customization that changes ``colors.accent`` keeps the other default
colors. Blank strings count as unset.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from storefront.themes.registry import DEFAULT_THEME, ThemeConfig, get_theme_config
from storefront.themes.types import (
    ColorOverrides,
    EffectiveStyle,
    LayoutOverrides,
    StoreTheme,
    ThemeColors,
    ThemeCustomization,
    ThemeLayout,
    ThemeTypography,
    TypographyOverrides,
)


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    return not (isinstance(value, str) and not value.strip())


def _as_dict(group: BaseModel | Mapping[str, Any] | None) -> dict[str, Any]:
    if group is None:
        return {}
    if isinstance(group, BaseModel):
        return group.model_dump()
    return dict(group)


def coalesce(
    defaults: BaseModel | Mapping[str, Any],
    overrides: BaseModel | Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Return ``defaults`` with every set field of ``overrides`` laid on top."""
    merged = _as_dict(defaults)
    for key, value in _as_dict(overrides).items():
        if _is_set(value):
            merged[key] = value
    return merged


def resolve_style(
    config: ThemeConfig,
    customization: ThemeCustomization | None = None,
) -> EffectiveStyle:
    customization = customization or ThemeCustomization()
    return EffectiveStyle(
        theme_name=config.name,
        colors=ThemeColors(**coalesce(config.default_colors, customization.colors)),
        typography=ThemeTypography(
            **coalesce(config.default_typography, customization.typography)
        ),
        layout=ThemeLayout(**coalesce(ThemeLayout(), customization.layout)),
        logo=customization.logo if _is_set(customization.logo) else None,
    )


def resolve_store_style(store_theme: StoreTheme | None) -> EffectiveStyle:
    """Effective style for a store, falling back to the default theme.

    Called per render; a store record saved between requests shows up on
    the next one.
    """
    config = get_theme_config(store_theme.name if store_theme else None)
    if config is None:
        config = get_theme_config(DEFAULT_THEME)
    customization = store_theme.customizations if store_theme else None
    return resolve_style(config, customization)


def merge_customizations(
    current: ThemeCustomization | None,
    patch: ThemeCustomization,
) -> ThemeCustomization:
    """Apply a partial customization update without dropping nested keys."""
    current = current or ThemeCustomization()
    fields = patch.model_fields_set

    def _group(name: str, model: type[BaseModel]) -> BaseModel | None:
        existing = getattr(current, name)
        if name not in fields:
            return existing
        incoming = getattr(patch, name)
        if incoming is None:
            return None
        merged = _as_dict(existing)
        # only keys the caller sent; explicit nulls clear a field
        merged.update(incoming.model_dump(exclude_unset=True))
        return model(**merged)

    logo = patch.logo if "logo" in fields else current.logo
    return ThemeCustomization(
        colors=_group("colors", ColorOverrides),
        typography=_group("typography", TypographyOverrides),
        layout=_group("layout", LayoutOverrides),
        logo=logo,
    )
