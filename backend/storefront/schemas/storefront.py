"""Public storefront payloads.

Also parsed by the storefront API client, so the renderer and the API
agree on one definition.
"""

from pydantic import BaseModel, Field

from storefront.themes.types import EffectiveStyle, StoreTheme, ThemeModel


class StorefrontSettings(BaseModel):
    theme: StoreTheme | None = None


class StorefrontInfo(BaseModel):
    name: str
    slug: str
    currency: str
    settings: StorefrontSettings = Field(default_factory=StorefrontSettings)


class StorefrontThemeResponse(ThemeModel):
    """Effective style of a store plus the component bundle serving it."""

    theme: StoreTheme
    style: EffectiveStyle
    bundle: str
