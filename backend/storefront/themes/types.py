"""Theme value types.

Wire format is camelCase (``defaultColors``, ``fontFamily``) to stay
compatible with stored theme records; attributes are snake_case.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

CustomizableProperty = Literal["colors", "typography", "layout", "logo"]

COLOR_KEYS = ("primary", "secondary", "background", "text", "accent")

# anything that could close the declaration, the rule or the <style> element
CSS_UNSAFE_RE = re.compile(r"[;{}<>\\\r\n]")


def _check_hex(value: str | None) -> str | None:
    if value is not None and value.strip() and not HEX_COLOR_RE.match(value.strip()):
        raise ValueError("Must be a hex color (#rgb, #rrggbb or #rrggbbaa)")
    return value.strip() if isinstance(value, str) else value


def _check_css_value(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if CSS_UNSAFE_RE.search(value):
        raise ValueError("Must be a plain CSS value without ; { } < > or backslashes")
    return value


class ThemeModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenThemeModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# --- Fully-populated style groups ---


class ThemeColors(FrozenThemeModel):
    """A complete palette. Extra keys (e.g. ``muted``) are allowed."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="allow"
    )

    primary: str
    secondary: str
    background: str
    text: str
    accent: str


class ThemeTypography(FrozenThemeModel):
    font_family: str
    heading_font: str
    font_size: str


class ThemeLayout(FrozenThemeModel):
    container_width: str = "1280px"
    spacing: str = "1rem"
    border_radius: str = "0.5rem"


# --- Partial overrides (merchant customizations) ---


class ColorOverrides(ThemeModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    primary: str | None = None
    secondary: str | None = None
    background: str | None = None
    text: str | None = None
    accent: str | None = None

    @field_validator(*COLOR_KEYS)
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        return _check_hex(v)

    @model_validator(mode="after")
    def validate_extension_colors(self) -> "ColorOverrides":
        for key, value in (self.model_extra or {}).items():
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Color '{key}' must be a string")
            _check_hex(value)
        return self


class TypographyOverrides(ThemeModel):
    font_family: str | None = Field(None, max_length=200)
    heading_font: str | None = Field(None, max_length=200)
    font_size: str | None = Field(None, max_length=20)

    @field_validator("font_family", "heading_font", "font_size")
    @classmethod
    def validate_css_value(cls, v: str | None) -> str | None:
        return _check_css_value(v)


class LayoutOverrides(ThemeModel):
    container_width: str | None = None
    spacing: str | None = None
    border_radius: str | None = None

    @field_validator("container_width", "spacing", "border_radius", mode="before")
    @classmethod
    def numbers_to_pixels(cls, v: object) -> object:
        # older saved customizations store borderRadius as a bare number
        if isinstance(v, bool):
            raise ValueError("Expected a CSS length")
        if isinstance(v, (int, float)):
            return f"{v:g}px"
        return v

    @field_validator("container_width", "spacing", "border_radius")
    @classmethod
    def validate_css_value(cls, v: str | None) -> str | None:
        return _check_css_value(v)


class ThemeCustomization(ThemeModel):
    colors: ColorOverrides | None = None
    typography: TypographyOverrides | None = None
    layout: LayoutOverrides | None = None
    logo: str | None = None


class StoreTheme(ThemeModel):
    """The persisted unit: selected theme name plus its customizations."""

    name: str = Field(..., min_length=1, max_length=63)
    customizations: ThemeCustomization = Field(default_factory=ThemeCustomization)


class EffectiveStyle(FrozenThemeModel):
    theme_name: str
    colors: ThemeColors
    typography: ThemeTypography
    layout: ThemeLayout
    logo: str | None = None

    def css_variables(self) -> dict[str, str]:
        variables = {f"--theme-{key}": value for key, value in self.colors.model_dump().items()}
        variables.update(
            {
                "--theme-font-family": self.typography.font_family,
                "--theme-heading-font": self.typography.heading_font,
                "--theme-font-size": self.typography.font_size,
                "--theme-container-width": self.layout.container_width,
                "--theme-spacing": self.layout.spacing,
                "--theme-border-radius": self.layout.border_radius,
            }
        )
        return variables
