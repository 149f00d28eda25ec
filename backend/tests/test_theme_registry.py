"""Theme registry lookups."""

import pytest
from pydantic import ValidationError

from storefront.themes.registry import (
    AVAILABLE_THEMES,
    DEFAULT_THEME,
    FALLBACK_COLORS,
    FALLBACK_TYPOGRAPHY,
    _index,
    get_available_themes,
    get_selectable_themes,
    get_theme_config,
    is_legacy_theme,
)

CURRENT_THEMES = {
    "modern", "classic", "minimal-v2", "premium", "neon", "elegant", "bold", "minimalist",
    "vintage", "dark-shade", "dark-premium", "royal-luxury", "ocean-breeze", "sunset-glow",
    "forest-nature", "cosmic-space",
}
LEGACY_THEMES = {"minimal", "dark-theme", "fashion-luxury", "techy"}


def test_every_entry_resolves_to_itself():
    for config in get_available_themes():
        assert get_theme_config(config.name) is config


def test_registry_contents():
    names = {config.name for config in AVAILABLE_THEMES}
    assert names == CURRENT_THEMES | LEGACY_THEMES


@pytest.mark.parametrize("name", [None, "", "does-not-exist", "MODERN"])
def test_unknown_names_return_none(name):
    assert get_theme_config(name) is None


def test_selectable_themes_exclude_legacy():
    selectable = {config.name for config in get_selectable_themes()}
    assert selectable == CURRENT_THEMES
    assert all(is_legacy_theme(name) for name in LEGACY_THEMES)
    assert not is_legacy_theme("modern")
    assert not is_legacy_theme("nope")


def test_available_themes_include_legacy():
    assert LEGACY_THEMES <= {config.name for config in get_available_themes()}


def test_fallbacks_are_default_theme_values():
    default = get_theme_config(DEFAULT_THEME)
    assert default is not None
    assert FALLBACK_COLORS == default.default_colors
    assert FALLBACK_TYPOGRAPHY == default.default_typography


def test_duplicate_names_rejected():
    modern = get_theme_config("modern")
    with pytest.raises(ValueError, match="Duplicate theme name"):
        _index((modern, modern))


def test_configs_are_immutable():
    config = get_theme_config("modern")
    with pytest.raises(ValidationError):
        config.name = "changed"


def test_wire_format_is_camel_case():
    data = get_theme_config("classic").model_dump(by_alias=True)
    assert "defaultColors" in data
    assert "fontFamily" in data["defaultTypography"]
    assert "customizableProperties" in data
    assert "legacy" not in data
