"""Static table of storefront themes.

Legacy themes stay in the table for stores that selected them before they
were retired; they are hidden from new-selection surfaces only.
"""

from pydantic import Field

from storefront.core.config import settings
from storefront.themes.types import (
    CustomizableProperty,
    FrozenThemeModel,
    ThemeColors,
    ThemeTypography,
)

DEFAULT_THEME = settings.DEFAULT_THEME


class ThemeConfig(FrozenThemeModel):
    name: str
    display_name: str
    description: str
    category: str
    default_colors: ThemeColors
    default_typography: ThemeTypography
    customizable_properties: tuple[CustomizableProperty, ...] = ("colors", "typography", "logo")
    legacy: bool = Field(False, exclude=True)


def _theme(
    name: str,
    display_name: str,
    description: str,
    category: str,
    colors: tuple[str, str, str, str, str],
    fonts: tuple[str, str] = ("Inter, system-ui, sans-serif", "Inter, system-ui, sans-serif"),
    *,
    font_size: str = "16px",
    layout: bool = True,
    legacy: bool = False,
) -> ThemeConfig:
    primary, secondary, background, text, accent = colors
    properties: tuple[CustomizableProperty, ...] = ("colors", "typography", "logo")
    if layout:
        properties += ("layout",)
    return ThemeConfig(
        name=name,
        display_name=display_name,
        description=description,
        category=category,
        default_colors=ThemeColors(
            primary=primary, secondary=secondary, background=background, text=text, accent=accent
        ),
        default_typography=ThemeTypography(
            font_family=fonts[0], heading_font=fonts[1], font_size=font_size
        ),
        customizable_properties=properties,
        legacy=legacy,
    )


_SERIF = ("Georgia, serif", "Georgia, serif")
_PLAYFAIR = ("Inter, system-ui, sans-serif", "Playfair Display, serif")
_CORMORANT = ("Lato, sans-serif", "Cormorant Garamond, serif")
_MONTSERRAT = ("Montserrat, sans-serif", "Montserrat, sans-serif")
_POPPINS = ("Poppins, sans-serif", "Poppins, sans-serif")
_MERRIWEATHER = ("Lora, serif", "Merriweather, serif")
_SPACE = ("Space Grotesk, sans-serif", "Orbitron, sans-serif")

AVAILABLE_THEMES: tuple[ThemeConfig, ...] = (
    # Internal store themes
    _theme(
        "modern", "Modern", "Clean storefront with bold product imagery", "modern",
        ("#2563eb", "#f8fafc", "#ffffff", "#1e293b", "#3b82f6"),
    ),
    _theme(
        "classic", "Classic", "Timeless serif layout for established brands", "classic",
        ("#1e3a5f", "#e8edf2", "#ffffff", "#1e293b", "#b45309"), _SERIF,
    ),
    _theme(
        "minimal-v2", "Minimal", "Whitespace-first design that lets products speak", "minimal",
        ("#111827", "#f9fafb", "#ffffff", "#1f2937", "#111827"),
    ),
    _theme(
        "premium", "Premium", "Refined luxury look with gold accents", "luxury",
        ("#1a1a1a", "#fdf6e3", "#ffffff", "#2c2c2c", "#c8a951"), _PLAYFAIR,
    ),
    # E-commerce themes
    _theme(
        "neon", "Neon", "Glowing accents on a dark canvas", "neon",
        ("#00ffff", "#0a0a2e", "#050520", "#e0e0ff", "#ff00ff"), _SPACE,
    ),
    _theme(
        "elegant", "Elegant", "Soft tones and graceful typography", "luxury",
        ("#1a1a2e", "#fffff0", "#fffef5", "#2c2c2c", "#b8860b"), _PLAYFAIR,
    ),
    _theme(
        "bold", "Bold", "High-contrast colors and heavy headings", "bold",
        ("#7c3aed", "#f5f3ff", "#ffffff", "#1e1b4b", "#f43f5e"), _MONTSERRAT,
    ),
    _theme(
        "minimalist", "Minimalist", "Quiet grid with understated details", "minimal",
        ("#1e40af", "#eff6ff", "#ffffff", "#1e3a5f", "#3b82f6"),
    ),
    _theme(
        "vintage", "Vintage", "Warm paper tones and classic serif headings", "vintage",
        ("#b45309", "#fef3c7", "#fffbeb", "#78350f", "#92400e"), _MERRIWEATHER,
    ),
    # Premium internal store themes
    _theme(
        "dark-shade", "Dark Shade", "Muted dark palette for night-mode stores", "dark",
        ("#e5e7eb", "#1f2937", "#111827", "#d1d5db", "#6b7280"),
    ),
    _theme(
        "dark-premium", "Dark Premium", "Black and gold premium presentation", "dark",
        ("#fbbf24", "#1f2937", "#000000", "#fef3c7", "#f59e0b"), _PLAYFAIR,
    ),
    _theme(
        "royal-luxury", "Royal Luxury", "Regal jewel tones for high-end catalogs", "luxury",
        ("#a855f7", "#faf5ff", "#ffffff", "#3b0764", "#c084fc"), _CORMORANT,
    ),
    _theme(
        "ocean-breeze", "Ocean Breeze", "Airy blues inspired by the coast", "nature",
        ("#0369a1", "#e0f2fe", "#f0f9ff", "#0c4a6e", "#0ea5e9"),
    ),
    _theme(
        "sunset-glow", "Sunset Glow", "Warm gradients of orange and rose", "bold",
        ("#ea580c", "#fff7ed", "#ffffff", "#431407", "#fbbf24"), _POPPINS,
    ),
    _theme(
        "forest-nature", "Forest Nature", "Earthy greens for organic brands", "nature",
        ("#166534", "#f0fdf4", "#ffffff", "#14532d", "#4ade80"), _MERRIWEATHER,
    ),
    _theme(
        "cosmic-space", "Cosmic Space", "Deep-space backgrounds with nebula accents", "dark",
        ("#c084fc", "#2e1065", "#0c0015", "#e9d5ff", "#a855f7"), _SPACE,
    ),
    # Legacy themes (deprecated, kept for backward compatibility)
    _theme(
        "minimal", "Minimal (Legacy)", "Clean and simple design with focus on content", "minimal",
        ("#000000", "#ffffff", "#ffffff", "#1a1a1a", "#4a90d9"),
        ("system-ui, sans-serif", "system-ui, sans-serif"),
        layout=False, legacy=True,
    ),
    _theme(
        "dark-theme", "Dark Theme (Legacy)", "Modern dark mode aesthetic with elegant design",
        "dark",
        ("#ffffff", "#1a1a1a", "#0a0a0a", "#e0e0e0", "#6366f1"),
        layout=False, legacy=True,
    ),
    _theme(
        "fashion-luxury", "Fashion Luxury (Legacy)", "Premium and elegant design for luxury brands",
        "luxury",
        ("#1a1a1a", "#f5f5f5", "#ffffff", "#2c2c2c", "#d4af37"),
        ("Playfair Display, serif", "Playfair Display, serif"),
        legacy=True,
    ),
    _theme(
        "techy", "Techy (Legacy)", "Modern tech-focused design with bold elements", "tech",
        ("#000000", "#00ff88", "#0a0a0a", "#ffffff", "#00ff88"),
        ("JetBrains Mono, monospace", "Inter, system-ui, sans-serif"),
        layout=False, legacy=True,
    ),
)


def _index(themes: tuple[ThemeConfig, ...]) -> dict[str, ThemeConfig]:
    index: dict[str, ThemeConfig] = {}
    for theme in themes:
        if theme.name in index:
            raise ValueError(f"Duplicate theme name in registry: {theme.name}")
        index[theme.name] = theme
    return index


_THEMES_BY_NAME = _index(AVAILABLE_THEMES)

if DEFAULT_THEME not in _THEMES_BY_NAME:
    raise ValueError(f"Default theme {DEFAULT_THEME!r} is not registered")

FALLBACK_COLORS: ThemeColors = _THEMES_BY_NAME[DEFAULT_THEME].default_colors
FALLBACK_TYPOGRAPHY: ThemeTypography = _THEMES_BY_NAME[DEFAULT_THEME].default_typography


def get_theme_config(name: str | None) -> ThemeConfig | None:
    """Look up a theme by name. ``None`` tells the caller to fall back."""
    if not name:
        return None
    return _THEMES_BY_NAME.get(name)


def get_available_themes() -> list[ThemeConfig]:
    """Every registered theme, legacy entries included."""
    return list(AVAILABLE_THEMES)


def get_selectable_themes() -> list[ThemeConfig]:
    """Themes a merchant may pick for a store today."""
    return [theme for theme in AVAILABLE_THEMES if not theme.legacy]


def is_legacy_theme(name: str) -> bool:
    config = _THEMES_BY_NAME.get(name)
    return config is not None and config.legacy
