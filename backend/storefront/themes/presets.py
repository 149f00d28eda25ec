"""Color presets layered on the base themes.

A preset is not a theme of its own: applying one selects its base theme and
writes the preset palette into the store's customizations. In the theme
picker presets show up as extra entries next to the registry themes.
"""

from pydantic import model_validator

from storefront.themes.registry import ThemeConfig, get_theme_config
from storefront.themes.types import (
    ColorOverrides,
    CustomizableProperty,
    StoreTheme,
    ThemeColors,
    ThemeCustomization,
    ThemeModel,
    ThemeTypography,
    TypographyOverrides,
)


class PresetNotFoundError(LookupError):
    def __init__(self, preset_id: str):
        self.preset_id = preset_id
        super().__init__(f"Unknown theme preset '{preset_id}'")


class ThemePreset(ThemeModel):
    id: str
    base_theme: str
    display_name: str
    category: str
    colors: ThemeColors
    typography: TypographyOverrides | None = None
    preview_gradient: tuple[str, str] | None = None

    @model_validator(mode="after")
    def default_gradient(self) -> "ThemePreset":
        if self.preview_gradient is None:
            self.preview_gradient = (self.colors.primary, self.colors.accent)
        return self


class ThemeCatalogEntry(ThemeModel):
    """One tile in the theme picker: a registry theme or a preset."""

    name: str
    display_name: str
    description: str = ""
    category: str
    default_colors: ThemeColors
    default_typography: ThemeTypography | None = None
    customizable_properties: tuple[CustomizableProperty, ...] = ()
    is_preset: bool = False
    preset_id: str | None = None
    base_theme: str | None = None
    preview_gradient: tuple[str, str] | None = None


PRESET_CATEGORIES = (
    "All",
    "Modern",
    "Minimal",
    "Dark",
    "Bold",
    "Luxury",
    "Nature",
    "Tech",
    "Neon",
    "Pastel",
    "Monochrome",
    "Seasonal",
)


def _preset(
    preset_id: str,
    base_theme: str,
    display_name: str,
    category: str,
    colors: tuple[str, str, str, str, str],
    gradient: tuple[str, str] | None = None,
    fonts: str | None = None,
) -> ThemePreset:
    primary, secondary, background, text, accent = colors
    return ThemePreset(
        id=preset_id,
        base_theme=base_theme,
        display_name=display_name,
        category=category,
        colors=ThemeColors(
            primary=primary, secondary=secondary, background=background, text=text, accent=accent
        ),
        typography=TypographyOverrides(font_family=fonts, heading_font=fonts) if fonts else None,
        preview_gradient=gradient,
    )


_GEORGIA = "Georgia, serif"
_LORA = "Lora, serif"
_PLAYFAIR = "Playfair Display, serif"
_CORMORANT = "Cormorant Garamond, serif"
_MONTSERRAT = "Montserrat, sans-serif"
_POPPINS = "Poppins, sans-serif"
_MERRIWEATHER = "Merriweather, serif"

THEME_PRESETS: tuple[ThemePreset, ...] = (
    # Modern
    _preset("modern-ocean", "modern", "Modern Ocean", "Modern",
            ("#0077b6", "#caf0f8", "#ffffff", "#023e8a", "#00b4d8")),
    _preset("modern-rose", "modern", "Modern Rose", "Modern",
            ("#be185d", "#fce7f3", "#ffffff", "#831843", "#ec4899")),
    _preset("modern-slate", "modern", "Modern Slate", "Modern",
            ("#334155", "#f1f5f9", "#ffffff", "#1e293b", "#6366f1")),
    _preset("modern-emerald", "modern", "Modern Emerald", "Modern",
            ("#059669", "#ecfdf5", "#ffffff", "#064e3b", "#10b981")),
    # Classic
    _preset("classic-warm", "classic", "Classic Warm", "Modern",
            ("#92400e", "#fef3c7", "#fffbeb", "#451a03", "#b45309"), fonts=_GEORGIA),
    _preset("classic-burgundy", "classic", "Classic Burgundy", "Luxury",
            ("#7f1d1d", "#fef2f2", "#fffafa", "#450a0a", "#991b1b"), fonts=_GEORGIA),
    _preset("classic-forest", "classic", "Classic Forest", "Nature",
            ("#14532d", "#f0fdf4", "#fafff7", "#052e16", "#166534"), fonts=_LORA),
    # Minimal
    _preset("minv2-pure", "minimal-v2", "Pure White", "Minimal",
            ("#111827", "#f9fafb", "#ffffff", "#1f2937", "#111827"), ("#111827", "#374151")),
    _preset("minv2-sand", "minimal-v2", "Sand Minimal", "Minimal",
            ("#78716c", "#fafaf9", "#fffbf5", "#44403c", "#a8a29e")),
    _preset("minv2-mono", "minimal-v2", "Monochrome", "Monochrome",
            ("#000000", "#e5e5e5", "#ffffff", "#171717", "#525252")),
    # Premium
    _preset("premium-gold", "premium", "Premium Gold", "Luxury",
            ("#1a1a1a", "#fdf6e3", "#ffffff", "#2c2c2c", "#c8a951"), fonts=_PLAYFAIR),
    _preset("premium-rose-gold", "premium", "Rose Gold", "Luxury",
            ("#4a2021", "#fdf2f8", "#fff5f7", "#3b0a0a", "#b76e79"), fonts=_CORMORANT),
    _preset("premium-midnight", "premium", "Midnight", "Dark",
            ("#e2e8f0", "#1e293b", "#0f172a", "#cbd5e1", "#818cf8"), ("#0f172a", "#818cf8"),
            fonts=_PLAYFAIR),
    # Neon
    _preset("neon-cyber", "neon", "Cyber Neon", "Neon",
            ("#00ffff", "#0a0a2e", "#050520", "#e0e0ff", "#ff00ff")),
    _preset("neon-synthwave", "neon", "Synthwave", "Neon",
            ("#f72585", "#1a0033", "#0d001a", "#e0c3fc", "#7209b7")),
    _preset("neon-vapor", "neon", "Vaporwave", "Neon",
            ("#ff71ce", "#1a0026", "#0d001a", "#ffd1eb", "#01cdfe")),
    # Elegant
    _preset("elegant-ivory", "elegant", "Ivory Elegance", "Luxury",
            ("#1a1a2e", "#fffff0", "#fffef5", "#2c2c2c", "#b8860b"), fonts=_PLAYFAIR),
    _preset("elegant-noir", "elegant", "Noir", "Dark",
            ("#e8d5b7", "#1a1a1a", "#0a0a0a", "#d4c5a9", "#c9a961"), ("#0a0a0a", "#c9a961"),
            fonts=_CORMORANT),
    _preset("elegant-mauve", "elegant", "Mauve", "Pastel",
            ("#6b21a8", "#faf5ff", "#fefcff", "#4a044e", "#a855f7"), fonts=_PLAYFAIR),
    # Bold
    _preset("bold-electric", "bold", "Bold Electric", "Bold",
            ("#7c3aed", "#f5f3ff", "#ffffff", "#1e1b4b", "#f43f5e"), fonts=_MONTSERRAT),
    _preset("bold-tropical", "bold", "Tropical", "Bold",
            ("#059669", "#f0fdf4", "#ffffff", "#052e16", "#f97316"), fonts=_POPPINS),
    _preset("bold-jungle", "bold", "Jungle", "Nature",
            ("#15803d", "#f0fdf4", "#ffffff", "#052e16", "#ca8a04"), fonts=_POPPINS),
    # Minimalist
    _preset("minimalist-winter", "minimalist", "Winter", "Minimal",
            ("#1e40af", "#eff6ff", "#ffffff", "#1e3a5f", "#3b82f6")),
    _preset("minimalist-steel", "minimalist", "Steel", "Monochrome",
            ("#475569", "#f1f5f9", "#ffffff", "#1e293b", "#64748b")),
    _preset("minimalist-lavender", "minimalist", "Lavender", "Pastel",
            ("#6d28d9", "#f5f3ff", "#fefcff", "#4c1d95", "#8b5cf6")),
    # Vintage
    _preset("vintage-retro", "vintage", "Retro", "Seasonal",
            ("#b45309", "#fef3c7", "#fffbeb", "#78350f", "#92400e"), fonts=_MERRIWEATHER),
    _preset("vintage-sepia", "vintage", "Sepia", "Monochrome",
            ("#704214", "#fdf6e3", "#faf3e0", "#5c3310", "#8b6914"), fonts=_LORA),
    _preset("vintage-rustic", "vintage", "Rustic", "Nature",
            ("#713f12", "#fef9c3", "#fefce8", "#422006", "#a16207"), fonts=_LORA),
    # Dark shade
    _preset("darkshade-charcoal", "dark-shade", "Charcoal", "Dark",
            ("#e5e7eb", "#1f2937", "#111827", "#d1d5db", "#6b7280"), ("#111827", "#6b7280")),
    _preset("darkshade-obsidian", "dark-shade", "Obsidian", "Dark",
            ("#c084fc", "#1e1b4b", "#0c0a1d", "#ddd6fe", "#7c3aed"), ("#0c0a1d", "#7c3aed")),
    # Dark premium
    _preset("darkprem-gold", "dark-premium", "Dark Gold", "Dark",
            ("#fbbf24", "#1f2937", "#000000", "#fef3c7", "#f59e0b"), ("#000000", "#f59e0b")),
    _preset("darkprem-ruby", "dark-premium", "Ruby", "Dark",
            ("#fda4af", "#4c0519", "#0c0000", "#ffe4e6", "#e11d48"), ("#0c0000", "#e11d48")),
    # Royal luxury
    _preset("royal-amethyst", "royal-luxury", "Amethyst", "Luxury",
            ("#a855f7", "#faf5ff", "#ffffff", "#3b0764", "#c084fc")),
    _preset("royal-imperial", "royal-luxury", "Imperial", "Luxury",
            ("#1e3a8a", "#eff6ff", "#ffffff", "#1e1b4b", "#c9a961")),
    # Ocean breeze
    _preset("ocean-pacific", "ocean-breeze", "Pacific", "Nature",
            ("#0369a1", "#e0f2fe", "#f0f9ff", "#0c4a6e", "#0ea5e9")),
    _preset("ocean-deep-sea", "ocean-breeze", "Deep Sea", "Dark",
            ("#7dd3fc", "#0c4a6e", "#082f49", "#bae6fd", "#0ea5e9"), ("#082f49", "#0ea5e9")),
    # Sunset glow
    _preset("sunset-golden", "sunset-glow", "Golden Hour", "Bold",
            ("#ea580c", "#fff7ed", "#ffffff", "#431407", "#fbbf24")),
    _preset("sunset-cherry", "sunset-glow", "Cherry Blossom", "Pastel",
            ("#ec4899", "#fdf2f8", "#fff5f9", "#831843", "#f9a8d4")),
    # Forest nature
    _preset("forest-moss", "forest-nature", "Moss", "Nature",
            ("#166534", "#f0fdf4", "#ffffff", "#14532d", "#4ade80")),
    _preset("forest-autumn", "forest-nature", "Autumn", "Seasonal",
            ("#b45309", "#fffbeb", "#ffffff", "#78350f", "#f59e0b")),
    # Cosmic space
    _preset("cosmic-nebula", "cosmic-space", "Nebula", "Dark",
            ("#c084fc", "#2e1065", "#0c0015", "#e9d5ff", "#a855f7"), ("#0c0015", "#a855f7")),
    _preset("cosmic-aurora", "cosmic-space", "Aurora", "Dark",
            ("#34d399", "#064e3b", "#050d1a", "#a7f3d0", "#818cf8"), ("#050d1a", "#34d399")),
    # Pastel and tech extras
    _preset("pastel-peach", "modern", "Peach", "Pastel",
            ("#f97316", "#fff7ed", "#fffaf5", "#7c2d12", "#fb923c")),
    _preset("pastel-mint", "minimalist", "Mint", "Pastel",
            ("#0d9488", "#f0fdfa", "#f0fffe", "#134e4a", "#5eead4")),
    _preset("tech-terminal", "neon", "Terminal", "Tech",
            ("#22c55e", "#0a1a0a", "#000000", "#4ade80", "#16a34a"), ("#000000", "#22c55e")),
    _preset("tech-circuit", "dark-shade", "Circuit", "Tech",
            ("#22d3ee", "#164e63", "#0a1929", "#a5f3fc", "#06b6d4"), ("#0a1929", "#06b6d4")),
)


def _index(presets: tuple[ThemePreset, ...]) -> dict[str, ThemePreset]:
    index: dict[str, ThemePreset] = {}
    for preset in presets:
        if preset.id in index:
            raise ValueError(f"Duplicate preset id: {preset.id}")
        if get_theme_config(preset.base_theme) is None:
            raise ValueError(f"Preset {preset.id} uses unknown base theme {preset.base_theme}")
        if preset.category not in PRESET_CATEGORIES:
            raise ValueError(f"Preset {preset.id} has unknown category {preset.category}")
        index[preset.id] = preset
    return index


_PRESETS_BY_ID = _index(THEME_PRESETS)


def get_preset(preset_id: str) -> ThemePreset | None:
    return _PRESETS_BY_ID.get(preset_id)


def catalog_entry_from_config(config: ThemeConfig) -> ThemeCatalogEntry:
    return ThemeCatalogEntry(
        name=config.name,
        display_name=config.display_name,
        description=config.description,
        category=config.category,
        default_colors=config.default_colors,
        default_typography=config.default_typography,
        customizable_properties=config.customizable_properties,
        is_preset=False,
    )


def _catalog_entry_from_preset(preset: ThemePreset) -> ThemeCatalogEntry:
    base = get_theme_config(preset.base_theme)
    typography = None
    base_label = preset.base_theme
    if base is not None:
        base_label = base.display_name
        typography = base.default_typography
        if preset.typography is not None:
            overrides = preset.typography.model_dump(exclude_none=True)
            typography = typography.model_copy(update=overrides)
    return ThemeCatalogEntry(
        name=preset.id,
        display_name=preset.display_name,
        description=f"{preset.display_name} preset for {base_label}",
        category=preset.category,
        default_colors=preset.colors,
        default_typography=typography,
        customizable_properties=base.customizable_properties if base else (),
        is_preset=True,
        preset_id=preset.id,
        base_theme=preset.base_theme,
        preview_gradient=preset.preview_gradient,
    )


def merge_presets(api_themes: list[ThemeConfig | ThemeCatalogEntry]) -> list[ThemeCatalogEntry]:
    """Theme picker entries: the given themes first, then every preset."""
    entries = [
        theme.model_copy(update={"is_preset": False})
        if isinstance(theme, ThemeCatalogEntry)
        else catalog_entry_from_config(theme)
        for theme in api_themes
    ]
    entries.extend(_catalog_entry_from_preset(preset) for preset in THEME_PRESETS)
    return entries


def apply_preset(preset_id: str, current: StoreTheme | None = None) -> StoreTheme:
    """Store theme selecting the preset's base theme with its palette.

    The merchant's layout and logo customizations are carried over; colors
    and typography are replaced by the preset's.
    """
    preset = get_preset(preset_id)
    if preset is None:
        raise PresetNotFoundError(preset_id)

    existing = current.customizations if current else ThemeCustomization()
    return StoreTheme(
        name=preset.base_theme,
        customizations=ThemeCustomization(
            colors=ColorOverrides(**preset.colors.model_dump()),
            typography=preset.typography.model_copy() if preset.typography else None,
            layout=existing.layout,
            logo=existing.logo,
        ),
    )

