"""Theme component bundles and their loader.

A bundle is the set of templates a theme renders a storefront with. Each
bundle directory under ``templates/themes/`` overrides some components;
the rest come from ``templates/themes/_base``.

``ThemeLoader.load`` always resolves to a bundle. Unknown names get the
default bundle, a failing factory is logged and replaced by the default
bundle, and several retired theme names are served by a different bundle
than their name suggests. Callers must not assume ``bundle.name`` equals
the name they asked for.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, fields

from jinja2 import Environment, Template, TemplateError

from storefront.rendering.environment import THEME_TEMPLATES_DIR, get_jinja_env
from storefront.themes.registry import DEFAULT_THEME, get_available_themes

logger = logging.getLogger(__name__)

BASE_BUNDLE_DIR = "_base"

REQUIRED_COMPONENTS = ("header", "footer", "hero", "product_card")

# Bundle directories that ship with the app
BUNDLE_KEYS = (
    "minimal",
    "modern",
    "classic",
    "minimalist",
    "elegant",
    "bold",
    "neon",
    "vintage",
    "dark-premium",
    "royal-luxury",
    "forest-nature",
    "cosmic-space",
)

# Theme names served by another theme's bundle
THEME_ALIASES: dict[str, str] = {
    "minimal-v2": "minimalist",
    "premium": "royal-luxury",
    "dark-shade": "dark-premium",
    "ocean-breeze": "modern",
    "sunset-glow": "bold",
    # legacy themes
    "dark-theme": "dark-premium",
    "fashion-luxury": "elegant",
    "techy": "neon",
    # retired Shopify themes still referenced by old stores
    "black-premium": "minimal",
    "3d-theme": "minimal",
    "white": "minimal",
    "r765r786ry8r": "minimal",
}


class ThemeLoadError(Exception):
    """A bundle could not be built."""


@dataclass(frozen=True)
class ThemeBundle:
    name: str
    header: Template | None = None
    footer: Template | None = None
    hero: Template | None = None
    product_card: Template | None = None
    product_detail: Template | None = None
    cart_summary: Template | None = None

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, component) is not None for component in REQUIRED_COMPONENTS)

    @classmethod
    def component_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "name")


BundleFactory = Callable[[], ThemeBundle]


def template_bundle_factory(bundle_key: str, env: Environment | None = None) -> BundleFactory:
    """Factory that builds ``bundle_key`` from its template directory."""

    def build() -> ThemeBundle:
        jinja_env = env or get_jinja_env()
        if not (THEME_TEMPLATES_DIR / bundle_key).is_dir():
            raise ThemeLoadError(f"No template directory for bundle '{bundle_key}'")
        components = {}
        try:
            for component in ThemeBundle.component_names():
                components[component] = jinja_env.select_template(
                    [
                        f"themes/{bundle_key}/{component}.html",
                        f"themes/{BASE_BUNDLE_DIR}/{component}.html",
                    ]
                )
        except TemplateError as exc:
            raise ThemeLoadError(f"Bundle '{bundle_key}' failed to compile: {exc}") from exc
        return ThemeBundle(name=bundle_key, **components)

    build.bundle_dir = THEME_TEMPLATES_DIR / bundle_key  # type: ignore[attr-defined]
    return build


def default_factories() -> dict[str, BundleFactory]:
    return {key: template_bundle_factory(key) for key in BUNDLE_KEYS}


class ThemeLoader:
    """Resolves theme names to bundles, memoizing one bundle per name."""

    def __init__(
        self,
        factories: Mapping[str, BundleFactory] | None = None,
        *,
        default: str = DEFAULT_THEME,
        aliases: Mapping[str, str] | None = None,
        cache: MutableMapping[str, ThemeBundle] | None = None,
    ):
        self.factories = dict(factories if factories is not None else default_factories())
        self.default = default
        self.aliases = dict(THEME_ALIASES if aliases is None else aliases)
        self.cache: MutableMapping[str, ThemeBundle] = {} if cache is None else cache
        self._lock = asyncio.Lock()

    def resolve_key(self, name: str | None) -> str:
        """Bundle key for a theme name; unknown names map to the default."""
        if name and name in self.factories:
            return name
        if name and self.aliases.get(name) in self.factories:
            return self.aliases[name]
        return self.default

    async def load(self, name: str | None) -> ThemeBundle:
        cache_key = name or self.default
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        async with self._lock:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

            bundle_key = self.resolve_key(name)
            if name in self.aliases and bundle_key == self.aliases[name]:
                logger.debug("Theme %r served by bundle %r", name, bundle_key)
            elif name and bundle_key != name:
                logger.warning("Unknown theme %r, using default bundle %r", name, bundle_key)
            try:
                bundle = await self._build(bundle_key)
            except Exception:
                # not cached under cache_key, so the next request retries the bundle
                logger.exception("Failed to load theme bundle %r, using default", bundle_key)
                if bundle_key == self.default:
                    return ThemeBundle(name=self.default)
                return await self._load_default()
            self.cache[cache_key] = bundle
            return bundle

    async def _build(self, bundle_key: str) -> ThemeBundle:
        cached = self.cache.get(bundle_key)
        if cached is not None:
            return cached
        bundle = await asyncio.to_thread(self.factories[bundle_key])
        self.cache[bundle_key] = bundle
        return bundle

    async def _load_default(self) -> ThemeBundle:
        try:
            return await self._build(self.default)
        except Exception:
            logger.exception("Default theme bundle %r failed to load", self.default)
            # never cached; renderers show a loading state for incomplete bundles
            return ThemeBundle(name=self.default)

    def validate(self) -> list[str]:
        """Report configuration problems; meant to run once at startup."""
        problems = []
        if self.default not in self.factories:
            problems.append(f"default bundle '{self.default}' has no factory")
        for alias, target in self.aliases.items():
            if target not in self.factories:
                problems.append(f"alias '{alias}' points at unknown bundle '{target}'")
        for key, factory in self.factories.items():
            bundle_dir = getattr(factory, "bundle_dir", None)
            if bundle_dir is not None and not bundle_dir.is_dir():
                problems.append(f"bundle '{key}' has no template directory")
        for theme in get_available_themes():
            if theme.name not in self.factories and theme.name not in self.aliases:
                problems.append(f"theme '{theme.name}' has no bundle and will use the default")
        return problems

    def clear(self) -> None:
        self.cache.clear()


theme_loader = ThemeLoader()


def get_theme_loader() -> ThemeLoader:
    return theme_loader
