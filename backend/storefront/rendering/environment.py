"""Jinja2 environment for server-rendered storefront pages."""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from storefront.themes.types import CSS_UNSAFE_RE

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
THEME_TEMPLATES_DIR = TEMPLATES_DIR / "themes"

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "KWD": "KD ",
    "AED": "AED ",
    "SAR": "SR ",
}

# ISO 4217 minor units where they differ from 2
_CURRENCY_DECIMALS = {"KWD": 3, "BHD": 3, "OMR": 3, "JPY": 0, "KRW": 0}


def _currency_filter(value: Any, currency: str = "KWD") -> str:
    """Format a major-unit amount, e.g. ``1299.5 -> KD 1,299.500``."""
    if value is None:
        return ""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    places = _CURRENCY_DECIMALS.get(currency, 2)
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{amount:,.{places}f}"


def _css_vars_filter(variables: dict[str, str]) -> Markup:
    """Render a ``:root { ... }`` block from theme custom properties.

    Values are emitted verbatim (no HTML escaping inside ``<style>``);
    any that could break out of the block are dropped.
    """
    body = "".join(
        f"{name}: {value};"
        for name, value in variables.items()
        if value and not CSS_UNSAFE_RE.search(value)
    )
    return Markup(f":root {{{body}}}")


def create_jinja_env(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["currency"] = _currency_filter
    env.filters["css_vars"] = _css_vars_filter
    return env


_env: Environment | None = None


def get_jinja_env() -> Environment:
    """Shared environment (lazy singleton)."""
    global _env  # noqa: PLW0603
    if _env is None:
        _env = create_jinja_env()
    return _env
