"""CORS configuration for merchant dashboards calling the API."""

from storefront.core.config import settings


def get_cors_config() -> dict:
    """Return CORS middleware kwargs for FastAPI.

    ``ALLOWED_ORIGIN_REGEX`` admits per-store custom domains that cannot be
    listed up front.
    """
    config = {
        "allow_origins": settings.allowed_origins_list,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": [
            "Authorization",
            "Content-Type",
            "X-Request-Id",
            "X-Tenant-Id",
        ],
        "expose_headers": ["X-Request-Id"],
    }
    if settings.ALLOWED_ORIGIN_REGEX and settings.ENVIRONMENT != "development":
        config["allow_origin_regex"] = settings.ALLOWED_ORIGIN_REGEX
    return config
