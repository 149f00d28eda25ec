"""Async HTTP client for the storefront REST API.

Used by the server-rendered storefront and by integrations. 5xx responses
and transport failures are retried with exponential backoff unless the
problem body says ``"retryable": false``.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from storefront.client.errors import ApiUnavailableError, error_for_status
from storefront.core.config import settings
from storefront.schemas.common import PaginatedResponse
from storefront.schemas.product import ProductFilters, PublicProductResponse
from storefront.schemas.storefront import StorefrontInfo, StorefrontThemeResponse
from storefront.themes.presets import ThemeCatalogEntry
from storefront.themes.types import StoreTheme, ThemeCustomization

logger = logging.getLogger(__name__)


def _problem_detail(response: httpx.Response) -> tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(payload, dict):
        detail = payload.get("detail") or payload.get("title")
        if isinstance(detail, str):
            return detail, payload
    return response.reason_phrase, payload


def _is_retryable(response: httpx.Response) -> bool:
    if response.status_code < 500:
        return False
    try:
        payload = response.json()
    except ValueError:
        return True
    return not (isinstance(payload, dict) and payload.get("retryable") is False)


class StorefrontApiClient:
    def __init__(
        self,
        base_url: str = settings.STOREFRONT_API_URL,
        *,
        token: str | None = None,
        cookies: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = settings.API_MAX_RETRIES,
        base_delay: float = settings.API_RETRY_BASE_DELAY,
        timeout: float = settings.API_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._base_path = urlparse(self.base_url).path.rstrip("/")
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            cookies=cookies,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "StorefrontApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def normalize_path(self, path: str) -> str:
        """Drop an ``/api`` prefix the base URL already carries."""
        if not path.startswith("/"):
            path = f"/{path}"
        base = self._base_path
        if base.endswith("/api") and path.startswith("/api/"):
            return path[len("/api"):]
        if base and path.startswith(f"{base}/"):
            return path[len(base):]
        return path

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self.normalize_path(path)
        attempt = 0
        while True:
            try:
                response = await self._client.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                if attempt >= self.max_retries:
                    logger.error("%s %s unreachable after %d retries", method, url, attempt)
                    raise ApiUnavailableError(f"{method} {url}: {exc}") from exc
                await self._backoff(attempt, method, url, repr(exc))
                attempt += 1
                continue

            if response.is_success:
                if response.status_code == 204 or not response.content:
                    return None
                return response.json()

            if _is_retryable(response) and attempt < self.max_retries:
                await self._backoff(attempt, method, url, f"HTTP {response.status_code}")
                attempt += 1
                continue

            detail, payload = _problem_detail(response)
            raise error_for_status(response.status_code, detail, payload)

    async def _backoff(self, attempt: int, method: str, url: str, reason: str) -> None:
        delay = self.base_delay * 2**attempt
        logger.warning(
            "%s %s failed (%s), retry %d/%d in %.1fs",
            method, url, reason, attempt + 1, self.max_retries, delay,
        )
        await asyncio.sleep(delay)

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # --- Public storefront ---

    async def get_storefront_info(self, slug: str) -> StorefrontInfo:
        return StorefrontInfo.model_validate(await self.get(f"/storefront/{slug}"))

    async def get_storefront_products(
        self, slug: str, filters: ProductFilters | None = None
    ) -> PaginatedResponse[PublicProductResponse]:
        params = filters.query_params() if filters else None
        data = await self.get(f"/storefront/{slug}/products", params=params)
        return PaginatedResponse[PublicProductResponse].model_validate(data)

    async def get_storefront_product(self, slug: str, product_id: str) -> PublicProductResponse:
        data = await self.get(f"/storefront/{slug}/products/{product_id}")
        return PublicProductResponse.model_validate(data)

    async def get_storefront_categories(self, slug: str) -> list[dict]:
        return await self.get(f"/storefront/{slug}/categories")

    async def get_storefront_theme(self, slug: str) -> StorefrontThemeResponse:
        data = await self.get(f"/storefront/{slug}/theme")
        return StorefrontThemeResponse.model_validate(data)

    # --- Merchant theme (needs a token) ---

    async def get_store_theme(self) -> StoreTheme:
        return StoreTheme.model_validate(await self.get("/tenants/me/storefront/theme"))

    async def update_store_theme(self, theme: StoreTheme) -> StoreTheme:
        data = await self.put(
            "/tenants/me/storefront/theme",
            json=theme.model_dump(by_alias=True, exclude_none=True),
        )
        return StoreTheme.model_validate(data)

    async def update_theme_customizations(self, patch: ThemeCustomization) -> StoreTheme:
        # exclude_unset keeps "not sent" distinct from an explicit null
        data = await self.patch(
            "/tenants/me/storefront/theme/customizations",
            json=patch.model_dump(by_alias=True, exclude_unset=True),
        )
        return StoreTheme.model_validate(data)

    async def get_theme_catalog(self) -> list[ThemeCatalogEntry]:
        data = await self.get("/tenants/me/storefront/themes")
        return [ThemeCatalogEntry.model_validate(entry) for entry in data]

    async def apply_theme_preset(self, preset_id: str) -> StoreTheme:
        data = await self.post(f"/tenants/me/storefront/theme/presets/{preset_id}")
        return StoreTheme.model_validate(data)
