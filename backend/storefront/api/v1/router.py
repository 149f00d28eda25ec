"""Aggregate all v1 sub-routers."""

from fastapi import APIRouter

from storefront.api.v1.health import router as health_router
from storefront.api.v1.public_storefront import router as public_storefront_router
from storefront.api.v1.store_theme import router as store_theme_router
from storefront.api.v1.tenants import router as tenants_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["health"])
api_v1_router.include_router(tenants_router, prefix="/tenants", tags=["tenants"])
api_v1_router.include_router(
    store_theme_router, prefix="/tenants/me/storefront", tags=["storefront-theme"]
)
api_v1_router.include_router(public_storefront_router, prefix="/storefront", tags=["storefront"])
