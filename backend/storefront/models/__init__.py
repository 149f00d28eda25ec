from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.product_image import ProductImage
from storefront.models.store_theme import StoreThemeRecord
from storefront.models.tenant import Tenant
from storefront.models.tenant_member import TenantMember
from storefront.models.user import User

__all__ = [
    "Category",
    "Product",
    "ProductImage",
    "StoreThemeRecord",
    "Tenant",
    "TenantMember",
    "User",
]
