"""
Repository Pattern for Catalog Lookups

Read-only adapters the cart engine prices against:
- ProductRepository: product price, VAT, active flag, localized name
- ComponentRepository: customization price modifiers
"""
from .product_repo import ProductRepository
from .component_repo import ComponentRepository

__all__ = [
    "ProductRepository",
    "ComponentRepository",
]
