"""Product Repository - read-only product lookups for cart pricing."""
import uuid
from typing import Any, Dict, List, Optional

from .base import BaseRepository
from simcart.services.models import Product

PRODUCT_COLUMNS = (
    "id,sku,base_price,vat_rate,is_active,"
    "product_translations(locale,name),"
    "product_images(image_url,display_order)"
)


def _pick_translation(translations: List[Dict[str, Any]], locale: str) -> Optional[Dict[str, Any]]:
    """Translation for locale, else the first one available."""
    if not translations:
        return None
    for translation in translations:
        if translation.get("locale") == locale:
            return translation
    return translations[0]


def _first_image_url(images: List[Dict[str, Any]]) -> Optional[str]:
    if not images:
        return None
    first = min(images, key=lambda image: image.get("display_order") or 0)
    return first.get("image_url")


class ProductRepository(BaseRepository):
    """Product catalog lookups (ProductCatalog contract)."""

    async def get_by_id(self, product_id: str, locale: str = "es") -> Optional[Product]:
        """
        Get product by ID with its localized name and first image.

        Returns None for unknown products and for ids that are not UUIDs
        (catalog primary keys are UUIDs; a malformed id can't match one).
        """
        try:
            uuid.UUID(str(product_id))
        except ValueError:
            return None

        result = (
            await self.client.table("products")
            .select(PRODUCT_COLUMNS)
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if not result.data:
            return None

        row = result.data[0]
        translation = _pick_translation(row.get("product_translations") or [], locale)
        return Product(
            id=row["id"],
            sku=row.get("sku") or "",
            name=translation["name"] if translation else row.get("sku") or "",
            image_url=_first_image_url(row.get("product_images") or []),
            base_price=row["base_price"],
            vat_rate=row.get("vat_rate"),
            is_active=bool(row.get("is_active", False)),
        )
