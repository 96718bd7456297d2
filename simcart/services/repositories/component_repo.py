"""Component Repository - price modifiers of product customization options."""
from decimal import Decimal
from typing import Iterable

from .base import BaseRepository
from simcart.services.money import to_decimal


class ComponentRepository(BaseRepository):
    """Component option lookups (ComponentCatalog contract)."""

    async def sum_price_modifiers(self, product_id: str, component_ids: Iterable[str]) -> Decimal:
        """Sum of price deltas configured for the selected components of a product."""
        ids = [str(component_id) for component_id in component_ids]
        if not ids:
            return Decimal("0")

        result = (
            await self.client.table("product_component_options")
            .select("price_modifier")
            .eq("product_id", str(product_id))
            .in_("component_id", ids)
            .execute()
        )
        return sum((to_decimal(row.get("price_modifier")) for row in result.data or []), Decimal("0"))
