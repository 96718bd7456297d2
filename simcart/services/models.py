"""Catalog Models - Pydantic models for the read-only catalog lookups."""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from simcart.services.money import to_decimal as _to_decimal


class Product(BaseModel):
    """Product as seen by the cart: identity, localized name, price, VAT."""
    model_config = ConfigDict(extra="ignore")

    id: str
    sku: str = ""
    name: str
    image_url: Optional[str] = None  # First image by display order
    base_price: Decimal
    vat_rate: Decimal = Decimal("0")  # Percent, e.g. 21
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)

    @field_validator("base_price", "vat_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)
