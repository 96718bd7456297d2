"""Cart models with Decimal-based pricing."""
import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from simcart.services.money import to_decimal, round_money, multiply, percent, add, to_float

# Per-product cap, checked against the resulting quantity
MAX_QUANTITY_PER_PRODUCT = 99


@dataclass
class SelectedOption:
    """One customization choice, e.g. group "Rim" -> component "Carbon 300mm"."""
    group_name: str
    component_id: str
    component_name: str

    def to_dict(self) -> dict:
        """Storage/wire shape (camelCase keys)."""
        return {
            "groupName": self.group_name,
            "componentId": self.component_id,
            "componentName": self.component_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SelectedOption":
        return cls(
            group_name=str(data["groupName"]),
            component_id=str(data["componentId"]),
            component_name=str(data["componentName"]),
        )


def serialize_options(options: List[SelectedOption]) -> str:
    """Encode selected options as the JSON array stored in Redis."""
    return json.dumps([option.to_dict() for option in options], ensure_ascii=False)


def parse_options(raw: Optional[str]) -> Tuple[List[SelectedOption], bool]:
    """
    Decode a stored selected-options value.

    Returns:
        (options, ok). ok is False when the value is not a JSON array of
        {groupName, componentId, componentName} objects; options is then empty.
    """
    if raw is None or raw == "":
        return [], True
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return [], False
    if data is None:
        return [], True
    if not isinstance(data, list):
        return [], False

    options = []
    for entry in data:
        if not isinstance(entry, dict):
            return [], False
        try:
            options.append(SelectedOption.from_dict(entry))
        except KeyError:
            return [], False
    return options, True


@dataclass
class AddToCart:
    """Add-to-cart request as understood by the engine."""
    product_id: str
    quantity: int = 1
    selected_component_ids: List[str] = field(default_factory=list)
    selected_options: List[SelectedOption] = field(default_factory=list)


@dataclass
class CartLine:
    """Priced line of a cart view."""
    product_id: str
    sku: str
    name: str
    quantity: int
    unit_price: Decimal  # Base price + price modifier
    vat_rate: Decimal
    image_url: Optional[str] = None
    selected_options: Optional[List[SelectedOption]] = None

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)
        self.vat_rate = to_decimal(self.vat_rate)

    @property
    def subtotal(self) -> Decimal:
        """Unit price times quantity."""
        return round_money(multiply(self.unit_price, self.quantity))

    @property
    def vat_amount(self) -> Decimal:
        """VAT of this line at the product's own rate, unrounded."""
        return percent(self.subtotal, self.vat_rate)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "sku": self.sku,
            "name": self.name,
            "image_url": self.image_url,
            "quantity": self.quantity,
            "unit_price": to_float(self.unit_price),
            "vat_rate": to_float(self.vat_rate),
            "subtotal": to_float(self.subtotal),
            "vat_amount": to_float(round_money(self.vat_amount)),
            "selected_options": (
                [option.to_dict() for option in self.selected_options]
                if self.selected_options is not None
                else None
            ),
        }


@dataclass
class CartView:
    """Read-side projection of a cart. Never persisted."""
    items: List[CartLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def vat_amount(self) -> Decimal:
        """
        Sum of per-line VAT, rounded to cents once.

        Each line is taxed at its own product's rate, so a cart mixing 21%
        and 10% products is never taxed at a single blended rate.
        """
        return round_money(sum((item.vat_amount for item in self.items), Decimal("0")))

    @property
    def total(self) -> Decimal:
        return add(self.subtotal, self.vat_amount)

    def get_item(self, product_id: str) -> Optional[CartLine]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def to_dict(self) -> dict:
        """JSON-ready shape for the HTTP layer."""
        return {
            "items": [item.to_dict() for item in self.items],
            "total_items": self.total_items,
            "subtotal": to_float(self.subtotal),
            "vat_amount": to_float(self.vat_amount),
            "total": to_float(self.total),
        }
