from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


def _edges(value: Any) -> list:
    """GraphQL connections come as {"edges": [{"node": ...}]}; plain lists are accepted too."""
    if isinstance(value, Mapping):
        value = value.get("edges") or []
    if not isinstance(value, list):
        return []
    nodes = []
    for item in value:
        if isinstance(item, Mapping) and "node" in item:
            item = item["node"]
        if isinstance(item, Mapping):
            nodes.append(item)
    return nodes


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class Variant:
    id: str
    price: str | None = None
    available_for_sale: bool = False
    inventory_quantity: int | None = None

    @property
    def is_purchasable(self) -> bool:
        # Unknown quantity counts as one unit in stock.
        quantity = 1 if self.inventory_quantity is None else self.inventory_quantity
        return self.available_for_sale and quantity > 0

    @property
    def numeric_id(self) -> str | None:
        if not self.id:
            return None
        return self.id.rsplit("/", 1)[-1] or None

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> "Variant":
        price = node.get("price")
        if isinstance(price, Mapping):
            price = price.get("amount")
        return cls(
            id=_text(node.get("id")),
            price=None if price in (None, "") else str(price),
            available_for_sale=bool(node.get("availableForSale")),
            inventory_quantity=_int_or_none(node.get("inventoryQuantity")),
        )


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    id: str
    title: str = ""
    vendor: str = ""
    product_type: str = ""
    handle: str = ""
    status: str = ""
    total_inventory: int = 0
    image_url: str | None = None
    variants: tuple[Variant, ...] = ()

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> "CatalogEntry":
        image = node.get("featuredImage")
        image_url = image.get("url") if isinstance(image, Mapping) else None
        return cls(
            id=_text(node.get("id")),
            title=_text(node.get("title")),
            vendor=_text(node.get("vendor")),
            product_type=_text(node.get("productType")),
            handle=_text(node.get("handle")),
            status=_text(node.get("status")),
            total_inventory=_int_or_none(node.get("totalInventory")) or 0,
            image_url=image_url or None,
            variants=tuple(Variant.from_node(v) for v in _edges(node.get("variants"))),
        )


@dataclass(frozen=True, slots=True)
class ResultRecord:
    id: str
    variant_id: str | None
    title: str
    brand: str
    category: str
    price: str
    image: str | None
    url: str
    add_to_cart: str | None

    def to_dict(self) -> dict:
        return asdict(self)
