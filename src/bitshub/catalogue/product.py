"""Product aggregate, an item listed in the storefront catalogue.

Products are edited only through the catalogue commands. The business
``id`` is not unique: adding a product whose id is already listed keeps both
listings, so each listing is stored under its own ``listing_id``.

``ProductSnapshot`` is the product as a value, the form carts, orders and
catalogue commands carry it in.
"""

import json
from enum import Enum
from pathlib import Path

from protean.fields import Auto, Boolean, Float, Identifier, Integer, List, String, Text

from bitshub.domain import bitshub
from bitshub.utils.casing import snake_keys

SEED_PATH = Path(__file__).with_name("seed.json")


class Category(Enum):
    LAPTOPS = "laptops"
    ACCESSORIES = "accessories"
    HEADPHONES = "headphones"


@bitshub.value_object
class ProductSnapshot:
    """A product's listing details, frozen at the moment they were captured."""

    id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    price = Float(required=True, min_value=0)
    original_price = Float(min_value=0)
    image = Text(sanitize=False, default="")
    category = String(required=True, choices=Category)
    rating = Float(min_value=0, max_value=5, default=0.0)
    reviews = Integer(min_value=0, default=0)
    in_stock = Boolean(default=True)
    description = Text(sanitize=False, default="")
    specs = List(content_type=String(sanitize=False))
    discount = Float(min_value=0, max_value=100)


@bitshub.aggregate
class Product:
    listing_id = Auto(identifier=True, identity_strategy="uuid", identity_type="string")
    id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    price = Float(required=True, min_value=0)
    original_price = Float(min_value=0)
    image = Text(sanitize=False, default="")
    category = String(required=True, choices=Category)
    rating = Float(min_value=0, max_value=5, default=0.0)
    reviews = Integer(min_value=0, default=0)
    in_stock = Boolean(default=True)
    description = Text(sanitize=False, default="")
    specs = List(content_type=String(sanitize=False))
    discount = Float(min_value=0, max_value=100)

    @classmethod
    def from_snapshot(cls, snapshot: ProductSnapshot) -> "Product":
        return cls(**snapshot.to_dict())

    def snapshot(self) -> ProductSnapshot:
        data = self.to_dict()
        data.pop("listing_id", None)
        data.pop("_version", None)
        return ProductSnapshot(**data)

    def revise(self, snapshot: ProductSnapshot) -> None:
        """Replace every listing detail with those in ``snapshot``."""
        for field, value in snapshot.to_dict().items():
            setattr(self, field, value)


def load_seed_catalogue() -> list[Product]:
    """Products the storefront ships with, before anything is rehydrated."""
    raw = SEED_PATH.read_text(encoding="utf-8")
    return [Product.from_snapshot(ProductSnapshot(**snake_keys(item))) for item in json.loads(raw)]
