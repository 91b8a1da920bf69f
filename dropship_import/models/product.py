# dropship_import/models/product.py

"""Product data models for inter-module data flow."""

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass
class ShippingMethod:
    """One synthesized shipping option for a product."""

    id: str
    name: str
    cost: float
    estimated_days: str
    carrier: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the dashboard's camelCase wire form."""
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "estimatedDays": self.estimated_days,
            "carrier": self.carrier,
        }


@dataclass
class ProductVariant:
    """A selectable product dimension such as colour or size."""

    id: str
    name: str
    options: list[str] = field(default_factory=lambda: list[str]())

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict."""
        return {
            "id": self.id,
            "name": self.name,
            "options": list(self.options),
        }


@dataclass
class PartialProduct:
    """Fields one extractor managed to recover from a document.

    ``None`` means the extractor found nothing for that field. The
    result merger decides which partial wins for each field.
    """

    title: str | None = None
    description: str | None = None
    price: float | None = None
    original_price: float | None = None
    currency: str | None = None
    images: list[str] | None = None
    category: str | None = None
    supplier: str | None = None
    min_order: int | None = None
    shipping_time: str | None = None
    shipping_cost: float | None = None
    free_shipping: bool | None = None
    shipping_methods: list[ShippingMethod] | None = None
    weight: str | None = None
    dimensions: str | None = None
    sku: str | None = None
    tags: list[str] | None = None
    rating: float | None = None
    reviews: int | None = None
    variants: list[ProductVariant] | None = None
    source_url: str | None = None
    source: str | None = None

    def filled_fields(self) -> list[str]:
        """Return the names of fields this partial has a value for."""
        return [
            f.name
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]


@dataclass(frozen=True)
class ExtractedProduct:
    """A complete, normalised product record produced by a pipeline."""

    title: str
    description: str
    price: float
    original_price: float
    currency: str
    images: list[str]
    category: str
    supplier: str
    min_order: int
    shipping_time: str
    shipping_cost: float
    free_shipping: bool
    shipping_methods: list[ShippingMethod]
    weight: str
    dimensions: str
    sku: str
    tags: list[str]
    rating: float
    reviews: int
    variants: list[ProductVariant]
    source_url: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the dashboard's camelCase wire form."""
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "originalPrice": self.original_price,
            "currency": self.currency,
            "images": list(self.images),
            "category": self.category,
            "supplier": self.supplier,
            "minOrder": self.min_order,
            "shippingTime": self.shipping_time,
            "shippingCost": self.shipping_cost,
            "isFreeShipping": self.free_shipping,
            "shippingMethods": [
                m.to_dict() for m in self.shipping_methods
            ],
            "weight": self.weight,
            "dimensions": self.dimensions,
            "sku": self.sku,
            "tags": list(self.tags),
            "rating": self.rating,
            "reviews": self.reviews,
            "variants": [v.to_dict() for v in self.variants],
            "sourceUrl": self.source_url,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractedProduct":
        """Rebuild a product from its wire form (e.g. the draft store)."""
        return cls(
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            price=float(data.get("price", 0) or 0),
            original_price=float(data.get("originalPrice", 0) or 0),
            currency=str(data.get("currency", "USD")),
            images=list(data.get("images") or []),
            category=str(data.get("category", "")),
            supplier=str(data.get("supplier", "")),
            min_order=int(data.get("minOrder", 1) or 1),
            shipping_time=str(data.get("shippingTime", "")),
            shipping_cost=float(data.get("shippingCost", 0) or 0),
            free_shipping=bool(data.get("isFreeShipping", False)),
            shipping_methods=[
                ShippingMethod(
                    id=str(m.get("id", "")),
                    name=str(m.get("name", "")),
                    cost=float(m.get("cost", 0) or 0),
                    estimated_days=str(m.get("estimatedDays", "")),
                    carrier=str(m.get("carrier", "")),
                )
                for m in data.get("shippingMethods") or []
            ],
            weight=str(data.get("weight", "")),
            dimensions=str(data.get("dimensions", "")),
            sku=str(data.get("sku", "")),
            tags=list(data.get("tags") or []),
            rating=float(data.get("rating", 0) or 0),
            reviews=int(data.get("reviews", 0) or 0),
            variants=[
                ProductVariant(
                    id=str(v.get("id", "")),
                    name=str(v.get("name", "")),
                    options=list(v.get("options") or []),
                )
                for v in data.get("variants") or []
            ],
            source_url=str(data.get("sourceUrl", "")),
            source=str(data.get("source", "")),
        )
