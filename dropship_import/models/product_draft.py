# dropship_import/models/product_draft.py

"""Persisted product draft model wrapping an extracted product."""

import random
import string
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dropship_import.models.product import ExtractedProduct

DRAFT_STATUSES: tuple[str, ...] = ("draft", "ready", "published")

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_draft_id() -> str:
    """Return an id like ``imported-1760880000000-k3j9x0a1b``."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"imported-{millis}-{suffix}"


@dataclass
class ProductDraft:
    """An imported product awaiting review in the dashboard."""

    id: str
    product: ExtractedProduct
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, product: ExtractedProduct) -> "ProductDraft":
        """Wrap a freshly extracted product as a new draft."""
        now = datetime.now()
        return cls(
            id=new_draft_id(),
            product=product,
            status="draft",
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the dashboard's product record shape."""
        return {
            "id": self.id,
            **self.product.to_dict(),
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductDraft":
        """Rebuild a draft from its flattened record."""
        return cls(
            id=str(data["id"]),
            product=ExtractedProduct.from_dict(data),
            status=str(data.get("status", "draft")),
            created_at=datetime.fromisoformat(str(data["createdAt"])),
            updated_at=datetime.fromisoformat(str(data["updatedAt"])),
        )
