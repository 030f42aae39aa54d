"""Item: an immutable catalog fact.

Items are owned by the catalog; the checkout pipeline only reads them.
Each item is exactly one physical unit that can be sold once.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from onedrop.domain.exceptions import SizeUnavailableError, ValidationError
from onedrop.domain.model.value_objects import Money


def normalize_size(size: str) -> str:
    return size.strip().upper()


@dataclass(frozen=True)
class Item:
    """A single-unit catalog entry.

    ``size_map`` maps a size label to exactly one fulfillment variant id.
    A size missing from the map is not available for this item.
    """

    id: str
    title: str
    price: Money
    size_map: dict[str, int]
    artwork_url: str
    description: str = ""
    image: str = ""
    sizes: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Item id is required")
        if not self.artwork_url:
            raise ValidationError(f"Item '{self.id}' has no artwork reference")
        normalized = {normalize_size(size): variant for size, variant in self.size_map.items()}
        object.__setattr__(self, "size_map", normalized)
        object.__setattr__(self, "sizes", tuple(normalized))

    def variant_for(self, size: str) -> int:
        """Resolve a size label to its fulfillment variant id."""
        variant_id = self.size_map.get(normalize_size(size))
        if variant_id is None:
            raise SizeUnavailableError(
                f"Size '{size}' is not available for {self.title}"
            )
        return variant_id
