"""Signature building for synthetic assets."""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .utils import format_dimensions, rgb_to_hex

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "|"

_NULL_PATTERN = re.compile(r"null", re.IGNORECASE)
_ADJUSTMENT_PATTERN = re.compile(r"adjustment", re.IGNORECASE)


class AssetCategory(Enum):
    """Kind of synthetic asset, derived from the item name."""
    NULL = "NULL"
    ADJ = "ADJ"
    SOLID = "SOLID"


def classify_name(name: str) -> AssetCategory:
    """
    Classify a synthetic asset by its display name.

    "null" wins over "adjustment", so "AdjustmentNullThing" is a NULL.

    Args:
        name: Item display name

    Returns:
        Asset category
    """
    if _NULL_PATTERN.search(name or ""):
        return AssetCategory.NULL
    if _ADJUSTMENT_PATTERN.search(name or ""):
        return AssetCategory.ADJ
    return AssetCategory.SOLID


@dataclass(frozen=True)
class Signature:
    """Grouping key: two assets are duplicates iff their signatures are equal."""
    category: AssetCategory
    hex_color: str
    width: int
    height: int
    pixel_aspect: float

    @property
    def key(self) -> str:
        """Printable form, e.g. ``SOLID|FF0000|1920|1080|1.0``."""
        return SIGNATURE_SEPARATOR.join([
            self.category.value,
            self.hex_color,
            str(self.width),
            str(self.height),
            repr(self.pixel_aspect),
        ])

    @property
    def dimensions(self) -> str:
        return format_dimensions(self.width, self.height)

    def survivor_name(self) -> str:
        """Normalized base name for the item that survives consolidation."""
        if self.category is AssetCategory.NULL:
            return f"Null_{self.dimensions}"
        if self.category is AssetCategory.ADJ:
            return f"Adjustment_Layer_{self.dimensions}"
        return f"Solid_{self.hex_color}_{self.dimensions}"

    def __str__(self) -> str:
        return self.key


def build_signature(item) -> Signature:
    """
    Derive the signature of a synthetic asset item.

    Args:
        item: Item exposing name, color, width, height and pixel_aspect

    Returns:
        Signature for grouping
    """
    return Signature(
        category=classify_name(item.name),
        hex_color=rgb_to_hex(item.color),
        width=int(item.width),
        height=int(item.height),
        pixel_aspect=float(item.pixel_aspect),
    )
