"""Project scanning and duplicate grouping."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .signature import AssetCategory, Signature, build_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetGroup:
    """Synthetic assets sharing one signature, in project enumeration order."""
    signature: Signature
    items: Tuple[object, ...]

    @property
    def survivor(self):
        """First-encountered item; it is kept, the rest are removed."""
        return self.items[0]

    @property
    def duplicates(self) -> Tuple[object, ...]:
        return self.items[1:]

    @property
    def size(self) -> int:
        return len(self.items)

    @property
    def has_duplicates(self) -> bool:
        return len(self.items) > 1


@dataclass(frozen=True)
class ScanResult:
    """Immutable outcome of one project scan."""
    groups: Tuple[AssetGroup, ...] = ()
    total_assets: int = 0
    category_counts: Dict[AssetCategory, int] = field(default_factory=dict)

    @property
    def solids_count(self) -> int:
        return self.category_counts.get(AssetCategory.SOLID, 0)

    @property
    def nulls_count(self) -> int:
        return self.category_counts.get(AssetCategory.NULL, 0)

    @property
    def adjustments_count(self) -> int:
        return self.category_counts.get(AssetCategory.ADJ, 0)

    @property
    def duplicates_to_remove(self) -> int:
        return sum(group.size - 1 for group in self.groups)

    @property
    def duplicate_groups(self) -> List[AssetGroup]:
        return [group for group in self.groups if group.has_duplicates]

    def group_for(self, signature: Signature) -> Optional[AssetGroup]:
        for group in self.groups:
            if group.signature == signature:
                return group
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            'total_assets': self.total_assets,
            'solids': self.solids_count,
            'nulls': self.nulls_count,
            'adjustments': self.adjustments_count,
            'groups': len(self.groups),
            'duplicate_groups': len(self.duplicate_groups),
            'duplicates_to_remove': self.duplicates_to_remove,
        }


class SolidScanner:
    """Walks a project once and groups synthetic assets by signature."""

    def scan(self, project) -> ScanResult:
        """
        Scan every project item in enumeration order.

        Only synthetic assets (solids, nulls, adjustment layers) take part;
        compositions, folders and real footage are skipped.

        Args:
            project: Project document

        Returns:
            ScanResult with groups ordered by first encounter
        """
        grouped: Dict[Signature, List[object]] = {}
        categories = Counter()
        total = 0

        for item in project.items:
            if not item.is_synthetic_asset:
                continue

            total += 1
            signature = build_signature(item)
            categories[signature.category] += 1
            grouped.setdefault(signature, []).append(item)
            logger.debug(f"Scanned {item.name!r} (id {item.id}) -> {signature.key}")

        groups = tuple(AssetGroup(signature, tuple(items)) for signature, items in grouped.items())
        result = ScanResult(
            groups=groups,
            total_assets=total,
            category_counts={category: categories.get(category, 0) for category in AssetCategory},
        )

        logger.info(f"Scan complete: {total} synthetic assets in {len(groups)} groups, "
                    f"{result.duplicates_to_remove} duplicates to remove")
        return result
