"""Lookup of layers that use a given project item."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .host import iter_compositions, same_item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Consumer:
    """A composition layer whose source is a given item."""
    composition: object
    layer_index: int
    layer: object

    def __str__(self) -> str:
        return f"{self.composition.name}[{self.layer_index}] {self.layer.name!r}"


class ReferenceResolver:
    """
    Finds every consumer of an item.

    When the host exposes a reverse index (``used_in``) and it is enabled,
    only the compositions it names are scanned. Otherwise every layer of
    every composition is checked; that layer list is gathered once and
    reused for all lookups.
    """

    def __init__(self, project, use_reverse_index: bool = True):
        self.project = project
        self.use_reverse_index = use_reverse_index
        self._all_layers: Optional[List[Tuple[object, int, object]]] = None

    def find_consumers(self, item) -> List[Consumer]:
        """
        Resolve the layers sourcing an item.

        Args:
            item: Project item (usually a duplicate about to be removed)

        Returns:
            Consumers in composition order, then layer order
        """
        # used_in is computed by the host on access, so read it only once
        used_in = getattr(item, 'used_in', None) if self.use_reverse_index else None
        if used_in is not None:
            consumers = self._scan(self._layers_of(used_in), item)
            strategy = "reverse index"
        else:
            consumers = self._scan(self._every_layer(), item)
            strategy = "full scan"

        logger.debug(f"{item.name!r}: {len(consumers)} consumer(s) via {strategy}")
        return consumers

    def _every_layer(self) -> List[Tuple[object, int, object]]:
        if self._all_layers is None:
            self._all_layers = list(self._layers_of(iter_compositions(self.project)))
            logger.debug(f"Indexed {len(self._all_layers)} layers for reference lookup")
        return self._all_layers

    @staticmethod
    def _layers_of(compositions: Iterable) -> Iterable[Tuple[object, int, object]]:
        for comp in compositions:
            for index, layer in enumerate(comp.layers):
                yield comp, index, layer

    @staticmethod
    def _scan(layers: Iterable[Tuple[object, int, object]], item) -> List[Consumer]:
        return [
            Consumer(comp, index, layer)
            for comp, index, layer in layers
            if same_item(layer.source, item)
        ]
