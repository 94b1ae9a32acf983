"""Host project interface expected by the consolidation engine.

The engine never checks concrete host classes. Every project node answers
the capability probes ``is_folder``, ``is_composition`` and
``is_synthetic_asset``, and anything the engine touches beyond that is
described by the protocols below. A host adapter only has to satisfy them.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)

UNDO_GROUP_NAME = "Consolidate Solids"


class HostOperationError(RuntimeError):
    """Raised when the host rejects an operation (e.g. the object is no longer valid)."""


class ProjectItem(Protocol):
    id: int
    name: str
    parent_folder: Optional["FolderNode"]

    @property
    def is_folder(self) -> bool: ...

    @property
    def is_composition(self) -> bool: ...

    @property
    def is_synthetic_asset(self) -> bool: ...

    def remove(self) -> None: ...


class AssetItem(ProjectItem, Protocol):
    """Footage item whose source is a generated color fill."""

    width: int
    height: int
    pixel_aspect: float
    color: Sequence[float]


class FolderNode(ProjectItem, Protocol):
    @property
    def num_items(self) -> int: ...

    @property
    def items(self) -> List[ProjectItem]: ...

    def item(self, index: int) -> ProjectItem: ...


class Layer(Protocol):
    name: str

    @property
    def source(self) -> Optional[ProjectItem]: ...

    def replace_source(self, item: ProjectItem) -> None:
        """Point the layer at another item without touching any other property."""
        ...


class Composition(ProjectItem, Protocol):
    @property
    def layers(self) -> List[Layer]: ...


@runtime_checkable
class SupportsUsageLookup(Protocol):
    """Optional reverse index: compositions that use an item."""

    @property
    def used_in(self) -> List[Composition]: ...


class ProjectDocument(Protocol):
    @property
    def items(self) -> List[ProjectItem]:
        """Every item except the root folder, in project enumeration order."""
        ...

    @property
    def root_folder(self) -> FolderNode: ...

    def add_folder(self, name: str, parent: Optional[FolderNode] = None) -> FolderNode: ...

    def begin_undo_group(self, name: str) -> None: ...

    def end_undo_group(self) -> None: ...


def same_item(a: Optional[ProjectItem], b: Optional[ProjectItem]) -> bool:
    """Compare two project nodes by host identity rather than by name."""
    return a is not None and b is not None and a.id == b.id


def iter_compositions(project: ProjectDocument) -> Iterator[Composition]:
    """Yield every composition in enumeration order."""
    for item in project.items:
        if item.is_composition:
            yield item


@contextmanager
def undo_group(project: ProjectDocument, name: str = UNDO_GROUP_NAME):
    """
    Bracket a batch of mutations as one undoable step.

    The group is closed even if the body raises, so the host undo stack
    stays balanced.
    """
    project.begin_undo_group(name)
    logger.debug(f"Opened undo group: {name}")
    try:
        yield project
    finally:
        project.end_undo_group()
        logger.debug(f"Closed undo group: {name}")
