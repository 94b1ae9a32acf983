"""In-memory project document used as the reference host adapter.

Mirrors the object model of a compositing application closely enough for
the consolidation engine: a flat item list in enumeration order, a folder
tree under an implicit root, compositions holding layers, and undo-group
bracketing. Projects can be loaded from and saved to a YAML snapshot.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from .host import HostOperationError

logger = logging.getLogger(__name__)

ROOT_FOLDER_ID = 0


class _ProjectNode:
    """Base for every node that lives in a project."""

    kind = "item"

    def __init__(self, project: "Project", item_id: int, name: str):
        self._project = project
        self.id = item_id
        self._name = name
        self._parent: Optional["Folder"] = None
        self._valid = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, name={self._name!r})"

    def _check_valid(self):
        if not self._valid:
            raise HostOperationError(f"Object is invalid: {self.kind} {self.id} ({self._name!r})")

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        self._check_valid()
        self._name = str(value)

    @property
    def parent_folder(self) -> Optional["Folder"]:
        return self._parent

    @parent_folder.setter
    def parent_folder(self, folder: "Folder"):
        self._check_valid()
        if folder is None:
            folder = self._project.root_folder
        folder._check_valid()
        if folder._project is not self._project:
            raise HostOperationError("Cannot move an item into another project's folder")

        ancestor = folder
        while ancestor is not None:
            if ancestor is self:
                raise HostOperationError(f"Cannot move folder {self._name!r} into itself")
            ancestor = ancestor._parent

        if self._parent is folder:
            return
        if self._parent is not None:
            self._parent._children.remove(self)
        folder._children.append(self)
        self._parent = folder

    @property
    def is_folder(self) -> bool:
        return False

    @property
    def is_composition(self) -> bool:
        return False

    @property
    def is_synthetic_asset(self) -> bool:
        return False

    def remove(self):
        """Remove the item from the project."""
        self._check_valid()
        self._project._remove_node(self)

    def to_dict(self) -> Dict[str, Any]:
        parent = self._parent
        return {
            'id': self.id,
            'type': self.kind,
            'name': self._name,
            'parent': None if parent is None or parent.id == ROOT_FOLDER_ID else parent.id,
        }


class Folder(_ProjectNode):
    """Container for items and other folders."""

    kind = "folder"

    def __init__(self, project: "Project", item_id: int, name: str):
        super().__init__(project, item_id, name)
        self._children: List[_ProjectNode] = []

    @property
    def is_folder(self) -> bool:
        return True

    @property
    def num_items(self) -> int:
        return len(self._children)

    @property
    def items(self) -> List[_ProjectNode]:
        return list(self._children)

    def item(self, index: int) -> _ProjectNode:
        """Child at a 0-based index."""
        self._check_valid()
        try:
            return self._children[index]
        except IndexError:
            raise HostOperationError(
                f"Folder {self._name!r} has no item at index {index} ({len(self._children)} items)"
            ) from None

    def remove(self):
        if self.id == ROOT_FOLDER_ID:
            raise HostOperationError("The root folder cannot be removed")
        super().remove()


class SolidItem(_ProjectNode):
    """Footage item backed by a solid color source (solid, null or adjustment layer)."""

    kind = "solid"

    def __init__(self, project: "Project", item_id: int, name: str,
                 color: Sequence[float], width: int, height: int, pixel_aspect: float = 1.0):
        super().__init__(project, item_id, name)
        self.color = [float(channel) for channel in color]
        self.width = int(width)
        self.height = int(height)
        self.pixel_aspect = float(pixel_aspect)

    @property
    def is_synthetic_asset(self) -> bool:
        return True

    @property
    def used_in(self) -> List["Composition"]:
        """Compositions with at least one layer sourcing this item."""
        return [
            comp for comp in self._project.compositions
            if any(layer.source is self for layer in comp.layers)
        ]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'color': list(self.color),
            'width': self.width,
            'height': self.height,
            'pixel_aspect': self.pixel_aspect,
        })
        return data


class FootageItem(_ProjectNode):
    """Footage item backed by a real file."""

    kind = "footage"

    def __init__(self, project: "Project", item_id: int, name: str,
                 file_path: Optional[str] = None, width: int = 0, height: int = 0):
        super().__init__(project, item_id, name)
        self.file_path = file_path
        self.width = int(width)
        self.height = int(height)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({'file': self.file_path, 'width': self.width, 'height': self.height})
        return data


class Layer:
    """A composition layer. Only ``source`` is ever rewritten by the engine."""

    def __init__(self, composition: "Composition", name: str,
                 source: Optional[_ProjectNode] = None,
                 properties: Optional[Dict[str, Any]] = None):
        self.composition = composition
        self.name = name
        self._source = source
        self.properties: Dict[str, Any] = dict(properties or {})

    def __repr__(self) -> str:
        source_id = self._source.id if self._source is not None else None
        return f"Layer(name={self.name!r}, source={source_id})"

    @property
    def source(self) -> Optional[_ProjectNode]:
        return self._source

    def replace_source(self, item: _ProjectNode):
        """Swap the layer's source item, leaving timing and transform untouched."""
        self.composition._check_valid()
        item._check_valid()
        if item.is_folder:
            raise HostOperationError(f"A folder cannot be a layer source: {item.name!r}")
        self._source = item

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'source': self._source.id if self._source is not None else None,
            'properties': dict(self.properties),
        }


class Composition(_ProjectNode):
    """Composition holding an ordered stack of layers."""

    kind = "composition"

    def __init__(self, project: "Project", item_id: int, name: str,
                 width: int = 1920, height: int = 1080):
        super().__init__(project, item_id, name)
        self.width = int(width)
        self.height = int(height)
        self._layers: List[Layer] = []

    @property
    def is_composition(self) -> bool:
        return True

    @property
    def layers(self) -> List[Layer]:
        return list(self._layers)

    @property
    def num_layers(self) -> int:
        return len(self._layers)

    def layer(self, index: int) -> Layer:
        return self._layers[index]

    def add_layer(self, source: Optional[_ProjectNode], name: Optional[str] = None,
                  **properties) -> Layer:
        """Append a layer sourcing an item."""
        self._check_valid()
        if source is not None:
            source._check_valid()
            if source.is_folder:
                raise HostOperationError(f"A folder cannot be a layer source: {source.name!r}")
        layer = Layer(self, name or (source.name if source is not None else "Layer"),
                      source, properties)
        self._layers.append(layer)
        return layer

    def _drop_layers_using(self, node: _ProjectNode) -> int:
        before = len(self._layers)
        self._layers = [layer for layer in self._layers if layer.source is not node]
        return before - len(self._layers)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'width': self.width,
            'height': self.height,
            'layers': [layer.to_dict() for layer in self._layers],
        })
        return data


class Project:
    """A live, mutable project document."""

    def __init__(self, name: str = "Untitled Project"):
        self.name = name
        self._root = Folder(self, ROOT_FOLDER_ID, "Root")
        self._items: List[_ProjectNode] = []
        self._next_id = ROOT_FOLDER_ID + 1
        self._open_undo_groups: List[str] = []
        self.undo_history: List[str] = []

    def __repr__(self) -> str:
        return f"Project(name={self.name!r}, items={len(self._items)})"

    # --- object model -----------------------------------------------------

    @property
    def items(self) -> List[_ProjectNode]:
        return list(self._items)

    @property
    def num_items(self) -> int:
        return len(self._items)

    @property
    def root_folder(self) -> Folder:
        return self._root

    @property
    def compositions(self) -> List[Composition]:
        return [item for item in self._items if item.is_composition]

    @property
    def folders(self) -> List[Folder]:
        return [item for item in self._items if item.is_folder]

    def item_by_id(self, item_id: int) -> _ProjectNode:
        if item_id == ROOT_FOLDER_ID:
            return self._root
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(f"No item with id {item_id}")

    def add_folder(self, name: str, parent: Optional[Folder] = None,
                   item_id: Optional[int] = None) -> Folder:
        return self._register(Folder(self, self._claim_id(item_id), name), parent)

    def add_solid(self, name: str, color: Sequence[float], width: int, height: int,
                  pixel_aspect: float = 1.0, parent: Optional[Folder] = None,
                  item_id: Optional[int] = None) -> SolidItem:
        solid = SolidItem(self, self._claim_id(item_id), name, color, width, height, pixel_aspect)
        return self._register(solid, parent)

    def add_footage(self, name: str, file_path: Optional[str] = None, width: int = 0,
                    height: int = 0, parent: Optional[Folder] = None,
                    item_id: Optional[int] = None) -> FootageItem:
        footage = FootageItem(self, self._claim_id(item_id), name, file_path, width, height)
        return self._register(footage, parent)

    def add_composition(self, name: str, width: int = 1920, height: int = 1080,
                        parent: Optional[Folder] = None,
                        item_id: Optional[int] = None) -> Composition:
        return self._register(Composition(self, self._claim_id(item_id), name, width, height), parent)

    def _claim_id(self, item_id: Optional[int]) -> int:
        if item_id is None:
            item_id = self._next_id
        item_id = int(item_id)
        if item_id == ROOT_FOLDER_ID or any(item.id == item_id for item in self._items):
            raise ValueError(f"Duplicate item id: {item_id}")
        self._next_id = max(self._next_id, item_id + 1)
        return item_id

    def _register(self, node: _ProjectNode, parent: Optional[Folder]) -> _ProjectNode:
        self._items.append(node)
        node.parent_folder = parent or self._root
        return node

    def _remove_node(self, node: _ProjectNode):
        if node.is_folder:
            for child in reversed(node.items):
                child.remove()

        for comp in self.compositions:
            if comp is node:
                continue
            dropped = comp._drop_layers_using(node)
            if dropped:
                logger.debug(f"Removed {dropped} layer(s) in {comp.name!r} that used {node.name!r}")

        if node._parent is not None:
            node._parent._children.remove(node)
            node._parent = None
        self._items.remove(node)
        node._valid = False

    # --- undo bracketing --------------------------------------------------

    def begin_undo_group(self, name: str):
        self._open_undo_groups.append(name)

    def end_undo_group(self):
        if not self._open_undo_groups:
            raise HostOperationError("end_undo_group called without a matching begin_undo_group")
        name = self._open_undo_groups.pop()
        if not self._open_undo_groups:
            self.undo_history.append(name)

    @property
    def undo_group_open(self) -> bool:
        return bool(self._open_undo_groups)

    # --- snapshot mapping -------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'items': [item.to_dict() for item in self._items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """
        Build a project from a snapshot mapping.

        Items are created in list order (which becomes the enumeration
        order), then folder membership and layers are wired up, so entries
        may refer to items that appear later in the list.
        """
        project = cls(name=data.get('name') or "Untitled Project")
        entries = data.get('items') or []

        for entry in entries:
            kind = entry.get('type', 'solid')
            item_id = entry.get('id')
            name = entry.get('name', '')
            if kind == 'folder':
                project.add_folder(name, item_id=item_id)
            elif kind == 'solid':
                project.add_solid(
                    name,
                    color=entry.get('color', [0.0, 0.0, 0.0]),
                    width=entry.get('width', 0),
                    height=entry.get('height', 0),
                    pixel_aspect=entry.get('pixel_aspect', 1.0),
                    item_id=item_id,
                )
            elif kind == 'footage':
                project.add_footage(name, file_path=entry.get('file'),
                                    width=entry.get('width', 0), height=entry.get('height', 0),
                                    item_id=item_id)
            elif kind == 'composition':
                project.add_composition(name, width=entry.get('width', 1920),
                                        height=entry.get('height', 1080), item_id=item_id)
            else:
                raise ValueError(f"Unknown item type {kind!r} for item {name!r}")

        for entry, node in zip(entries, project.items):
            parent_id = entry.get('parent')
            if parent_id is not None:
                parent = project._lookup(parent_id, f"parent of {node.name!r}")
                if not parent.is_folder:
                    raise ValueError(f"Parent of {node.name!r} is not a folder: {parent.name!r}")
                node.parent_folder = parent

            layers = entry.get('layers') or []
            if layers and not node.is_composition:
                raise ValueError(f"Only compositions can hold layers: {node.name!r}")
            for layer_data in layers:
                source_id = layer_data.get('source')
                source = None
                if source_id is not None:
                    source = project._lookup(source_id, f"source of layer in {node.name!r}")
                    if source.is_folder:
                        raise ValueError(f"Layer in {node.name!r} uses a folder as its source: "
                                         f"{source.name!r}")
                node.add_layer(source, name=layer_data.get('name'),
                               **(layer_data.get('properties') or {}))

        logger.debug(f"Built project {project.name!r} with {project.num_items} items")
        return project

    def _lookup(self, item_id: int, what: str) -> _ProjectNode:
        try:
            return self.item_by_id(item_id)
        except KeyError:
            raise ValueError(f"Unknown item id {item_id} ({what})") from None


def load_project(path: Union[str, Path]) -> Project:
    """Load a project snapshot from a YAML file."""
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Failed to load project from {path}: {e}")
        raise

    if not isinstance(data, dict):
        raise ValueError(f"Project file must contain a mapping: {path}")
    data.setdefault('name', path.stem)

    project = Project.from_dict(data)
    logger.info(f"Loaded project {project.name!r} from {path} ({project.num_items} items)")
    return project


def save_project(project: Project, path: Union[str, Path]) -> str:
    """Write a project snapshot to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(project.to_dict(), f, default_flow_style=None, sort_keys=False)
    logger.info(f"Saved project {project.name!r} to {path}")
    return str(path)
