"""Utility functions for solid consolidation."""

import math
from datetime import datetime
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)


def quantize_channel(value: float) -> int:
    """
    Quantize a 0-1 color channel to an 8-bit integer.

    Halves always round up, so a channel sitting exactly on a .5 boundary
    maps to the same byte on every run and every platform.

    Args:
        value: Channel value in [0, 1]

    Returns:
        Integer in [0, 255]
    """
    byte = int(math.floor(float(value) * 255 + 0.5))
    return max(0, min(255, byte))


def rgb_to_hex(color: Sequence[float]) -> str:
    """
    Encode an RGB triple as an uppercase hex string.

    Args:
        color: Sequence of at least three channels in [0, 1]

    Returns:
        Six hex digits, red first, without a leading '#'
    """
    if len(color) < 3:
        raise ValueError(f"Expected an RGB triple, got {list(color)}")

    r, g, b = (quantize_channel(channel) for channel in color[:3])
    return f"{(r << 16) | (g << 8) | b:06X}"


def _excluded_ids(exclude) -> set:
    if exclude is None:
        return set()
    if hasattr(exclude, 'id'):
        return {exclude.id}
    return {item.id for item in exclude}


def name_exists(project, name: str, exclude=None) -> bool:
    """
    Check whether any project item already uses a name.

    Names are unique across the whole project, not per folder.

    Args:
        project: Project document to search
        name: Candidate name
        exclude: Item, or collection of items, ignored during the check
            (usually items about to be renamed)

    Returns:
        True if another item carries the name
    """
    skipped = _excluded_ids(exclude)
    for item in project.items:
        if item.id in skipped:
            continue
        if item.name == name:
            return True
    return False


def get_unique_name(project, base_name: str, exclude=None) -> str:
    """
    Produce a project-wide unique name from a base name.

    Tries the base name first, then base_1, base_2, ... until one is free.

    Args:
        project: Project document to search
        base_name: Preferred name
        exclude: Item, or collection of items, ignored during collision checks

    Returns:
        First non-colliding name
    """
    name = base_name
    suffix = 1
    while name_exists(project, name, exclude=exclude):
        name = f"{base_name}_{suffix}"
        suffix += 1

    if name != base_name:
        logger.debug(f"Name {base_name!r} taken, using {name!r}")
    return name


def format_dimensions(width: int, height: int) -> str:
    """Format a frame size as WIDTHxHEIGHT."""
    return f"{int(width)}x{int(height)}"


def find_root_folder_by_name(project, name: str) -> Optional[object]:
    """
    Find a folder directly under the project root by display name.

    Args:
        project: Project document
        name: Folder name to match exactly

    Returns:
        The first matching folder, or None
    """
    root = project.root_folder
    for index in range(root.num_items):
        child = root.item(index)
        if child.is_folder and child.name == name:
            return child
    return None


def get_current_timestamp():
    """Get current timestamp as ISO string."""
    return datetime.now().isoformat()
