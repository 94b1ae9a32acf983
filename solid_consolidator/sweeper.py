"""Recursive removal of empty folders."""

import logging
from dataclasses import dataclass
from typing import Optional

from .host import same_item

logger = logging.getLogger(__name__)

DEFAULT_MAX_SWEEPS = 50


@dataclass
class SweepReport:
    """Outcome of sweeping a folder tree to a fixpoint."""
    sweeps: int = 0
    folders_removed: int = 0
    converged: bool = True


class FolderSweeper:
    """
    Removes empty folders, sparing one protected folder.

    Protection is by identity: a folder that merely shares the protected
    folder's name is removed like any other empty folder.
    """

    def __init__(self, max_sweeps: Optional[int] = DEFAULT_MAX_SWEEPS):
        """
        Args:
            max_sweeps: Upper bound on sweeps. 0 or None sweeps until nothing
                changes; that still terminates because every productive sweep
                removes at least one folder from a finite tree.

        Raises:
            ValueError: If max_sweeps is negative or not an integer
        """
        if max_sweeps is not None:
            try:
                max_sweeps = int(max_sweeps)
            except (TypeError, ValueError):
                raise ValueError(f"max_sweeps must be an integer, got {max_sweeps!r}") from None
            if max_sweeps < 0:
                raise ValueError(f"max_sweeps must be >= 0, got {max_sweeps}")
        self.max_sweeps = max_sweeps or None

    def sweep(self, folder, protected=None) -> int:
        """
        Run one post-order pass below a folder.

        Children are visited last to first so removals never shift the
        indices still to be visited. Sub-folders are cleaned before their
        parent is checked, so a whole empty chain goes in one pass. The
        folder passed in is never removed itself.

        Args:
            folder: Folder whose descendants are swept
            protected: Folder that must never be removed

        Returns:
            Number of folders removed
        """
        removed = 0
        for index in range(folder.num_items - 1, -1, -1):
            child = folder.item(index)
            if not child.is_folder:
                continue

            removed += self.sweep(child, protected)

            if child.num_items == 0 and not same_item(child, protected):
                logger.debug(f"Removing empty folder: {child.name!r} (id {child.id})")
                child.remove()
                removed += 1
        return removed

    def sweep_until_clean(self, root, protected=None) -> SweepReport:
        """
        Repeat sweeps until one removes nothing or the sweep cap is hit.

        Hitting the cap is not an error; it is logged and the report is
        marked as not converged.

        Args:
            root: Root of the folder tree
            protected: Folder that must never be removed

        Returns:
            SweepReport with sweep and removal counts
        """
        report = SweepReport()
        while self.max_sweeps is None or report.sweeps < self.max_sweeps:
            removed = self.sweep(root, protected)
            report.sweeps += 1
            report.folders_removed += removed
            if removed == 0:
                break
        else:
            report.converged = False
            logger.warning(f"Folder cleanup stopped after {report.sweeps} sweeps "
                           f"without reaching a clean state")

        logger.info(f"Folder cleanup: {report.folders_removed} folders removed "
                    f"in {report.sweeps} sweep(s)")
        return report
