"""Solid consolidation: merge duplicates, normalize survivors, clean folders."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from tqdm import tqdm

from .config import Config
from .host import UNDO_GROUP_NAME, same_item, undo_group
from .references import ReferenceResolver
from .scanner import AssetGroup, ScanResult, SolidScanner
from .sweeper import FolderSweeper
from .utils import find_root_folder_by_name, get_current_timestamp, get_unique_name

logger = logging.getLogger(__name__)


@dataclass
class ConsolidationStats:
    """Statistics for consolidation process."""
    groups_processed: int = 0
    duplicates_removed: int = 0
    consumers_repointed: int = 0
    survivors_moved: int = 0
    survivors_renamed: int = 0
    sweeps: int = 0
    folders_removed: int = 0
    renamed: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class ConsolidationResult:
    """Outcome of one consolidation run: success, or failure with a reason."""
    success: bool
    dry_run: bool = False
    scan: Optional[ScanResult] = None
    stats: ConsolidationStats = field(default_factory=ConsolidationStats)
    error: Optional[str] = None
    target_folder: Optional[str] = None
    cleanup: bool = True
    timestamp: str = field(default_factory=get_current_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'dry_run': self.dry_run,
            'error': self.error,
            'timestamp': self.timestamp,
            'target_folder': self.target_folder,
            'cleanup': self.cleanup,
            'scan': self.scan.to_dict() if self.scan else {},
            'statistics': {
                'groups_processed': self.stats.groups_processed,
                'duplicates_removed': self.stats.duplicates_removed,
                'consumers_repointed': self.stats.consumers_repointed,
                'survivors_moved': self.stats.survivors_moved,
                'survivors_renamed': self.stats.survivors_renamed,
                'sweeps': self.stats.sweeps,
                'folders_removed': self.stats.folders_removed,
            },
            'renamed': [{'from': old, 'to': new} for old, new in self.stats.renamed],
        }


class SolidConsolidator:
    """Consolidates duplicate solids, nulls and adjustment layers in a project."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize consolidator with configuration.

        Args:
            config: Configuration instance (defaults are used when omitted)
        """
        self.config = config or Config()
        self.scanner = SolidScanner()
        self.sweeper = FolderSweeper(self.config.get_max_sweeps())

    def analyze(self, project) -> ScanResult:
        """Scan a project without touching it."""
        if project is None:
            raise ValueError("No active project")
        return self.scanner.scan(project)

    def run(self, project, scan: Optional[ScanResult] = None, dry_run: Optional[bool] = None,
            cleanup: Optional[bool] = None) -> ConsolidationResult:
        """
        Consolidate a project as a single undoable operation.

        Errors raised by the host while mutating the project abort the run
        and are returned as a failed result. Changes made before the error
        are kept; the undo group is always closed.

        Args:
            project: Project document (None reports a failed precondition)
            scan: Result of a previous analyze() call; the project is scanned if omitted
            dry_run: Only scan and report (defaults to config setting)
            cleanup: Remove empty folders afterwards (defaults to config setting)

        Returns:
            ConsolidationResult
        """
        if dry_run is None:
            dry_run = self.config.is_dry_run()
        if cleanup is None:
            cleanup = self.config.should_cleanup_empty_folders()

        target_name = self.config.get_target_folder_name()
        result = ConsolidationResult(success=False, dry_run=dry_run,
                                     target_folder=target_name, cleanup=cleanup)

        if project is None:
            result.error = "No active project"
            logger.error(result.error)
            return result

        result.scan = scan if scan is not None else self.scanner.scan(project)

        if dry_run:
            logger.info(f"DRY RUN: {result.scan.duplicates_to_remove} duplicates would be removed")
            result.success = True
            return result

        logger.info(f"Starting consolidation: {len(result.scan.groups)} groups, "
                    f"{result.scan.duplicates_to_remove} duplicates")

        with undo_group(project, UNDO_GROUP_NAME):
            try:
                target_folder = self.find_or_create_target_folder(project, target_name)
                self.consolidate_groups(project, result.scan, target_folder, result.stats)
                if cleanup:
                    self.cleanup_folders(project, target_folder, result.stats)
                result.success = True
            except Exception as e:
                result.error = str(e) or type(e).__name__
                logger.error(f"Consolidation failed: {result.error}")

        if result.success:
            logger.info(f"Consolidation complete: {result.stats.duplicates_removed} removed, "
                        f"{result.stats.consumers_repointed} layers repointed, "
                        f"{result.stats.folders_removed} folders removed")
        return result

    def find_or_create_target_folder(self, project, name: Optional[str] = None):
        """
        Find the survivors' folder directly under the root, creating it if missing.

        Args:
            project: Project document
            name: Folder name (defaults to config setting)

        Returns:
            The target folder; its identity is what folder cleanup protects
        """
        name = name or self.config.get_target_folder_name()
        folder = find_root_folder_by_name(project, name)
        if folder is None:
            folder = project.add_folder(name)
            logger.info(f"Created target folder: {name}")
        return folder

    def consolidate_groups(self, project, scan: ScanResult, target_folder,
                           stats: ConsolidationStats):
        """
        Merge duplicates of every group and normalize every survivor.

        Renaming runs after all merges and moves. A survivor's name is only
        checked against names already settled, never against survivors still
        waiting for their own rename, so a second run keeps every name.
        """
        resolver = ReferenceResolver(project, self.config.should_use_reverse_index())

        with tqdm(scan.groups, desc="Consolidating groups", unit="groups",
                  disable=not self.config.show_progress()) as pbar:
            for group in pbar:
                if group.has_duplicates:
                    self._merge_duplicates(group, resolver, stats)
                self._move_survivor(group, target_folder, stats)
                stats.groups_processed += 1

        pending = [group.survivor for group in scan.groups]
        for group in scan.groups:
            self._rename_survivor(project, group, pending, stats)
            pending.remove(group.survivor)

    def _merge_duplicates(self, group: AssetGroup, resolver: ReferenceResolver,
                          stats: ConsolidationStats):
        """Repoint every consumer of the group's duplicates to the survivor, then drop them."""
        survivor = group.survivor

        for duplicate in group.duplicates:
            consumers = resolver.find_consumers(duplicate)
            for consumer in consumers:
                consumer.layer.replace_source(survivor)
                stats.consumers_repointed += 1

            logger.debug(f"Removing duplicate {duplicate.name!r} (id {duplicate.id}), "
                         f"{len(consumers)} layer(s) now use {survivor.name!r}")
            duplicate.remove()
            stats.duplicates_removed += 1

    def _move_survivor(self, group: AssetGroup, target_folder, stats: ConsolidationStats):
        """Move the survivor into the target folder."""
        survivor = group.survivor
        if not same_item(survivor.parent_folder, target_folder):
            survivor.parent_folder = target_folder
            stats.survivors_moved += 1

    def _rename_survivor(self, project, group: AssetGroup, pending: List,
                         stats: ConsolidationStats):
        """Give the survivor its normalized name, ignoring survivors not yet renamed."""
        survivor = group.survivor
        new_name = get_unique_name(project, group.signature.survivor_name(), exclude=pending)
        if survivor.name != new_name:
            logger.debug(f"Renaming {survivor.name!r} -> {new_name!r}")
            stats.renamed.append((survivor.name, new_name))
            survivor.name = new_name
            stats.survivors_renamed += 1

    def cleanup_folders(self, project, protected_folder, stats: ConsolidationStats):
        """Remove every empty folder except the protected one."""
        report = self.sweeper.sweep_until_clean(project.root_folder, protected_folder)
        stats.sweeps = report.sweeps
        stats.folders_removed = report.folders_removed
        return report
