"""Reporting for solid consolidation."""

import logging
from pathlib import Path
from typing import Optional

from .consolidator import ConsolidationResult
from .scanner import ScanResult

logger = logging.getLogger(__name__)


class ConsolidationReporter:
    """Generates the dry-run analysis and the post-run summary."""

    def __init__(self, config):
        """Initialize reporter with configuration."""
        self.config = config
        self.report_dir = Path(config.get_report_dir() or ".")

    def generate_dry_run_report(self, scan: ScanResult, cleanup: Optional[bool] = None) -> str:
        """
        Generate the analysis shown before anything is changed.

        Args:
            scan: Result of scanning the project
            cleanup: Whether empty folders will be removed (defaults to config setting)

        Returns:
            Formatted report
        """
        if cleanup is None:
            cleanup = self.config.should_cleanup_empty_folders()
        target = self.config.get_target_folder_name()

        report = []
        report.append("SOLID CONSOLIDATOR - DRY RUN REPORT")
        report.append("-" * 48)
        report.append(f"Total Solids Found: {scan.total_assets}")
        report.append(f"   - Visual Solids: {scan.solids_count}")
        report.append(f"   - Null Objects: {scan.nulls_count}")
        report.append(f"   - Adjustment Layers: {scan.adjustments_count}")
        report.append("")

        report.append("ACTION PLAN:")
        report.append(f"1. Move survivors to root '/{target}' folder.")
        report.append(f"2. Consolidate Duplicates: {scan.duplicates_to_remove} items will be deleted.")
        report.append("3. Rename Survivors (Unix Style).")
        if cleanup:
            report.append("4. Recursively delete ALL empty folders.")

        duplicate_groups = scan.duplicate_groups
        if duplicate_groups:
            report.append("")
            report.append("DUPLICATE GROUPS:")
            for group in duplicate_groups:
                report.append(f"  {group.signature.survivor_name()}: keep {group.survivor.name!r}, "
                              f"remove {group.size - 1}")

        return "\n".join(report)

    def generate_summary_report(self, result: ConsolidationResult) -> str:
        """
        Generate human-readable summary of a run.

        Args:
            result: Result of SolidConsolidator.run

        Returns:
            Formatted summary report
        """
        stats = result.stats

        report = []
        report.append("=" * 50)
        report.append("SOLID CONSOLIDATION SUMMARY REPORT")
        report.append("=" * 50)
        report.append(f"Completed: {result.timestamp}")
        report.append(f"Mode: {'DRY RUN' if result.dry_run else 'LIVE RUN'}")
        report.append(f"Target folder: /{result.target_folder}")
        report.append("")

        if result.scan is not None:
            report.append("=== SCAN ===")
            report.append(f"• Synthetic assets: {result.scan.total_assets:,}")
            report.append(f"• Signature groups: {len(result.scan.groups):,}")
            report.append(f"• Duplicates found: {result.scan.duplicates_to_remove:,}")
            report.append("")

        report.append("=== CHANGES ===")
        report.append(f"• Duplicates removed: {stats.duplicates_removed:,}")
        report.append(f"• Layers repointed: {stats.consumers_repointed:,}")
        report.append(f"• Survivors moved: {stats.survivors_moved:,}")
        report.append(f"• Survivors renamed: {stats.survivors_renamed:,}")
        if result.cleanup:
            report.append(f"• Empty folders removed: {stats.folders_removed:,} "
                          f"({stats.sweeps} sweep(s))")
        else:
            report.append("• Empty folder cleanup: skipped")
        report.append("")

        if stats.renamed:
            report.append("=== RENAMED ===")
            for old, new in stats.renamed:
                report.append(f"  {old} -> {new}")
            report.append("")

        if result.error:
            report.append("=== ERRORS ENCOUNTERED ===")
            report.append(f"❌ {result.error}")
            report.append("Changes made before the error were kept; undo reverts the whole run.")
            report.append("")

        status = "✅ COMPLETE SUCCESS" if result.success else "⚠️ FAILED"
        report.append(f"STATUS: {status}")

        return "\n".join(report)

    def save_report(self, result: ConsolidationResult, filename: Optional[str] = None) -> str:
        """
        Save summary report to file.

        Args:
            result: Result of SolidConsolidator.run
            filename: Optional filename (auto-generated if None)

        Returns:
            Path to saved report file
        """
        if filename is None:
            timestamp = result.timestamp.replace(':', '-')
            filename = f"solid_consolidation_{timestamp}.txt"

        report_file = self.report_dir / filename
        report_file.parent.mkdir(parents=True, exist_ok=True)

        report_content = self.generate_summary_report(result)

        try:
            with open(report_file, 'w', encoding='utf-8') as f:
                f.write(report_content)

            logger.info(f"Report saved: {report_file}")
            return str(report_file)

        except Exception as e:
            logger.error(f"Failed to save report: {e}")
            raise
