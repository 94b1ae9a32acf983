"""
Solid Consolidator

Deduplicates solids, null objects and adjustment layers in a compositing
project: duplicates are merged into one survivor, every layer is repointed
to it, survivors are renamed and gathered in one folder, and folders left
empty are removed.
"""

__version__ = "1.0.0"
__author__ = "Homelab Team"

from .config import Config
from .signature import AssetCategory, Signature, build_signature, classify_name
from .scanner import AssetGroup, ScanResult, SolidScanner
from .references import Consumer, ReferenceResolver
from .sweeper import FolderSweeper, SweepReport
from .consolidator import ConsolidationResult, ConsolidationStats, SolidConsolidator
from .reporter import ConsolidationReporter
from .project import Project, load_project, save_project

__all__ = [
    'Config',
    'AssetCategory',
    'Signature',
    'build_signature',
    'classify_name',
    'AssetGroup',
    'ScanResult',
    'SolidScanner',
    'Consumer',
    'ReferenceResolver',
    'FolderSweeper',
    'SweepReport',
    'ConsolidationResult',
    'ConsolidationStats',
    'SolidConsolidator',
    'ConsolidationReporter',
    'Project',
    'load_project',
    'save_project',
]
