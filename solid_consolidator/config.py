"""Configuration management for solid consolidation."""

import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
import logging

from .sweeper import DEFAULT_MAX_SWEEPS

logger = logging.getLogger(__name__)

DEFAULT_TARGET_FOLDER = "Solids"


class Config:
    """Manages configuration for solid consolidation from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, searches for config files
                and falls back to built-in defaults when none is found.
        """
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = {}
        if self.config_path:
            self._load_config()
        else:
            logger.info("No configuration file found, using defaults")

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        # Look for config files in order of preference
        file_names = ["solid_consolidator.local.yml", "solid_consolidator.yml"]
        search_dirs = [Path.cwd(), Path(__file__).parent.parent]

        for directory in search_dirs:
            for file_name in file_names:
                config_file = directory / file_name
                if config_file.exists():
                    logger.info(f"Found config file: {config_file}")
                    return str(config_file.resolve())

        return None

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {self.config_path}")
        except Exception as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'solid_consolidation.cleanup.max_sweeps'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_consolidation_config(self) -> Dict[str, Any]:
        """Get solid consolidation specific configuration."""
        return self.get('solid_consolidation', {})

    def get_target_folder_name(self) -> str:
        """Get the name of the root-level folder that collects survivors."""
        return self.get('solid_consolidation.target_folder', DEFAULT_TARGET_FOLDER)

    def should_cleanup_empty_folders(self) -> bool:
        """Check if empty folders should be removed after consolidation."""
        return self.get('solid_consolidation.cleanup.enabled', True)

    def get_max_sweeps(self) -> Optional[int]:
        """Get the folder sweep cap (0 or null means no cap)."""
        return self.get('solid_consolidation.cleanup.max_sweeps', DEFAULT_MAX_SWEEPS)

    def should_use_reverse_index(self) -> bool:
        """Check if the host's 'used in' lookup should be preferred over full layer scans."""
        return self.get('solid_consolidation.references.use_reverse_index', True)

    def show_progress(self) -> bool:
        """Check if progress bars should be shown."""
        return self.get('solid_consolidation.process.show_progress', True)

    def is_dry_run(self) -> bool:
        """Check if this is a dry run."""
        return self.get('solid_consolidation.process.dry_run', False)

    def get_report_dir(self) -> Optional[str]:
        """Get directory for saved reports, if any."""
        return self.get('solid_consolidation.report_dir')

    def get_log_dir(self) -> Optional[str]:
        """Get directory for log files, if any."""
        return self.get('logging.log_dir')

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.get('logging.level', 'INFO')

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages
        """
        errors = []

        target = self.get_target_folder_name()
        if not isinstance(target, str) or not target.strip():
            errors.append("Target folder name not configured")

        max_sweeps = self.get_max_sweeps()
        if max_sweeps is not None:
            if isinstance(max_sweeps, bool) or not isinstance(max_sweeps, int):
                errors.append(f"Invalid max_sweeps value: {max_sweeps!r} (must be an integer)")
            elif max_sweeps < 0:
                errors.append(f"Invalid max_sweeps value: {max_sweeps} (must be >= 0)")

        level = self.get_log_level()
        if str(level).upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR'):
            errors.append(f"Invalid logging level: {level}")

        return errors

    def __str__(self) -> str:
        """String representation of configuration."""
        return f"Config(path={self.config_path}, target_folder={self.get_target_folder_name()})"
