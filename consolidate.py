#!/usr/bin/env python3
"""
Solid Consolidation CLI

Merges duplicate solids, null objects and adjustment layers in a project
snapshot, repoints every layer to the surviving item, renames survivors
and removes folders left empty.
"""

import sys
import logging
import click
from pathlib import Path
from colorama import init, Fore, Style

from solid_consolidator import (
    Config,
    SolidConsolidator,
    ConsolidationReporter,
    load_project,
    save_project,
)
from solid_consolidator.host import undo_group
from solid_consolidator.utils import find_root_folder_by_name

# Initialize colorama for cross-platform colored output
init()

_console_handler = None
_file_handler = None


def setup_logging(level: str = 'INFO', log_dir: Path = None):
    """Set up logging configuration."""
    global _console_handler
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Replace the handler from a previous invocation
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(formatter)
    root_logger.addHandler(_console_handler)

    if log_dir:
        _setup_file_logging(log_dir, formatter, root_logger)


def _setup_file_logging(log_dir: Path, formatter: logging.Formatter, root_logger: logging.Logger,
                        log_name: str = 'solid_consolidation'):
    """Add file handler to root logger."""
    global _file_handler
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove previous file handler if any
    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)

    _file_handler = logging.FileHandler(log_dir / f'{log_name}.log')
    _file_handler.setFormatter(formatter)
    root_logger.addHandler(_file_handler)


def print_header(title: str):
    """Print a formatted header."""
    click.echo(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{title.center(60)}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}\n")

def print_success(message: str):
    """Print success message."""
    click.echo(f"{Fore.GREEN}OK: {message}{Style.RESET_ALL}")

def print_warning(message: str):
    """Print warning message."""
    click.echo(f"{Fore.YELLOW}WARN: {message}{Style.RESET_ALL}")

def print_error(message: str):
    """Print error message."""
    click.echo(f"{Fore.RED}ERROR: {message}{Style.RESET_ALL}")

def print_info(message: str):
    """Print info message."""
    click.echo(f"{Fore.BLUE}INFO: {message}{Style.RESET_ALL}")


@click.group()
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config, log_level):
    """Solid Consolidator - merge duplicate solids, nulls and adjustment layers."""

    try:
        config_obj = Config(config)
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    errors = config_obj.validate_config()
    if errors:
        print_error("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    log_dir = config_obj.get_log_dir()
    setup_logging(log_level or config_obj.get_log_level(), Path(log_dir) if log_dir else None)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config_obj


@cli.command()
@click.argument('project_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def analyze(ctx, project_file):
    """Scan a project and show what consolidation would do."""

    print_header("SOLID ANALYSIS")

    config = ctx.obj['config']
    consolidator = SolidConsolidator(config)
    reporter = ConsolidationReporter(config)

    try:
        project = load_project(project_file)
        scan = consolidator.analyze(project)
        click.echo(reporter.generate_dry_run_report(scan))

        if scan.duplicates_to_remove == 0:
            print_info("No duplicates found - every synthetic asset is unique")

    except Exception as e:
        print_error(f"Analysis failed: {e}")
        sys.exit(1)


@cli.command()
@click.argument('project_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write the consolidated project here (defaults to PROJECT_FILE)')
@click.option('--cleanup/--no-cleanup', default=None,
              help='Recursively delete all empty folders (override config)')
@click.option('--dry-run/--no-dry-run', default=None, help='Perform dry run (override config)')
@click.option('--yes', '-y', is_flag=True, help='Proceed without confirmation')
@click.option('--report', '-r', help='Save report to specific file')
@click.pass_context
def consolidate(ctx, project_file, output, cleanup, dry_run, yes, report):
    """Merge duplicates, rename survivors and clean up empty folders."""

    print_header("SOLID CONSOLIDATION")

    config = ctx.obj['config']
    consolidator = SolidConsolidator(config)
    reporter = ConsolidationReporter(config)

    if dry_run is None:
        dry_run = config.is_dry_run()
    if cleanup is None:
        cleanup = config.should_cleanup_empty_folders()

    try:
        project = load_project(project_file)
        scan = consolidator.analyze(project)
        click.echo(reporter.generate_dry_run_report(scan, cleanup=cleanup))
        click.echo()

        if dry_run:
            print_info("DRY RUN completed - the project was not modified")
            return

        if not yes and not click.confirm("Proceed with consolidation?", default=False):
            print_warning("Cancelled - the project was not modified")
            return

        result = consolidator.run(project, scan=scan, dry_run=False, cleanup=cleanup)
        click.echo("\n" + reporter.generate_summary_report(result))

        if report:
            print_success(f"Report saved: {reporter.save_report(result, report)}")

        if not result.success:
            print_error(f"Consolidation failed: {result.error}")
            sys.exit(1)

        saved = save_project(project, output or project_file)
        print_success(f"Project cleaned and saved: {saved}")

    except Exception as e:
        print_error(f"Consolidation failed: {e}")
        sys.exit(1)


@cli.command()
@click.argument('project_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write the cleaned project here (defaults to PROJECT_FILE)')
@click.pass_context
def sweep(ctx, project_file, output):
    """Remove empty folders only, sparing the root-level target folder."""

    print_header("EMPTY FOLDER CLEANUP")

    config = ctx.obj['config']
    consolidator = SolidConsolidator(config)

    try:
        project = load_project(project_file)
        protected = find_root_folder_by_name(project, config.get_target_folder_name())

        with undo_group(project, "Remove Empty Folders"):
            report = consolidator.sweeper.sweep_until_clean(project.root_folder, protected)

        if not report.converged:
            print_warning(f"Stopped after {report.sweeps} sweeps; some empty folders may remain")
        print_success(f"Removed {report.folders_removed} empty folder(s) in {report.sweeps} sweep(s)")

        saved = save_project(project, output or project_file)
        print_info(f"Project saved: {saved}")

    except Exception as e:
        print_error(f"Cleanup failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
