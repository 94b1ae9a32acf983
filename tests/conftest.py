"""Shared fixtures for solid consolidation tests."""

import copy

import pytest
import yaml

from solid_consolidator.project import Project


@pytest.fixture
def config_data(tmp_path):
    """Configuration mapping with progress bars off and reports under tmp_path."""
    return {
        'solid_consolidation': {
            'target_folder': 'Solids',
            'cleanup': {
                'enabled': True,
                'max_sweeps': 50,
            },
            'references': {
                'use_reverse_index': True,
            },
            'process': {
                'dry_run': False,
                'show_progress': False,
            },
            'report_dir': str(tmp_path / 'reports'),
        },
        'logging': {
            'level': 'INFO',
        },
    }


@pytest.fixture
def write_config(tmp_path, config_data):
    """Factory fixture: write a config file, optionally overriding keys, and return its path."""

    def _write(overrides=None, filename='solid_consolidator.yml'):
        data = copy.deepcopy(config_data)
        for key_path, value in (overrides or {}).items():
            node = data
            keys = key_path.split('.')
            for key in keys[:-1]:
                node = node.setdefault(key, {})
            node[keys[-1]] = value

        config_path = tmp_path / filename
        with open(config_path, 'w') as f:
            yaml.dump(data, f)
        return config_path

    return _write


@pytest.fixture
def sample_config(write_config):
    """Create a Config backed by a temp config file."""
    from solid_consolidator.config import Config
    return Config(str(write_config()))


@pytest.fixture
def project():
    """Empty in-memory project."""
    return Project(name='test_project')


@pytest.fixture
def red_null_project():
    """
    Three null solids with identical color and size, spread over folders,
    and one composition whose three layers each use a different one.
    """
    project = Project(name='red_nulls')
    old = project.add_folder('Old Stuff')
    nested = project.add_folder('Solids', parent=old)

    bg = project.add_solid('BG Null', [1, 0, 0], 1920, 1080, parent=nested)
    first = project.add_solid('Null 1', [1, 0, 0], 1920, 1080, parent=nested)
    second = project.add_solid('Null 2', [1, 0, 0], 1920, 1080, parent=old)

    comp = project.add_composition('Main')
    comp.add_layer(bg, name='Controller', in_point=0.0, position=[960, 540])
    comp.add_layer(first, name='Rig', in_point=2.0, position=[100, 100])
    comp.add_layer(second, name='Camera Rig', in_point=4.0, stretch=50.0)

    return project


@pytest.fixture
def write_project(tmp_path):
    """Factory fixture: write a project snapshot file and return its path."""

    def _write(data, filename='project.yml'):
        project_path = tmp_path / filename
        with open(project_path, 'w') as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return project_path

    return _write


@pytest.fixture
def sample_snapshot():
    """Snapshot mapping with duplicates, real footage and a nested folder."""
    return {
        'name': 'snapshot',
        'items': [
            {'id': 1, 'type': 'folder', 'name': 'Old Stuff', 'parent': None},
            {'id': 2, 'type': 'solid', 'name': 'Red Solid 1', 'color': [1.0, 0.0, 0.0],
             'width': 1920, 'height': 1080, 'pixel_aspect': 1.0, 'parent': 1},
            {'id': 3, 'type': 'solid', 'name': 'Red Solid 2', 'color': [1.0, 0.0, 0.0],
             'width': 1920, 'height': 1080, 'pixel_aspect': 1.0, 'parent': None},
            {'id': 4, 'type': 'footage', 'name': 'clip.mov', 'file': 'clip.mov',
             'width': 1920, 'height': 1080, 'parent': None},
            {'id': 5, 'type': 'composition', 'name': 'Main', 'width': 1920, 'height': 1080,
             'parent': None, 'layers': [
                 {'name': 'A', 'source': 2, 'properties': {'opacity': 50}},
                 {'name': 'B', 'source': 3, 'properties': {'in_point': 1.5}},
                 {'name': 'C', 'source': 4},
             ]},
        ],
    }
