#!/usr/bin/env python3
"""Tests for solid consolidation utilities using should/when pattern."""

import pytest

from solid_consolidator.project import Project
from solid_consolidator.utils import (
    find_root_folder_by_name,
    format_dimensions,
    get_unique_name,
    name_exists,
    quantize_channel,
    rgb_to_hex,
)


def test_should_encode_primary_colors_when_channels_are_whole():
    """Should encode black, white and pure red exactly."""

    # When encoding whole-valued colors
    assert rgb_to_hex([0, 0, 0]) == "000000"
    assert rgb_to_hex([1, 1, 1]) == "FFFFFF"
    assert rgb_to_hex([1, 0, 0]) == "FF0000"
    assert rgb_to_hex([0, 1, 0]) == "00FF00"
    assert rgb_to_hex([0, 0, 1]) == "0000FF"


def test_should_round_fractional_channels_when_encoding_hex():
    """Should round fractional channels to the nearest byte, halves upward."""

    # 0.5 * 255 = 127.5 -> 128 (0x80)
    assert rgb_to_hex([0.5, 0.5, 0.5]) == "808080"
    # 0.2 * 255 = 51 -> 0x33
    assert rgb_to_hex([0.2, 0.4, 0.6]) == "336699"
    # 0.1 * 255 = 25.5 -> 26 (0x1A)
    assert rgb_to_hex([0.1, 0.0, 0.0]) == "1A0000"


def test_should_round_half_byte_boundary_the_same_way_every_time():
    """Should map a channel sitting exactly on a half-byte boundary deterministically."""

    # 0.5 * 255 is exactly 127.5 in binary floating point
    results = {quantize_channel(0.5) for _ in range(10)}
    assert results == {128}
    # 0.25 * 255 = 63.75, 0.75 * 255 = 191.25
    assert quantize_channel(0.25) == 64
    assert quantize_channel(0.75) == 191


def test_should_clamp_out_of_range_channels_when_quantizing():
    """Should clamp channel values outside [0, 1]."""

    assert quantize_channel(-0.2) == 0
    assert quantize_channel(1.7) == 255


def test_should_ignore_alpha_when_color_has_four_channels():
    """Should encode only RGB when an alpha channel is present."""

    assert rgb_to_hex([1, 0, 0, 0.5]) == "FF0000"


def test_should_reject_color_when_fewer_than_three_channels():
    """Should raise when the color is not an RGB triple."""

    with pytest.raises(ValueError):
        rgb_to_hex([1, 0])


def test_should_return_base_name_when_no_collision():
    """Should keep the base name when nothing uses it."""

    project = Project()
    project.add_solid('Something Else', [0, 0, 0], 100, 100)

    assert get_unique_name(project, 'Solid_FF0000_1920x1080') == 'Solid_FF0000_1920x1080'


def test_should_pick_first_free_suffix_when_name_collides():
    """Should append the first free integer suffix when the base name is taken."""

    project = Project()
    project.add_solid('Solid_FF0000_1920x1080', [1, 0, 0], 1920, 1080)
    project.add_solid('Solid_FF0000_1920x1080_1', [1, 0, 0], 1920, 1080)

    assert get_unique_name(project, 'Solid_FF0000_1920x1080') == 'Solid_FF0000_1920x1080_2'


def test_should_reuse_gap_in_suffixes_when_checking_sequentially():
    """Should take _1 when only the base and _2 exist."""

    project = Project()
    project.add_solid('Null_100x100', [0, 0, 0], 100, 100)
    project.add_solid('Null_100x100_2', [0, 0, 0], 100, 100)

    assert get_unique_name(project, 'Null_100x100') == 'Null_100x100_1'


def test_should_check_names_globally_when_items_live_in_other_folders():
    """Should treat names as project-wide, including folders and compositions."""

    project = Project()
    folder = project.add_folder('Deep')
    project.add_composition('Null_100x100', parent=folder)

    assert name_exists(project, 'Null_100x100')
    assert get_unique_name(project, 'Null_100x100') == 'Null_100x100_1'


def test_should_ignore_excluded_item_when_checking_collisions():
    """Should not count the item being renamed as a collision with itself."""

    project = Project()
    solid = project.add_solid('Null_100x100', [0, 0, 0], 100, 100)

    assert not name_exists(project, 'Null_100x100', exclude=solid)
    assert get_unique_name(project, 'Null_100x100', exclude=solid) == 'Null_100x100'


def test_should_ignore_every_excluded_item_when_given_a_collection():
    """Should skip all items in an exclude collection and still see the rest."""

    project = Project()
    first = project.add_solid('Null_100x100', [0, 0, 0], 100, 100)
    second = project.add_solid('Null_100x100_1', [0, 0, 0], 100, 100)
    project.add_folder('Null_100x100_2')

    assert not name_exists(project, 'Null_100x100', exclude=[first, second])
    assert get_unique_name(project, 'Null_100x100_2', exclude=[first, second]) == 'Null_100x100_2_1'
    assert get_unique_name(project, 'Null_100x100', exclude=[second]) == 'Null_100x100_1'


def test_should_format_dimensions_when_size_provided():
    """Should format sizes as WIDTHxHEIGHT."""

    assert format_dimensions(1920, 1080) == "1920x1080"
    assert format_dimensions(1920.0, 1080.0) == "1920x1080"


def test_should_find_only_root_level_folder_when_searching_by_name():
    """Should find a folder directly under root and ignore nested namesakes."""

    project = Project()
    outer = project.add_folder('Outer')
    project.add_folder('Solids', parent=outer)

    assert find_root_folder_by_name(project, 'Solids') is None

    root_level = project.add_folder('Solids')
    assert find_root_folder_by_name(project, 'Solids') is root_level
