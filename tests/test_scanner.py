"""Tests for project scanning and grouping."""

from solid_consolidator.scanner import SolidScanner
from solid_consolidator.signature import AssetCategory


class TestGrouping:
    """Test that duplicates land in one group with the right survivor."""

    def test_identical_solids_grouped_together(self, project):
        a = project.add_solid('Red Solid 1', [1, 0, 0], 1920, 1080)
        b = project.add_solid('Red Solid 2', [1, 0, 0], 1920, 1080)
        c = project.add_solid('Blue Solid 1', [0, 0, 1], 1920, 1080)

        result = SolidScanner().scan(project)

        assert len(result.groups) == 2
        red = result.groups[0]
        assert red.items == (a, b)
        assert result.groups[1].items == (c,)
        assert result.duplicates_to_remove == 1

    def test_survivor_is_first_in_enumeration_order(self, project):
        folder = project.add_folder('Later Folder')
        first = project.add_solid('Gray 1', [0.5, 0.5, 0.5], 100, 100, parent=folder)
        second = project.add_solid('Gray 2', [0.5, 0.5, 0.5], 100, 100)
        third = project.add_solid('Gray 3', [0.5, 0.5, 0.5], 100, 100)

        group = SolidScanner().scan(project).groups[0]

        assert group.survivor is first
        assert group.duplicates == (second, third)

    def test_groups_ordered_by_first_encounter(self, project):
        blue = project.add_solid('Blue', [0, 0, 1], 10, 10)
        red = project.add_solid('Red', [1, 0, 0], 10, 10)
        project.add_solid('Blue again', [0, 0, 1], 10, 10)

        groups = SolidScanner().scan(project).groups

        assert [g.survivor for g in groups] == [blue, red]

    def test_non_synthetic_items_skipped(self, project):
        project.add_folder('Null Folder')
        project.add_composition('Null Comp')
        project.add_footage('null_pass.exr', file_path='renders/null_pass.exr')
        solid = project.add_solid('Null 1', [0, 0, 0], 100, 100)

        result = SolidScanner().scan(project)

        assert result.total_assets == 1
        assert result.groups[0].items == (solid,)

    def test_category_splits_otherwise_identical_items(self, project):
        project.add_solid('White Solid', [1, 1, 1], 1920, 1080)
        project.add_solid('Null 1', [1, 1, 1], 1920, 1080)
        project.add_solid('Adjustment Layer 1', [1, 1, 1], 1920, 1080)

        result = SolidScanner().scan(project)

        assert len(result.groups) == 3
        assert result.duplicates_to_remove == 0


class TestCounts:
    """Test summary statistics."""

    def test_counts_per_category(self, project):
        project.add_solid('Red Solid 1', [1, 0, 0], 1920, 1080)
        project.add_solid('Red Solid 2', [1, 0, 0], 1920, 1080)
        project.add_solid('Null 1', [1, 0, 0], 100, 100)
        project.add_solid('Null 2', [1, 0, 0], 100, 100)
        project.add_solid('Null 3', [1, 0, 0], 100, 100)
        project.add_solid('Adjustment Layer 1', [1, 1, 1], 1920, 1080)

        result = SolidScanner().scan(project)

        assert result.total_assets == 6
        assert result.solids_count == 2
        assert result.nulls_count == 3
        assert result.adjustments_count == 1
        assert result.category_counts[AssetCategory.NULL] == 3
        # (2 - 1) + (3 - 1) + (1 - 1)
        assert result.duplicates_to_remove == 3
        assert len(result.duplicate_groups) == 2

    def test_empty_project(self, project):
        result = SolidScanner().scan(project)

        assert result.total_assets == 0
        assert result.groups == ()
        assert result.duplicates_to_remove == 0
        assert result.to_dict()['groups'] == 0

    def test_scan_does_not_modify_project(self, project):
        a = project.add_solid('Red Solid 1', [1, 0, 0], 1920, 1080)
        project.add_solid('Red Solid 2', [1, 0, 0], 1920, 1080)

        SolidScanner().scan(project)

        assert project.num_items == 2
        assert a.name == 'Red Solid 1'
        assert a.parent_folder is project.root_folder

    def test_group_lookup_by_signature(self, project):
        project.add_solid('Red Solid 1', [1, 0, 0], 1920, 1080)
        result = SolidScanner().scan(project)
        signature = result.groups[0].signature

        assert result.group_for(signature) is result.groups[0]
