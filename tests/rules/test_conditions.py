#!/usr/bin/env python3
"""Tests for conditions and the folder/hierarchy matchers."""

import pytest

from topdrawer.rules.conditions import (
    Condition,
    ConditionCase,
    FolderContentsMatcher,
    HierarchyMatcher,
)
from topdrawer.rules.string_matcher import StringMatcher
from topdrawer.tree.nodes import Directory, File, HierarchyInformation


def find(root, relative):
    node = root
    for part in relative.split("/"):
        node = next(child for child in node.children if child.full_name == part)
    return node


def hierarchy(node):
    return HierarchyInformation.for_file(node)


class TestConditionCase:
    """Tests for the case tags and cost ranks."""

    def test_persisted_tags(self):
        """Test case values are the persisted tags."""
        assert [case.value for case in ConditionCase] == [
            "Name",
            "Ext",
            "FullName",
            "ParentContains",
            "ParentDoesntContain",
            "HierarchyContains",
        ]

    def test_cost_ranks(self):
        """Test every case has its fixed cost rank."""
        assert ConditionCase.FULL_NAME.cost_rank == 0
        assert ConditionCase.NAME.cost_rank == 1
        assert ConditionCase.EXT.cost_rank == 2
        assert ConditionCase.HIERARCHY_CONTAINS.cost_rank == 3
        assert ConditionCase.PARENT_CONTAINS.cost_rank == 4
        assert ConditionCase.PARENT_DOESNT_CONTAIN.cost_rank == 5

    def test_condition_cost_rank_follows_case(self):
        """Test a condition reports the rank of its case."""
        condition = Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.exact("App")))

        assert condition.cost_rank == 3


class TestConstruction:
    """Tests for building conditions."""

    def test_wrong_matcher_type_rejected(self):
        """Test a case cannot wrap the wrong kind of matcher."""
        with pytest.raises(TypeError):
            Condition(ConditionCase.EXT, HierarchyMatcher(StringMatcher.exact("App")))

        with pytest.raises(TypeError):
            Condition.parent_contains(StringMatcher.exact("App"))

    def test_bare_string_matcher_is_full_name(self):
        """Test a nested StringMatcher is shorthand for a full-name condition."""
        matcher = FolderContentsMatcher(StringMatcher.contains("Tests"))

        assert matcher.condition == Condition.full_name(StringMatcher.contains("Tests"))

    def test_nested_type_checked(self):
        """Test nested predicates must be conditions or string matchers."""
        with pytest.raises(TypeError):
            HierarchyMatcher("App")

    def test_input_string_reaches_innermost_pattern(self):
        """Test input_string unwraps nested matchers."""
        condition = Condition.parent_contains(
            FolderContentsMatcher(
                Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.prefix("Lib")))
            )
        )

        assert condition.input_string == "Lib"


class TestStringConditions:
    """Tests for name, ext and full_name."""

    def test_string_attributes(self):
        """Test each case tests its own attribute of the entry."""
        file = File("/src/main.swift")
        empty = HierarchyInformation()

        assert Condition.name(StringMatcher.exact("main")).matches(file, empty)
        assert Condition.ext(StringMatcher.exact("swift")).matches(file, empty)
        assert Condition.full_name(StringMatcher.exact("main.swift")).matches(file, empty)
        assert not Condition.name(StringMatcher.exact("main.swift")).matches(file, empty)

    def test_extension_without_dot(self):
        """Test entries without an extension have an empty ext."""
        file = File("/src/Makefile")

        assert Condition.ext(StringMatcher.exact("")).matches(file, HierarchyInformation())

    def test_directory_extension(self):
        """Test directories have extensions too."""
        bundle = Directory("/projects/App/App.xcodeproj")

        assert Condition.ext(StringMatcher.exact("xcodeproj")).matches(bundle, HierarchyInformation())


class TestFolderContentsMatcher:
    """Tests for FolderContentsMatcher and the parent conditions."""

    def test_empty_directory_never_matches(self, project_tree):
        """Test an empty directory has no child to satisfy the condition."""
        matcher = FolderContentsMatcher(Condition.name(StringMatcher.contains("")))
        empty = find(project_tree, "Empty")

        assert not matcher.matches(empty, hierarchy(empty))

    def test_any_child_matches(self, project_tree):
        """Test one matching child is enough."""
        matcher = FolderContentsMatcher(Condition.ext(StringMatcher.exact("xcworkspace")))

        app = find(project_tree, "App")
        library = find(project_tree, "Library")

        assert matcher.matches(app, hierarchy(app))
        assert not matcher.matches(library, hierarchy(library))

    def test_parent_contains(self, project_tree):
        """Test parent_contains looks at the entry's siblings."""
        condition = Condition.parent_contains(
            FolderContentsMatcher(Condition.ext(StringMatcher.exact("xcworkspace")))
        )
        project = find(project_tree, "App/App.xcodeproj")
        other = find(project_tree, "Library/Library.xcodeproj")

        assert condition.matches(project, hierarchy(project))
        assert not condition.matches(other, hierarchy(other))

    def test_parent_contains_sees_the_entry_itself(self, project_tree):
        """Test the entry is one of its parent's children."""
        condition = Condition.parent_contains(
            FolderContentsMatcher(Condition.full_name(StringMatcher.exact("notes.txt")))
        )
        notes = find(project_tree, "notes.txt")

        assert condition.matches(notes, hierarchy(notes))

    def test_parent_doesnt_contain(self, project_tree):
        """Test parent_doesnt_contain negates the folder scan."""
        condition = Condition.parent_doesnt_contain(
            FolderContentsMatcher(Condition.ext(StringMatcher.exact("xcworkspace")))
        )
        project = find(project_tree, "App/App.xcodeproj")
        other = find(project_tree, "Library/Library.xcodeproj")

        assert not condition.matches(project, hierarchy(project))
        assert condition.matches(other, hierarchy(other))

    def test_parent_conditions_false_for_root(self, project_tree):
        """Test an entry with no parent satisfies neither parent condition."""
        nested = FolderContentsMatcher(Condition.name(StringMatcher.exact("App")))

        assert not Condition.parent_contains(nested).matches(project_tree, HierarchyInformation())
        assert not Condition.parent_doesnt_contain(nested).matches(
            project_tree, HierarchyInformation()
        )

    def test_nested_condition_sees_child_hierarchy(self, project_tree):
        """Test conditions nested in a folder scan get the children's hierarchy."""
        # Matches a folder holding an entry that itself sits below "Library"
        matcher = FolderContentsMatcher(
            Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.exact("Library")))
        )
        sources = find(project_tree, "Library/Sources")
        app_sources = find(project_tree, "App/Sources")

        assert matcher.matches(sources, hierarchy(sources))
        assert not matcher.matches(app_sources, hierarchy(app_sources))


class TestHierarchyMatcher:
    """Tests for HierarchyMatcher and hierarchy_contains."""

    def test_empty_hierarchy_never_matches(self):
        """Test a root-level entry has no ancestor to satisfy the condition."""
        matcher = HierarchyMatcher(Condition.name(StringMatcher.contains("")))

        assert not matcher.matches(HierarchyInformation())

    def test_any_ancestor_matches(self, project_tree):
        """Test one matching ancestor is enough, at any distance."""
        condition = Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.exact("App")))
        main = find(project_tree, "App/Sources/main.swift")
        util = find(project_tree, "Library/Sources/util.swift")

        assert condition.matches(main, hierarchy(main))
        assert not condition.matches(util, hierarchy(util))

    def test_entry_itself_not_an_ancestor(self, project_tree):
        """Test the entry being tested is not part of its own hierarchy."""
        condition = Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.exact("App")))
        app = find(project_tree, "App")

        assert not condition.matches(app, hierarchy(app))

    def test_nested_condition_uses_ancestor_hierarchy(self, project_tree):
        """Test each ancestor is tested with its own ancestors."""
        # An ancestor whose parent holds a Package.swift
        condition = Condition.hierarchy_contains(
            HierarchyMatcher(
                Condition.parent_contains(
                    FolderContentsMatcher(StringMatcher.exact("Package.swift"))
                )
            )
        )
        util = find(project_tree, "Library/Sources/util.swift")
        main = find(project_tree, "App/Sources/main.swift")

        assert condition.matches(util, hierarchy(util))
        assert not condition.matches(main, hierarchy(main))

    def test_uses_only_supplied_hierarchy(self, project_tree):
        """Test matching reads the supplied chain rather than walking the tree."""
        condition = Condition.hierarchy_contains(HierarchyMatcher(StringMatcher.exact("Elsewhere")))
        main = find(project_tree, "App/Sources/main.swift")
        supplied = HierarchyInformation((Directory("/Elsewhere"),))

        assert condition.matches(main, supplied)


class TestEquality:
    """Tests for structural equality and decision tree keys."""

    def test_equal_conditions(self):
        """Test conditions with the same case and matcher are equal."""
        first = Condition.parent_contains(FolderContentsMatcher(StringMatcher.contains("Tests")))
        second = Condition.parent_contains(FolderContentsMatcher(StringMatcher.contains("Tests")))

        assert first == second
        assert hash(first) == hash(second)
        assert first.decision_tree_key == second.decision_tree_key

    def test_case_distinguishes(self):
        """Test the same matcher under different cases is not equal."""
        matcher = StringMatcher.exact("App")

        assert Condition.name(matcher) != Condition.full_name(matcher)
        assert Condition.name(matcher).decision_tree_key != Condition.full_name(matcher).decision_tree_key

    def test_nested_values_distinguish(self):
        """Test nested conditions with the same pattern but different cases differ."""
        first = Condition.parent_contains(
            FolderContentsMatcher(Condition.name(StringMatcher.exact("Tests")))
        )
        second = Condition.parent_contains(
            FolderContentsMatcher(Condition.ext(StringMatcher.exact("Tests")))
        )

        assert first.input_string == second.input_string
        assert first != second
        assert first.decision_tree_key != second.decision_tree_key


class TestPersistence:
    """Tests for the Case/AssociatedValue persisted form."""

    def test_persisted_form(self):
        """Test the persisted form nests the matcher's form."""
        condition = Condition.parent_contains(FolderContentsMatcher(StringMatcher.contains("Tests")))

        assert condition.to_persisted() == {
            "Case": "ParentContains",
            "AssociatedValue": {
                "Condition": {
                    "Case": "FullName",
                    "AssociatedValue": {
                        "Strategy": "contains",
                        "Pattern": "Tests",
                        "CaseSensitive": True,
                    },
                }
            },
        }

    def test_round_trip_behaves_identically(self):
        """Test a restored condition is equal and matches the same entries."""
        condition = Condition.parent_contains(FolderContentsMatcher(StringMatcher.contains("Tests")))
        restored = Condition.from_persisted(condition.to_persisted())

        root = Directory("/project")
        root.add_child(Directory("/project/UnitTests"))
        source = root.add_child(File("/project/main.swift"))
        chain = hierarchy(source)

        assert restored == condition
        assert restored.matches(source, chain) is condition.matches(source, chain) is True

    @pytest.mark.parametrize(
        "condition",
        [
            Condition.name(StringMatcher.exact("main")),
            Condition.ext(StringMatcher.suffix("proj", case_sensitive=False)),
            Condition.full_name(StringMatcher.wildcard("*.swift")),
            Condition.parent_doesnt_contain(
                FolderContentsMatcher(Condition.ext(StringMatcher.exact("xcworkspace")))
            ),
            Condition.hierarchy_contains(
                HierarchyMatcher(
                    Condition.parent_contains(FolderContentsMatcher(StringMatcher.exact("Package.swift")))
                )
            ),
        ],
    )
    def test_round_trip(self, condition):
        """Test every case round-trips, including nested conditions."""
        assert Condition.from_persisted(condition.to_persisted()) == condition

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"AssociatedValue": {"Strategy": "exact", "Pattern": "a", "CaseSensitive": True}},
            {"Case": "Size", "AssociatedValue": {"Strategy": "exact", "Pattern": "a", "CaseSensitive": True}},
            {"Case": "Ext"},
            {"Case": "Ext", "AssociatedValue": {"Strategy": "regex", "Pattern": "a", "CaseSensitive": True}},
            {"Case": "ParentContains", "AssociatedValue": {"Strategy": "exact", "Pattern": "a", "CaseSensitive": True}},
            {"Case": "HierarchyContains", "AssociatedValue": {"Condition": {"Case": "Bogus"}}},
        ],
    )
    def test_malformed_returns_none(self, data):
        """Test unknown tags and malformed values restore to None."""
        assert Condition.from_persisted(data) is None
