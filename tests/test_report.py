#!/usr/bin/env python3
"""Tests for report rendering."""

import pytest

from topdrawer.core.constants import ErrorCode
from topdrawer.report import ReportError, ReportRenderer, tree_lines
from topdrawer.rules.conditions import Condition
from topdrawer.rules.rule import Rule
from topdrawer.rules.string_matcher import StringMatcher
from topdrawer.tree.nodes import Directory, File

SWIFT_RULE = Rule([Condition.ext(StringMatcher.exact("swift"))], name="Swift")


@pytest.fixture
def filtered_root():
    root = Directory("/projects")
    app = root.add_child(Directory("/projects/App"))
    app.add_child(File("/projects/App/main.swift"))
    return root


class TestTreeLines:
    """Tests for tree_lines."""

    def test_indented_by_depth(self, filtered_root):
        """Test entries are indented by depth and directories marked."""
        assert tree_lines(filtered_root) == ["App/", "  main.swift"]

    def test_custom_indent(self, filtered_root):
        """Test the indent string can be changed."""
        assert tree_lines(filtered_root, indent="\t") == ["App/", "\tmain.swift"]


class TestReportRenderer:
    """Tests for ReportRenderer."""

    def test_default_template(self, filtered_root):
        """Test the built-in report layout."""
        groups = [(SWIFT_RULE, [File("/projects/App/main.swift")]), (Rule(), [])]

        output = ReportRenderer().render("/projects", groups, filtered_root)

        assert output == (
            "Rules matched under /projects\n"
            "\n"
            "Swift (1 match)\n"
            "  Extension is 'swift'\n"
            "  - /projects/App/main.swift\n"
            "\n"
            "Rule 2 (0 matches)\n"
            "  Every item\n"
            "\n"
            "Menu\n"
            "App/\n"
            "  main.swift\n"
        )

    def test_without_tree(self):
        """Test the menu section is left out without a filtered tree."""
        output = ReportRenderer().render("/projects", [(SWIFT_RULE, [])])

        assert "Menu" not in output

    def test_template_file(self, temp_dir):
        """Test a template file replaces the built-in one."""
        template = temp_dir / "report.j2"
        template.write_text("{{ root }}: {{ groups[0].description }}")

        output = ReportRenderer(template).render("/projects", [(SWIFT_RULE, [])])

        assert output == "/projects: Extension is 'swift'"

    def test_missing_template(self, temp_dir):
        """Test a missing template raises NOT_FOUND."""
        with pytest.raises(ReportError) as exc_info:
            ReportRenderer(temp_dir / "missing.j2")

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_syntax_error(self, temp_dir):
        """Test a template with bad syntax raises ReportError."""
        template = temp_dir / "report.j2"
        template.write_text("{% for group in groups %}")

        with pytest.raises(ReportError, match="Template error"):
            ReportRenderer(template)

    def test_render_error(self, temp_dir):
        """Test errors while rendering raise ReportError."""
        template = temp_dir / "report.j2"
        template.write_text("{{ root | no_such_filter }}")

        with pytest.raises(ReportError):
            ReportRenderer(template).render("/projects", [])
