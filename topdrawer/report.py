#!/usr/bin/env python3
"""Text reports rendered with Jinja2.

The report lists every rule with its description and the entries it
matched, followed by the filtered tree as it would appear in the menu.
A custom template file can replace the built-in one; it receives:

- ``root``: path of the scanned directory
- ``groups``: list of dicts with ``name``, ``description`` and ``files``
  (each file has ``path``, ``full_name`` and ``is_directory``)
- ``tree_lines``: indented lines of the filtered tree

Example:
    >>> renderer = ReportRenderer()
    >>> print(renderer.render(root.path, groups, filtered_root))
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jinja2

from topdrawer.core.constants import ErrorCode
from topdrawer.rules.formatter import describe_rule
from topdrawer.rules.rule import Rule
from topdrawer.tree.nodes import Directory, File

DEFAULT_TEMPLATE = """\
Rules matched under {{ root }}
{% for group in groups %}

{{ group.name }} ({{ group.files | length }} match{{ "" if group.files | length == 1 else "es" }})
  {{ group.description }}
{% for file in group.files %}
  - {{ file.path }}{{ "/" if file.is_directory else "" }}
{% endfor %}
{% endfor %}
{% if tree_lines %}

Menu
{% for line in tree_lines %}
{{ line }}
{% endfor %}
{% endif %}
"""


class ReportError(Exception):
    """Raised when a report template cannot be loaded or rendered."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def tree_lines(directory: Directory, indent: str = "  ") -> List[str]:
    """Indented lines for every entry below ``directory``."""
    lines: List[str] = []
    _append_lines(directory, 0, indent, lines)
    return lines


def _append_lines(directory: Directory, depth: int, indent: str, lines: List[str]) -> None:
    for child in directory.children:
        suffix = "/" if child.is_directory else ""
        lines.append(f"{indent * depth}{child.full_name}{suffix}")
        if isinstance(child, Directory):
            _append_lines(child, depth + 1, indent, lines)


class ReportRenderer:
    """Renders match reports from a Jinja2 template."""

    def __init__(self, template_path: Optional[Union[str, Path]] = None, **jinja_options):
        """Initialize renderer.

        Args:
            template_path: Template file replacing the built-in template
            **jinja_options: Additional Jinja2 environment options

        Raises:
            ReportError: If the template file cannot be read or compiled
        """
        options = {"trim_blocks": True, "lstrip_blocks": True, "keep_trailing_newline": True}
        options.update(jinja_options)
        self._env = jinja2.Environment(**options)

        if template_path is None:
            source = DEFAULT_TEMPLATE
        else:
            try:
                source = Path(template_path).expanduser().read_text(encoding="utf-8")
            except OSError as e:
                raise ReportError(f"Cannot read template {template_path}: {e}", ErrorCode.NOT_FOUND)

        try:
            self._template = self._env.from_string(source)
        except jinja2.TemplateError as e:
            raise ReportError(f"Template error: {e}")

    def render(
        self,
        root: str,
        groups: List[Tuple[Rule, List[File]]],
        filtered_root: Optional[Directory] = None,
    ) -> str:
        """Render a report.

        Args:
            root: Path of the scanned directory
            groups: Rules with the entries they matched, in rule-set order
            filtered_root: Filtered tree to list under "Menu"

        Returns:
            Rendered text

        Raises:
            ReportError: If rendering fails
        """
        context: Dict[str, Any] = {
            "root": root,
            "groups": [
                {
                    "name": rule.name or f"Rule {index + 1}",
                    "description": describe_rule(rule.conditions),
                    "files": files,
                }
                for index, (rule, files) in enumerate(groups)
            ],
            "tree_lines": tree_lines(filtered_root) if filtered_root is not None else [],
        }

        try:
            return self._template.render(**context)
        except jinja2.TemplateError as e:
            raise ReportError(f"Template error: {e}")
