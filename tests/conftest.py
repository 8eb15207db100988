"""Shared pytest fixtures for TopDrawer tests."""
import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from topdrawer.core import logging as topdrawer_logging
from topdrawer.tree.nodes import Directory, File


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep TOPDRAWER_* variables and cached loggers from leaking between tests."""
    for key in list(os.environ):
        if key.startswith("TOPDRAWER_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(topdrawer_logging, "_loggers", {})


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_tree() -> Directory:
    """In-memory tree of a projects folder.

    /projects
        App/
            App.xcodeproj/
            App.xcworkspace/
            Sources/
                main.swift
        Library/
            Library.xcodeproj/
            Package.swift
            Sources/
                util.swift
        Empty/
        notes.txt
    """
    root = Directory("/projects")

    app = root.add_child(Directory("/projects/App"))
    app.add_child(Directory("/projects/App/App.xcodeproj"))
    app.add_child(Directory("/projects/App/App.xcworkspace"))
    app_sources = app.add_child(Directory("/projects/App/Sources"))
    app_sources.add_child(File("/projects/App/Sources/main.swift"))

    library = root.add_child(Directory("/projects/Library"))
    library.add_child(Directory("/projects/Library/Library.xcodeproj"))
    library.add_child(File("/projects/Library/Package.swift"))
    library_sources = library.add_child(Directory("/projects/Library/Sources"))
    library_sources.add_child(File("/projects/Library/Sources/util.swift"))

    root.add_child(Directory("/projects/Empty"))
    root.add_child(File("/projects/notes.txt"))

    return root


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create the same projects folder on disk, plus hidden entries."""
    source = temp_dir / "projects"
    source.mkdir()

    (source / "App").mkdir()
    (source / "App" / "App.xcodeproj").mkdir()
    (source / "App" / "App.xcworkspace").mkdir()
    (source / "App" / "Sources").mkdir()
    (source / "App" / "Sources" / "main.swift").write_text("print(\"app\")\n")

    (source / "Library").mkdir()
    (source / "Library" / "Library.xcodeproj").mkdir()
    (source / "Library" / "Package.swift").write_text("// swift-tools-version:5.9\n")
    (source / "Library" / "Sources").mkdir()
    (source / "Library" / "Sources" / "util.swift").write_text("func util() {}\n")

    (source / "Empty").mkdir()
    (source / "notes.txt").write_text("notes\n")

    (source / ".git").mkdir()
    (source / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (source / ".DS_Store").write_text("")

    return source


@pytest.fixture
def rule_set_document() -> dict:
    """Persisted rule set matching Xcode projects not shadowed by a workspace."""
    return {
        "Version": 1,
        "Rules": [
            {
                "Name": "Xcode projects",
                "Conditions": [
                    {
                        "Case": "Ext",
                        "AssociatedValue": {
                            "Strategy": "exact",
                            "Pattern": "xcodeproj",
                            "CaseSensitive": True,
                        },
                    },
                    {
                        "Case": "ParentDoesntContain",
                        "AssociatedValue": {
                            "Condition": {
                                "Case": "Ext",
                                "AssociatedValue": {
                                    "Strategy": "exact",
                                    "Pattern": "xcworkspace",
                                    "CaseSensitive": True,
                                },
                            }
                        },
                    },
                ],
            },
            {
                "Name": "Swift sources",
                "Conditions": [
                    {
                        "Case": "Ext",
                        "AssociatedValue": {
                            "Strategy": "exact",
                            "Pattern": "swift",
                            "CaseSensitive": True,
                        },
                    },
                ],
            },
        ],
    }


@pytest.fixture
def rules_file(temp_dir: Path, rule_set_document: dict) -> Path:
    """Write the rule set document as YAML."""
    path = temp_dir / "rules.yaml"
    path.write_text(yaml.safe_dump(rule_set_document, sort_keys=False))
    return path
