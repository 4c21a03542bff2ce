"""Tests for the runtime-visible / tool-only path helpers."""

from pathlib import Path

import pytest

from vartypes.paths import is_tool_only, is_within, relative_parts, tool_folder_for


class TestToolFolderFor:
    """Tests for tool_folder_for."""

    @pytest.mark.parametrize(
        ("directory", "expected"),
        [
            ("Meh/", "Meh/Editor"),
            ("Meh", "Meh/Editor"),
            ("Editor/", "Editor"),
            ("Editor", "Editor"),
            ("Meh/Editor/things", "Meh/Editor/things"),
            ("Meh/EditorMeepo/things", "Meh/EditorMeepo/things/Editor"),
            ("Meh/EditorMeepo/things/", "Meh/EditorMeepo/things/Editor"),
            ("Hello/Meep", "Hello/Meep/Editor"),
            ("Hello/Editor", "Hello/Editor"),
            ("Hello/Editor/Foo", "Hello/Editor/Foo"),
        ],
    )
    def test_pairing(self, directory: str, expected: str) -> None:
        """Test the tool-only folder chosen for a directory."""
        assert tool_folder_for(Path(directory)) == Path(expected)

    def test_root_components_are_ignored(self, tmp_path: Path) -> None:
        """Test that an Editor folder above the root does not count."""
        root = tmp_path / "Editor" / "Assets"
        root.mkdir(parents=True)
        assert tool_folder_for(root / "Vars", root) == root / "Vars" / "Editor"


class TestIsToolOnly:
    """Tests for is_tool_only."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("Hello/Meep/Editor", True),
            ("Hello/Editor", True),
            ("Hello/Editor/", True),
            ("Hello/Editor/Meep", True),
            ("Hello/EditorEditor/Editor", True),
            ("Editor/Woah/EditorLie", True),
            ("Editor/Woah", True),
            ("Hello/EditorDerp/Meep", False),
            ("Hello/EditorEditor/Meep", False),
            ("Harhar/lol", False),
        ],
    )
    def test_component_match(self, path: str, expected: bool) -> None:
        """Test that only whole Editor components mark a path tool-only."""
        assert is_tool_only(Path(path)) is expected

    def test_relative_to_root(self, tmp_path: Path) -> None:
        """Test that only components below the root are considered."""
        root = tmp_path / "Editor" / "Assets"
        root.mkdir(parents=True)
        assert is_tool_only(root / "Vars", root) is False
        assert is_tool_only(root / "Vars" / "Editor", root) is True


class TestContainment:
    """Tests for is_within and relative_parts."""

    def test_is_within(self, tmp_path: Path) -> None:
        """Test containment of paths in a root."""
        root = tmp_path / "Assets"
        assert is_within(root, root) is True
        assert is_within(root / "a" / "b", root) is True
        assert is_within(tmp_path / "Other", root) is False

    def test_relative_parts_outside_root(self, tmp_path: Path) -> None:
        """Test that paths outside the root keep all their parts."""
        outside = tmp_path / "Other" / "file.cs"
        assert relative_parts(outside, tmp_path / "Assets") == outside.parts
        assert relative_parts(tmp_path / "Assets" / "x", tmp_path / "Assets") == ("x",)
