"""Tests for the scanner module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from rich.console import Console

from context_pack.core.matcher import DEFAULT_IGNORE, is_ignored
from context_pack.core.scanner import (
    InvalidRootError,
    ScanError,
    Scanner,
    format_size,
    load_rules,
    parse_size,
    walk,
)


def quiet_scanner(**kwargs) -> Scanner:
    return Scanner(console=Console(quiet=True), **kwargs)


class TestFormatSize:
    """Tests for format_size function."""

    def test_bytes(self):
        assert format_size(500) == "500.0 B"

    def test_kilobytes(self):
        assert format_size(1024) == "1.0 KB"

    def test_megabytes(self):
        assert format_size(1024 * 1024) == "1.0 MB"


class TestParseSize:
    """Tests for parse_size function."""

    def test_parse_bytes(self):
        assert parse_size("100") == 100
        assert parse_size("100B") == 100

    def test_parse_kilobytes(self):
        assert parse_size("10KB") == 10 * 1024
        assert parse_size("10kb") == 10 * 1024

    def test_parse_decimal_values(self):
        assert parse_size("1.5MB") == int(1.5 * 1024 * 1024)

    def test_parse_invalid_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_size("invalid")
        with pytest.raises(ValueError):
            parse_size("")

    def test_parse_negative_raises_value_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            parse_size("-10KB")


class TestWalk:
    """Tests for the walk function."""

    def test_records_text_files(self, mock_project: Path):
        result = walk(mock_project, list(DEFAULT_IGNORE))

        by_path = {f.rel_path: f for f in result.files}
        assert set(by_path) == {"node_modules/x.js", "src/index.js"}
        assert by_path["node_modules/x.js"].tokens == 125
        assert by_path["src/index.js"].tokens == 10
        assert by_path["src/index.js"].size_bytes == 40
        assert by_path["src/index.js"].extension == ".js"
        assert by_path["src/index.js"].name == "index.js"
        assert by_path["src/index.js"].path == mock_project / "src" / "index.js"

    def test_sorted_by_tokens_descending(self, bloated_project: Path):
        result = walk(bloated_project, list(DEFAULT_IGNORE))

        tokens = [f.tokens for f in result.files]
        assert tokens == sorted(tokens, reverse=True)

    def test_binary_file_has_no_tokens(self, temp_dir: Path):
        (temp_dir / "image.png").write_bytes(b"\x00" * 2000)

        result = walk(temp_dir, [])

        assert len(result.files) == 1
        image = result.files[0]
        assert image.is_binary is True
        assert image.tokens == 0
        assert image.size_bytes == 2000
        assert result.binary_count == 1

    def test_uppercase_binary_extension(self, temp_dir: Path):
        (temp_dir / "PHOTO.JPG").write_bytes(b"\xff" * 10)

        result = walk(temp_dir, [])

        assert result.files[0].is_binary is True
        assert result.files[0].extension == ".jpg"

    def test_tokens_count_characters_not_bytes(self, temp_dir: Path):
        (temp_dir / "unicode.txt").write_text("é" * 8, encoding="utf-8")

        result = walk(temp_dir, [])

        assert result.files[0].size_bytes == 16
        assert result.files[0].tokens == 2

    def test_undecodable_text_still_counted(self, temp_dir: Path):
        (temp_dir / "data.txt").write_bytes(b"\xff\xfe\xfa\xfb")

        result = walk(temp_dir, [])

        assert result.files[0].tokens == 1

    def test_line_endings_counted_as_written(self, temp_dir: Path):
        # 9 characters; universal newlines would fold them to 6
        (temp_dir / "mixed.txt").write_bytes(b"a\rb\r\n\r\n\r\n")

        result = walk(temp_dir, [])

        assert result.files[0].size_bytes == 9
        assert result.files[0].tokens == 3

    def test_ignored_directory_is_pruned(self, mock_project: Path):
        result = walk(mock_project, ["src/"])

        assert not any(f.rel_path.startswith("src/") for f in result.files)
        assert result.ignored_count >= 1

    def test_pruned_directory_is_never_entered(self, temp_dir: Path):
        (temp_dir / "vendor" / "deep" / "deeper").mkdir(parents=True)
        (temp_dir / "vendor" / "deep" / "deeper" / "lib.js").write_text("x")
        (temp_dir / "main.js").write_text("x")
        entered: list[str] = []

        result = walk(temp_dir, ["vendor"], on_directory=entered.append)

        assert entered == ["."]
        assert result.ignored_count == 1
        assert [f.rel_path for f in result.files] == ["main.js"]

    def test_ignored_file_counted(self, temp_dir: Path):
        (temp_dir / "debug.log").write_text("x")
        (temp_dir / "main.py").write_text("x")

        result = walk(temp_dir, ["*.log"])

        assert [f.rel_path for f in result.files] == ["main.py"]
        assert result.ignored_count == 1

    def test_no_kept_file_has_ignored_ancestor(self, bloated_project: Path):
        rules = ["node_modules", "dist/**", ".vscode"]

        result = walk(bloated_project, rules)

        for f in result.files:
            parts = f.rel_path.split("/")
            for depth in range(1, len(parts)):
                assert not is_ignored("/".join(parts[:depth]), rules)

    def test_invalid_root_missing(self, temp_dir: Path):
        with pytest.raises(InvalidRootError):
            walk(temp_dir / "missing", [])

    def test_invalid_root_is_file(self, temp_dir: Path):
        file_path = temp_dir / "file.txt"
        file_path.write_text("x")

        with pytest.raises(ScanError):
            walk(file_path, [])

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_not_followed(self, temp_dir: Path):
        (temp_dir / "real").mkdir()
        (temp_dir / "real" / "a.txt").write_text("abcd")
        os.symlink(temp_dir, temp_dir / "real" / "loop")

        result = walk(temp_dir, [])

        assert [f.rel_path for f in result.files] == ["real/a.txt"]

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_directory_is_skipped(self, temp_dir: Path):
        locked = temp_dir / "locked"
        locked.mkdir()
        (locked / "secret.txt").write_text("x")
        (temp_dir / "open.txt").write_text("x")
        locked.chmod(0)
        try:
            result = walk(temp_dir, [])
        finally:
            locked.chmod(0o755)

        assert [f.rel_path for f in result.files] == ["open.txt"]
        assert len(result.scan_errors) == 1

    def test_idempotent(self, bloated_project: Path):
        first = walk(bloated_project, list(DEFAULT_IGNORE))
        second = walk(bloated_project, list(DEFAULT_IGNORE))

        assert first == second


class TestLoadRules:
    """Tests for load_rules function."""

    def test_defaults_only(self, temp_dir: Path):
        assert load_rules(temp_dir) == list(DEFAULT_IGNORE)

    def test_combines_gitignore_and_project_file(self, temp_dir: Path):
        (temp_dir / ".gitignore").write_text("build\n")
        (temp_dir / ".claudeignore").write_text("# docs\ndocs/\n")

        rules = load_rules(temp_dir)

        assert rules == list(DEFAULT_IGNORE) + ["build", "docs/"]

    def test_gitignore_can_be_disabled(self, temp_dir: Path):
        (temp_dir / ".gitignore").write_text("build\n")

        assert "build" not in load_rules(temp_dir, respect_gitignore=False)

    def test_project_file_can_be_disabled(self, temp_dir: Path):
        (temp_dir / ".claudeignore").write_text("docs\n")

        assert "docs" not in load_rules(temp_dir, use_project_ignore=False)


class TestScanner:
    """Tests for Scanner class."""

    def test_scan_empty_directory(self, temp_dir: Path):
        result = quiet_scanner().scan(temp_dir)

        assert result.root_path == temp_dir
        assert result.files == []
        assert result.total_tokens == 0
        assert result.has_project_ignore is False

    def test_scan_skips_git_directory(self, bloated_project: Path):
        result = quiet_scanner().scan(bloated_project)

        assert not any(f.rel_path.startswith(".git/") for f in result.files)
        assert result.ignored_count >= 1

    def test_scan_applies_project_ignore(self, mock_project: Path):
        (mock_project / ".claudeignore").write_text("src/\n")

        result = quiet_scanner().scan(mock_project)

        assert result.has_project_ignore is True
        assert not any(f.rel_path.startswith("src/") for f in result.files)
        assert result.ignored_count >= 1

    def test_scan_applies_gitignore(self, mock_project: Path):
        (mock_project / ".gitignore").write_text("node_modules\n")

        result = quiet_scanner().scan(mock_project)

        assert result.has_gitignore is True
        assert "node_modules/x.js" not in {f.rel_path for f in result.files}

    def test_scan_extra_ignore(self, mock_project: Path):
        result = quiet_scanner(extra_ignore=["node_modules"]).scan(mock_project)

        assert [f.rel_path for f in result.files] == ["src/index.js"]

    def test_totals(self, mock_project: Path):
        result = quiet_scanner().scan(mock_project)

        assert result.total_tokens == 135
        assert result.total_size == 540

    def test_scan_invalid_root_raises(self, temp_dir: Path):
        with pytest.raises(InvalidRootError):
            quiet_scanner().scan(temp_dir / "nope")
