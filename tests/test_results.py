"""Tests for result assembly and end-to-end analysis."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from rich.console import Console

from context_pack.core.classifier import Classification
from context_pack.core.results import (
    AnalysisResult,
    analyze,
    assemble_result,
    category_breakdown,
    percent_of,
)
from context_pack.core.scanner import Scanner
from context_pack.patterns import PRIORITY_ORDER


def scan(root: Path):
    return Scanner(console=Console(quiet=True)).scan(root)


class TestPercentOf:
    """Tests for percent_of function."""

    def test_zero_whole(self):
        assert percent_of(0, 0) == 0
        assert percent_of(5, 0) == 0

    def test_rounds_half_up(self):
        assert percent_of(1, 8) == 13  # 12.5
        assert percent_of(1, 200) == 1  # 0.5
        assert percent_of(1, 3) == 33

    def test_full(self):
        assert percent_of(7, 7) == 100


class TestAssembleResult:
    """Tests for assemble_result function."""

    def test_empty(self):
        result = assemble_result(Classification(), 0)

        assert result.suggestions == ()
        assert result.total_tokens == 0
        assert result.reduction_percent == 0

    def test_result_is_frozen(self):
        result = assemble_result(Classification(), 10)

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.total_tokens = 5  # type: ignore[misc]

    def test_conservation(self, bloated_project: Path):
        result = analyze(scan(bloated_project))

        assert result.total_tokens == result.bloat_tokens + result.clean_tokens


class TestAnalyze:
    """End-to-end scenarios over real directory trees."""

    def test_dependencies_scenario(self, mock_project: Path):
        results = scan(mock_project)
        analysis = analyze(results)

        assert len(results.files) == 2
        assert analysis.suggestions[0].category == "dependencies"
        assert analysis.suggestions[0].token_savings == 125
        assert analysis.bloat_tokens == 125
        assert analysis.clean_tokens == 10
        assert analysis.reduction_percent == 93

    def test_binary_scenario(self, temp_dir: Path):
        (temp_dir / "image.png").write_bytes(b"\x00" * 2000)

        results = scan(temp_dir)
        analysis = analyze(results)

        image = results.files[0]
        assert image.is_binary is True
        assert image.tokens == 0
        assert image.size_bytes == 2000
        assert results.binary_count == 1
        assert analysis.total_tokens == 0

    def test_large_file_scenario(self, temp_dir: Path):
        (temp_dir / "report.txt").write_text("r" * 41000)

        analysis = analyze(scan(temp_dir))

        assert [f.rel_path for f in analysis.large_files] == ["report.txt"]
        assert analysis.suggestions == ()

    def test_build_output_scenario(self, temp_dir: Path):
        (temp_dir / "dist").mkdir()
        (temp_dir / "dist" / "a.js").write_text("a" * 100)
        (temp_dir / "dist" / "b.js").write_text("b" * 37)

        analysis = analyze(scan(temp_dir))

        assert len(analysis.suggestions) == 1
        assert analysis.suggestions[0].file_count == 2
        assert analysis.suggestions[0].token_savings == 25 + 10

    def test_ordering_contract(self, bloated_project: Path):
        analysis = analyze(scan(bloated_project))

        for prev, cur in zip(analysis.suggestions, analysis.suggestions[1:]):
            prev_tier = PRIORITY_ORDER[prev.priority]
            cur_tier = PRIORITY_ORDER[cur.priority]
            assert prev_tier <= cur_tier
            if prev_tier == cur_tier:
                assert prev.token_savings >= cur.token_savings

    def test_bloated_project_suggestions(self, bloated_project: Path):
        analysis = analyze(scan(bloated_project))

        assert [s.pattern for s in analysis.suggestions] == [
            "node_modules/",
            "dist/",
            "package-lock.json",
            "*.log",
            ".vscode/",
        ]
        assert [f.rel_path for f in analysis.large_files] == ["report.txt"]
        assert analysis.is_bloat("dist/bundle.js") is True
        assert analysis.is_bloat("src/app.js") is False

    def test_idempotent(self, bloated_project: Path):
        first = analyze(scan(bloated_project))
        second = analyze(scan(bloated_project))

        assert first == second

    def test_custom_large_threshold(self, mock_project: Path):
        analysis = analyze(scan(mock_project), large_file_threshold=10)

        assert [f.rel_path for f in analysis.large_files] == ["src/index.js"]


class TestCategoryBreakdown:
    """Tests for category_breakdown function."""

    def test_groups_by_category(self, bloated_project: Path):
        breakdown = category_breakdown(analyze(scan(bloated_project)))

        assert list(breakdown) == ["dependencies", "build", "lockfiles", "logs", "ide"]
        assert breakdown["build"].patterns == ["dist/"]
        assert breakdown["build"].file_count == 2
        assert breakdown["dependencies"].token_savings == 1000

    def test_empty(self):
        result = AnalysisResult((), (), (), 0, 0, 0, 0)

        assert category_breakdown(result) == {}
