"""Tests for the command line entry point."""

import json
import os

import pytest
from click.testing import CliRunner

from bindery.cover.cover_renderer import CoverPdfRenderer
from main import main

BOOK = ["--spine-width", "0.5", "--bleed", "0.125"]


@pytest.fixture
def runner():
    return CliRunner()


def test_geometry_dump(runner):
    result = runner.invoke(main, BOOK + ["--geometry"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["cover"]["values"]["total_width"] == pytest.approx(12.75)
    assert payload["interior"]["margins"]["gutter"] == 0.675


def test_interior_geometry_without_spine(runner):
    result = runner.invoke(main, ["--package", "interior", "--geometry"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert list(payload) == ["interior"]


def test_generates_package(runner, tmp_path):
    result = runner.invoke(main, BOOK + ["--package", "cover", "--dpi", "30", "--out", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "✅ Generated" in result.output
    assert os.path.exists(tmp_path / "Template_PerfectBindSoftcover_cover.zip")
    assert "Cover/cover.psd" in result.output


def test_invalid_dimension_exits_2(runner):
    result = runner.invoke(main, ["--trim-width", "0", "--geometry"])
    assert result.exit_code == 2
    assert "greater than 0" in result.output


def test_missing_spine_exits_1(runner, tmp_path):
    result = runner.invoke(main, ["--binding", "Case Bind / Hardcover", "--out", str(tmp_path)])
    assert result.exit_code == 1
    assert "❌" in result.output
    assert not list(tmp_path.iterdir())


def test_inspect_local_pdf(runner, tmp_path, perfect_geometry, policy):
    path = tmp_path / "cover.pdf"
    path.write_bytes(CoverPdfRenderer().render(perfect_geometry, policy))
    result = runner.invoke(main, ["--inspect", str(path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["firstPageWidthInches"] == 12.75


def test_validate_cover(runner, tmp_path, perfect_geometry, policy):
    path = tmp_path / "cover.pdf"
    path.write_bytes(CoverPdfRenderer().render(perfect_geometry, policy))
    ok = runner.invoke(main, BOOK + ["--validate-cover-path", str(path)])
    assert ok.exit_code == 0, ok.output
    assert "✅ No issues found." in ok.output

    wrong = runner.invoke(main, ["--spine-width", "1.0", "--bleed", "0.125", "--validate-cover-path", str(path)])
    assert wrong.exit_code == 1
    assert "ERROR:" in wrong.output
