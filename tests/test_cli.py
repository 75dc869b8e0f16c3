"""Tests for the ``harvest`` CLI command."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each test from an empty working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def captured(monkeypatch):
    """Replace ``run_harvest`` with a recorder of its arguments."""
    calls: list[dict] = []

    def fake_run(urls, **kwargs):
        calls.append({"urls": list(urls), **kwargs})
        return []

    monkeypatch.setattr("cli.main.run_harvest", fake_run)
    return calls


def test_no_urls_prints_usage_and_exits_1(workdir, captured):
    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "Usage:" in result.stdout
    assert "--file urls.txt" in result.stdout
    assert captured == []
    assert not (workdir / "results.json").exists()
    assert not (workdir / "images").exists()


def test_non_url_arguments_only_exits_1(workdir, captured):
    result = runner.invoke(app, ["not-a-url", "ftp.example.com"])
    assert result.exit_code == 1
    assert "Usage:" in result.stdout
    assert captured == []


def test_positional_urls_are_forwarded(workdir, captured):
    result = runner.invoke(app, ["https://a.example/1", "junk", "https://a.example/2"])
    assert result.exit_code == 0
    assert captured[0]["urls"] == ["https://a.example/1", "https://a.example/2"]
    assert captured[0]["output_path"] is None
    assert captured[0]["images_dir"] is None
    assert captured[0]["delay"] is None


def test_file_option_reads_urls(workdir, captured):
    url_file = workdir / "urls.txt"
    url_file.write_text("https://a.example/1\n\nnotes\nhttps://a.example/2\n", encoding="utf-8")

    result = runner.invoke(app, ["--file", str(url_file)])

    assert result.exit_code == 0
    assert captured[0]["urls"] == ["https://a.example/1", "https://a.example/2"]


def test_file_without_urls_exits_1(workdir, captured):
    url_file = workdir / "urls.txt"
    url_file.write_text("nothing here\n", encoding="utf-8")

    result = runner.invoke(app, ["--file", str(url_file)])

    assert result.exit_code == 1
    assert "Usage:" in result.stdout
    assert captured == []


def test_missing_file_exits_1(workdir, captured):
    result = runner.invoke(app, ["--file", str(workdir / "absent.txt")])
    assert result.exit_code == 1
    assert "URL file not found" in result.stdout
    assert captured == []


def test_overrides_are_forwarded(workdir, captured):
    result = runner.invoke(
        app,
        [
            "https://a.example/1",
            "--output",
            "out/data.json",
            "--images-dir",
            "pics",
            "--delay",
            "0.25",
        ],
    )
    assert result.exit_code == 0
    assert captured[0]["output_path"] == Path("out/data.json")
    assert captured[0]["images_dir"] == Path("pics")
    assert captured[0]["delay"] == 0.25


def test_file_and_positional_urls_are_merged(workdir, captured):
    url_file = workdir / "urls.txt"
    url_file.write_text("https://a.example/1\nhttps://a.example/2\n", encoding="utf-8")

    result = runner.invoke(app, ["--file", str(url_file), "https://a.example/3"])

    assert result.exit_code == 0
    assert captured[0]["urls"] == [
        "https://a.example/1",
        "https://a.example/2",
        "https://a.example/3",
    ]
