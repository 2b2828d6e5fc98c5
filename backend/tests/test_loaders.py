"""Tests for document loaders."""

from pathlib import Path

import pytest

from corpus_gpt.ingest.loaders import LoaderRegistry


def test_directory_expands_to_supported_files(corpus_dir: Path) -> None:
    files = LoaderRegistry().iter_files([corpus_dir])
    assert [path.name for path in files] == ["data.txt", "routing.md"]


def test_markdown_front_matter_becomes_metadata(corpus_dir: Path) -> None:
    [document] = LoaderRegistry().load(corpus_dir / "routing.md")
    assert document.source == str(corpus_dir / "routing.md")
    assert document.metadata["url"] == "https://nextjs.org/docs/routing"
    assert document.content.startswith("# Routing")


def test_text_is_kept_verbatim(corpus_dir: Path) -> None:
    [document] = LoaderRegistry().load(corpus_dir / "data.txt")
    assert document.content == "Data fetching happens in server components.\n"
    assert document.metadata == {"source": str(corpus_dir / "data.txt")}


def test_unsupported_suffix_is_rejected(corpus_dir: Path) -> None:
    with pytest.raises(ValueError, match="No loader"):
        LoaderRegistry().load(corpus_dir / "image.png")


def test_missing_path_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        LoaderRegistry().load_paths([tmp_path / "missing"])
