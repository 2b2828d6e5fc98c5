"""Document loaders for supported formats."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import yaml

from corpus_gpt.ingest.types import Document


class BaseLoader:
    """Common loader interface."""

    suffixes: tuple[str, ...] = ()

    def can_load(self, path: Path) -> bool:
        return path.suffix.lower() in self.suffixes

    def load(self, path: Path) -> list[Document]:  # pragma: no cover - interface
        raise NotImplementedError


class TextLoader(BaseLoader):
    suffixes = (".txt", ".text")

    def load(self, path: Path) -> list[Document]:
        text = path.read_text(encoding="utf-8", errors="ignore")
        return [Document(content=text, metadata={"source": str(path)})]


class MarkdownLoader(BaseLoader):
    """Markdown files; YAML front matter is merged into the metadata."""

    suffixes = (".md", ".markdown", ".mdx")

    def load(self, path: Path) -> list[Document]:
        text = path.read_text(encoding="utf-8", errors="ignore")
        front_matter, body = _split_front_matter(text)
        metadata: dict[str, object] = {}
        if front_matter:
            metadata.update({key: _flat_value(value) for key, value in front_matter.items()})
        metadata["source"] = str(path)
        return [Document(content=body.strip("\n"), metadata=metadata)]


class LoaderRegistry:
    """Dispatch paths to the loader that handles their suffix."""

    def __init__(self, loaders: Sequence[BaseLoader] | None = None) -> None:
        self._loaders: list[BaseLoader] = list(loaders or (MarkdownLoader(), TextLoader()))

    def for_path(self, path: Path) -> BaseLoader | None:
        for loader in self._loaders:
            if loader.can_load(path):
                return loader
        return None

    def load(self, path: Path) -> list[Document]:
        loader = self.for_path(path)
        if loader is None:
            raise ValueError(f"No loader registered for suffix {path.suffix}")
        return loader.load(path)

    def iter_files(self, paths: Iterable[Path]) -> list[Path]:
        """Expand directories into the supported files they contain, sorted."""
        files: list[Path] = []
        for path in paths:
            path = path.expanduser()
            if not path.exists():
                raise ValueError(f"Path does not exist: {path}")
            if path.is_dir():
                files.extend(
                    sorted(item for item in path.rglob("*") if item.is_file() and self.for_path(item))
                )
            else:
                files.append(path)
        return files

    def load_paths(self, paths: Iterable[Path]) -> list[Document]:
        documents: list[Document] = []
        for file_path in self.iter_files(paths):
            documents.extend(self.load(file_path))
        return documents


def _split_front_matter(text: str) -> tuple[dict[str, object] | None, str]:
    if text.startswith("---"):
        parts = text.split("---", 2)
        if len(parts) >= 3:
            try:
                front_matter = yaml.safe_load(parts[1]) or {}
            except yaml.YAMLError:
                return None, text
            if isinstance(front_matter, dict):
                return front_matter, parts[2]
    return None, text


def _flat_value(value: object) -> object:
    # Index metadata only holds scalars and lists of strings.
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return str(value)


__all__ = ["BaseLoader", "TextLoader", "MarkdownLoader", "LoaderRegistry"]
