"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "CGPT_"
DEFAULT_CONFIG_PATH = Path("~/.config/corpus-gpt/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("pinecone", "api_key"): "pinecone_api_key",
    ("pinecone", "cloud"): "pinecone_cloud",
    ("pinecone", "region"): "pinecone_region",
    ("index", "name"): "index_name",
    ("index", "dimension"): "vector_dimension",
    ("index", "metric"): "index_metric",
    ("index", "ready_timeout"): "index_ready_timeout",
    ("index", "poll_interval"): "index_poll_interval",
    ("index", "ready_strict"): "index_ready_strict",
    ("openai", "api_key"): "openai_api_key",
    ("openai", "embedding_model"): "embedding_model",
    ("openai", "completion_model"): "completion_model",
    ("openai", "temperature"): "temperature",
    ("openai", "max_tokens"): "max_tokens",
    ("ingest", "chunk_size"): "chunk_size",
    ("ingest", "chunk_overlap"): "chunk_overlap",
    ("ingest", "batch_size"): "batch_size",
    ("ingest", "docs_path"): "docs_path",
    ("retrieval", "top_k"): "top_k",
    ("logging", "level"): "log_level",
    ("logging", "json"): "log_json",
}

# Conventional SDK variables honoured when the prefixed ones are absent.
_FALLBACK_ENV: Mapping[str, str] = {
    "openai_api_key": "OPENAI_API_KEY",
    "pinecone_api_key": "PINECONE_API_KEY",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    index_name: str = "corpus-gpt"
    vector_dimension: int = Field(default=1536, gt=0)
    index_metric: str = "cosine"
    pinecone_api_key: str | None = None
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"
    index_ready_timeout: float = Field(default=80.0, ge=0)
    index_poll_interval: float = Field(default=5.0, gt=0)
    index_ready_strict: bool = False

    openai_api_key: str | None = None
    embedding_model: str = "text-embedding-ada-002"
    completion_model: str = "gpt-3.5-turbo"
    temperature: float = 0.9
    max_tokens: int = Field(default=1024, gt=0)

    chunk_size: int = 1000
    chunk_overlap: int = 0
    batch_size: int = 10
    top_k: int = Field(default=10, ge=1)
    docs_path: Path = Field(default=Path("documents"))

    log_level: str = "INFO"
    log_json: bool = True
    debug: bool = False

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("docs_path", mode="before")
    @classmethod
    def _expand_docs_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("docs_path must be a path or string")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("chunk_size", "batch_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @model_validator(mode="after")
    def _check_overlap(self) -> "Settings":
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
        return self

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        for field_name, env_name in _FALLBACK_ENV.items():
            if not data.get(field_name) and os.environ.get(env_name):
                data[field_name] = os.environ[env_name]
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with CGPT_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
