"""Configuration loading for srcroot (.srcroot.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import ArtifactSpec
from .modules import DEFAULT_FRAGMENT_NAME, UnmatchedPolicy
from .selection import DEFAULT_TARGET_ROOT

CONFIG_FILENAME = ".srcroot.yml"

DEFAULT_SOURCE_SUFFIXES = (".java", ".kt")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ArtifactConfig:
    """Artifact the host generates into each selected root."""

    file_name: str
    package: str = ""

    def to_spec(self) -> ArtifactSpec:
        return ArtifactSpec(file_name=self.file_name, package=self.package)


@dataclass
class ResolverConfig:
    """Represents the settings defined in .srcroot.yml."""

    root: Path
    fragment_name: str = DEFAULT_FRAGMENT_NAME
    default_root: str = DEFAULT_TARGET_ROOT
    unmatched: UnmatchedPolicy = UnmatchedPolicy.ROOT
    strict: bool = False
    source_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_SUFFIXES))
    exclude_paths: List[str] = field(default_factory=list)
    generated_patterns: List[str] = field(default_factory=list)
    artifact: Optional[ArtifactConfig] = None


def load_config(config_path: Path) -> ResolverConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ResolverConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = ResolverConfig(root=root)

    fragment_name = _as_str(data.get("fragment_name"))
    if fragment_name:
        config.fragment_name = fragment_name

    default_root = _as_str(data.get("default_root"))
    if default_root:
        config.default_root = default_root.replace("\\", "/").rstrip("/")

    unmatched = _as_str(data.get("unmatched"))
    if unmatched:
        try:
            config.unmatched = UnmatchedPolicy(unmatched.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(policy.value for policy in UnmatchedPolicy)
            raise ConfigError(
                f"Unsupported value for 'unmatched': {unmatched!r} (expected one of {allowed})"
            ) from exc

    config.strict = _as_bool(data.get("strict")) or False

    suffixes = _as_str_list(data.get("source_suffixes"))
    if suffixes:
        config.source_suffixes = [_as_suffix(suffix) for suffix in suffixes]

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    config.generated_patterns = _as_str_list(data.get("generated_patterns"))

    artifact_data = _as_dict(data.get("artifact"))
    file_name = _as_str(artifact_data.get("file_name")) if artifact_data else None
    if file_name:
        config.artifact = ArtifactConfig(
            file_name=file_name,
            package=_as_str(artifact_data.get("package")) or "",
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_suffix(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ArtifactConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_SOURCE_SUFFIXES",
    "ResolverConfig",
    "load_config",
]
