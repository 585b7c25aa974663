"""Tests for .srcroot.yml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcroot.config import CONFIG_FILENAME, ConfigError, load_config
from srcroot.modules import DEFAULT_FRAGMENT_NAME, UnmatchedPolicy


def _write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(content, encoding="utf-8")
    return path


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.fragment_name == DEFAULT_FRAGMENT_NAME
    assert config.default_root == "src/main/java"
    assert config.unmatched is UnmatchedPolicy.ROOT
    assert config.strict is False
    assert config.source_suffixes == [".java", ".kt"]
    assert config.exclude_paths == []
    assert config.artifact is None


def test_load_config_reads_all_settings(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
fragment_name: roots.yaml
default_root: src\\java\\
unmatched: Parent
strict: yes
source_suffixes:
  - java
  - .KT
  - groovy
exclude_paths:
  - vendor/
generated_patterns: out/generated
artifact:
  file_name: NeedsReview.java
  package: com.example.annotations
""",
    )

    config = load_config(tmp_path)

    assert config.fragment_name == "roots.yaml"
    assert config.default_root == "src/java"
    assert config.unmatched is UnmatchedPolicy.PARENT
    assert config.strict is True
    assert config.source_suffixes == [".java", ".kt", ".groovy"]
    assert config.exclude_paths == ["vendor/"]
    assert config.generated_patterns == ["out/generated"]
    assert config.artifact is not None
    assert config.artifact.to_spec().relative_path == "com/example/annotations/NeedsReview.java"


def test_load_config_accepts_config_file_path(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "default_root: sources\n")
    assert load_config(path).default_root == "sources"


def test_artifact_without_file_name_is_ignored(tmp_path: Path) -> None:
    _write_config(tmp_path, "artifact:\n  package: com.example\n")
    assert load_config(tmp_path).artifact is None


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "\n")
    assert load_config(tmp_path).default_root == "src/main/java"


def test_unknown_unmatched_policy_raises(tmp_path: Path) -> None:
    _write_config(tmp_path, "unmatched: sideways\n")
    with pytest.raises(ConfigError, match="unmatched"):
        load_config(tmp_path)


def test_non_mapping_config_raises(tmp_path: Path) -> None:
    _write_config(tmp_path, "- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    _write_config(tmp_path, "default_root: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
