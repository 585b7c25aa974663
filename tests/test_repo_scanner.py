"""Tests for repository scanning."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcroot.config import ResolverConfig
from srcroot.models import DecisionReason
from srcroot.orchestrator import ResolutionRun
from srcroot.repo_scanner import RepoScanner, feed_run, resolve_repository
from tests._fixtures.repo_builder import RepoBuilder


def test_scan_collects_sources_and_fragments(repo_builder: RepoBuilder) -> None:
    repo_builder.touch(
        "app/src/main/java/App.java",
        "app/src/main/kotlin/Util.kt",
        "app/build/generated/source/kapt/main/Gen.java",
        "app/pom.xml",
        "README.md",
        ".git/objects/Blob.java",
        ".gradle/cache/Cached.java",
    )
    repo_builder.write({"lib/.migration-source-roots.yaml": "sourceRoots:\n  - code\n"})

    result = repo_builder.scan()

    assert result.root == str(repo_builder.path().resolve())
    assert result.sources == [
        "app/build/generated/source/kapt/main/Gen.java",
        "app/src/main/java/App.java",
        "app/src/main/kotlin/Util.kt",
    ]
    assert result.fragments == {"lib/.migration-source-roots.yaml": "sourceRoots:\n  - code\n"}


def test_scan_respects_gitignore_and_excludes(repo_builder: RepoBuilder) -> None:
    repo_builder.touch(
        "app/src/main/java/App.java",
        "vendor/src/main/java/Vendored.java",
        "out/Compiled.java",
        "app/src/main/java/Scratch.java",
    )
    repo_builder.write(
        {
            ".gitignore": "out/\nScratch.java\n",
            ".srcroot.yml": "exclude_paths:\n  - vendor/\n",
        }
    )

    result = repo_builder.scan()

    assert result.sources == ["app/src/main/java/App.java"]


def test_scan_uses_configured_suffixes(repo_builder: RepoBuilder) -> None:
    repo_builder.touch("app/src/main/java/App.java", "app/src/main/groovy/Build.groovy")

    config = ResolverConfig(root=repo_builder.path(), source_suffixes=[".groovy"])
    result = RepoScanner(config).scan(str(repo_builder.path()))

    assert result.sources == ["app/src/main/groovy/Build.groovy"]


def test_scan_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        RepoScanner().scan(str(tmp_path / "missing"))


def test_scan_file_root_raises(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        RepoScanner().scan(str(target))


def test_feed_run_ingests_scan_result(repo_builder: RepoBuilder) -> None:
    repo_builder.touch("lib/code/Impl.java")
    repo_builder.write({"lib/.migration-source-roots.yaml": "sourceRoots:\n  - code\n"})

    run = feed_run(repo_builder.scan(), ResolutionRun(strict=True))

    assert run.targets() == {"lib": "lib/code"}


def test_resolve_repository_end_to_end(repo_builder: RepoBuilder) -> None:
    repo_builder.touch(
        "app/src/main/java/App.java",
        "app/src/test/java/AppTest.java",
        "app/src/main/java/com/example/annotations/NeedsReview.java",
        "lib/src/main/kotlin/Lib.kt",
        "legacy/code/Old.java",
    )
    repo_builder.write(
        {
            "legacy/.migration-source-roots.yaml": "sourceRoots:\n  - code\n",
            ".srcroot.yml": """
artifact:
  file_name: NeedsReview.java
  package: com.example.annotations
""",
        }
    )

    run = repo_builder.resolve()

    assert run.decisions["app"].reason is DecisionReason.ALREADY_PRESENT
    assert run.targets() == {"legacy": "legacy/code", "lib": "lib/src/main/kotlin"}
    assert run.planned_artifacts() == [
        "legacy/code/com/example/annotations/NeedsReview.java",
        "lib/src/main/kotlin/com/example/annotations/NeedsReview.java",
    ]


def test_resolve_repository_empty_tree_uses_default(repo_builder: RepoBuilder) -> None:
    repo_builder.touch("docs/index.md")

    run = resolve_repository(str(repo_builder.path()))

    assert run.targets() == {"": "src/main/java"}
