"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from srcroot.cli import _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "resolve"])
    assert args.verbose is True
    assert args.command == "resolve"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["classify", "repo", "--verbose"])
    assert args.verbose is True
    assert args.command == "classify"
    assert args.path == "repo"


def test_cli_accepts_artifact_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "resolve",
            "--json",
            "--artifact-name",
            "NeedsReview.java",
            "--artifact-package",
            "com.example",
            "--default-root",
            "src/java",
        ]
    )
    assert args.json is True
    assert args.artifact_name == "NeedsReview.java"
    assert args.artifact_package == "com.example"
    assert args.default_root == "src/java"


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 8000


def _sample_repo(repo_builder: RepoBuilder) -> Path:
    repo_builder.touch(
        "app/src/main/java/Foo.java",
        "app/src/test/java/FooTest.java",
    )
    return repo_builder.path()


def test_resolve_prints_decisions(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)

    main(["resolve", str(root), "--artifact-name", "Marker.java"])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "app: app/src/main/java (priority)",
        "  + app/src/main/java/Marker.java",
    ]


def test_resolve_json_output(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)

    main(["resolve", str(root), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["decisions"] == [
        {
            "module": "app",
            "root": "app/src/main/java",
            "reason": "priority",
            "places_artifact": True,
        }
    ]
    assert payload["detected_roots"] == {"app": ["app/src/main/java", "app/src/test/java"]}
    assert "planned_artifacts" not in payload


def test_classify_prints_each_path(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)
    repo_builder.touch("tools/Gen.java")

    main(["classify", str(root)])

    assert capsys.readouterr().out.splitlines() == [
        "app/src/main/java/Foo.java -> app | app/src/main/java",
        "app/src/test/java/FooTest.java -> app | app/src/test/java",
        "tools/Gen.java -> . | -",
    ]


def test_resolve_reports_diagnostics(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)
    repo_builder.write({"app/.migration-source-roots.yaml": "sourceRoots:\n  - build/generated\n"})

    main(["resolve", str(root)])

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "app: app/src/main/java (priority)"
    assert out[1].startswith("warning: ")
    assert out[1].endswith("[generated-root]")


def test_missing_path_exits_with_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["resolve", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "Repository path not found" in capsys.readouterr().err


def test_bad_config_exits_with_error(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)
    repo_builder.write({".srcroot.yml": "unmatched: sideways\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["classify", str(root)])

    assert excinfo.value.code == 1
    assert "srcroot classify failed" in capsys.readouterr().err
