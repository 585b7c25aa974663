from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

import pytest

from srcroot.orchestrator import ResolutionRun
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def make_run() -> Callable[..., ResolutionRun]:
    """Build a run from paths and `path -> text` fragments, ingested in order."""

    def _make(
        paths: Iterable[str] = (),
        fragments: Optional[Mapping[str, str]] = None,
        **kwargs: object,
    ) -> ResolutionRun:
        run = ResolutionRun(**kwargs)  # type: ignore[arg-type]
        run.ingest_paths(paths)
        for path, text in (fragments or {}).items():
            run.ingest_fragment(path, text)
        return run

    return _make
