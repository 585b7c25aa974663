"""Repository scanning utilities that feed a resolution run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .config import ResolverConfig, load_config
from .logging import get_logger
from .orchestrator import ResolutionRun

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".gradle",
    ".idea",
    ".mvn",
    ".venv",
    "node_modules",
    "__pycache__",
}

_LOGGER = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .srcroot.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


@dataclass
class ScanResult:
    """Source paths and configuration fragments found under a repository root."""

    root: str
    sources: List[str] = field(default_factory=list)
    fragments: Dict[str, str] = field(default_factory=dict)


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    has_slash = "/" in pattern
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash=has_slash,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, config: ResolverConfig) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in config.exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


class RepoScanner:
    """Walks a repository and collects what a resolution run needs."""

    def __init__(self, config: Optional[ResolverConfig] = None) -> None:
        self._config = config

    def scan(self, root: str) -> ScanResult:
        """Return source paths and fragment contents under ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        config = self._config or load_config(root_path)
        suffixes = tuple(config.source_suffixes)
        rules = _load_ignore_rules(root_path, config)

        result = ScanResult(root=str(root_path))
        for rel_path in _iter_files(root_path, rules):
            name = rel_path.rsplit("/", 1)[-1]
            if name == config.fragment_name:
                try:
                    text = (root_path / rel_path).read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    _LOGGER.warning("Skipping unreadable configuration %s: %s", rel_path, exc)
                    continue
                result.fragments[rel_path] = text
            elif name.lower().endswith(suffixes):
                result.sources.append(rel_path)

        _LOGGER.debug(
            "Scanned %s: %d source file(s), %d configuration fragment(s)",
            root_path,
            len(result.sources),
            len(result.fragments),
        )
        return result


def feed_run(result: ScanResult, run: ResolutionRun) -> ResolutionRun:
    """Ingest every path and fragment of ``result`` into ``run``."""
    run.ingest_paths(result.sources)
    for path, text in result.fragments.items():
        run.ingest_fragment(path, text)
    return run


def resolve_repository(root: str, config: Optional[ResolverConfig] = None) -> ResolutionRun:
    """Scan ``root`` and return a committed run for it."""
    if config is None:
        config = load_config(Path(root).expanduser())
    result = RepoScanner(config).scan(root)
    run = feed_run(result, ResolutionRun.from_config(config))
    run.commit()
    return run


__all__ = ["IgnoreRule", "RepoScanner", "ScanResult", "feed_run", "resolve_repository"]
