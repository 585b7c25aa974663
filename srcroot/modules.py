"""Module prefix resolution for ingested paths."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .matching import NOT_FOUND, find_segment_boundary_match, parent_directory, prefix_before
from .overrides import OverrideSet
from .patterns import DEFAULT_CATALOG, PatternCatalog

DEFAULT_FRAGMENT_NAME = ".migration-source-roots.yaml"


class UnmatchedPolicy(str, Enum):
    """Module assigned to a source file that matches no root pattern."""

    ROOT = "root"
    PARENT = "parent"


class ModuleResolver:
    """Maps a path to the prefix of the build module that owns it.

    Resolution order, first hit wins:

    1. a built-in source-root pattern (``app/src/main/java/Foo.java`` -> ``app``);
    2. an override pattern from the committed :class:`OverrideSet`;
    3. for configuration fragments, the fragment's own directory;
    4. the unmatched policy (repository root by default).

    The resolver holds no mutable state; with the same override set it always
    returns the same answer for the same path.
    """

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        overrides: Optional[OverrideSet] = None,
        *,
        fragment_name: str = DEFAULT_FRAGMENT_NAME,
        unmatched: UnmatchedPolicy = UnmatchedPolicy.ROOT,
    ) -> None:
        self.catalog = catalog
        self.overrides = overrides if overrides is not None else OverrideSet()
        self.fragment_name = fragment_name
        self.unmatched = unmatched

    def is_fragment(self, path: str) -> bool:
        return path.rsplit("/", 1)[-1] == self.fragment_name

    def from_builtins(self, path: str) -> Optional[str]:
        for pattern in self.catalog.source_patterns():
            index = find_segment_boundary_match(path, pattern)
            if index == NOT_FOUND:
                continue
            prefix = prefix_before(path, index)
            # e.g. target/generated-sources/src/main/java is not a module root
            if prefix and self.catalog.is_generated_root(prefix):
                continue
            return prefix
        return None

    def from_overrides(self, path: str) -> Optional[str]:
        # Prefer an override declared by the module the match points at, so
        # that one module's custom roots do not claim a sibling's files.
        first: Optional[str] = None
        for module, patterns in self.overrides.items():
            for pattern in patterns:
                index = find_segment_boundary_match(path, pattern)
                if index == NOT_FOUND:
                    continue
                prefix = prefix_before(path, index)
                if prefix == module:
                    return prefix
                if first is None:
                    first = prefix
        return first

    def fragment_module(self, path: str) -> str:
        """Module a configuration fragment declares overrides for.

        Never consults overrides, so fragment parse order cannot matter.
        """
        prefix = self.from_builtins(path)
        if prefix is not None:
            return prefix
        return parent_directory(path)

    def resolve(self, path: str) -> str:
        prefix = self.from_builtins(path)
        if prefix is not None:
            return prefix
        prefix = self.from_overrides(path)
        if prefix is not None:
            return prefix
        if self.is_fragment(path) or self.unmatched is UnmatchedPolicy.PARENT:
            return parent_directory(path)
        return ""


__all__ = ["DEFAULT_FRAGMENT_NAME", "ModuleResolver", "UnmatchedPolicy"]
