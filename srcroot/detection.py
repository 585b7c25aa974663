"""Source-root detection for classified paths."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .matching import find_segment_boundary_match, join_root
from .overrides import OverrideSet
from .patterns import DEFAULT_CATALOG, PatternCatalog


class RootDetector:
    """Finds the most specific source root a path lives in, within its module."""

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        overrides: Optional[OverrideSet] = None,
    ) -> None:
        self.catalog = catalog
        self.overrides = overrides if overrides is not None else OverrideSet()
        self._candidates: Dict[str, Tuple[str, ...]] = {}

    def candidates(self, module: str) -> Tuple[str, ...]:
        """Built-in and module override patterns, longest first then alphabetical."""
        cached = self._candidates.get(module)
        if cached is not None:
            return cached
        combined = dict.fromkeys(self.catalog.source_patterns())
        for pattern in self.overrides.patterns_for(module):
            if not self.catalog.is_generated_root(pattern):
                combined[pattern] = None
        ordered = tuple(sorted(combined, key=lambda pattern: (-len(pattern), pattern)))
        self._candidates[module] = ordered
        return ordered

    def detect(self, path: str, module: str) -> Optional[str]:
        for pattern in self.candidates(module):
            root = join_root(module, pattern)
            if find_segment_boundary_match(path, root) != 0:
                continue
            # only the root itself decides; package directories below it do not
            if self.catalog.is_generated_root(root):
                return None
            return root
        return None


__all__ = ["RootDetector"]
