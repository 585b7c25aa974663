"""Deterministic per-module target root selection."""

from __future__ import annotations

from typing import AbstractSet, Dict, Iterable, Mapping, Optional, Tuple

from .logging import get_logger
from .matching import join_root, relative_to_module
from .models import DecisionReason, TargetDecision
from .overrides import OverrideSet
from .patterns import DEFAULT_CATALOG, PatternCatalog

DEFAULT_TARGET_ROOT = "src/main/java"

_LOGGER = get_logger("selection")


class RootSelector:
    """Reduces each module's detected roots to the single root an artifact goes in.

    Declared overrides win in their declared order, as long as files were actually
    found under them. Otherwise roots are ranked by the catalog priority
    (main Java, main Kotlin, legacy, integration tests, custom, test) with ties
    broken by the root path, so scan order never changes the outcome.
    """

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        overrides: Optional[OverrideSet] = None,
        *,
        default_root: str = DEFAULT_TARGET_ROOT,
    ) -> None:
        self.catalog = catalog
        self.overrides = overrides if overrides is not None else OverrideSet()
        self.default_root = default_root

    def rank(self, root: str, module: str) -> Tuple[int, str]:
        return self.catalog.root_priority(relative_to_module(root, module)), root

    def select(self, module: str, roots: Iterable[str]) -> Optional[Tuple[str, DecisionReason]]:
        available = set(roots)
        if not available:
            return None

        for pattern in self.overrides.patterns_for(module):
            if self.catalog.is_generated_root(pattern):
                continue
            expected = join_root(module, pattern)
            if expected in available:
                return expected, DecisionReason.OVERRIDE

        best = min(available, key=lambda root: self.rank(root, module))
        return best, DecisionReason.PRIORITY

    def decide(
        self,
        detected: Mapping[str, Iterable[str]],
        roots_with_artifact: AbstractSet[str] = frozenset(),
    ) -> Dict[str, TargetDecision]:
        decisions: Dict[str, TargetDecision] = {}
        for module in sorted(detected):
            choice = self.select(module, detected[module])
            if choice is None:
                continue
            root, reason = choice
            if root in roots_with_artifact:
                _LOGGER.debug("Module '%s' already has the artifact in %s", module, root)
                reason = DecisionReason.ALREADY_PRESENT
            decisions[module] = TargetDecision(module=module, root=root, reason=reason)

        if not decisions and not roots_with_artifact:
            _LOGGER.debug("No source roots detected; falling back to %s", self.default_root)
            decisions[""] = TargetDecision(
                module="", root=self.default_root, reason=DecisionReason.DEFAULT
            )
        return decisions


__all__ = ["DEFAULT_TARGET_ROOT", "RootSelector"]
