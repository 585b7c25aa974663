"""Two-phase resolution run: accumulate inputs, then commit once."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .detection import RootDetector
from .logging import get_logger
from .matching import normalize_path
from .models import ArtifactSpec, Classification, Diagnostic, TargetDecision
from .modules import DEFAULT_FRAGMENT_NAME, ModuleResolver, UnmatchedPolicy
from .overrides import ConfigurationStore, OverrideSet, normalize_override
from .patterns import DEFAULT_CATALOG, PatternCatalog
from .selection import DEFAULT_TARGET_ROOT, RootSelector

if TYPE_CHECKING:
    from .config import ResolverConfig


class RunState(str, Enum):
    ACCUMULATING = "accumulating"
    COMMITTED = "committed"


class ContractViolationError(RuntimeError):
    """Raised in strict mode when a run is used out of order."""


class ResolutionRun:
    """Owns every accumulator for one resolution pass over a source tree.

    While accumulating, paths and configuration fragments may arrive in any order
    and nothing is interpreted. :meth:`commit` then parses fragments, classifies
    every path and selects one target root per module, exactly once. Results are
    read-only afterwards; reading any of them commits the run first.
    """

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        *,
        fragment_name: str = DEFAULT_FRAGMENT_NAME,
        artifact: Optional[ArtifactSpec] = None,
        default_root: str = DEFAULT_TARGET_ROOT,
        unmatched: UnmatchedPolicy = UnmatchedPolicy.ROOT,
        strict: bool = __debug__,
    ) -> None:
        self.catalog = catalog
        self.fragment_name = fragment_name
        self.artifact = artifact
        self.default_root = default_root
        self.unmatched = unmatched
        self.strict = strict
        self.logger = get_logger("run")

        self._state = RunState.ACCUMULATING
        self._committing = False
        self._store = ConfigurationStore(catalog)
        self._paths: Dict[str, None] = {}
        self._declared_artifact_roots: Set[str] = set()
        self._resolver = self._build_resolver(self._store.overrides)

        self._classifications: Dict[str, Classification] = {}
        self._detected: Dict[str, Tuple[str, ...]] = {}
        self._roots_with_artifact: FrozenSet[str] = frozenset()
        self._decisions: Dict[str, TargetDecision] = {}

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "ResolutionRun":
        catalog = DEFAULT_CATALOG.with_generated(config.generated_patterns)
        artifact = config.artifact.to_spec() if config.artifact is not None else None
        return cls(
            catalog,
            fragment_name=config.fragment_name,
            artifact=artifact,
            default_root=config.default_root,
            unmatched=config.unmatched,
            strict=config.strict,
        )

    @property
    def state(self) -> RunState:
        return self._state

    # Phase 1: accumulation

    def ingest_path(self, path: str) -> None:
        if not self._accepting("path", path):
            return
        self._paths[normalize_path(path)] = None

    def ingest_paths(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.ingest_path(path)

    def ingest_fragment(self, path: str, text: str) -> None:
        if not self._accepting("configuration", path):
            return
        self._store.add_fragment(path, text)

    def mark_artifact_present(self, root: str) -> None:
        """Record a root the caller knows already holds the artifact."""
        if not self._accepting("artifact root", root):
            return
        self._declared_artifact_roots.add(normalize_override(root))

    def _accepting(self, kind: str, value: str) -> bool:
        if self._state is RunState.ACCUMULATING and not self._committing:
            return True
        message = f"Cannot ingest {kind} '{value}' after the run has committed"
        if self.strict:
            raise ContractViolationError(message)
        self.logger.warning("%s; ignoring it.", message)
        return False

    # Phase 2: commit

    def commit(self) -> None:
        if self._state is RunState.COMMITTED:
            return
        if self._committing:
            if self.strict:
                raise ContractViolationError("Commit re-entered while already committing")
            return
        self._committing = True
        try:
            self._commit()
        finally:
            self._committing = False

    def _commit(self) -> None:
        overrides = self._store.load(self._resolver.fragment_module)
        resolver = self._build_resolver(overrides)
        detector = RootDetector(self.catalog, overrides)

        classifications: Dict[str, Classification] = {}
        detected: Dict[str, Set[str]] = {}
        for path in sorted(self._paths):
            if resolver.is_fragment(path):
                continue
            module = resolver.resolve(path)
            root = detector.detect(path, module)
            classifications[path] = Classification(path=path, module=module, root=root)
            if root is not None:
                detected.setdefault(module, set()).add(root)
            self.logger.debug("%s -> module '%s', root %s", path, module, root)

        roots_with_artifact = set(self._declared_artifact_roots)
        if self.artifact is not None:
            for item in classifications.values():
                if item.root is not None and item.path == self.artifact.path_in(item.root):
                    roots_with_artifact.add(item.root)

        self._store.report_orphans({item.module for item in classifications.values()})

        detected_roots = {module: tuple(sorted(roots)) for module, roots in sorted(detected.items())}
        selector = RootSelector(self.catalog, overrides, default_root=self.default_root)
        decisions = selector.decide(detected_roots, roots_with_artifact)

        self._resolver = resolver
        self._classifications = classifications
        self._detected = detected_roots
        self._roots_with_artifact = frozenset(roots_with_artifact)
        self._decisions = decisions
        self._state = RunState.COMMITTED
        self.logger.info(
            "Resolved %d module(s) from %d path(s) and %d configuration fragment(s)",
            len(decisions),
            len(classifications),
            self._store.fragment_count,
        )

    def _build_resolver(self, overrides: OverrideSet) -> ModuleResolver:
        return ModuleResolver(
            self.catalog,
            overrides,
            fragment_name=self.fragment_name,
            unmatched=self.unmatched,
        )

    # Queries

    def resolve_module_prefix(self, path: str) -> str:
        """Module prefix for ``path``; authoritative only once committed."""
        normalised = normalize_path(path)
        known = self._classifications.get(normalised)
        if known is not None:
            return known.module
        return self._resolver.resolve(normalised)

    @property
    def classifications(self) -> Dict[str, Classification]:
        self.commit()
        return dict(self._classifications)

    @property
    def detected_roots(self) -> Dict[str, Tuple[str, ...]]:
        self.commit()
        return dict(self._detected)

    @property
    def overrides(self) -> Dict[str, Tuple[str, ...]]:
        self.commit()
        return self._store.overrides.as_dict()

    @property
    def roots_with_artifact(self) -> FrozenSet[str]:
        self.commit()
        return self._roots_with_artifact

    @property
    def decisions(self) -> Dict[str, TargetDecision]:
        self.commit()
        return dict(self._decisions)

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        self.commit()
        return tuple(self._store.diagnostics)

    def targets(self) -> Dict[str, str]:
        """Module -> root for every module that still needs the artifact."""
        return {
            module: decision.root
            for module, decision in self.decisions.items()
            if decision.places_artifact
        }

    def planned_artifacts(self) -> List[str]:
        if self.artifact is None:
            raise ValueError("No artifact configured for this run")
        return sorted(self.artifact.path_in(root) for root in self.targets().values())


__all__ = ["ContractViolationError", "ResolutionRun", "RunState"]
