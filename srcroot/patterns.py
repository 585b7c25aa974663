"""Built-in source-root and generated-root pattern catalog."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Tuple

from .matching import matches_at_boundary

# Build output directories; never a home for hand-written code. Segment-boundary
# matching makes "build/generated" cover every Gradle subtree such as
# build/generated/source/kapt, while leaving build/generated-x alone.
GENERATED_ROOT_PATTERNS: Tuple[str, ...] = (
    "target/generated-sources",
    "target/generated-test-sources",
    "build/generated",
)

# Roots an artifact may be placed into, best first.
MAIN_SOURCE_ROOT_PATTERNS: Tuple[str, ...] = (
    "src/main/java",
    "src/main/kotlin",
    "src/java",
    "src/it/java",
    "src/integrationTest/java",
)

# Roots recognised when classifying files (main and test).
DETECTION_PATTERNS: Tuple[str, ...] = (
    "src/main/java",
    "src/test/java",
    "src/java",
    "src/main/kotlin",
    "src/test/kotlin",
    "src/it/java",
    "src/integrationTest/java",
)

CUSTOM_ROOT_PRIORITY = 50
TEST_ROOT_PRIORITY = 100


def is_test_pattern(pattern: str) -> bool:
    return "test" in pattern.split("/")


@dataclass(frozen=True)
class PatternCatalog:
    """Ordered, immutable set of root patterns used by one resolution run."""

    detection: Tuple[str, ...] = DETECTION_PATTERNS
    placement: Tuple[str, ...] = MAIN_SOURCE_ROOT_PATTERNS
    generated: Tuple[str, ...] = GENERATED_ROOT_PATTERNS
    _generated_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_generated_set", frozenset(self.generated))

    def with_generated(self, extra: Iterable[str]) -> "PatternCatalog":
        """Return a copy whose generated list also contains ``extra``."""
        merged = list(self.generated)
        for pattern in extra:
            pattern = pattern.replace("\\", "/").strip("/")
            if pattern and pattern not in merged:
                merged.append(pattern)
        return replace(self, generated=tuple(merged))

    def is_generated(self, pattern: str) -> bool:
        return pattern in self._generated_set

    def is_generated_root(self, path: str) -> bool:
        """True when ``path`` lies in (or is) a generated directory."""
        return any(matches_at_boundary(path, pattern) for pattern in self.generated)

    def source_patterns(self) -> Tuple[str, ...]:
        """Detection patterns that are safe for classification."""
        return tuple(pattern for pattern in self.detection if not self.is_generated(pattern))

    def root_priority(self, pattern: str) -> int:
        """Lower is better; placement roots by rank, then custom roots, then test roots."""
        if pattern in self.placement:
            return self.placement.index(pattern)
        if is_test_pattern(pattern):
            return TEST_ROOT_PRIORITY
        return CUSTOM_ROOT_PRIORITY


DEFAULT_CATALOG = PatternCatalog()


__all__ = [
    "CUSTOM_ROOT_PRIORITY",
    "DEFAULT_CATALOG",
    "DETECTION_PATTERNS",
    "GENERATED_ROOT_PATTERNS",
    "MAIN_SOURCE_ROOT_PATTERNS",
    "PatternCatalog",
    "TEST_ROOT_PRIORITY",
    "is_test_pattern",
]
