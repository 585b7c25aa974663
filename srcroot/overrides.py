"""Per-module source-root overrides read from configuration fragments.

A fragment is a small file (``.migration-source-roots.yaml`` by default) that lists
extra source roots for the module it lives in::

    # services/order/.migration-source-roots.yaml
    sourceRoots:
      - src/main/generated-by-hand
      - "custom/src"

Fragments are stored verbatim while a run accumulates input and parsed only when
the run commits, so a fragment seen after the files it governs still applies to
them. The format is deliberately a flat line-oriented list rather than YAML.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .logging import get_logger
from .matching import find_segment_boundary_match, normalize_path
from .models import Diagnostic
from .patterns import DEFAULT_CATALOG, PatternCatalog

SOURCE_ROOTS_KEY = "sourceRoots"

REDUNDANT_MODULE_PREFIX = "redundant-module-prefix"
GENERATED_ROOT = "generated-root"
NO_SOURCE_ROOTS = "no-source-roots"
ORPHAN_OVERRIDE = "orphan-override"

_LOGGER = get_logger("overrides")


class OverrideSet:
    """Module prefix -> ordered, duplicate-free override patterns."""

    def __init__(self) -> None:
        # dict keys double as an insertion-ordered set
        self._by_module: Dict[str, Dict[str, None]] = {}

    def add(self, module: str, pattern: str) -> bool:
        patterns = self._by_module.setdefault(module, {})
        if pattern in patterns:
            return False
        patterns[pattern] = None
        return True

    def patterns_for(self, module: str) -> Tuple[str, ...]:
        return tuple(self._by_module.get(module, ()))

    def modules(self) -> Tuple[str, ...]:
        return tuple(sorted(self._by_module))

    def items(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        for module in self.modules():
            yield module, self.patterns_for(module)

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return {module: patterns for module, patterns in self.items() if patterns}

    def __contains__(self, module: object) -> bool:
        return bool(self._by_module.get(module))  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return any(self._by_module.values())

    def __len__(self) -> int:
        return sum(len(patterns) for patterns in self._by_module.values())


def _unquote(value: str) -> str:
    quote = value[:1]
    if quote in {'"', "'"}:
        end = value.find(quote, 1)
        return value[1:end] if end > 0 else value
    return value.split(" #", 1)[0].strip()


def _is_key_line(raw: str, stripped: str, key: str) -> bool:
    if raw[:1].isspace():
        return False
    head = stripped.split("#", 1)[0].strip()
    return head == f"{key}:"


def parse_fragment(text: str, key: str = SOURCE_ROOTS_KEY) -> List[str]:
    """Return the raw list items found under ``key:`` in ``text``.

    Malformed or empty input simply yields an empty list.
    """
    items: List[str] = []
    in_list = False
    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if _is_key_line(raw, stripped, key):
            in_list = True
            continue
        if not in_list:
            continue
        if stripped == "-" or stripped.startswith("- "):
            value = _unquote(stripped[1:].strip())
            if value:
                items.append(value)
        else:
            in_list = False
    return items


def normalize_override(item: str) -> str:
    return normalize_path(item).rstrip("/")


def _has_content(text: str) -> bool:
    return any(
        line.strip() and not line.strip().startswith("#") for line in text.splitlines()
    )


class ConfigurationStore:
    """Accumulates raw fragments and turns them into an :class:`OverrideSet`."""

    def __init__(self, catalog: PatternCatalog = DEFAULT_CATALOG) -> None:
        self.catalog = catalog
        self.overrides = OverrideSet()
        self.diagnostics: List[Diagnostic] = []
        self._pending: Dict[str, str] = {}
        self._loaded = False

    @property
    def fragment_count(self) -> int:
        return len(self._pending)

    def add_fragment(self, path: str, text: str) -> None:
        self._pending[normalize_path(path)] = text or ""

    def load(self, fragment_module: Callable[[str], str]) -> OverrideSet:
        """Parse every pending fragment once, in path order."""
        if self._loaded:
            return self.overrides
        self._loaded = True
        for path in sorted(self._pending):
            self._load_fragment(path, self._pending[path], fragment_module(path))
        return self.overrides

    def _load_fragment(self, path: str, text: str, module: str) -> None:
        items = parse_fragment(text)
        if not items:
            if _has_content(text):
                self._report(
                    NO_SOURCE_ROOTS,
                    f"Configuration '{path}' has no '{SOURCE_ROOTS_KEY}:' entries; it was ignored.",
                    path,
                )
            return

        for raw_item in items:
            item = normalize_override(raw_item)
            if not item:
                continue
            diagnostic = self.validate(item, path)
            if diagnostic is not None:
                self._record(diagnostic)
                continue
            if self.overrides.add(module, item):
                _LOGGER.debug("Override '%s' registered for module '%s'", item, module)

    def validate(self, item: str, source: str) -> Optional[Diagnostic]:
        """Return a diagnostic when ``item`` may not be used as an override."""
        for pattern in self.catalog.source_patterns():
            if find_segment_boundary_match(item, pattern) > 0:
                return Diagnostic(
                    code=REDUNDANT_MODULE_PREFIX,
                    message=(
                        f"Custom source root '{item}' contains a module prefix before "
                        f"standard pattern '{pattern}'. It is ignored; use '{pattern}' instead."
                    ),
                    source=source,
                    item=item,
                )
        if self.catalog.is_generated_root(item):
            return Diagnostic(
                code=GENERATED_ROOT,
                message=(
                    f"Custom source root '{item}' is a generated source directory "
                    "(build output, cleaned on build). It is ignored."
                ),
                source=source,
                item=item,
            )
        return None

    def report_orphans(self, known_modules: set[str]) -> None:
        """Flag override modules that no classified path belongs to."""
        for module, patterns in self.overrides.items():
            if patterns and module not in known_modules:
                self._report(
                    ORPHAN_OVERRIDE,
                    f"Overrides for module '{module or '.'}' match no source file; "
                    "place the configuration next to the module's build file.",
                    module,
                )

    def _report(self, code: str, message: str, source: str, item: Optional[str] = None) -> None:
        self._record(Diagnostic(code=code, message=message, source=source, item=item))

    def _record(self, diagnostic: Diagnostic) -> None:
        _LOGGER.warning("%s (%s)", diagnostic.message, diagnostic.source)
        self.diagnostics.append(diagnostic)


__all__ = [
    "ConfigurationStore",
    "GENERATED_ROOT",
    "NO_SOURCE_ROOTS",
    "ORPHAN_OVERRIDE",
    "OverrideSet",
    "REDUNDANT_MODULE_PREFIX",
    "SOURCE_ROOTS_KEY",
    "normalize_override",
    "parse_fragment",
]
