"""Plain-data and text renderings of a committed run."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from .orchestrator import ResolutionRun


def _module_label(module: str) -> str:
    return module or "."


def decisions_payload(run: ResolutionRun) -> Dict[str, Any]:
    """Return a JSON-serialisable summary of decisions and diagnostics."""
    decisions = [
        {
            "module": decision.module,
            "root": decision.root,
            "reason": decision.reason.value,
            "places_artifact": decision.places_artifact,
        }
        for decision in run.decisions.values()
    ]
    payload: Dict[str, Any] = {
        "decisions": decisions,
        "detected_roots": {module: list(roots) for module, roots in run.detected_roots.items()},
        "overrides": {module: list(patterns) for module, patterns in run.overrides.items()},
        "diagnostics": [asdict(diagnostic) for diagnostic in run.diagnostics],
    }
    if run.artifact is not None:
        payload["planned_artifacts"] = run.planned_artifacts()
    return payload


def classifications_payload(run: ResolutionRun) -> List[Dict[str, Any]]:
    return [asdict(item) for item in run.classifications.values()]


def render_decisions(run: ResolutionRun) -> List[str]:
    lines = [
        f"{_module_label(decision.module)}: {decision.root} ({decision.reason.value})"
        for decision in run.decisions.values()
    ]
    if run.artifact is not None:
        lines.extend(f"  + {path}" for path in run.planned_artifacts())
    lines.extend(
        f"warning: {diagnostic.message} [{diagnostic.code}]" for diagnostic in run.diagnostics
    )
    return lines


def render_classifications(run: ResolutionRun) -> List[str]:
    return [
        f"{item.path} -> {_module_label(item.module)} | {item.root or '-'}"
        for item in run.classifications.values()
    ]


__all__ = [
    "classifications_payload",
    "decisions_payload",
    "render_classifications",
    "render_decisions",
]
