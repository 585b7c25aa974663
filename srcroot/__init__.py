"""Resolve build modules and target source roots in multi-module source trees."""

from .matching import NOT_FOUND, find_segment_boundary_match
from .models import ArtifactSpec, Classification, DecisionReason, Diagnostic, TargetDecision
from .modules import ModuleResolver, UnmatchedPolicy
from .orchestrator import ContractViolationError, ResolutionRun, RunState
from .patterns import DEFAULT_CATALOG, PatternCatalog

__version__ = "0.1.0"

__all__ = [
    "ArtifactSpec",
    "Classification",
    "ContractViolationError",
    "DEFAULT_CATALOG",
    "DecisionReason",
    "Diagnostic",
    "ModuleResolver",
    "NOT_FOUND",
    "PatternCatalog",
    "ResolutionRun",
    "RunState",
    "TargetDecision",
    "UnmatchedPolicy",
    "find_segment_boundary_match",
]
