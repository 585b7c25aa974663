"""Core data models shared across srcroot components."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DecisionReason(str, Enum):
    """Why a module ended up with its target root."""

    OVERRIDE = "override"
    PRIORITY = "priority"
    DEFAULT = "default"
    ALREADY_PRESENT = "already-present"


@dataclass(frozen=True)
class Diagnostic:
    """Advisory message surfaced to the user; never fatal."""

    code: str
    message: str
    source: str
    item: Optional[str] = None


@dataclass(frozen=True)
class Classification:
    """Module and source root computed for one ingested path."""

    path: str
    module: str
    root: Optional[str]


@dataclass(frozen=True)
class TargetDecision:
    """Final root chosen for a module."""

    module: str
    root: str
    reason: DecisionReason

    @property
    def places_artifact(self) -> bool:
        return self.reason is not DecisionReason.ALREADY_PRESENT


@dataclass(frozen=True)
class ArtifactSpec:
    """Describes the file a host generates into each chosen root."""

    file_name: str
    package: str = ""

    @property
    def relative_path(self) -> str:
        package_dir = self.package.replace(".", "/").strip("/")
        return f"{package_dir}/{self.file_name}" if package_dir else self.file_name

    def path_in(self, root: str) -> str:
        return f"{root}/{self.relative_path}" if root else self.relative_path
