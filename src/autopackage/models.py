"""Shared domain models for AutoPackage."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .constants import SIGN_TOOL_GRACE_SECONDS


class ReleaseOutcome(str, Enum):
    NO_SOLUTION_OPEN = "no_solution_open"
    NO_VERSION_FILE_FOUND = "no_version_file_found"
    SCRIPT_UPDATE_FAILED = "script_update_failed"
    PACKAGING_FAILED = "packaging_failed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ReleaseConfig:
    """Resolved paths and switches for a single release invocation."""

    solution_root: Optional[str]
    project_root: Optional[str]
    source_root: Optional[str]
    metadata_file: Optional[str]
    script_template: Optional[str]
    packaging_script: Optional[str]
    artifact_folder: Optional[str]
    sign_tool: Optional[str] = None
    open_artifact_folder: bool = False
    upload_to_web: bool = False
    upload_url: str = ""
    sign_tool_grace_seconds: float = SIGN_TOOL_GRACE_SECONDS
    packaging_timeout_seconds: Optional[float] = None

    @property
    def has_project_context(self) -> bool:
        return bool(self.solution_root)


@dataclass
class ReleaseReport:
    """Result of a release run, filled in as the pipeline progresses."""

    outcome: ReleaseOutcome
    sync_outcome: Optional[ReleaseOutcome] = None
    version: Optional[str] = None
    packaging_returncode: Optional[int] = None
    warnings: List[str] = field(default_factory=list)
