"""Project layout resolution for AutoPackage."""

import glob
import os
from typing import Optional

from autopackage.constants import (
    ARTIFACT_FOLDER_RELPATH,
    METADATA_RELPATH,
    PACKAGING_SCRIPT_RELPATH,
    SCRIPT_TEMPLATE_RELPATH,
    SIGN_TOOL_GRACE_SECONDS,
    UPLOAD_URL,
)
from autopackage.errors import ReleaseError
from autopackage.models import ReleaseConfig


class ProjectLayout:
    """Maps a solution/project pair onto the release folder conventions.

    The installer files live next to the solution folder::

        <source root>/
            <solution dir>/App.sln
            package/ProVersion/IssFiles/version.iss
            package/ProVersion/Pack_normal.bat
            package/ProVersion/PackedFiles/
    """

    def __init__(self, logger):
        self.logger = logger

    def discover_solution(self, directory: str) -> Optional[str]:
        candidates = sorted(glob.glob(os.path.join(directory, "*.sln")))
        if not candidates:
            return None
        if len(candidates) > 1:
            names = ", ".join(os.path.basename(item) for item in candidates)
            raise ReleaseError(f"Several solutions found ({names}). Pass --solution explicitly.")
        return candidates[0]

    def discover_project(self, solution_root: Optional[str]) -> Optional[str]:
        if not solution_root:
            return None
        candidates = sorted(
            glob.glob(os.path.join(solution_root, "**", "*.csproj"), recursive=True)
            + glob.glob(os.path.join(solution_root, "**", "*.vbproj"), recursive=True)
        )
        if not candidates:
            self.logger.warning("No project file found under %s.", solution_root)
            return None
        if len(candidates) > 1:
            names = ", ".join(os.path.relpath(item, solution_root) for item in candidates)
            raise ReleaseError(f"Several projects found ({names}). Pass --project explicitly.")
        self.logger.debug("Using project %s", candidates[0])
        return candidates[0]

    @staticmethod
    def to_directory(path: Optional[str]) -> Optional[str]:
        """Accept a .sln/.csproj file or its folder and return the folder."""
        if not path:
            return None
        absolute = os.path.abspath(path)
        if os.path.isdir(absolute):
            return absolute
        return os.path.dirname(absolute)

    @staticmethod
    def _resolve(root: Optional[str], override: Optional[str], default: str) -> Optional[str]:
        value = override or default
        if os.path.isabs(value):
            return os.path.normpath(value)
        if not root:
            return None
        return os.path.normpath(os.path.join(root, value))

    def build_config(
        self,
        solution: Optional[str],
        project: Optional[str],
        metadata_file: Optional[str] = None,
        script_template: Optional[str] = None,
        packaging_script: Optional[str] = None,
        artifact_folder: Optional[str] = None,
        sign_tool: Optional[str] = None,
        open_artifact_folder: bool = False,
        upload_to_web: bool = False,
        upload_url: Optional[str] = None,
        sign_tool_grace_seconds: float = SIGN_TOOL_GRACE_SECONDS,
        packaging_timeout_seconds: Optional[float] = None,
    ) -> ReleaseConfig:
        solution_root = self.to_directory(solution)
        project_root = self.to_directory(project)
        source_root = os.path.dirname(solution_root) if solution_root else None

        config = ReleaseConfig(
            solution_root=solution_root,
            project_root=project_root,
            source_root=source_root,
            metadata_file=self._resolve(project_root, metadata_file, METADATA_RELPATH),
            script_template=self._resolve(source_root, script_template, SCRIPT_TEMPLATE_RELPATH),
            packaging_script=self._resolve(
                source_root, packaging_script, PACKAGING_SCRIPT_RELPATH
            ),
            artifact_folder=self._resolve(source_root, artifact_folder, ARTIFACT_FOLDER_RELPATH),
            sign_tool=os.path.abspath(sign_tool) if sign_tool else None,
            open_artifact_folder=open_artifact_folder,
            upload_to_web=upload_to_web,
            upload_url=upload_url or UPLOAD_URL,
            sign_tool_grace_seconds=sign_tool_grace_seconds,
            packaging_timeout_seconds=packaging_timeout_seconds,
        )
        self.logger.debug("Resolved release config: %s", config)
        return config
