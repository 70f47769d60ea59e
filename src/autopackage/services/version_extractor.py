"""Assembly version extraction for AutoPackage."""

import re
from typing import Optional

from packaging.version import InvalidVersion, Version

from autopackage.errors import ReleaseError
from autopackage.errors_catalog import actionable_error


class VersionExtractor:
    """Reads the assembly version declared in project metadata."""

    # Matches [assembly: AssemblyVersion("1.2.3.4")] and the VB <Assembly: ...> form.
    DECLARATION_PATTERN = re.compile(
        r"[\[<]\s*(?i:assembly)\s*:\s*AssemblyVersion\(\s*\"([0-9.]*)\"\s*\)\s*[\]>]"
    )
    DOTTED_PATTERN = re.compile(r"\d+(?:\.\d+)+")

    def __init__(self, logger=None):
        self.logger = logger

    def extract_version(self, metadata_text: str) -> Optional[str]:
        match = self.DECLARATION_PATTERN.search(metadata_text)
        if not match:
            self._debug("No AssemblyVersion declaration found.")
            return None

        candidate = match.group(1)
        if not self.DOTTED_PATTERN.fullmatch(candidate):
            self._debug("Ignoring malformed assembly version: %r", candidate)
            return None

        try:
            Version(candidate)
        except InvalidVersion:
            self._debug("Ignoring unparsable assembly version: %r", candidate)
            return None

        return candidate

    def read_version(self, metadata_file: str) -> Optional[str]:
        try:
            with open(metadata_file, "r", encoding="utf-8-sig", errors="replace") as file_obj:
                text = file_obj.read()
        except OSError as exc:
            raise ReleaseError(f"Could not read metadata file '{metadata_file}': {exc}") from exc
        return self.extract_version(text)

    def _debug(self, message: str, *args):
        if self.logger:
            self.logger.debug(message, *args)


def output_version(version: str) -> str:
    """Drop the revision segment and squash the rest: ``1.4.4.13`` -> ``144``."""
    if "." not in version:
        raise ReleaseError(actionable_error("invalid_version", version=version))
    return version.rsplit(".", 1)[0].replace(".", "")
