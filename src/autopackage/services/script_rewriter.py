"""Installer script version rewriting for AutoPackage."""

import re
from datetime import datetime
from typing import List

from autopackage.services.version_extractor import output_version


class ScriptRewriter:
    """Rewrites the version fields of an Inno Setup script.

    Each field is replaced by its own pass so a template missing one label
    still gets the other two updated. Only the quoted value changes.
    """

    VERSION_PATTERN = re.compile(r"MyAppVersion \"[0-9.]*\"")
    BUILD_NO_PATTERN = re.compile(r"MyAppBuildNo \"\(Build [0-9/]*\)\"")
    OUTPUT_VERSION_PATTERN = re.compile(r"OutputVersion \"[0-9.]*\"")

    FIELD_PATTERNS = {
        "MyAppVersion": VERSION_PATTERN,
        "MyAppBuildNo": BUILD_NO_PATTERN,
        "OutputVersion": OUTPUT_VERSION_PATTERN,
    }

    def rewrite(self, script_text: str, version: str, build_timestamp: datetime) -> str:
        compact_version = output_version(version)
        build_no = self.build_number(build_timestamp)

        result = self.VERSION_PATTERN.sub(lambda _: f'MyAppVersion "{version}"', script_text)
        result = self.BUILD_NO_PATTERN.sub(lambda _: f'MyAppBuildNo "{build_no}"', result)
        result = self.OUTPUT_VERSION_PATTERN.sub(
            lambda _: f'OutputVersion "{compact_version}"', result
        )
        return result

    @staticmethod
    def build_number(build_timestamp: datetime) -> str:
        return build_timestamp.strftime("(Build %m/%d/%y)")

    def changed_fields(self, before: str, after: str) -> List[str]:
        changed = []
        for name, pattern in self.FIELD_PATTERNS.items():
            if pattern.findall(before) != pattern.findall(after):
                changed.append(name)
        return changed
