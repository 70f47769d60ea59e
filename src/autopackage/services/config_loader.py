"""Configuration loader for AutoPackage."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from autopackage.errors import ReleaseError

BOOL = "bool"
NUMBER = "number"
PATH = "path"
TEXT = "str"


class ConfigLoader:
    """Loads and type-checks the YAML file that supplies CLI defaults.

    ``path`` values are resolved against the config file's folder. Layout
    overrides (``script_template`` and friends) stay relative so they keep
    resolving against the solution and project folders.
    """

    KEY_TYPES = {
        "solution": PATH,
        "project": PATH,
        "metadata_file": TEXT,
        "script_template": TEXT,
        "packaging_script": TEXT,
        "artifact_folder": TEXT,
        "sign_tool": PATH,
        "sign_tool_grace_seconds": NUMBER,
        "open_artifact_folder": BOOL,
        "upload_to_web": BOOL,
        "upload_url": TEXT,
        "packaging_timeout_minutes": NUMBER,
        "verbose": BOOL,
        "log_file": PATH,
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ReleaseError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ReleaseError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ReleaseError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(str(key) for key in set(parsed.keys()) - set(self.KEY_TYPES))
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ReleaseError(f"Unknown configuration keys: {unknown_list}")

        base_dir = str(path.resolve().parent)
        return {
            key: self._coerce(key, value, base_dir)
            for key, value in parsed.items()
            if value is not None
        }

    def _coerce(self, key: str, value: Any, base_dir: str) -> Any:
        kind = self.KEY_TYPES[key]

        if kind == BOOL:
            if not isinstance(value, bool):
                raise ReleaseError(f"Config key '{key}' must be true or false, got {value!r}.")
            return value

        if kind == NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ReleaseError(f"Config key '{key}' must be a number, got {value!r}.")
            if value < 0:
                raise ReleaseError(f"Config key '{key}' must not be negative.")
            return float(value)

        if not isinstance(value, str) or not value.strip():
            raise ReleaseError(f"Config key '{key}' must be a non-empty string, got {value!r}.")

        if kind == PATH:
            expanded = os.path.expanduser(value)
            if not os.path.isabs(expanded):
                expanded = os.path.join(base_dir, expanded)
            return os.path.normpath(expanded)
        return value
