"""Actionable error catalog for AutoPackage."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "no_solution_open": {
        "what": "Please open a solution!",
        "next": "Pass `--solution` or run from a directory containing a `.sln` file.",
    },
    "script_update_failed": {
        "what": "Change version.iss error! Could not update {path}.",
        "next": "Check that the installer script is readable and writable, then retry.",
    },
    "invalid_version": {
        "what": "Version `{version}` has no revision segment to drop.",
        "next": "Declare a dotted version such as `1.4.4.13` in the assembly metadata.",
    },
    "packaging_script_not_found": {
        "what": "Packaging script not found: {path}",
        "next": "Set `packaging_script` in the config or restore the script in the package folder.",
    },
    "packaging_launch_failed": {
        "what": "Could not start packaging script {path}: {error}",
        "next": "Make sure the script is executable on this platform.",
    },
    "packaging_failed": {
        "what": "Packaging script exited with code {returncode}.",
        "next": "Run {path} manually to inspect its output.",
    },
    "packaging_timed_out": {
        "what": "Packaging script did not finish within {timeout} seconds.",
        "next": "Increase `--packaging-timeout-minutes` or inspect the script for prompts.",
    },
    "sign_tool_launch_failed": {
        "what": "Could not start signing tool {path}: {error}",
        "next": "Start the signing tool manually before the packaging script signs files.",
    },
    "open_target_failed": {
        "what": "Could not open {target}: {error}",
        "next": "Open it manually once packaging is finished.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
