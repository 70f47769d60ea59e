"""Default locations and timings for AutoPackage."""

DEFAULT_CONFIG_FILE = ".autopackage.yml"

METADATA_RELPATH = "Properties/AssemblyInfo.cs"
SCRIPT_TEMPLATE_RELPATH = "package/ProVersion/IssFiles/version.iss"
PACKAGING_SCRIPT_RELPATH = "package/ProVersion/Pack_normal.bat"
ARTIFACT_FOLDER_RELPATH = "package/ProVersion/PackedFiles"

UPLOAD_URL = "https://dist.wangxutech.com/admin"

# No readiness signal exists for the signing tool, so a fixed grace period is used.
SIGN_TOOL_GRACE_SECONDS = 1.0
TERMINATE_TIMEOUT_SECONDS = 10.0
