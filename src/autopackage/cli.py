import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE, SIGN_TOOL_GRACE_SECONDS
from .core import ReleaseOrchestrator, console
from .errors import ReleaseError
from .models import ReleaseOutcome
from .services.config_loader import ConfigLoader
from .services.layout import ProjectLayout


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--solution",
    required=False,
    type=click.Path(),
    help="Solution file or folder. Defaults to the single .sln in the current directory.",
)
@click.option(
    "--project",
    required=False,
    type=click.Path(),
    help="Project file or folder holding Properties/AssemblyInfo.cs.",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=(
        f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present. "
        "Relative solution, project, sign_tool and log_file values resolve against the "
        "config file's folder; the other paths resolve against the solution layout."
    ),
)
@click.option(
    "--metadata-file",
    required=False,
    help="Assembly metadata file, relative to the project folder.",
)
@click.option(
    "--script-template",
    required=False,
    help="Installer script to update, relative to the folder above the solution.",
)
@click.option(
    "--packaging-script",
    required=False,
    help="Packaging script to run, relative to the folder above the solution.",
)
@click.option(
    "--artifact-folder",
    required=False,
    help="Folder holding the packed files, relative to the folder above the solution.",
)
@click.option("--sign-tool", required=False, type=click.Path(), help="Signing tool to start first")
@click.option(
    "--sign-tool-grace-seconds",
    required=False,
    type=float,
    default=None,
    help=f"Seconds to wait after starting the signing tool (default: {SIGN_TOOL_GRACE_SECONDS}).",
)
@click.option(
    "--open-artifact-folder",
    is_flag=True,
    default=None,
    help="Open the packed files folder once packaging finishes.",
)
@click.option(
    "--upload-to-web",
    is_flag=True,
    default=None,
    help="Open the distribution upload page once packaging finishes.",
)
@click.option("--upload-url", required=False, help="Override the distribution upload page URL.")
@click.option(
    "--packaging-timeout-minutes",
    required=False,
    type=float,
    default=None,
    help="Terminate the packaging script after this many minutes (default: no limit).",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    solution,
    project,
    config,
    metadata_file,
    script_template,
    packaging_script,
    artifact_folder,
    sign_tool,
    sign_tool_grace_seconds,
    open_artifact_folder,
    upload_to_web,
    upload_url,
    packaging_timeout_minutes,
    verbose,
    log_file,
):
    """Sync the installer version from AssemblyInfo.cs and run the packaging script."""
    logger = logging.getLogger("autopackage")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc

    solution = _resolve_option(solution, config_values, "solution")
    project = _resolve_option(project, config_values, "project")
    metadata_file = _resolve_option(metadata_file, config_values, "metadata_file")
    script_template = _resolve_option(script_template, config_values, "script_template")
    packaging_script = _resolve_option(packaging_script, config_values, "packaging_script")
    artifact_folder = _resolve_option(artifact_folder, config_values, "artifact_folder")
    sign_tool = _resolve_option(sign_tool, config_values, "sign_tool")
    sign_tool_grace_seconds = float(
        _resolve_option(
            sign_tool_grace_seconds,
            config_values,
            "sign_tool_grace_seconds",
            default=SIGN_TOOL_GRACE_SECONDS,
        )
    )
    open_artifact_folder = bool(
        _resolve_option(open_artifact_folder, config_values, "open_artifact_folder", default=False)
    )
    upload_to_web = bool(
        _resolve_option(upload_to_web, config_values, "upload_to_web", default=False)
    )
    upload_url = _resolve_option(upload_url, config_values, "upload_url")
    packaging_timeout_minutes = _resolve_option(
        packaging_timeout_minutes, config_values, "packaging_timeout_minutes"
    )
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if sign_tool_grace_seconds < 0:
        raise click.ClickException("--sign-tool-grace-seconds must not be negative.")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    layout = ProjectLayout(logger=logger)
    try:
        if not solution:
            solution = layout.discover_solution(os.getcwd())
        if not project:
            project = layout.discover_project(layout.to_directory(solution))
        release_config = layout.build_config(
            solution=solution,
            project=project,
            metadata_file=metadata_file,
            script_template=script_template,
            packaging_script=packaging_script,
            artifact_folder=artifact_folder,
            sign_tool=sign_tool,
            open_artifact_folder=open_artifact_folder,
            upload_to_web=upload_to_web,
            upload_url=upload_url,
            sign_tool_grace_seconds=sign_tool_grace_seconds,
            packaging_timeout_seconds=(
                float(packaging_timeout_minutes) * 60 if packaging_timeout_minutes else None
            ),
        )
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc

    orchestrator = ReleaseOrchestrator(release_config)
    handle = orchestrator.start()
    try:
        report = handle.wait()
    except KeyboardInterrupt:
        console.print("[bold red]Operation cancelled by user.[/bold red]")
        logger.info("Operation cancelled by user")
        handle.cancel()
        report = handle.wait()

    logger.debug("Release finished: %s", report)
    raise SystemExit(0 if report.outcome == ReleaseOutcome.COMPLETED else 1)


if __name__ == "__main__":
    main()
