import logging
import os
import subprocess
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional

from rich.console import Console

from .errors import ReleaseError
from .errors_catalog import actionable_error
from .models import ReleaseConfig, ReleaseOutcome, ReleaseReport
from .services.filesystem import FileSystemService
from .services.notifier import Notifier
from .services.process_launcher import ProcessLauncher
from .services.script_rewriter import ScriptRewriter
from .services.version_extractor import VersionExtractor

console = Console()
logger = logging.getLogger("autopackage")


class ReleaseHandle:
    """Tracks a dispatched release so the caller can wait on or cancel it."""

    def __init__(self, sync_outcome: ReleaseOutcome, future: Future, orchestrator=None):
        self.sync_outcome = sync_outcome
        self.future = future
        self._orchestrator = orchestrator

    def done(self) -> bool:
        return self.future.done()

    def wait(self, timeout: Optional[float] = None) -> ReleaseReport:
        try:
            return self.future.result(timeout=timeout)
        except CancelledError:
            return ReleaseReport(outcome=ReleaseOutcome.CANCELLED, sync_outcome=self.sync_outcome)

    def cancel(self) -> bool:
        if self.future.cancel():
            return True
        if self._orchestrator is not None:
            self._orchestrator.cancel()
        return False


class ReleaseOrchestrator:
    """Synchronizes the installer version, then signs, packages and distributes.

    Built once per trigger from an explicit :class:`ReleaseConfig`. Version
    sync and signing run on the calling thread; packaging and distribution
    run on a single background worker so the caller returns immediately.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        notifier: Optional[Notifier] = None,
        launcher: Optional[ProcessLauncher] = None,
        filesystem: Optional[FileSystemService] = None,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.notifier = notifier or Notifier(logger=logger, console=console)
        self.launcher = launcher or ProcessLauncher(logger=logger)
        self.filesystem = filesystem or FileSystemService(logger=logger)
        self.version_extractor = VersionExtractor(logger=logger)
        self.script_rewriter = ScriptRewriter()
        self.clock = clock
        self.sleep = sleep

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._packaging_process: Optional[subprocess.Popen] = None

    def run(self) -> ReleaseReport:
        return self.start().wait()

    def start(self) -> ReleaseHandle:
        if not self.config.has_project_context:
            self.notifier.error(actionable_error("no_solution_open"))
            future: Future = Future()
            future.set_result(ReleaseReport(outcome=ReleaseOutcome.NO_SOLUTION_OPEN))
            return ReleaseHandle(ReleaseOutcome.NO_SOLUTION_OPEN, future)

        report = ReleaseReport(outcome=ReleaseOutcome.COMPLETED)
        report.sync_outcome = self.synchronize_version(report)
        self.launch_sign_tool(report)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="autopackage")
        try:
            future = executor.submit(self._package_and_distribute, report)
        finally:
            executor.shutdown(wait=False)
        return ReleaseHandle(report.sync_outcome, future, orchestrator=self)

    def cancel(self):
        self._cancelled.set()
        with self._lock:
            process = self._packaging_process
        if process is not None:
            logger.info("Cancelling packaging process %s", process.pid)
            self.launcher.terminate(process)

    def synchronize_version(self, report: ReleaseReport) -> ReleaseOutcome:
        metadata_file = self.config.metadata_file
        script_template = self.config.script_template

        if not metadata_file:
            logger.warning("Version sync skipped: no project selected, pass --project.")
            return ReleaseOutcome.NO_VERSION_FILE_FOUND

        if not (self.filesystem.exists(metadata_file) and self.filesystem.exists(script_template)):
            logger.info(
                "Version sync skipped: metadata '%s' or script '%s' not found.",
                metadata_file,
                script_template,
            )
            return ReleaseOutcome.NO_VERSION_FILE_FOUND

        try:
            version = self.version_extractor.read_version(metadata_file)
        except ReleaseError as exc:
            logger.warning("Version sync skipped: %s", exc)
            return ReleaseOutcome.NO_VERSION_FILE_FOUND

        if not version:
            logger.info("Version sync skipped: no AssemblyVersion in %s", metadata_file)
            return ReleaseOutcome.NO_VERSION_FILE_FOUND

        report.version = version
        logger.info("Assembly version: %s", version)

        try:
            script_text = self.filesystem.read_text(script_template)
            rewritten = self.script_rewriter.rewrite(script_text, version, self.clock())
            if not rewritten.strip():
                raise ReleaseError(f"Rewriting {script_template} produced an empty script.")
            self.filesystem.write_text_atomic(script_template, rewritten)
        except ReleaseError as exc:
            logger.debug("Script update failed: %s", exc)
            message = actionable_error("script_update_failed", path=script_template)
            report.warnings.append(message)
            self.notifier.warning(message)
            return ReleaseOutcome.SCRIPT_UPDATE_FAILED

        changed = self.script_rewriter.changed_fields(script_text, rewritten)
        logger.debug("Updated fields in %s: %s", script_template, ", ".join(changed) or "<none>")
        self.notifier.success(f"version.iss updated to {version}.")
        return ReleaseOutcome.COMPLETED

    def launch_sign_tool(self, report: ReleaseReport):
        sign_tool = self.config.sign_tool
        if not sign_tool:
            return
        if not self.filesystem.exists(sign_tool):
            logger.info("Signing tool not found, skipping: %s", sign_tool)
            return

        try:
            self.launcher.launch([sign_tool], cwd=os.path.dirname(sign_tool))
        except ReleaseError as exc:
            message = actionable_error("sign_tool_launch_failed", path=sign_tool, error=str(exc))
            report.warnings.append(message)
            self.notifier.warning(message)
            return

        grace = self.config.sign_tool_grace_seconds
        logger.info("Signing tool opened. Waiting %.1fs for it to start.", grace)
        if grace > 0:
            self.sleep(grace)

    def _package_and_distribute(self, report: ReleaseReport) -> ReleaseReport:
        try:
            self.package(report)
        except ReleaseError as exc:
            if self._cancelled.is_set():
                report.outcome = ReleaseOutcome.CANCELLED
                self.notifier.warning("Packaging cancelled.")
                return report
            report.outcome = ReleaseOutcome.PACKAGING_FAILED
            self.notifier.error(str(exc))
            return report
        except Exception as exc:
            logger.exception("Unexpected error while packaging")
            report.outcome = ReleaseOutcome.PACKAGING_FAILED
            self.notifier.error(f"Unexpected error while packaging: {exc}")
            return report

        if self._cancelled.is_set():
            report.outcome = ReleaseOutcome.CANCELLED
            return report

        self.distribute(report)
        report.outcome = ReleaseOutcome.COMPLETED
        return report

    def package(self, report: ReleaseReport):
        script = self.config.packaging_script
        if not self.filesystem.exists(script):
            raise ReleaseError(actionable_error("packaging_script_not_found", path=script))

        try:
            process = self.launcher.launch([script], cwd=os.path.dirname(script))
        except ReleaseError as exc:
            raise ReleaseError(
                actionable_error("packaging_launch_failed", path=script, error=str(exc))
            ) from exc

        with self._lock:
            self._packaging_process = process
        if self._cancelled.is_set():
            self.launcher.terminate(process)

        self.notifier.info(f"{os.path.basename(script)} running...")
        timeout = self.config.packaging_timeout_seconds
        try:
            returncode = self.launcher.wait(process, timeout=timeout)
        except ReleaseError as exc:
            message = actionable_error("packaging_timed_out", timeout=str(timeout))
            raise ReleaseError(message) from exc
        finally:
            with self._lock:
                self._packaging_process = None

        report.packaging_returncode = returncode
        if self._cancelled.is_set():
            raise ReleaseError("Packaging cancelled.")
        if returncode != 0:
            raise ReleaseError(
                actionable_error("packaging_failed", returncode=str(returncode), path=script)
            )
        self.notifier.success("Packed!")

    def distribute(self, report: ReleaseReport):
        if self.config.open_artifact_folder:
            self._open_target(self.launcher.open_location, self.config.artifact_folder, report)
        if self.config.upload_to_web:
            self._open_target(self.launcher.open_url, self.config.upload_url, report)

    def _open_target(
        self,
        opener: Callable[[str], None],
        target: Optional[str],
        report: ReleaseReport,
    ):
        try:
            if not target:
                raise ReleaseError("no location configured")
            opener(target)
        except ReleaseError as exc:
            message = actionable_error("open_target_failed", target=str(target), error=str(exc))
            report.warnings.append(message)
            self.notifier.warning(message)
            return
        logger.info("Opened %s", target)
