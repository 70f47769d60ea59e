"""External process launching for AutoPackage."""

import os
import subprocess
import sys
import webbrowser
from typing import List, Optional

from autopackage.constants import TERMINATE_TIMEOUT_SECONDS
from autopackage.errors import ReleaseError


class ProcessLauncher:
    """Starts external tools and opens folders or URLs with the OS defaults."""

    def __init__(
        self,
        logger,
        subprocess_module=subprocess,
        browser=webbrowser,
        platform: Optional[str] = None,
    ):
        self.logger = logger
        self.subprocess = subprocess_module
        self.browser = browser
        self.platform = platform or sys.platform

    def launch(self, cmd: List[str], cwd: Optional[str] = None) -> subprocess.Popen:
        cmd_str = " ".join(cmd)
        self.logger.debug("Launching: %s", cmd_str)
        try:
            return self.subprocess.Popen(cmd, cwd=cwd)
        except FileNotFoundError as exc:
            raise ReleaseError(f"Command not found: {cmd[0]}") from exc
        except OSError as exc:
            raise ReleaseError(f"Failed to launch {cmd_str}: {exc}") from exc

    def wait(self, process, timeout: Optional[float] = None) -> int:
        try:
            return process.wait(timeout=timeout)
        except self.subprocess.TimeoutExpired as exc:
            self.terminate(process)
            raise ReleaseError(f"Process {process.pid} timed out after {timeout}s") from exc

    def terminate(self, process):
        if process.poll() is not None:
            return
        self.logger.debug("Terminating process %s", process.pid)
        process.terminate()
        try:
            process.wait(timeout=TERMINATE_TIMEOUT_SECONDS)
        except self.subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def open_location(self, path: str):
        if not os.path.exists(path):
            raise ReleaseError(f"Path does not exist: {path}")

        if self.platform == "win32":
            cmd = ["explorer", os.path.normpath(path)]
        elif self.platform == "darwin":
            cmd = ["open", path]
        else:
            cmd = ["xdg-open", path]
        self.launch(cmd)

    def open_url(self, url: str):
        self.logger.debug("Opening URL: %s", url)
        try:
            opened = self.browser.open(url)
        except webbrowser.Error as exc:
            raise ReleaseError(f"Failed to open {url}: {exc}") from exc
        if not opened:
            raise ReleaseError(f"No browser available to open {url}")
