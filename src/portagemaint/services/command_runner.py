"""Subprocess execution service for portage-maint."""

import subprocess
from typing import List, Optional

from portagemaint.errors import MaintenanceError


class CommandRunner:
    """Runs external commands with consistent error handling."""

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        output_path: Optional[str] = None,
        input_path: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        """Run ``cmd`` and wait for it to finish.

        With ``output_path`` set, stdout and stderr are both appended to that
        file. With ``input_path`` set, the file is fed to the child's stdin.
        """
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        stdin_obj = None
        output_obj = None
        try:
            try:
                if input_path:
                    stdin_obj = open(input_path, "r", encoding="utf-8")
                if output_path:
                    output_obj = open(output_path, "a", encoding="utf-8")
            except OSError as exc:
                raise MaintenanceError(f"Could not open redirection file for {cmd[0]}: {exc}") from exc

            redirect = {"stdout": output_obj, "stderr": subprocess.STDOUT} if output_obj else {}
            try:
                result = self.subprocess.run(
                    cmd,
                    text=True,
                    stdin=stdin_obj,
                    capture_output=capture_output and output_obj is None,
                    **redirect,
                )
            except FileNotFoundError as exc:
                raise MaintenanceError(
                    f"Required command not found: {cmd[0]}. Please install it and try again."
                ) from exc
            except OSError as exc:
                raise MaintenanceError(f"Failed to execute command: {cmd_str}. {exc}") from exc
        finally:
            if stdin_obj is not None:
                stdin_obj.close()
            if output_obj is not None:
                output_obj.close()

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise MaintenanceError(message)

        self.logger.debug(message)
        return result
