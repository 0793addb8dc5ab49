"""Subprocess execution service for pgcloudops."""

import os
import subprocess
from typing import Dict, List, Optional

from pgcloudops.errors import CommandError, OpsError
from pgcloudops.errors_catalog import actionable_error


class CommandRunner:
    """Runs external commands with consistent error handling.

    Instances are callable so services can take either a runner or any
    function with the same signature (tests pass plain fakes).
    """

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def __call__(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        return self.run(cmd, **kwargs)

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        input_text: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout
        child_env = None
        if env:
            child_env = dict(os.environ)
            child_env.update(env)

        try:
            result = subprocess.run(
                cmd,
                text=True,
                input=input_text,
                capture_output=capture_output,
                env=child_env,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise OpsError(actionable_error("command_not_found", command=cmd[0])) from exc
        except subprocess.TimeoutExpired as exc:
            raise OpsError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except Exception as exc:
            raise OpsError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise CommandError(message, cmd=cmd, returncode=result.returncode, stderr=stderr)

        self.logger.debug(message)
        return result
