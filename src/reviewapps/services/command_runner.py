"""Subprocess execution service for review-apps."""

import subprocess
from typing import List, Optional

from reviewapps.errors import CommandFailedError, ReviewAppError
from reviewapps.models import CommandOutcome, FailurePolicy


class CommandRunner:
    """Runs external commands with a failure policy chosen per call site."""

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def run(
        self,
        cmd: List[str],
        policy: FailurePolicy = FailurePolicy.FATAL,
        capture_output: bool = False,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout

        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=capture_output,
                timeout=effective_timeout,
                cwd=cwd,
                input=input_text,
            )
        except FileNotFoundError as exc:
            raise ReviewAppError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ReviewAppError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except Exception as exc:
            raise ReviewAppError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0 or policy is FailurePolicy.PROBE:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if policy is FailurePolicy.FATAL:
            raise CommandFailedError(message, result.returncode)

        self.logger.warning("%s (ignored)", message)
        return result

    def best_effort(self, cmd: List[str], **kwargs) -> CommandOutcome:
        result = self.run(cmd, policy=FailurePolicy.IGNORE, **kwargs)
        return CommandOutcome(
            succeeded=result.returncode == 0,
            returncode=result.returncode,
            stderr=(result.stderr or "").strip(),
        )
