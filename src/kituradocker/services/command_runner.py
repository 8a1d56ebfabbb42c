"""Subprocess execution service for kituradocker."""

import subprocess
from typing import Iterable, List, Optional, Sequence

from kituradocker.errors import CommandError
from kituradocker.errors_catalog import actionable_error


REDACTED = "********"


def redact_command(cmd: Sequence[str], secrets: Iterable[str]) -> List[str]:
    hidden = set(secrets)
    return [REDACTED if arg in hidden else arg for arg in cmd]


class CommandRunner:
    """Runs external commands with consistent error handling.

    Output is streamed to the parent's stdout/stderr; the call blocks until
    the process exits.
    """

    def __init__(self, logger, secrets: Iterable[str] = ()):
        self.logger = logger
        self.secrets = frozenset(secret for secret in secrets if secret)

    def run(self, cmd: List[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
        if not cmd:
            raise CommandError(cmd, None, "Cannot execute an empty command.")

        cmd_str = " ".join(redact_command(cmd, self.secrets))
        if cwd:
            self.logger.debug("Executing: %s (in %s)", cmd_str, cwd)
        else:
            self.logger.debug("Executing: %s", cmd_str)

        try:
            result = subprocess.run(cmd, cwd=cwd, text=True)
        except FileNotFoundError as exc:
            raise CommandError(
                cmd, None, actionable_error("command_not_found", command=cmd[0])
            ) from exc
        except OSError as exc:
            raise CommandError(cmd, None, f"Failed to execute command: {cmd_str}. {exc}") from exc

        if result.returncode != 0:
            raise CommandError(
                cmd,
                result.returncode,
                f"Command failed ({result.returncode}): {cmd_str}",
            )

        return result
