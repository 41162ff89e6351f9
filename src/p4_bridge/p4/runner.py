"""Running the p4 command-line client.

`Command` is the seam between p4-bridge and Perforce: everything that talks to
a server goes through `Command.execute`, so tests can substitute a fake and
the real implementation stays a thin wrapper around `subprocess.run`.
"""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from p4_bridge.api.exceptions import ProtocolError
from p4_bridge.models.auth import AuthContext
from p4_bridge.utils.debug import DebugLogger

logger = logging.getLogger(__name__)

REDACTED = "********"

# Global options whose value must never be logged
SECRET_FLAGS = frozenset({"-P"})


def build_global_flags(auth: AuthContext) -> List[str]:
    """Build p4 global options from an auth context.

    Order is fixed (-p, -u, -c, -P); absent fields are omitted.
    """
    flags = []
    if auth.server:
        flags.extend(["-p", auth.server])
    if auth.user:
        flags.extend(["-u", auth.user])
    if auth.client:
        flags.extend(["-c", auth.client])
    if auth.ticket:
        flags.extend(["-P", auth.ticket])
    return flags


def redact_command(cmd: Sequence[str]) -> List[str]:
    """Copy of `cmd` with the value following every secret flag masked."""
    redacted = list(cmd)
    for i, part in enumerate(redacted[:-1]):
        if part in SECRET_FLAGS:
            redacted[i + 1] = REDACTED
    return redacted


class Command(ABC):
    """Executes p4 subcommands against a server."""

    @abstractmethod
    def execute(
        self,
        args: Sequence[str],
        auth: AuthContext,
        input: Optional[str] = None,
    ) -> str:
        """Run one p4 invocation and return its standard output.

        Args:
            args: Subcommand and its arguments, e.g. ["-ztag", "users"]
            auth: Connection context providing the global options
            input: Text written to the process's standard input, which is then closed

        Returns:
            Captured standard output

        Raises:
            ProtocolError: If the process could not run or exited non-zero
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement execute() method"
        )


class P4CommandRunner(Command):
    """Runs the real p4 executable, one child process per invocation."""

    def __init__(self, executable: str = "p4", timeout: Optional[float] = None):
        """Initialize runner.

        Args:
            executable: p4 binary name or path
            timeout: Seconds before a hung invocation is killed (None waits forever)
        """
        self.executable = executable
        self.timeout = timeout

    def execute(
        self,
        args: Sequence[str],
        auth: AuthContext,
        input: Optional[str] = None,
    ) -> str:
        cmd = [self.executable, *build_global_flags(auth), *args]
        logged_cmd = redact_command(cmd)
        operation = next((part for part in args if not part.startswith("-")), "p4")
        logger.info("→ %s", " ".join(logged_cmd))

        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                input=input,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            DebugLogger.log_invocation(operation, logged_cmd, None, "timed out", time.monotonic() - start)
            message = f"p4 timed out after {self.timeout:g}s"
            logger.error("p4 error: %s", message)
            raise ProtocolError(message) from None
        except OSError as e:
            # Executable missing or not runnable
            DebugLogger.log_invocation(operation, logged_cmd, None, str(e), time.monotonic() - start)
            logger.error("p4 error: %s", e)
            raise ProtocolError(str(e) or "p4 failed") from e

        DebugLogger.log_invocation(operation, logged_cmd, result.returncode, result.stderr, time.monotonic() - start)

        if result.returncode != 0:
            stderr = result.stderr or ""
            message = stderr.strip() or "p4 failed"
            logger.error("p4 error: %s", message)
            raise ProtocolError(message, stderr=stderr, returncode=result.returncode)

        return result.stdout
