"""Exchanging a password for a p4 ticket."""

import logging
from enum import Enum

from p4_bridge.api.exceptions import LoginError, ProtocolError
from p4_bridge.models.auth import AuthContext
from p4_bridge.p4.runner import Command
from p4_bridge.p4.tagged import split_lines

logger = logging.getLogger(__name__)


class LoginState(str, Enum):
    IDLE = "idle"
    TRUSTING = "trusting"
    LOGGING_IN = "logging_in"
    DONE = "done"
    FAILED = "failed"


class TrustLoginFlow:
    """Trust the server, then log in with a password to obtain a ticket.

    The trust step (`p4 trust -y`) is best effort: SSL servers need it the
    first time, plain servers reject it, and already-trusted servers don't
    care. Whatever happens, the flow moves on to `p4 login -a -p`, which reads
    the password from standard input and prints the ticket.

    One instance handles one login attempt; `state` records how far it got.
    """

    def __init__(self, runner: Command):
        self.runner = runner
        self.state = LoginState.IDLE

    def run(self, server: str, user: str, password: str) -> str:
        """Obtain a ticket for `user` on `server`.

        Args:
            server: P4PORT to log in to
            user: Perforce user name
            password: The user's password

        Returns:
            The ticket printed by p4

        Raises:
            LoginError: If p4 rejects the login or prints no ticket
        """
        self.state = LoginState.TRUSTING
        self._trust(server)

        self.state = LoginState.LOGGING_IN
        try:
            ticket = self._login(server, user, password)
        except LoginError:
            self.state = LoginState.FAILED
            raise

        self.state = LoginState.DONE
        return ticket

    def _trust(self, server: str) -> None:
        try:
            self.runner.execute(["trust", "-y"], AuthContext(server=server))
        except ProtocolError as e:
            logger.info("p4 trust note: %s", e)

    def _login(self, server: str, user: str, password: str) -> str:
        try:
            out = self.runner.execute(
                ["login", "-a", "-p"],
                AuthContext(server=server, user=user),
                input=password + "\n",
            )
        except ProtocolError as e:
            if e.returncode is None:
                raise LoginError(str(e)) from e
            raise LoginError(e.stderr.strip() or "login failed") from e

        # `login -p` may print a prompt before the ticket; the ticket is last
        lines = [line.strip() for line in split_lines(out) if line.strip()]
        if not lines:
            raise LoginError("login failed: p4 printed no ticket")
        return lines[-1]
