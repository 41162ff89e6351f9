import pytest

from p4_bridge.api.context import BridgeContext
from p4_bridge.config.settings import Settings
from p4_bridge.p4.runner import Command
from p4_bridge.store.memory import MemoryCredentialStore
from p4_bridge.utils.debug import DebugLogger


class FakeRunner(Command):
    """
    Test-only stand-in for the p4 executable.

    Responses are keyed by subcommand name (the first argument that is not
    `-ztag`). A response may be output text, an exception to raise, or a
    callable taking (args, auth, input). Every call is recorded in `calls`.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def execute(self, args, auth, input=None):
        args = list(args)
        self.calls.append((args, auth, input))
        subcommand = next((a for a in args if a != "-ztag"), None)
        response = self.responses.get(subcommand, "")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args, auth, input)
        return response

    def subcommands(self):
        """Subcommands run so far, in order."""
        return [next((a for a in args if a != "-ztag"), None) for args, _, _ in self.calls]

    def args_for(self, subcommand):
        """Arguments of the first call to `subcommand`."""
        for args, _, _ in self.calls:
            if subcommand in args:
                return args
        raise AssertionError(f"{subcommand} was never run; calls: {self.subcommands()}")


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def memory_store():
    return MemoryCredentialStore()


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the user's home directory."""
    return Settings(data_dir=tmp_path / "p4-bridge")


@pytest.fixture
def bridge_context(settings, fake_runner, memory_store):
    return BridgeContext(
        settings=settings,
        runner=fake_runner,
        credential_store=memory_store,
    )


@pytest.fixture(autouse=True)
def reset_debug_logger():
    """Keep debug tracing off unless a test turns it on."""
    DebugLogger.configure(enabled=False, log_dir=None)
    yield
    DebugLogger.configure(enabled=False, log_dir=None)
