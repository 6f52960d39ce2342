import asyncio
from unittest.mock import patch

import pytest

from sshpool.core.models import ExecutionResult
from sshpool.core.probe import BinaryProber


class FakeProber(BinaryProber):
    def __init__(self, available: bool):
        self.available = available
        self.calls = []

    async def is_resolvable(self, name: str) -> bool:
        self.calls.append(name)
        return self.available


class FakeExecutor:
    """替代 process.execute，只记录命令行"""

    def __init__(self):
        self.calls = []
        self.delays = {}
        self.failures = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, command, **options):
        self.calls.append((command, options))
        host = options.get("host")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(host, 0.01))
            for marker, error in self.failures.items():
                if marker in command:
                    raise error
        finally:
            self.in_flight -= 1
        return ExecutionResult(
            stdout=f"{host} out\n", stderr="", command=command, host=host
        )

    @property
    def commands(self):
        return [c for c, _ in self.calls]


@pytest.fixture
def executor():
    fake = FakeExecutor()
    with patch("sshpool.core.process.execute", new=fake):
        yield fake


@pytest.fixture
def rsync_available():
    return FakeProber(True)


@pytest.fixture
def rsync_missing():
    return FakeProber(False)
