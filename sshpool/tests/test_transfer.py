import asyncio

import pytest

from sshpool.core.connection import Connection
from sshpool.core.exceptions import ConfigError, ProcessError
from sshpool.core.models import CopyOptions, Direction, Side
from sshpool.core.transfer import (
    RsyncStrategy,
    StagedArchiveStrategy,
    complete_path,
    select_strategy,
)


class TestRsync:
    def copy(self, prober, remote="user@host", key=None, **options):
        connection = Connection(remote, key=key, prober=prober)
        return asyncio.run(connection.copy("/src/dir", "/dest/dir", **options))

    def test_default(self, executor, rsync_available):
        self.copy(rsync_available)
        assert executor.commands == ['rsync -az -e "ssh" /src/dir user@host:/dest/dir']

    def test_key(self, executor, rsync_available):
        connection = Connection("user@host", key="/k", prober=rsync_available)
        asyncio.run(connection.copy("/a", "/b"))
        assert executor.commands == ['rsync -az -e "ssh -i /k" /a user@host:/b']

    def test_ignores(self, executor, rsync_available):
        self.copy(rsync_available, ignores=["a", "b"])
        assert executor.commands == [
            'rsync --exclude "a" --exclude "b" -az -e "ssh" /src/dir user@host:/dest/dir'
        ]

    def test_remote_to_local(self, executor, rsync_available):
        self.copy(rsync_available, direction="remoteToLocal")
        assert executor.commands == ['rsync -az -e "ssh" user@host:/src/dir /dest/dir']

    def test_direction_enum(self, executor, rsync_available):
        self.copy(rsync_available, direction=Direction.LOCAL_TO_REMOTE)
        assert executor.commands == ['rsync -az -e "ssh" /src/dir user@host:/dest/dir']

    def test_extra_args(self, executor, rsync_available):
        self.copy(rsync_available, rsync=["--delete", "--checksum"])
        assert executor.commands == [
            'rsync -az --delete --checksum -e "ssh" /src/dir user@host:/dest/dir'
        ]

    def test_port_and_key(self, executor, rsync_available):
        self.copy(rsync_available, remote="user@host:12345", key="/path/to/key")
        assert executor.commands == [
            'rsync -az -e "ssh -p 12345 -i /path/to/key" /src/dir user@host:/dest/dir'
        ]

    def test_direction_not_forwarded(self, executor, rsync_available):
        self.copy(rsync_available, direction="localToRemote", ignores=["a"], cwd="/tmp")
        _, options = executor.calls[0]
        assert "direction" not in options
        assert "ignores" not in options
        assert options["cwd"] == "/tmp"
        assert options["max_buffer"] == 1000 * 1024

    def test_probe_every_copy(self, executor, rsync_available):
        connection = Connection("user@host", prober=rsync_available)

        async def copy_twice():
            await connection.copy("/a", "/b")
            await connection.copy("/a", "/b")

        asyncio.run(copy_twice())
        assert rsync_available.calls == ["rsync", "rsync"]

    def test_log(self, executor, rsync_available):
        messages = []
        connection = Connection(
            "user@host",
            prober=rsync_available,
            log=lambda msg, *args: messages.append(msg % args),
        )
        asyncio.run(connection.copy("/src/dir", "/dest/dir"))
        assert messages == ['Remote copy "/src/dir" to "user@host:/dest/dir"']

    def test_failure(self, executor, rsync_available):
        executor.failures["rsync"] = ProcessError("rsync failed", returncode=23)
        with pytest.raises(ProcessError):
            self.copy(rsync_available)

    def test_unknown_direction(self, executor, rsync_available):
        with pytest.raises(ConfigError):
            self.copy(rsync_available, direction="sideways")
        assert executor.calls == []


class TestStagedArchive:
    def test_local_to_remote(self, executor, rsync_missing):
        connection = Connection("user@host:2222", key="/k", prober=rsync_missing)
        asyncio.run(connection.copy("/src/dir", "/dest/dir"))

        assert executor.commands == [
            "cd /src && tar -czf dir.tar.gz dir",
            'ssh -p 2222 -i /k user@host "mkdir -p /dest/dir"',
            "scp -P 2222 -i /k /src/dir.tar.gz user@host:/dest/dir",
            "rm -f /src/dir.tar.gz",
            'ssh -p 2222 -i /k user@host "cd /dest/dir && tar --strip-components 1 -xzf dir.tar.gz"',
            'ssh -p 2222 -i /k user@host "rm -f /dest/dir/dir.tar.gz"',
        ]

    def test_remote_to_local(self, executor, rsync_missing):
        connection = Connection("user@host", prober=rsync_missing)
        asyncio.run(connection.copy("/src/dir", "/dest/dir", direction="remoteToLocal"))

        assert executor.commands == [
            'ssh user@host "cd /src && tar -czf dir.tar.gz dir"',
            "mkdir -p /dest/dir",
            "scp user@host:/src/dir.tar.gz /dest/dir",
            'ssh user@host "rm -f /src/dir.tar.gz"',
            "cd /dest/dir && tar --strip-components 1 -xzf dir.tar.gz",
            "rm -f /dest/dir/dir.tar.gz",
        ]

    def test_use_shim(self, executor, rsync_available):
        connection = Connection("user@host", prober=rsync_available)
        asyncio.run(connection.copy("/src/dir", "/dest/dir", use_shim=True))
        assert len(executor.commands) == 6
        assert not any(c.startswith("rsync") for c in executor.commands)

    def test_ignores(self, executor, rsync_missing):
        connection = Connection("user@host", prober=rsync_missing)
        asyncio.run(connection.copy("/src/dir", "/dest/dir", ignores=["a", "b"]))
        assert executor.commands[0] == (
            'cd /src && tar --exclude "a" --exclude "b" -czf dir.tar.gz dir'
        )

    def test_trailing_slash_and_relative_src(self, executor, rsync_missing):
        connection = Connection("user@host", prober=rsync_missing)
        asyncio.run(connection.copy("dist/", "/srv/app"))
        assert executor.commands[0] == "cd . && tar -czf dist.tar.gz dist"
        assert executor.commands[2] == "scp ./dist.tar.gz user@host:/srv/app"

    def test_sequential_and_aggregated(self, executor, rsync_missing):
        connection = Connection("user@host", prober=rsync_missing)
        result = asyncio.run(connection.copy("/src/dir", "/dest/dir"))

        assert executor.max_in_flight == 1
        assert result.stdout == "host out\n" * 6
        assert result.host == "host"
        assert result.command == "; ".join(executor.commands)

    def test_abort_on_failure(self, executor, rsync_missing):
        executor.failures["scp "] = ProcessError("scp failed", returncode=1)
        connection = Connection("user@host", prober=rsync_missing)

        with pytest.raises(ProcessError):
            asyncio.run(connection.copy("/src/dir", "/dest/dir"))

        # 中止后不执行清理
        assert len(executor.commands) == 3
        assert executor.commands[-1].startswith("scp ")


class TestSelectStrategy:
    def test_rsync(self, rsync_available):
        strategy = asyncio.run(select_strategy(rsync_available, CopyOptions.build()))
        assert isinstance(strategy, RsyncStrategy)

    def test_staged(self, rsync_missing):
        strategy = asyncio.run(select_strategy(rsync_missing, CopyOptions.build()))
        assert isinstance(strategy, StagedArchiveStrategy)

    def test_use_shim_skips_probe(self, rsync_available):
        options = CopyOptions.build(use_shim=True)
        strategy = asyncio.run(select_strategy(rsync_available, options))
        assert isinstance(strategy, StagedArchiveStrategy)
        assert rsync_available.calls == []


@pytest.mark.parametrize(
    "direction, side, expected",
    [
        (Direction.LOCAL_TO_REMOTE, Side.SRC, "/p"),
        (Direction.LOCAL_TO_REMOTE, Side.DEST, "user@host:/p"),
        (Direction.REMOTE_TO_LOCAL, Side.SRC, "user@host:/p"),
        (Direction.REMOTE_TO_LOCAL, Side.DEST, "/p"),
    ],
)
def test_complete_path(direction, side, expected):
    assert complete_path(Connection("user@host"), "/p", direction, side) == expected
