"""文件传输策略：rsync 优先，不可用时退回 tar + scp"""

import logging
import posixpath
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from sshpool.core.command import format_excludes, is_remote_side
from sshpool.core.models import CopyOptions, Direction, ExecutionResult, Side
from sshpool.core.probe import BinaryProber
from sshpool.core.remote import format_remote

if TYPE_CHECKING:
    from sshpool.core.connection import Connection

logger = logging.getLogger(__name__)

RSYNC_BINARY = "rsync"
ARCHIVE_SUFFIX = ".tar.gz"


def complete_path(connection: "Connection", path: str, direction: Direction, side: Side) -> str:
    """远程一侧加上 user@host: 前缀"""
    if is_remote_side(direction, side):
        return f"{format_remote(connection.remote)}:{path}"
    return path


class TransferStrategy(ABC):
    name = ""

    @abstractmethod
    async def copy(
        self, connection: "Connection", src: str, dest: str, options: CopyOptions
    ) -> ExecutionResult:
        pass

    def _log_copy(self, connection: "Connection", src: str, dest: str, options: CopyOptions):
        connection.log(
            'Remote copy "%s" to "%s"',
            complete_path(connection, src, options.direction, Side.SRC),
            complete_path(connection, dest, options.direction, Side.DEST),
        )


class RsyncStrategy(TransferStrategy):
    name = "rsync"

    def build_command(
        self, connection: "Connection", src: str, dest: str, options: CopyOptions
    ) -> str:
        ssh = " ".join(["ssh"] + connection.ssh_args)
        args = ["rsync"]
        args += format_excludes(options.ignores)
        args.append("-az")
        args += options.rsync
        args += [
            "-e",
            f'"{ssh}"',
            complete_path(connection, src, options.direction, Side.SRC),
            complete_path(connection, dest, options.direction, Side.DEST),
        ]
        return " ".join(args)

    async def copy(self, connection, src, dest, options):
        self._log_copy(connection, src, dest, options)
        # direction 只在这里使用，不传给执行器
        return await connection.exec(
            self.build_command(connection, src, dest, options), **options.process_options
        )


class StagedArchiveStrategy(TransferStrategy):
    """
    没有 rsync 时用六步模拟目录复制:
        打包 -> 创建目标目录 -> scp -> 清理源端 -> 解包 -> 清理目标端

    任意一步失败即中止，不回滚已完成的步骤，可能遗留临时包或目录。
    临时包名由 src 的 basename 决定，同一主机上并发复制同名目录会冲突。
    """

    name = "staged"

    def build_steps(
        self, connection: "Connection", src: str, dest: str, options: CopyOptions
    ) -> List[str]:
        src = src.rstrip("/") or src
        src_dir = posixpath.dirname(src) or "."
        src_name = posixpath.basename(src)
        pkgname = src_name + ARCHIVE_SUFFIX

        tar = ["tar"] + format_excludes(options.ignores) + ["-czf", pkgname, src_name]

        steps: List[Tuple[Optional[Side], str]] = [
            (Side.SRC, f"cd {src_dir} && {' '.join(tar)}"),
            (Side.DEST, f"mkdir -p {dest}"),
            (None, self._build_scp(connection, posixpath.join(src_dir, pkgname), dest, options)),
            (Side.SRC, f"rm -f {posixpath.join(src_dir, pkgname)}"),
            (Side.DEST, f"cd {dest} && tar --strip-components 1 -xzf {pkgname}"),
            (Side.DEST, f"rm -f {posixpath.join(dest, pkgname)}"),
        ]

        commands = []
        for side, command in steps:
            if side is not None and is_remote_side(options.direction, side):
                command = connection.build_ssh_command(command)
            commands.append(command)
        return commands

    def _build_scp(self, connection, archive, dest, options) -> str:
        args = ["scp"]
        if connection.remote.port:
            args += ["-P", str(connection.remote.port)]
        if connection.config.key:
            args += ["-i", connection.config.key]
        if connection.config.strict:
            args += ["-o", f"StrictHostKeyChecking={connection.config.strict}"]
        args.append(complete_path(connection, archive, options.direction, Side.SRC))
        args.append(complete_path(connection, dest, options.direction, Side.DEST))
        return " ".join(args)

    async def copy(self, connection, src, dest, options):
        self._log_copy(connection, src, dest, options)

        results = []
        for command in self.build_steps(connection, src, dest, options):
            # 严格顺序执行，异常直接向上抛出
            results.append(await connection.exec(command, **options.process_options))

        return ExecutionResult(
            stdout="".join(r.stdout for r in results),
            stderr="".join(r.stderr for r in results),
            process=results[-1].process,
            command="; ".join(r.command for r in results),
            host=connection.remote.host,
        )


async def select_strategy(prober: BinaryProber, options: CopyOptions) -> TransferStrategy:
    """每次复制都重新探测 rsync，不缓存"""
    if not options.use_shim and await prober.is_resolvable(RSYNC_BINARY):
        strategy = RsyncStrategy()
    else:
        strategy = StagedArchiveStrategy()
    logger.debug("transfer strategy: %s", strategy.name)
    return strategy
