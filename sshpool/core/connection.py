"""单主机连接"""

import logging
from typing import Any, Callable, Optional, Union

from sshpool.core import process
from sshpool.core.command import build_ssh_args, build_ssh_command
from sshpool.core.models import (
    DEFAULT_MAX_BUFFER,
    ConnectionConfig,
    CopyOptions,
    ExecutionResult,
    RemoteEndpoint,
)
from sshpool.core.probe import BinaryProber, WhichProber
from sshpool.core.remote import ensure_remote
from sshpool.core.transfer import select_strategy

logger = logging.getLogger(__name__)


class Connection:
    """
    通过外部 ssh 客户端操作一台远程主机。

    Args:
        remote: "user@host[:port]" 或 RemoteEndpoint
        key: 私钥路径
        strict: StrictHostKeyChecking 取值
        as_user: 以该用户身份（sudo -u）执行远程命令
        stdout/stderr: 实时输出目标流，每行加主机前缀
        log: 日志函数，按 log(msg, *args) 调用
        prober: rsync 可用性探测，默认查找 PATH
    """

    def __init__(
        self,
        remote: Union[str, RemoteEndpoint],
        key: Optional[str] = None,
        strict: Optional[str] = None,
        as_user: Optional[str] = None,
        stdout: Any = None,
        stderr: Any = None,
        log: Optional[Callable[..., Any]] = None,
        prober: Optional[BinaryProber] = None,
    ):
        self.config = ConnectionConfig(
            remote=ensure_remote(remote),
            key=key,
            strict=strict,
            as_user=as_user,
            stdout=stdout,
            stderr=stderr,
            log=log,
        )
        self.prober = prober or WhichProber()
        self.ssh_args = build_ssh_args(
            port=self.remote.port, key=self.config.key, strict=self.config.strict
        )

    @classmethod
    def from_config(
        cls, config: ConnectionConfig, prober: Optional[BinaryProber] = None
    ) -> "Connection":
        return cls(
            config.remote,
            key=config.key,
            strict=config.strict,
            as_user=config.as_user,
            stdout=config.stdout,
            stderr=config.stderr,
            log=config.log,
            prober=prober,
        )

    @property
    def remote(self) -> RemoteEndpoint:
        return self.config.remote

    def __repr__(self):
        return f"<Connection {self.remote.user}@{self.remote.host}>"

    def log(self, msg: str, *args):
        if self.config.log:
            self.config.log(msg, *args)

    def build_ssh_command(self, command: str) -> str:
        return build_ssh_command(
            command, self.ssh_args, self.remote, as_user=self.config.as_user
        )

    async def exec(self, command: str, **options) -> ExecutionResult:
        """在本地执行命令行，输出按本主机前缀装饰"""
        return await process.execute(
            command,
            stdout=self.config.stdout,
            stderr=self.config.stderr,
            host=self.remote.host,
            **options,
        )

    async def run(self, command: str, **options) -> ExecutionResult:
        """
        在远程主机上执行命令。

        Args:
            command: 远程命令
            **options: 传给执行器的参数（max_buffer、cwd、env）

        Raises:
            ProcessError: ssh 无法启动或命令退出码非零
            BufferLimitError: 输出超过 max_buffer
        """
        options.setdefault("max_buffer", DEFAULT_MAX_BUFFER)
        self.log('Running "%s" on host "%s".', command, self.remote.host)
        return await self.exec(self.build_ssh_command(command), **options)

    async def copy(self, src: str, dest: str, **options) -> ExecutionResult:
        """
        复制目录，rsync 可用时使用 rsync，否则退回 tar + scp。

        Args:
            src: 源路径
            dest: 目标路径
            **options: direction、ignores、rsync、use_shim 以及执行器参数
        """
        copy_options = CopyOptions.build(**options)
        strategy = await select_strategy(self.prober, copy_options)
        logger.debug("%r copy %s -> %s via %s", self, src, dest, strategy.name)
        return await strategy.copy(self, src, dest, copy_options)
