"""多主机连接池"""

import asyncio
import logging
from typing import Iterator, List, Sequence, Union

from sshpool.core.connection import Connection
from sshpool.core.models import ExecutionResult, RemoteEndpoint

logger = logging.getLogger(__name__)


class ConnectionPool:
    """对一组连接并发执行相同操作，结果顺序与连接顺序一致"""

    def __init__(
        self,
        connections: Sequence[Union[Connection, str, RemoteEndpoint]],
        **options,
    ):
        self.connections: List[Connection] = [
            c if isinstance(c, Connection) else Connection(c, **options)
            for c in connections
        ]

    def __len__(self):
        return len(self.connections)

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.connections)

    async def _fan_out(self, method: str, *args, **options) -> List[ExecutionResult]:
        logger.debug("%s on %d connections", method, len(self.connections))
        tasks = [
            asyncio.ensure_future(getattr(connection, method)(*args, **options))
            for connection in self.connections
        ]
        # 任一失败立即抛出，其余任务继续运行但结果丢弃
        return list(await asyncio.gather(*tasks))

    async def run(self, command: str, **options) -> List[ExecutionResult]:
        """在所有主机上并发执行命令"""
        return await self._fan_out("run", command, **options)

    async def copy(self, src: str, dest: str, **options) -> List[ExecutionResult]:
        """在所有主机上并发复制"""
        return await self._fan_out("copy", src, dest, **options)
