"""本地进程执行与输出装饰"""

import asyncio
import codecs
import logging
from typing import IO, Dict, List, Optional

from sshpool.core.exceptions import BufferLimitError, ProcessError
from sshpool.core.models import DEFAULT_MAX_BUFFER, ExecutionResult

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096


class LineWrapper:
    """给每一行输出加上前缀后写入目标流"""

    def __init__(self, sink: IO[str], prefix: str):
        self.sink = sink
        self.prefix = prefix
        self._buffer = ""

    def write(self, text: str):
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            # 整行一次写入，减少多主机输出交错
            self.sink.write(f"{self.prefix}{line}\n")
        if lines and hasattr(self.sink, "flush"):
            self.sink.flush()

    def close(self):
        if self._buffer:
            self.sink.write(f"{self.prefix}{self._buffer}\n")
            self._buffer = ""
            if hasattr(self.sink, "flush"):
                self.sink.flush()


async def _pump(
    stream: asyncio.StreamReader,
    chunks: List[bytes],
    wrapper: Optional[LineWrapper],
    command: str,
    max_buffer: int,
):
    """读取管道直到 EOF，超过 max_buffer 时抛出异常"""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    size = 0
    while True:
        data = await stream.read(READ_CHUNK_SIZE)
        if not data:
            break
        size += len(data)
        if size > max_buffer:
            raise BufferLimitError(command, max_buffer)
        chunks.append(data)
        if wrapper:
            wrapper.write(decoder.decode(data))
    if wrapper:
        wrapper.write(decoder.decode(b"", final=True))


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


async def execute(
    command: str,
    max_buffer: int = DEFAULT_MAX_BUFFER,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
    host: Optional[str] = None,
) -> ExecutionResult:
    """
    通过本地 shell 执行命令，等待进程退出。

    Args:
        command: 完整命令行
        max_buffer: 单个输出流允许缓存的最大字节数
        cwd: 工作目录
        env: 环境变量
        stdout/stderr: 实时输出的目标流，按行加 "@<host> " / "@<host>-err " 前缀
        host: 用于输出前缀和结果标识

    Raises:
        ProcessError: 无法启动或退出码非零
        BufferLimitError: 输出超过 max_buffer
    """
    logger.debug("exec: %s", command)

    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=env,
        )
    except OSError as e:
        raise ProcessError(f"Failed to spawn {command!r}: {e}", command=command) from e

    out_wrapper = LineWrapper(stdout, f"@{host} ") if stdout is not None else None
    err_wrapper = LineWrapper(stderr, f"@{host}-err ") if stderr is not None else None

    out_chunks: List[bytes] = []
    err_chunks: List[bytes] = []
    try:
        await asyncio.gather(
            _pump(process.stdout, out_chunks, out_wrapper, command, max_buffer),
            _pump(process.stderr, err_chunks, err_wrapper, command, max_buffer),
        )
    except BufferLimitError as e:
        if process.returncode is None:
            process.kill()
        await process.wait()
        e.stdout = _decode(out_chunks)
        e.stderr = _decode(err_chunks)
        raise
    finally:
        for wrapper in (out_wrapper, err_wrapper):
            if wrapper:
                wrapper.close()

    returncode = await process.wait()
    result = ExecutionResult(
        stdout=_decode(out_chunks),
        stderr=_decode(err_chunks),
        process=process,
        command=command,
        host=host,
    )

    if returncode != 0:
        raise ProcessError(
            f"Command failed with exit code {returncode}: {command}",
            command=command,
            returncode=returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result
