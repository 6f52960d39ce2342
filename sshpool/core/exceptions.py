"""异常定义"""

from typing import Optional


class SSHPoolError(Exception):
    """基础异常"""


class ConfigError(SSHPoolError):
    """配置错误：主机串为空、方向非法、清单文件无效等"""


class ProcessError(SSHPoolError):
    """外部进程启动失败或以非零状态退出"""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class BufferLimitError(ProcessError):
    """输出超过 max_buffer"""

    def __init__(self, command: str, max_buffer: int, stdout: str = "", stderr: str = ""):
        super().__init__(
            f"Output of {command!r} exceeded max_buffer ({max_buffer} bytes)",
            command=command,
            stdout=stdout,
            stderr=stderr,
        )
        self.max_buffer = max_buffer
