"""sshpool - run commands and copy directories on remote hosts over SSH"""

__version__ = "1.0.0"

from .core.connection import Connection
from .core.pool import ConnectionPool
from .core.exceptions import BufferLimitError, ConfigError, ProcessError, SSHPoolError
from .core.models import (
    ConnectionConfig,
    CopyOptions,
    Direction,
    ExecutionResult,
    RemoteEndpoint,
)
from .core.remote import format_remote, parse_remote

__all__ = [
    "Connection",
    "ConnectionPool",
    "ConnectionConfig",
    "CopyOptions",
    "Direction",
    "ExecutionResult",
    "RemoteEndpoint",
    "parse_remote",
    "format_remote",
    "SSHPoolError",
    "ConfigError",
    "ProcessError",
    "BufferLimitError",
]
