from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from sshpool.core.exceptions import ConfigError

DEFAULT_USER = "deploy"
DEFAULT_MAX_BUFFER = 1000 * 1024


class Direction(Enum):
    LOCAL_TO_REMOTE = "localToRemote"
    REMOTE_TO_LOCAL = "remoteToLocal"


class Side(Enum):
    SRC = "src"
    DEST = "dest"


@dataclass(frozen=True)
class RemoteEndpoint:
    """远程主机端点"""

    host: str
    user: str = DEFAULT_USER
    port: Optional[int] = None


@dataclass(frozen=True)
class ConnectionConfig:
    """单个连接的运行参数，构造后只读"""

    remote: RemoteEndpoint
    key: Optional[str] = None
    strict: Optional[str] = None
    as_user: Optional[str] = None
    stdout: Any = None
    stderr: Any = None
    log: Optional[Callable[..., Any]] = None


@dataclass(frozen=True)
class CopyOptions:
    """单次复制的参数"""

    direction: Direction = Direction.LOCAL_TO_REMOTE
    ignores: Tuple[str, ...] = ()
    rsync: Tuple[str, ...] = ()
    use_shim: bool = False
    process_options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        direction: Union[Direction, str] = Direction.LOCAL_TO_REMOTE,
        ignores=None,
        rsync=None,
        use_shim: bool = False,
        **process_options,
    ) -> "CopyOptions":
        """从关键字参数构造，补全默认值"""
        try:
            direction = Direction(direction)
        except ValueError:
            raise ConfigError(f"Unknown copy direction: {direction!r}")

        process_options.setdefault("max_buffer", DEFAULT_MAX_BUFFER)
        return cls(
            direction=direction,
            ignores=tuple(ignores or ()),
            rsync=tuple(rsync or ()),
            use_shim=bool(use_shim),
            process_options=process_options,
        )


@dataclass
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    process: Any = None
    command: str = ""
    host: Optional[str] = None
