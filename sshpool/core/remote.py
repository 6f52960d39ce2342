"""远程主机串解析"""

import re
from typing import Union

from sshpool.core.exceptions import ConfigError
from sshpool.core.models import DEFAULT_USER, RemoteEndpoint

REMOTE_PATTERN = re.compile(r"(.*)@([^:]*):?(.*)")


def parse_remote(spec: str) -> RemoteEndpoint:
    """解析 user@host[:port]"""
    if not spec:
        raise ConfigError("Host cannot be empty.")

    m = REMOTE_PATTERN.match(spec)
    if not m:
        return RemoteEndpoint(host=spec, user=DEFAULT_USER)

    user, host, port = m.groups()
    if not host:
        raise ConfigError(f"Host cannot be empty in {spec!r}.")

    return RemoteEndpoint(
        host=host,
        user=user,
        port=int(port) if port.isdigit() and int(port) else None,
    )


def format_remote(remote: RemoteEndpoint) -> str:
    """格式化为 user@host，端口不包含在内"""
    return f"{remote.user}@{remote.host}"


def ensure_remote(value: Union[str, RemoteEndpoint]) -> RemoteEndpoint:
    if isinstance(value, RemoteEndpoint):
        if not value.host:
            raise ConfigError("Host cannot be empty.")
        return value
    return parse_remote(value)
