"""SSH 命令行构造"""

import re
from typing import Iterable, List, Optional

from sshpool.core.models import Direction, RemoteEndpoint, Side
from sshpool.core.remote import format_remote

SUDO_TOKEN = re.compile(r"^sudo(\s+|$)")


def build_ssh_args(
    port: Optional[int] = None, key: Optional[str] = None, strict: Optional[str] = None
) -> List[str]:
    """生成 ssh/rsync 共用的参数，连接创建时计算一次"""
    args = []
    if port:
        args += ["-p", str(port)]
    if key:
        args += ["-i", key]
    if strict:
        args += ["-o", f"StrictHostKeyChecking={strict}"]
    return args


def is_sudo(command: str) -> bool:
    return command.startswith("sudo")


def wrap_as_user(command: str, as_user: str) -> str:
    """以 sudo -u <as_user> 重新包装，去掉已有的 sudo 避免嵌套"""
    if is_sudo(command):
        command = SUDO_TOKEN.sub("", command, count=1)
    return f"sudo -u {as_user} {command}"


def build_ssh_command(
    command: str,
    ssh_args: List[str],
    remote: RemoteEndpoint,
    as_user: Optional[str] = None,
) -> str:
    """
    构造远程执行的完整命令行:
        ssh [-tt] <ssh_args> user@host "<command>"

    sudo 命令可能需要交互输入，因此分配 TTY。
    """
    if as_user:
        command = wrap_as_user(command, as_user)

    args = ["ssh"]
    if is_sudo(command):
        args.append("-tt")
    args += ssh_args
    args.append(format_remote(remote))

    escaped = command.replace('"', '\\"')
    args.append(f'"{escaped}"')
    return " ".join(args)


def format_excludes(ignores: Iterable[str]) -> List[str]:
    """忽略模式转为 --exclude "pattern"，rsync 和 tar 通用"""
    excludes = []
    for pattern in ignores:
        excludes += ["--exclude", f'"{pattern}"']
    return excludes


def is_remote_side(direction: Direction, side: Side) -> bool:
    if direction == Direction.LOCAL_TO_REMOTE:
        return side == Side.DEST
    return side == Side.SRC
