"""命令共用的工具函数"""

import logging
import sys
from typing import Awaitable, Callable, List

import click
from tenacity import retry, stop_after_attempt

from sshpool.core.connection import Connection
from sshpool.core.models import ExecutionResult
from sshpool.core.pool import ConnectionPool
from sshpool.core.remote import parse_remote
from sshpool.log import get_ssh_logger

logger = logging.getLogger(__name__)

OUTPUT_CHOICES = ["default", "json", "yaml", "template", "none"]


def build_pool(ctx: click.Context, quiet: bool = False) -> ConnectionPool:
    """根据全局选项为每台主机创建连接"""
    obj = ctx.obj
    if not obj["hosts"]:
        raise click.UsageError("No hosts given, use --host or --inventory")

    connections = []
    for spec in obj["hosts"]:
        remote = parse_remote(spec)
        connections.append(
            Connection(
                remote,
                key=obj["key"],
                strict=obj["strict"],
                as_user=obj["as_user"],
                stdout=None if quiet else sys.stdout,
                stderr=None if quiet else sys.stderr,
                log=get_ssh_logger(remote).info,
            )
        )
    return ConnectionPool(connections)


def with_retries(
    func: Callable[[], Awaitable[List[ExecutionResult]]], retries: int
) -> Callable[[], Awaitable[List[ExecutionResult]]]:
    """调用方的重试策略，核心模块本身不重试"""
    if retries <= 0:
        return func

    def retry_logger(retry_state):
        exception = retry_state.outcome.exception()
        logger.warning(
            f"{exception} retry {retry_state.attempt_number}/{retries + 1}."
        )

    return retry(
        stop=stop_after_attempt(retries + 1),
        after=retry_logger,
        reraise=True,
    )(func)
