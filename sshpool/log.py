import logging
import sys

from sshpool.core.models import RemoteEndpoint

ssh_formatter = logging.Formatter(
    fmt="%(asctime)s [%(hostname)s][%(levelname)s] %(message)s"
)
ssh_streamHandler = logging.StreamHandler(sys.stderr)
ssh_streamHandler.setFormatter(ssh_formatter)

# 带主机名的日志，只接收 get_ssh_logger 产生的记录
ssh_logger = logging.getLogger("sshpool.ssh")
ssh_logger.setLevel(logging.INFO)
ssh_logger.propagate = False
ssh_logger.addHandler(ssh_streamHandler)


def setup_logging(level: str = "INFO"):
    """配置根日志和 ssh 日志级别"""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s:%(name)s:%(levelname)s:%(message)s",
    )
    logging.getLogger("sshpool").setLevel(log_level)
    ssh_logger.setLevel(log_level)


def get_ssh_logger(remote: RemoteEndpoint) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(logger=ssh_logger, extra={"hostname": remote.host})
