"""主命令行接口"""

import click

from sshpool import __version__
from sshpool.commands.copy import copy_command
from sshpool.commands.run import run_command
from sshpool.commands.version import version_command
from sshpool.config.inventory import load_inventory
from sshpool.core.exceptions import ConfigError
from sshpool.log import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--inventory", "-i", type=click.Path(), help="YAML 主机清单路径")
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
)
@click.option("--host", "-H", "hosts", multiple=True, help="目标主机 user@host[:port]")
@click.option("--key", "-k", help="SSH 私钥路径")
@click.option("--strict", help="StrictHostKeyChecking 取值")
@click.option("--as-user", "-u", help="以该用户身份执行远程命令")
@click.pass_context
def cli(ctx, inventory, log_level, hosts, key, strict, as_user):
    """sshpool - run commands and copy directories on many hosts over SSH

    Drives the local ssh / rsync / scp / tar binaries; rsync is used when
    available, otherwise copies fall back to tar + scp.
    """
    setup_logging(log_level)

    options = {"key": key, "strict": strict, "as_user": as_user}
    all_hosts = list(hosts)

    # 命令行参数优先于清单
    if inventory:
        try:
            inv = load_inventory(inventory)
        except ConfigError as e:
            raise click.BadParameter(str(e), param_hint="--inventory")
        all_hosts = inv.hosts + all_hosts
        for name, value in inv.connection_options().items():
            if options[name] is None:
                options[name] = value

    ctx.ensure_object(dict)
    ctx.obj.update(options)
    ctx.obj["hosts"] = all_hosts


# 注册子命令
cli.add_command(run_command, name="run")
cli.add_command(copy_command, name="copy")
cli.add_command(version_command, name="version")


def main():
    """主入口函数"""
    cli()


if __name__ == "__main__":
    main()
