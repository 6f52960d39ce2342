"""远程命令执行"""

import asyncio

import click

from sshpool.commands.common import OUTPUT_CHOICES, build_pool, with_retries
from sshpool.core.exceptions import SSHPoolError
from sshpool.core.models import DEFAULT_MAX_BUFFER
from sshpool.ui.formatter import OutputFormatter


@click.command()
@click.argument("command")
@click.option("--max-buffer", default=DEFAULT_MAX_BUFFER, show_default=True, help="单个输出流的最大字节数")
@click.option("--cwd", help="本地工作目录")
@click.option("--retries", default=0, help="失败后重试次数")
@click.option("--output", "-o", type=click.Choice(OUTPUT_CHOICES), default="default", help="输出格式")
@click.option("--template", "-T", help="自定义 Jinja2 输出模板")
@click.option("--quiet", "-q", is_flag=True, help="不显示实时输出")
@click.pass_context
def run_command(ctx, command, max_buffer, cwd, retries, output, template, quiet):
    """在所有主机上执行命令"""

    # 非默认格式时只输出最终结果
    if output != "default":
        quiet = True

    pool = build_pool(ctx, quiet=quiet)
    formatter = OutputFormatter(output, template)

    async def _run():
        return await pool.run(command, max_buffer=max_buffer, cwd=cwd)

    try:
        results = asyncio.run(with_retries(_run, retries)())
    except SSHPoolError as e:
        formatter.print_error(e)
        ctx.exit(1)

    formatter.print_results(results, "Command Execution Results")
