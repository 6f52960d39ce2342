"""目录复制"""

import asyncio

import click

from sshpool.commands.common import OUTPUT_CHOICES, build_pool, with_retries
from sshpool.core.exceptions import SSHPoolError
from sshpool.core.models import DEFAULT_MAX_BUFFER, Direction
from sshpool.ui.formatter import OutputFormatter


@click.command()
@click.argument("src")
@click.argument("dest")
@click.option(
    "--direction",
    "-d",
    type=click.Choice([d.value for d in Direction]),
    default=Direction.LOCAL_TO_REMOTE.value,
    show_default=True,
    help="复制方向",
)
@click.option("--ignore", "-x", "ignores", multiple=True, help="忽略的文件模式")
@click.option("--rsync-arg", "rsync_args", multiple=True, help="附加的 rsync 参数")
@click.option("--use-shim", is_flag=True, help="强制使用 tar + scp")
@click.option("--max-buffer", default=DEFAULT_MAX_BUFFER, show_default=True, help="单个输出流的最大字节数")
@click.option("--retries", default=0, help="失败后重试次数")
@click.option("--output", "-o", type=click.Choice(OUTPUT_CHOICES), default="default", help="输出格式")
@click.option("--template", "-T", help="自定义 Jinja2 输出模板")
@click.option("--quiet", "-q", is_flag=True, help="不显示实时输出")
@click.pass_context
def copy_command(
    ctx,
    src,
    dest,
    direction,
    ignores,
    rsync_args,
    use_shim,
    max_buffer,
    retries,
    output,
    template,
    quiet,
):
    """在所有主机上复制目录

    example:
      sshpool -H deploy@web1 -H deploy@web2 copy ./dist /srv/app
    """

    if output != "default":
        quiet = True

    pool = build_pool(ctx, quiet=quiet)
    formatter = OutputFormatter(output, template)

    async def _copy():
        return await pool.copy(
            src,
            dest,
            direction=direction,
            ignores=list(ignores),
            rsync=list(rsync_args),
            use_shim=use_shim,
            max_buffer=max_buffer,
        )

    try:
        results = asyncio.run(with_retries(_copy, retries)())
    except SSHPoolError as e:
        formatter.print_error(e)
        ctx.exit(1)

    formatter.print_results(results, "Copy Results")
