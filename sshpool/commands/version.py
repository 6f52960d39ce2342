import shutil
import sys

import click
from rich import box
from rich.console import Console
from rich.table import Table

from sshpool import __version__

EXTERNAL_BINARIES = ["ssh", "scp", "rsync", "tar"]


def print_version():
    click.echo(
        "\n".join(
            [
                f"Version: {__version__}",
                f"Running-Interrupt-Version: Python {' '.join(sys.version.split())}",
                f"Running-Platform: {sys.platform}",
            ]
        )
    )


def print_version_by_rich():
    """
    输出版本信息以及本机外部程序的路径
    """
    console = Console()

    table = Table(show_header=False, box=box.ROUNDED, padding=(0, 1))
    table.add_column("Key", style="cyan bold", width=20)
    table.add_column("Value", style="white")

    table.add_row("Program", "sshpool", style="on blue")
    table.add_row("Version", __version__, style="bright_green")
    table.add_row("Python", " ".join(sys.version.split("\n")))
    table.add_row("Platform", sys.platform)

    for name in EXTERNAL_BINARIES:
        path = shutil.which(name)
        table.add_row(name, path if path else "[red]not found[/red]")

    console.print(table)


@click.command()
@click.option("--simple", "-s", is_flag=True, default=False, help="简化版输出")
def version_command(simple):
    """
    打印版本信息
    """
    if simple:
        print_version()
    else:
        print_version_by_rich()
