"""输出格式化模块"""

import json
from typing import Any, Dict, List, Optional

import yaml
from jinja2 import Template
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from sshpool.core.exceptions import ProcessError
from sshpool.core.models import ExecutionResult

DEFAULT_TEMPLATE = """
========== {{ host }} ==========
command: {{ command }}
{% if stdout %}
stdout:
{{ stdout }}
{% endif %}
{% if stderr %}
stderr:
{{ stderr }}
{% endif %}
"""


def result_to_dict(result: ExecutionResult) -> Dict[str, Any]:
    """去掉进程句柄，只保留可序列化字段"""
    process = result.process
    return {
        "host": result.host,
        "command": result.command,
        "stdout": result.stdout,
        "stderr": result.stderr,
        "returncode": getattr(process, "returncode", None),
    }


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format_type: str = "default", template: Optional[str] = None):
        self.format_type = format_type.lower()
        self.template = template or DEFAULT_TEMPLATE
        self.console = Console()

    def format_results(self, results: List[ExecutionResult]) -> str:
        if self.format_type == "none":
            return ""
        data = [result_to_dict(r) for r in results]
        if self.format_type == "json":
            return json.dumps(data, indent=2, ensure_ascii=False)
        elif self.format_type == "yaml":
            return yaml.dump(data, indent=2, allow_unicode=True)
        elif self.format_type == "template":
            template = Template(self.template, lstrip_blocks=True, trim_blocks=True)
            return "\n".join(template.render(item) for item in data)
        return self._format_default(data)

    def _format_default(self, data: List[Dict[str, Any]]) -> str:
        output_lines = []
        for item in data:
            output_lines.append(f"\n✅ {item['host']}")
            if item["stdout"]:
                output_lines.append("STDOUT:")
                output_lines.append(item["stdout"].rstrip())
            if item["stderr"]:
                output_lines.append("STDERR:")
                output_lines.append(item["stderr"].rstrip())
            output_lines.append("-" * 50)
        return "\n".join(output_lines)

    def print_results(self, results: List[ExecutionResult], title: Optional[str] = None):
        """默认格式用 Rich 面板，其余格式直接打印"""
        if self.format_type == "none":
            return
        if self.format_type != "default":
            print(self.format_results(results))
            return

        if title:
            self.console.print(f"[bold]{title}[/bold]")
        for result in results:
            content_lines = ["[green]✅ SUCCESS[/green]"]
            if result.stdout:
                content_lines.append("\n[bold]STDOUT:[/bold]")
                content_lines.append(escape(result.stdout.rstrip()))
            if result.stderr:
                content_lines.append("\n[bold red]STDERR:[/bold red]")
                content_lines.append(f"[red]{escape(result.stderr.rstrip())}[/red]")

            self.console.print(
                Panel(
                    "\n".join(content_lines),
                    title=f"[bold]{result.host}[/bold]",
                    border_style="green",
                    expand=False,
                )
            )

    def print_error(self, error: Exception):
        """打印失败信息"""
        content_lines = [f"[red]{escape(str(error))}[/red]"]
        if isinstance(error, ProcessError):
            if error.returncode is not None:
                content_lines.append(f"Exit Code: {error.returncode}")
            if error.stderr:
                content_lines.append("\n[bold red]STDERR:[/bold red]")
                content_lines.append(f"[red]{escape(error.stderr.rstrip())}[/red]")
        self.console.print(
            Panel(
                "\n".join(content_lines),
                title="[bold red]❌ ERROR[/bold red]",
                border_style="red",
                expand=False,
            )
        )
