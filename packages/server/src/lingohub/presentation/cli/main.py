# packages/server/src/lingohub/presentation/cli/main.py
"""`lingohub` 命令行入口。"""

import os
from typing import Literal

import typer
from rich.console import Console
from rich.traceback import install as install_rich_tracebacks

from lingohub.bootstrap import create_app_config
from lingohub.observability.logging_config import setup_logging_from_config

from ._state import CLISharedState
from .commands import db, export, seed, tag

install_rich_tracebacks(word_wrap=True)

app = typer.Typer(
    name="lingohub",
    help="LingoHub 翻译管理命令行工具。",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(db.app, name="db")
app.add_typer(tag.app, name="tag")
app.command("export")(export.export_command)
app.command("seed")(seed.seed_command)

console = Console()


@app.callback()
def main(ctx: typer.Context) -> None:
    """加载配置、初始化日志，并把共享状态挂到上下文上。"""
    env_mode_str = os.getenv("LINGOHUB_ENV", "dev").lower()
    if env_mode_str not in ("prod", "dev", "test"):
        env_mode_str = "dev"
    env_mode: Literal["prod", "dev", "test"] = env_mode_str  # type: ignore[assignment]

    try:
        config = create_app_config(env_mode=env_mode)
    except ValueError as e:
        console.print(f"[bold red]❌ 启动失败：无法加载配置: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    setup_logging_from_config(config, service="lingohub-cli")
    ctx.obj = CLISharedState(config)


if __name__ == "__main__":
    app()
