# packages/server/src/lingohub/presentation/cli/commands/tag.py
"""标签管理命令。"""

from __future__ import annotations

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from lingohub_core.exceptions import LingoHubError
from lingohub_core.types import Page, TagRecord

from .._state import CLISharedState
from .._utils import get_coordinator

app = typer.Typer(help="标签管理。", no_args_is_help=True)
console = Console()


async def _add(state: CLISharedState, name: str) -> TagRecord:
    async with get_coordinator(state) as coordinator:
        return await coordinator.create_tag(name)


async def _list(
    state: CLISharedState, name: str | None, page: int, per_page: int | None
) -> Page[TagRecord]:
    async with get_coordinator(state) as coordinator:
        return await coordinator.search_tags(name, page, per_page)


@app.command("add")
def tag_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="标签名称。")],
) -> None:
    """创建一个标签。"""
    state: CLISharedState = ctx.obj
    try:
        record = asyncio.run(_add(state, name))
    except LingoHubError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ 标签已创建[/green]: {record.name} ([dim]{record.id}[/dim])")


@app.command("list")
def tag_list(
    ctx: typer.Context,
    name: Annotated[
        Optional[str], typer.Option("--name", help="按名称子串过滤。")
    ] = None,
    page: Annotated[int, typer.Option("--page", min=1)] = 1,
    per_page: Annotated[Optional[int], typer.Option("--per-page", min=1)] = None,
) -> None:
    """分页列出标签。"""
    state: CLISharedState = ctx.obj
    result = asyncio.run(_list(state, name, page, per_page))

    table = Table(title=f"标签（第 {result.page}/{result.last_page} 页，共 {result.total} 个）")
    table.add_column("ID", style="dim")
    table.add_column("名称", style="cyan")
    table.add_column("键数量", justify="right")
    for tag in result.items:
        table.add_row(tag.id, tag.name, str(len(tag.translation_keys)))
    console.print(table)
