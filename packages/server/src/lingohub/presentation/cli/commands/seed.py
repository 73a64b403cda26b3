# packages/server/src/lingohub/presentation/cli/commands/seed.py
"""填充演示数据。"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console

from lingohub.infrastructure.db import (
    create_async_db_engine,
    create_async_sessionmaker,
    dispose_engine,
)
from lingohub.management.seed import SeedSummary, seed_database

from .._state import CLISharedState
from .._utils import get_coordinator

console = Console()


async def _seed(state: CLISharedState, count: int) -> SeedSummary:
    engine = create_async_db_engine(state.config)
    try:
        summary = await seed_database(
            create_async_sessionmaker(engine),
            count,
            batch_size=state.config.export.batch_size,
        )
    finally:
        await dispose_engine(engine)

    # 数据绕过了服务层写入，需要手动清除导出缓存
    async with get_coordinator(state) as coordinator:
        await coordinator.export_service.invalidate()
    return summary


def seed_command(
    ctx: typer.Context,
    count: Annotated[
        int, typer.Option("--count", "-n", min=1, help="要生成的翻译条数。")
    ] = 1000,
) -> None:
    """创建 mobile/desktop/web 标签并生成随机翻译。"""
    state: CLISharedState = ctx.obj
    with console.status(f"正在写入 {count} 条翻译..."):
        summary = asyncio.run(_seed(state, count))
    console.print(
        f"[bold green]✅ 完成[/bold green]: {summary.translations} 条翻译，"
        f"{summary.tags} 个标签。"
    )
