# packages/server/src/lingohub/presentation/cli/commands/db.py
"""数据库管理命令：建表、删表与 Alembic 迁移。"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from alembic import command
from alembic.config import Config as AlembicConfig
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from lingohub.infrastructure.db import (
    create_all,
    create_async_db_engine,
    dispose_engine,
    drop_all,
)
from lingohub.management.config_utils import mask_db_url

from .._state import CLISharedState

app = typer.Typer(help="数据库管理命令。", no_args_is_help=True)
console = Console()


def _find_alembic_ini() -> Path:
    """自下而上查找 alembic.ini。"""
    start = Path(__file__).resolve().parent
    for p in [*start.parents, Path.cwd(), *Path.cwd().parents]:
        for cand in (p / "packages" / "server" / "alembic.ini", p / "alembic.ini"):
            if cand.is_file():
                return cand
    raise FileNotFoundError("未找到 Alembic 配置文件 'alembic.ini'。")


async def _run_schema(state: CLISharedState, create: bool) -> None:
    engine = create_async_db_engine(state.config)
    try:
        await (create_all(engine) if create else drop_all(engine))
    finally:
        await dispose_engine(engine)


@app.command("init")
def db_init(ctx: typer.Context) -> None:
    """按 ORM 模型直接建表（开发与测试环境使用）。"""
    state: CLISharedState = ctx.obj
    try:
        asyncio.run(_run_schema(state, create=True))
    except SQLAlchemyError as e:
        console.print(f"[bold red]❌ 建表失败: {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print(
        f"[bold green]✅ 数据表已创建[/bold green]: {mask_db_url(state.config.database.url)}"
    )


@app.command("drop")
def db_drop(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "-y", "--yes", help="跳过确认。"),
) -> None:
    """[危险] 删除所有数据表。"""
    state: CLISharedState = ctx.obj
    if not yes:
        typer.confirm(
            f"确定要删除 '{mask_db_url(state.config.database.url)}' 中的所有表吗?",
            abort=True,
        )
    try:
        asyncio.run(_run_schema(state, create=False))
    except SQLAlchemyError as e:
        console.print(f"[bold red]❌ 删表失败: {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print("[bold yellow]数据表已删除。[/bold yellow]")


@app.command("migrate")
def db_migrate(
    ctx: typer.Context,
    revision: str = typer.Argument("head", help="目标版本。"),
) -> None:
    """运行 Alembic 迁移，将 Schema 升级到指定版本。"""
    state: CLISharedState = ctx.obj
    try:
        alembic_cfg = AlembicConfig(str(_find_alembic_ini()))
        alembic_cfg.attributes["lingohub_config"] = state.config
        command.upgrade(alembic_cfg, revision)
    except (FileNotFoundError, SQLAlchemyError) as e:
        console.print(f"[bold red]❌ 迁移命令执行失败: {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print("[bold green]✅ 迁移完成。[/bold green]")
