# packages/server/src/lingohub/presentation/cli/commands/export.py
"""导出全部翻译。"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console

from .._state import CLISharedState
from .._utils import get_coordinator

console = Console()


async def _export(state: CLISharedState) -> list[dict[str, Any]]:
    async with get_coordinator(state) as coordinator:
        return await coordinator.export_translations()


def export_command(
    ctx: typer.Context,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="写入的 JSON 文件；缺省时输出到终端。"),
    ] = None,
) -> None:
    """导出全部翻译为 JSON（键数量受 LINGOHUB_EXPORT__MAX_KEYS 限制）。"""
    state: CLISharedState = ctx.obj
    document = asyncio.run(_export(state))
    payload = json.dumps(document, ensure_ascii=False, indent=2)

    if output is None:
        console.print_json(payload)
        return
    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]✅ 已导出 {len(document)} 个键到[/green] {output}")
