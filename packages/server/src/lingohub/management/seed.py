# packages/server/src/lingohub/management/seed.py
"""
演示/压测数据填充。

创建固定标签 mobile / desktop / web，再生成 N 条随机翻译，
每条翻译的键挂 1 到 3 个随机标签。用于对导出管线做容量测试。
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from lingohub.domain.ids import new_id
from lingohub.infrastructure.db import session_scope
from lingohub.infrastructure.db._schema import (
    Tag,
    TagTranslationKey,
    Translation,
    TranslationKey,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = structlog.get_logger(__name__)

SEED_TAGS = ("mobile", "desktop", "web")
SEED_LOCALES = ("en", "fr", "es")
_PREFIXES = ("home", "auth", "common", "errors", "validation", "messages")
_SUFFIXES = ("title", "description", "button", "label", "placeholder", "message")
_WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua"
).split()


@dataclass(frozen=True)
class SeedSummary:
    tags: int
    translations: int


def _sentence(rng: random.Random) -> str:
    words = rng.sample(_WORDS, rng.randint(3, 8))
    return " ".join(words).capitalize() + "."


def _synthetic_key(rng: random.Random) -> str:
    suffix = new_id().replace("-", "")[:12]
    return f"{rng.choice(_PREFIXES)}.{rng.choice(_SUFFIXES)}.{suffix}"


async def _ensure_tags(session: AsyncSession) -> list[str]:
    stmt = select(Tag.name, Tag.id).where(Tag.name.in_(list(SEED_TAGS)))
    existing: dict[str, str] = {
        name: tag_id for name, tag_id in await session.execute(stmt)
    }
    for name in SEED_TAGS:
        if name not in existing:
            tag = Tag(name=name)
            session.add(tag)
            existing[name] = tag.id
    await session.flush()
    return [existing[name] for name in SEED_TAGS]


async def seed_database(
    sessionmaker: async_sessionmaker[AsyncSession],
    count: int,
    *,
    batch_size: int = 1000,
    rng: random.Random | None = None,
) -> SeedSummary:
    """写入 `count` 条随机翻译，每 `batch_size` 条提交一次。"""
    rng = rng or random.Random()

    async with session_scope(sessionmaker) as session:
        tag_ids = await _ensure_tags(session)
    logger.info("种子标签已就绪", tags=list(SEED_TAGS))

    written = 0
    while written < count:
        size = min(batch_size, count - written)
        async with session_scope(sessionmaker) as session:
            keys = [TranslationKey(key=_synthetic_key(rng)) for _ in range(size)]
            session.add_all(keys)
            # 先落地键，再写入引用它们的译文与关联行
            await session.flush()
            for key in keys:
                session.add(
                    Translation(
                        translation_key_id=key.id,
                        locale=rng.choice(SEED_LOCALES),
                        content=_sentence(rng),
                    )
                )
                for tag_id in rng.sample(tag_ids, rng.randint(1, len(tag_ids))):
                    session.add(
                        TagTranslationKey(tag_id=tag_id, translation_key_id=key.id)
                    )
        written += size
        logger.debug("种子批次已提交", written=written, total=count)

    logger.info("种子数据写入完成", translations=written)
    return SeedSummary(tags=len(tag_ids), translations=written)
