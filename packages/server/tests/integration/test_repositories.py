# packages/server/tests/integration/test_repositories.py
"""
持久化层（仓库）的集成测试。
验证每个仓库方法与真实 SQLite 数据库的交互。
"""

import pytest
from sqlalchemy import func, select

from lingohub.infrastructure.db._schema import TagTranslationKey, TranslationKey
from lingohub.infrastructure.uow import UowFactory
from lingohub_core.exceptions import DuplicateNameError, DuplicateTranslationError

pytestmark = [pytest.mark.db, pytest.mark.integration]


async def _count_links(uow_factory: UowFactory, key_id: str) -> int:
    async with uow_factory() as uow:
        return await uow.session.scalar(
            select(func.count(TagTranslationKey.id)).where(
                TagTranslationKey.translation_key_id == key_id
            )
        )


@pytest.mark.asyncio
async def test_get_or_create_key_is_idempotent(uow_factory: UowFactory):
    async with uow_factory() as uow:
        key_id, created = await uow.keys.get_or_create("home.title")
        again_id, created_again = await uow.keys.get_or_create("home.title")

    assert created is True
    assert created_again is False
    assert again_id == key_id

    async with uow_factory() as uow:
        assert await uow.keys.find_id("home.title") == key_id
        count = await uow.session.scalar(select(func.count(TranslationKey.id)))
        assert count == 1


@pytest.mark.asyncio
async def test_sync_tags_twice_creates_no_duplicates(uow_factory: UowFactory):
    async with uow_factory() as uow:
        key_id, _ = await uow.keys.get_or_create("welcome")
        tag_a = await uow.tags.add("a")
        tag_b = await uow.tags.add("b")

    for _ in range(2):
        async with uow_factory() as uow:
            await uow.keys.sync_tags(key_id, [tag_a, tag_b])

    assert await _count_links(uow_factory, key_id) == 2


@pytest.mark.asyncio
async def test_sync_tags_replaces_and_attach_only_adds(uow_factory: UowFactory):
    async with uow_factory() as uow:
        key_id, _ = await uow.keys.get_or_create("welcome")
        tag_a = await uow.tags.add("a")
        tag_b = await uow.tags.add("b")
        tag_c = await uow.tags.add("c")
        await uow.keys.sync_tags(key_id, [tag_a, tag_b])

    async with uow_factory() as uow:
        await uow.keys.sync_tags(key_id, [tag_b, tag_c])
        assert sorted(await uow.keys.tag_ids(key_id)) == sorted([tag_b, tag_c])

    async with uow_factory() as uow:
        await uow.keys.attach_tags(key_id, [tag_a, tag_b])
        assert sorted(await uow.keys.tag_ids(key_id)) == sorted([tag_a, tag_b, tag_c])

    async with uow_factory() as uow:
        await uow.keys.sync_tags(key_id, [])
        assert await uow.keys.tag_ids(key_id) == []


@pytest.mark.asyncio
async def test_translation_unique_constraint_maps_to_domain_error(uow_factory: UowFactory):
    """绕过前置检查直接插入重复行，唯一约束兜底并转换为领域异常。"""
    async with uow_factory() as uow:
        key_id, _ = await uow.keys.get_or_create("welcome")
        await uow.translations.add(key_id, "en", "Hi")

    async with uow_factory() as uow:
        with pytest.raises(DuplicateTranslationError) as exc_info:
            await uow.translations.add(key_id, "en", "Hello")
        # SAVEPOINT 回滚后，外层事务仍然可用
        assert await uow.translations.exists(key_id, "en")

    assert exc_info.value.key == "welcome"
    assert exc_info.value.locale == "en"


@pytest.mark.asyncio
async def test_tag_unique_constraint_maps_to_domain_error(uow_factory: UowFactory):
    async with uow_factory() as uow:
        await uow.tags.add("mobile")

    async with uow_factory() as uow:
        with pytest.raises(DuplicateNameError):
            await uow.tags.add("mobile")
        assert await uow.tags.find_id_by_name("mobile") is not None


@pytest.mark.asyncio
async def test_delete_key_cascades_links(uow_factory: UowFactory):
    async with uow_factory() as uow:
        key_id, _ = await uow.keys.get_or_create("welcome")
        tag_id = await uow.tags.add("common")
        await uow.keys.sync_tags(key_id, [tag_id])

    async with uow_factory() as uow:
        await uow.keys.delete(key_id)

    assert await _count_links(uow_factory, key_id) == 0
    async with uow_factory() as uow:
        assert await uow.tags.get(tag_id) is not None


@pytest.mark.asyncio
async def test_missing_tag_ids(uow_factory: UowFactory):
    async with uow_factory() as uow:
        tag_id = await uow.tags.add("web")
        assert await uow.tags.missing_ids([tag_id, "nope", tag_id]) == ["nope"]
        assert await uow.tags.missing_ids([]) == []


@pytest.mark.asyncio
async def test_export_repository_batches(uow_factory: UowFactory):
    async with uow_factory() as uow:
        tag_id = await uow.tags.add("web")
        for key in ("c.key", "a.key", "b.key"):
            key_id, _ = await uow.keys.get_or_create(key)
            await uow.translations.add(key_id, "en", key.upper())
            await uow.keys.sync_tags(key_id, [tag_id])

    async with uow_factory() as uow:
        assert await uow.export.count_keys() == 3
        listed = await uow.export.list_keys(2)
        assert [key for _, key in listed] == ["a.key", "b.key"]

        rows = await uow.export.fetch_batch([key_id for key_id, _ in listed])
        assert sorted(rows) == [
            ("a.key", "en", "A.KEY", "web"),
            ("b.key", "en", "B.KEY", "web"),
        ]
        assert await uow.export.fetch_batch([]) == []


@pytest.mark.asyncio
async def test_key_translation_lookup_with_fallback(uow_factory: UowFactory):
    from sqlalchemy.orm import selectinload

    async with uow_factory() as uow:
        key_id, _ = await uow.keys.get_or_create("home.title")
        await uow.translations.add(key_id, "en", "Home")
        await uow.translations.add(key_id, "fr", "Accueil")

    async with uow_factory() as uow:
        key = await uow.session.scalar(
            select(TranslationKey)
            .where(TranslationKey.id == key_id)
            .options(selectinload(TranslationKey.translations))
        )
        assert key.get_translation("fr").content == "Accueil"
        assert key.get_translation("de") is None
        assert key.get_translation_with_fallback("de").content == "Home"
        assert key.get_translation_with_fallback("de", "fr").content == "Accueil"
        with pytest.raises(ValueError, match="at most 5 characters"):
            key.get_translation("en_USA")


@pytest.mark.asyncio
async def test_tagged_keys_are_capped_per_tag_in_sql(uow_factory: UowFactory):
    from lingohub.infrastructure.persistence._query import tagged_keys_statement

    async with uow_factory() as uow:
        busy = await uow.tags.add("busy")
        quiet = await uow.tags.add("quiet")
        for key in ("k.c", "k.a", "k.d", "k.b"):
            key_id, _ = await uow.keys.get_or_create(key)
            await uow.keys.attach_tags(key_id, [busy])
        key_id, _ = await uow.keys.get_or_create("k.z")
        await uow.keys.attach_tags(key_id, [quiet])

    async with uow_factory() as uow:
        rows = (
            await uow.session.execute(tagged_keys_statement([busy, quiet], 2))
        ).all()
        assert sorted((tag_id, key) for tag_id, _, key in rows) == sorted(
            [(busy, "k.a"), (busy, "k.b"), (quiet, "k.z")]
        )

        capped = await uow.tags.get(busy, key_limit=3)
        assert [k.key for k in capped.translation_keys] == ["k.a", "k.b", "k.c"]
        full = await uow.tags.get(busy)
        assert len(full.translation_keys) == 4

        page = await uow.tags.search(None, 1, 10, key_limit=1)
        assert {t.name: [k.key for k in t.translation_keys] for t in page.items} == {
            "busy": ["k.a"],
            "quiet": ["k.z"],
        }
