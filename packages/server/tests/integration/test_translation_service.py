# packages/server/tests/integration/test_translation_service.py
"""
翻译写操作的集成测试：唯一性、孤儿键清理、重命名时的标签迁移与原子性。
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from lingohub.application.coordinator import Coordinator
from lingohub.infrastructure.db._schema import (
    TagTranslationKey,
    Translation,
    TranslationKey,
)
from lingohub.infrastructure.uow import UowFactory
from lingohub_core.exceptions import (
    DuplicateTranslationError,
    EntityNotFoundError,
    FieldValidationError,
)
from lingohub_core.types import TranslationPatch

pytestmark = [pytest.mark.db, pytest.mark.integration]


async def _count(uow_factory: UowFactory, column, *where) -> int:
    async with uow_factory() as uow:
        return await uow.session.scalar(select(func.count(column)).where(*where))


async def _key_id(uow_factory: UowFactory, key: str) -> str | None:
    async with uow_factory() as uow:
        return await uow.keys.find_id(key)


@pytest.mark.asyncio
async def test_create_returns_record_with_key_and_tags(coordinator: Coordinator):
    tag = await coordinator.create_tag("common")
    record = await coordinator.create_translation("welcome", "fr", "Salut", [tag.id])

    assert record.key == "welcome"
    assert record.locale == "fr"
    assert record.content == "Salut"
    assert [t.name for t in record.tags] == ["common"]
    assert record.created_at is not None

    fetched = await coordinator.get_translation(record.id)
    assert fetched == record


@pytest.mark.asyncio
async def test_duplicate_key_locale_is_rejected_without_writes(
    coordinator: Coordinator, uow_factory: UowFactory
):
    await coordinator.create_translation("welcome", "en", "Hi")

    with pytest.raises(DuplicateTranslationError) as exc_info:
        await coordinator.create_translation("welcome", "en", "Hello")

    assert exc_info.value.key == "welcome"
    assert exc_info.value.locale == "en"
    assert "already exists" in str(exc_info.value)
    assert await _count(uow_factory, Translation.id) == 1
    assert await _count(uow_factory, TranslationKey.id) == 1


@pytest.mark.asyncio
async def test_create_with_unknown_tag_leaves_no_key(
    coordinator: Coordinator, uow_factory: UowFactory
):
    with pytest.raises(EntityNotFoundError) as exc_info:
        await coordinator.create_translation("welcome", "en", "Hi", ["missing-tag"])
    assert exc_info.value.entity == "Tag"
    assert await _count(uow_factory, TranslationKey.id) == 0


@pytest.mark.asyncio
async def test_create_rolls_back_when_tag_sync_fails(
    coordinator: Coordinator, uow_factory: UowFactory, mocker
):
    """标签同步失败时，键与翻译的插入一并回滚，原异常原样抛出。"""
    tag = await coordinator.create_tag("common")
    boom = RuntimeError("storage failure")
    mocker.patch(
        "lingohub.infrastructure.persistence.repositories._key_repo."
        "SqlAlchemyTranslationKeyRepository.sync_tags",
        side_effect=boom,
    )

    with pytest.raises(RuntimeError) as exc_info:
        await coordinator.create_translation("welcome", "en", "Hi", [tag.id])

    assert exc_info.value is boom
    assert await _count(uow_factory, Translation.id) == 0
    assert await _count(uow_factory, TranslationKey.id) == 0


@pytest.mark.asyncio
async def test_create_validates_fields(coordinator: Coordinator):
    with pytest.raises(FieldValidationError):
        await coordinator.create_translation("Bad Key", "en", "x")
    with pytest.raises(FieldValidationError) as exc_info:
        await coordinator.create_translation("ok.key", "en_USA", "x")
    assert "at most 5 characters" in str(exc_info.value)


@pytest.mark.asyncio
async def test_deleting_only_translation_removes_key_and_links(
    coordinator: Coordinator, uow_factory: UowFactory
):
    tag = await coordinator.create_tag("common")
    record = await coordinator.create_translation("welcome", "en", "Hi", [tag.id])
    key_id = await _key_id(uow_factory, "welcome")

    await coordinator.delete_translation(record.id)

    assert await _key_id(uow_factory, "welcome") is None
    assert (
        await _count(
            uow_factory,
            TagTranslationKey.id,
            TagTranslationKey.translation_key_id == key_id,
        )
        == 0
    )
    # 标签本身不受影响
    assert (await coordinator.get_tag(tag.id)).name == "common"


@pytest.mark.asyncio
async def test_deleting_one_of_several_translations_keeps_key(
    coordinator: Coordinator, uow_factory: UowFactory
):
    en = await coordinator.create_translation("welcome", "en", "Hi")
    fr = await coordinator.create_translation("welcome", "fr", "Salut")

    await coordinator.delete_translation(en.id)

    assert await _key_id(uow_factory, "welcome") is not None
    assert (await coordinator.get_translation(fr.id)).locale == "fr"


@pytest.mark.asyncio
async def test_delete_and_get_unknown_id(coordinator: Coordinator):
    with pytest.raises(EntityNotFoundError):
        await coordinator.delete_translation("nope")
    with pytest.raises(EntityNotFoundError):
        await coordinator.get_translation("nope")
    with pytest.raises(EntityNotFoundError):
        await coordinator.update_translation("nope", {"content": "x"})


@pytest.mark.asyncio
async def test_rename_preserves_tags(coordinator: Coordinator, uow_factory: UowFactory):
    web = await coordinator.create_tag("web")
    mobile = await coordinator.create_tag("mobile")
    record = await coordinator.create_translation(
        "old.key", "en", "Hi", [web.id, mobile.id]
    )

    updated = await coordinator.update_translation(record.id, {"key": "new.key"})

    assert updated.id == record.id
    assert updated.key == "new.key"
    assert sorted(t.name for t in updated.tags) == ["mobile", "web"]
    # 旧键已无翻译，被清理
    assert await _key_id(uow_factory, "old.key") is None


@pytest.mark.asyncio
async def test_rename_keeps_old_key_that_still_has_translations(
    coordinator: Coordinator, uow_factory: UowFactory
):
    tag = await coordinator.create_tag("common")
    en = await coordinator.create_translation("shared", "en", "Hi", [tag.id])
    await coordinator.create_translation("shared", "fr", "Salut")

    moved = await coordinator.update_translation(en.id, {"key": "moved"})

    assert [t.name for t in moved.tags] == ["common"]
    assert await _key_id(uow_factory, "shared") is not None


@pytest.mark.asyncio
async def test_rename_with_tag_ids_syncs_new_key(coordinator: Coordinator):
    web = await coordinator.create_tag("web")
    desktop = await coordinator.create_tag("desktop")
    record = await coordinator.create_translation("old.key", "en", "Hi", [web.id])

    updated = await coordinator.update_translation(
        record.id, TranslationPatch(key="new.key", tag_ids=[desktop.id])
    )

    assert [t.name for t in updated.tags] == ["desktop"]


@pytest.mark.asyncio
async def test_rename_onto_existing_key_reuses_it(
    coordinator: Coordinator, uow_factory: UowFactory
):
    web = await coordinator.create_tag("web")
    mobile = await coordinator.create_tag("mobile")
    await coordinator.create_translation("target", "en", "Hello", [mobile.id])
    record = await coordinator.create_translation("source", "fr", "Salut", [web.id])

    updated = await coordinator.update_translation(record.id, {"key": "target"})

    assert updated.key == "target"
    assert sorted(t.name for t in updated.tags) == ["mobile", "web"]
    assert await _count(uow_factory, TranslationKey.id) == 1


@pytest.mark.asyncio
async def test_rename_onto_taken_key_locale_fails_atomically(
    coordinator: Coordinator, uow_factory: UowFactory
):
    await coordinator.create_translation("target", "en", "Hello")
    record = await coordinator.create_translation("source", "en", "Hi")

    with pytest.raises(DuplicateTranslationError):
        await coordinator.update_translation(
            record.id, {"key": "target", "content": "changed"}
        )

    unchanged = await coordinator.get_translation(record.id)
    assert unchanged.key == "source"
    assert unchanged.content == "Hi"


@pytest.mark.asyncio
async def test_locale_change_to_taken_locale_fails(coordinator: Coordinator):
    await coordinator.create_translation("welcome", "en", "Hi")
    fr = await coordinator.create_translation("welcome", "fr", "Salut")

    with pytest.raises(DuplicateTranslationError):
        await coordinator.update_translation(fr.id, {"locale": "en"})

    moved = await coordinator.update_translation(fr.id, {"locale": "es"})
    assert moved.locale == "es"


@pytest.mark.asyncio
async def test_partial_update_distinguishes_absent_from_empty(coordinator: Coordinator):
    tag = await coordinator.create_tag("common")
    record = await coordinator.create_translation("welcome", "en", "Hi", [tag.id])

    only_content = await coordinator.update_translation(record.id, {"content": ""})
    assert only_content.content == ""
    assert only_content.locale == "en"
    assert [t.name for t in only_content.tags] == ["common"]

    untagged = await coordinator.update_translation(record.id, {"tag_ids": []})
    assert untagged.tags == []


@pytest.mark.asyncio
async def test_explicit_null_key_is_rejected(coordinator: Coordinator):
    record = await coordinator.create_translation("welcome", "en", "Hi")
    with pytest.raises(ValidationError):
        await coordinator.update_translation(record.id, {"key": None})


@pytest.mark.asyncio
async def test_concrete_welcome_scenario(coordinator: Coordinator):
    common = await coordinator.create_tag("common")
    await coordinator.create_translation("welcome", "en", "Hi")
    await coordinator.create_translation("welcome", "fr", "Salut", [common.id])

    assert await coordinator.export_translations() == [
        {
            "key": "welcome",
            "translations": {"en": "Hi", "fr": "Salut"},
            "tags": ["common"],
        }
    ]
    with pytest.raises(DuplicateTranslationError):
        await coordinator.create_translation("welcome", "en", "Hello")
