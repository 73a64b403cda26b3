# packages/server/tests/integration/test_export.py
"""导出管线：完整性、缓存命中与失效、批次与上限。"""

import asyncio

import pytest

from lingohub.application.coordinator import Coordinator
from lingohub.application.services import ExportState

pytestmark = [pytest.mark.db, pytest.mark.integration]


async def _seed(coordinator: Coordinator, count: int) -> None:
    tag = await coordinator.create_tag("common")
    for i in range(count):
        await coordinator.create_translation(f"key.{i:03d}", "en", f"en {i}", [tag.id])
        await coordinator.create_translation(f"key.{i:03d}", "fr", f"fr {i}")


@pytest.mark.asyncio
async def test_empty_store_exports_empty_list(coordinator: Coordinator):
    assert await coordinator.export_translations() == []


@pytest.mark.asyncio
async def test_every_key_appears_once_with_all_locales(coordinator: Coordinator):
    web = await coordinator.create_tag("web")
    mobile = await coordinator.create_tag("mobile")
    await coordinator.create_translation("b.key", "en", "B", [web.id, mobile.id])
    await coordinator.create_translation("b.key", "de", "Be")
    await coordinator.create_translation("a.key", "en", "A")

    assert await coordinator.export_translations() == [
        {"key": "a.key", "translations": {"en": "A"}, "tags": []},
        {
            "key": "b.key",
            "translations": {"de": "Be", "en": "B"},
            "tags": ["mobile", "web"],
        },
    ]


@pytest.mark.asyncio
async def test_cache_hit_skips_rebuild(coordinator: Coordinator):
    await _seed(coordinator, 2)
    export = coordinator.export_service

    first = await coordinator.export_translations()
    assert export.build_count == 1
    assert export.state is ExportState.CACHED

    second = await coordinator.export_translations()
    assert second == first
    assert export.build_count == 1


@pytest.mark.asyncio
async def test_editing_a_result_does_not_alter_cached_document(
    coordinator: Coordinator,
):
    await coordinator.create_translation("welcome", "en", "Hi")

    first = await coordinator.export_translations()
    first[0]["translations"]["en"] = "changed"
    first.append({"key": "extra", "translations": {}, "tags": []})

    second = await coordinator.export_translations()
    second[0]["tags"].append("edited")

    assert await coordinator.export_translations() == [
        {"key": "welcome", "translations": {"en": "Hi"}, "tags": []}
    ]
    assert coordinator.export_service.build_count == 1


@pytest.mark.asyncio
async def test_write_invalidates_cache(coordinator: Coordinator):
    await coordinator.create_translation("welcome", "en", "Hi")
    export = coordinator.export_service
    await coordinator.export_translations()
    assert export.build_count == 1

    record = await coordinator.create_translation("welcome", "fr", "Salut")
    assert export.state is ExportState.IDLE
    doc = await coordinator.export_translations()
    assert doc[0]["translations"] == {"en": "Hi", "fr": "Salut"}
    assert export.build_count == 2

    await coordinator.update_translation(record.id, {"content": "Bonjour"})
    doc = await coordinator.export_translations()
    assert doc[0]["translations"]["fr"] == "Bonjour"

    await coordinator.delete_translation(record.id)
    doc = await coordinator.export_translations()
    assert doc[0]["translations"] == {"en": "Hi"}
    assert export.build_count == 4


@pytest.mark.asyncio
async def test_cache_expires_after_ttl(coordinator: Coordinator, clock, test_config):
    await coordinator.create_translation("welcome", "en", "Hi")
    export = coordinator.export_service

    await coordinator.export_translations()
    clock.advance(test_config.export.cache_ttl - 1)
    await coordinator.export_translations()
    assert export.build_count == 1

    clock.advance(2)
    await coordinator.export_translations()
    assert export.build_count == 2


@pytest.mark.asyncio
async def test_small_batches_produce_same_document(coordinator_factory):
    default = coordinator_factory()
    await _seed(default, 7)
    expected = await default.export_translations()

    batched = coordinator_factory(batch_size=2)
    await batched.export_service.invalidate()
    assert await batched.export_translations() == expected
    assert batched.export_service.build_count == 1
    assert len(expected) == 7
    assert expected[0] == {
        "key": "key.000",
        "translations": {"en": "en 0", "fr": "fr 0"},
        "tags": ["common"],
    }


@pytest.mark.asyncio
async def test_key_cap_truncates_and_warns(coordinator_factory, mocker):
    await _seed(coordinator_factory(), 5)
    logger = mocker.patch("lingohub.application.services._export.logger")

    capped = coordinator_factory(max_keys=3, batch_size=2)
    doc = await capped.export_translations()

    assert [entry["key"] for entry in doc] == ["key.000", "key.001", "key.002"]
    logger.warning.assert_called_once()
    assert logger.warning.call_args.kwargs["omitted"] == 2


@pytest.mark.asyncio
async def test_no_cap_when_max_keys_is_none(coordinator_factory, mocker):
    await _seed(coordinator_factory(), 4)
    logger = mocker.patch("lingohub.application.services._export.logger")

    doc = await coordinator_factory(max_keys=None).export_translations()

    assert len(doc) == 4
    logger.warning.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_misses_build_once(coordinator: Coordinator):
    await _seed(coordinator, 3)
    export = coordinator.export_service

    results = await asyncio.gather(*(coordinator.export_translations() for _ in range(5)))

    assert export.build_count == 1
    assert all(r == results[0] for r in results)


@pytest.mark.asyncio
async def test_invalidation_during_build_is_not_written_back(
    coordinator: Coordinator, mocker
):
    await coordinator.create_translation("welcome", "en", "Hi")
    export = coordinator.export_service
    original_build = export._build

    async def build_then_invalidate():
        document = await original_build()
        await export.invalidate()
        return document

    mocker.patch.object(export, "_build", side_effect=build_then_invalidate)
    await coordinator.export_translations()
    assert export.state is ExportState.IDLE

    mocker.stopall()
    await coordinator.export_translations()
    assert export.build_count == 2
    assert export.state is ExportState.CACHED
