# packages/server/tests/unit/test_export_fold.py
"""导出行折叠逻辑的单元测试。"""

from lingohub.application.services import fold_export_rows
from lingohub_core.uow import ExportRow


def test_outer_join_rows_without_translation_do_not_inject_nulls():
    rows = [
        ExportRow("lonely", None, None, None),
        ExportRow("tagged", None, None, "web"),
    ]
    assert fold_export_rows(rows) == [
        {"key": "lonely", "translations": {}, "tags": []},
        {"key": "tagged", "translations": {}, "tags": ["web"]},
    ]


def test_tags_are_deduplicated_across_locale_rows():
    rows = [
        ExportRow("welcome", "en", "Hi", "common"),
        ExportRow("welcome", "en", "Hi", "web"),
        ExportRow("welcome", "fr", "Salut", "common"),
        ExportRow("welcome", "fr", "Salut", "web"),
    ]
    assert fold_export_rows(rows) == [
        {
            "key": "welcome",
            "translations": {"en": "Hi", "fr": "Salut"},
            "tags": ["common", "web"],
        }
    ]


def test_output_is_sorted_by_codepoint():
    rows = [
        ExportRow("b.title", "en", "B", None),
        ExportRow("a_z", "en", "AZ", None),
        ExportRow("a.z", "en", "A.Z", None),
    ]
    assert [entry["key"] for entry in fold_export_rows(rows)] == ["a.z", "a_z", "b.title"]


def test_empty_content_is_kept():
    rows = [ExportRow("blank", "en", "", None)]
    assert fold_export_rows(rows)[0]["translations"] == {"en": ""}
