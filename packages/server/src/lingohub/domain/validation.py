# packages/server/src/lingohub/domain/validation.py
"""
字段级校验。

请求在到达核心之前已由外部协作方校验过；这里再做一次防御性校验，
保证写入路径上的不变量与存储层列约束一致。所有函数返回规范化后的值，
失败时抛出 `FieldValidationError`。
"""

from __future__ import annotations

import re

from lingohub_core.exceptions import FieldValidationError

KEY_MAX_LENGTH = 255
LOCALE_MAX_LENGTH = 5
CONTENT_MAX_LENGTH = 65535
TAG_NAME_MAX_LENGTH = 255

KEY_PATTERN = re.compile(r"^[a-z0-9_.]+$")
LOCALE_PATTERN = re.compile(r"^[a-z]{2}(_[A-Z]{2})?$")


def validate_key(key: str) -> str:
    if not key:
        raise FieldValidationError("key", "不能为空")
    if len(key) > KEY_MAX_LENGTH:
        raise FieldValidationError("key", f"长度不能超过 {KEY_MAX_LENGTH}")
    if not KEY_PATTERN.match(key):
        raise FieldValidationError("key", "只允许小写字母、数字、下划线和点")
    return key


def validate_locale(locale: str) -> str:
    if len(locale) > LOCALE_MAX_LENGTH:
        raise FieldValidationError(
            "locale", f"Locale must be at most {LOCALE_MAX_LENGTH} characters long"
        )
    if not LOCALE_PATTERN.match(locale):
        raise FieldValidationError("locale", "必须形如 'en' 或 'en_US'")
    return locale


def validate_content(content: str) -> str:
    if len(content) > CONTENT_MAX_LENGTH:
        raise FieldValidationError("content", f"长度不能超过 {CONTENT_MAX_LENGTH}")
    return content


def validate_tag_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise FieldValidationError("name", "不能为空")
    if len(name) > TAG_NAME_MAX_LENGTH:
        raise FieldValidationError("name", f"长度不能超过 {TAG_NAME_MAX_LENGTH}")
    return name


def validate_tag_ids(tag_ids: list[str]) -> list[str]:
    """去重并保持原有顺序。"""
    return list(dict.fromkeys(tag_ids))
