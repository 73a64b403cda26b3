# packages/server/src/lingohub/management/config_utils.py
"""配置相关的工具函数。"""

from __future__ import annotations

from typing import Union

from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.exc import ArgumentError


def mask_db_url(url: Union[str, URL, None]) -> str:
    """把数据库 URL 中的密码替换为 '***'，用于日志与控制台输出。"""
    if url is None:
        return "[未配置]"
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "[无法解析的数据库 URL]"
