# packages/server/src/lingohub/domain/ids.py
"""实体标识符生成器。"""

from __future__ import annotations

import uuid


def new_id() -> str:
    """生成一个新的不透明唯一标识（UUID4 字符串）。"""
    return str(uuid.uuid4())
