# packages/core/src/lingohub_core/exceptions.py
"""
本模块定义了 LingoHub 项目中所有自定义的、语义化的异常类型。

应用服务只抛出这些领域异常（或原样传播的存储层异常），
上层调用者（HTTP 控制器、CLI）据此映射为各自的响应形式。
"""

from __future__ import annotations


class LingoHubError(Exception):
    """
    所有 LingoHub 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """

    pass


class ConfigurationError(LingoHubError):
    """表示在加载、解析或验证配置时发生的错误。"""

    pass


class DatabaseError(LingoHubError):
    """
    表示在持久化层操作（如数据库连接、事务提交）中发生的错误。
    事务已回滚，调用方可自行决定是否重试只读操作。
    """

    pass


class EntityNotFoundError(LingoHubError, LookupError):
    """按 ID 查找的实体不存在。"""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} 未找到: id={entity_id}")


class DuplicateTranslationError(LingoHubError):
    """同一个翻译键在同一语言下已存在翻译。"""

    def __init__(self, key: str, locale: str):
        self.key = key
        self.locale = locale
        super().__init__(
            f"A translation with key '{key}' and locale '{locale}' already exists."
        )


class DuplicateNameError(LingoHubError):
    """标签名称与已有标签冲突。"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"标签名称已存在: {name!r}")


class FieldValidationError(LingoHubError, ValueError):
    """字段格式非法（例如 locale 不符合模式或超长）。"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
