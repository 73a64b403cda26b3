# packages/server/src/lingohub/__init__.py
"""LingoHub Server：翻译键 / 多语言译文 / 标签的数据层与导出管线。"""

__version__ = "1.0.0"
