# packages/server/src/lingohub/config.py
"""
LingoHub Server 配置（Pydantic v2）

- 纯粹的数据模型；环境文件由加载器 (bootstrap.py) 负责读入环境变量。
- 环境变量前缀 `LINGOHUB_`，嵌套分隔符 `__`，
  例如 `LINGOHUB_EXPORT__CACHE_TTL=30`。
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine.url import make_url

# ===================== 子模型 =====================


class DatabaseSettings(BaseModel):
    """主库（运行期异步驱动）"""

    url: str = Field(
        default="sqlite+aiosqlite:///lingohub.db",
        description="异步 DSN（sqlite+aiosqlite / postgresql+asyncpg / mysql+aiomysql）",
    )
    echo: bool = Field(default=False, description="SQLAlchemy echo（调试）")

    @field_validator("url")
    @classmethod
    def _validate_async_driver(cls, v: str) -> str:
        allowed = {"sqlite+aiosqlite", "postgresql+asyncpg", "mysql+aiomysql"}
        try:
            drv = make_url(v).drivername.lower()
        except Exception as e:
            raise ValueError(f"非法数据库 URL：{v!r}（{e}）") from e
        if drv not in allowed:
            raise ValueError(
                f"不支持的运行期数据库驱动：{drv!r}，仅允许 {', '.join(sorted(allowed))}"
            )
        return v


class RedisSettings(BaseModel):
    url: Optional[str] = Field(default=None)
    key_prefix: str = Field(default="lingohub:dev:")


class MemoryCacheSettings(BaseModel):
    maxsize: int = Field(default=128, ge=1)


class ExportSettings(BaseModel):
    """
    导出管线参数。

    `max_keys` 是内存保护阀：超过该数量的键不会出现在导出结果中，
    截断时会记录 WARNING 日志。设为 None 表示不设上限。
    """

    cache_key: str = Field(default="translations_export")
    cache_ttl: int = Field(default=60, ge=1)
    max_keys: Optional[int] = Field(default=2000, ge=1)
    batch_size: int = Field(default=1000, ge=1)


class PaginationSettings(BaseModel):
    default_per_page: int = Field(default=15, ge=1)
    max_per_page: int = Field(default=100, ge=1)
    tag_key_limit: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "PaginationSettings":
        if self.default_per_page > self.max_per_page:
            raise ValueError("default_per_page 不能大于 max_per_page")
        return self


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")


# ===================== 顶层配置 =====================
class LingoHubConfig(BaseSettings):
    """
    LingoHub 核心配置模型。
    """

    # --- 领域子配置 ---
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    memory_cache: MemoryCacheSettings = Field(default_factory=MemoryCacheSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # --- 连接池高级参数 ---
    db_pool_size: Optional[int] = None
    db_max_overflow: Optional[int] = None
    db_pool_timeout: int = 30
    db_pool_recycle: Optional[int] = None
    db_pool_pre_ping: bool = True
    db_echo: bool = False

    # --- Pydantic v2 设置 ---
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="LINGOHUB_",
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )
