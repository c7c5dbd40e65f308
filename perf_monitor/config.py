"""
配置加载模块

从 config.yaml 加载配置，支持 Pydantic 验证和环境变量覆盖。
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SamplerConfig(BaseModel):
    """采样配置"""
    cpu_interval: float = Field(default=1.0, gt=0, description="CPU 两次快照间隔（秒）")
    ping_host: str = Field(default="8.8.8.8", description="延迟探测目标主机")
    ping_timeout: float = Field(default=3.0, gt=0, description="ping 最长等待时间（秒）")


class HistoryConfig(BaseModel):
    """历史记录配置"""
    path: str = "performanceHistory.json"
    retention_hours: float = Field(default=6, gt=0)

    @property
    def retention(self) -> timedelta:
        return timedelta(hours=self.retention_hours)


class AggregationConfig(BaseModel):
    """聚合配置"""
    bucket_count: int = Field(default=6, ge=1)
    bucket_minutes: int = Field(default=60, ge=1)

    @property
    def bucket_width(self) -> timedelta:
        return timedelta(minutes=self.bucket_minutes)


class SchedulerConfig(BaseModel):
    """定时记录配置"""
    interval_seconds: float = Field(default=1800, gt=0)


class APIConfig(BaseModel):
    """API 服务配置"""
    host: str = "0.0.0.0"
    port: int = 3010
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    stats_timeout: float = Field(default=5.0, gt=0, description="实时查询整体超时（秒）")


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    file: Optional[str] = None


class AppConfig(BaseSettings):
    """
    应用配置（完整配置）

    环境变量优先于 YAML，例如 PERF_MONITOR_HISTORY__RETENTION_HOURS=1
    """
    model_config = SettingsConfigDict(
        env_prefix="PERF_MONITOR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # 环境变量覆盖 YAML（init 参数）
        return env_settings, init_settings


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    加载配置文件

    优先级：
    1. 参数指定的路径
    2. 环境变量 PERF_MONITOR_CONFIG
    3. 默认路径 config.yaml

    配置文件中的相对路径以配置文件所在目录为基准。
    """
    if config_path is None:
        config_path = os.environ.get("PERF_MONITOR_CONFIG", "config.yaml")

    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
        if raw_config:
            base_dir = config_file.resolve().parent

            def _resolve_path(value: Optional[str]) -> Optional[str]:
                if not value:
                    return value
                path = Path(value)
                if path.is_absolute():
                    return str(path)
                return str((base_dir / path).resolve())

            history = raw_config.setdefault("history", {}) or {}
            if history.get("path"):
                history["path"] = _resolve_path(history["path"])
            raw_config["history"] = history

            logging_section = raw_config.setdefault("logging", {}) or {}
            logging_section["file"] = _resolve_path(logging_section.get("file"))
            raw_config["logging"] = logging_section

            return AppConfig(**raw_config)

    # 配置文件不存在时使用默认配置
    return AppConfig()


# 全局配置实例（延迟加载）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例模式）"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """重置配置（主要用于测试）"""
    global _config
    _config = None
