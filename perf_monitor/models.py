"""
数据模型定义

包括：
- 采样点 Sample（持久化到历史文件）
- 单次测量结果 Measurement（包含内存字节数，用于生成展示字符串）
- Pydantic 响应模型
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sample(BaseModel):
    """
    单个采样点

    持久化格式：{"time": ISO-8601, "cpu": number, "ram": number, "ping": number | null}
    ping 为 None 表示本次没有延迟读数（与 0ms 区分）。
    """
    model_config = ConfigDict(frozen=True)

    time: datetime
    cpu: float = Field(..., ge=0, le=100, description="CPU 使用率 (0-100)")
    ram: float = Field(..., ge=0, le=100, description="内存使用率 (0-100)")
    ping: Optional[float] = Field(None, ge=0, description="网络延迟 ms")

    @field_validator("time")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        # 无时区信息的时间戳按 UTC 处理
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Measurement:
    """一次完整测量：采样点 + 内存字节数"""
    sample: Sample
    ram_used_bytes: int = 0
    ram_total_bytes: int = 0


class Bucket(BaseModel):
    """时间桶平均值（供前端绘图）"""
    time: str = Field(..., description="桶结束时刻（本地时间 HH:MM）")
    cpu: int = 0
    ram: int = 0
    ping: int = 0


class StatsResponse(BaseModel):
    """GET /api/monitor 响应"""
    model_config = ConfigDict(populate_by_name=True)

    cpu: str = Field(..., description="CPU 使用率，如 42.3% / 100%")
    ram: str = Field(..., description="内存使用量，如 3.21GB / 16GB")
    ping: float = Field(0, description="网络延迟 ms，无读数时为 0")
    performance_data: List[Bucket] = Field(
        default_factory=list,
        alias="performanceData",
        description="小时聚合序列（最旧在前）",
    )


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="健康状态: ok|degraded")
    timestamp: datetime = Field(..., description="检查时间")
    checks: Dict[str, str] = Field(..., description="各组件检查结果")
    details: Dict[str, Optional[str]] = Field(..., description="详细信息")
