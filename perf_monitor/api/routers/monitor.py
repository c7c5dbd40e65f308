"""
性能数据 API

提供实时状态和小时聚合序列查询。
"""

from typing import List

from fastapi import APIRouter, Depends

from ...models import Bucket, StatsResponse
from ...monitor import Monitor
from ..dependencies import get_monitor

router = APIRouter(tags=["monitor"])


@router.get("/api/monitor", response_model=StatsResponse, response_model_by_alias=True)
async def get_monitor_stats(monitor: Monitor = Depends(get_monitor)):
    """
    获取当前 CPU / 内存 / 延迟

    performanceData 为缓存的聚合序列（最旧在前）。
    实时采样超时返回 N/A 占位数据。
    """
    return await monitor.get_current_stats()


@router.get("/api/monitor/series", response_model=List[Bucket])
async def get_monitor_series(monitor: Monitor = Depends(get_monitor)):
    """仅返回缓存的聚合序列，不触发采样"""
    return monitor.get_series()
