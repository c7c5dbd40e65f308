"""
Monitor：采样 / 历史 / 聚合的统一持有者

启动时创建一次，同时交给定时任务和 HTTP 层使用：
- run_cycle(): 采样 -> 追加 -> 清理 -> 聚合 -> 缓存（串行执行）
- get_current_stats(): 实时采样 + 缓存的聚合序列（带整体超时）
- get_series(): 缓存的聚合序列
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .aggregator import aggregate
from .config import AppConfig
from .history import HistoryStore
from .models import Bucket, Sample, StatsResponse
from .sampler import Sampler
from .utils import format_bytes, format_percent

logger = logging.getLogger(__name__)


class Monitor:
    """主机性能监控器"""

    def __init__(
        self,
        config: AppConfig,
        sampler: Optional[Sampler] = None,
        store: Optional[HistoryStore] = None,
    ):
        self.config = config
        self.sampler = sampler or Sampler(config.sampler)
        self.store = store or HistoryStore(config.history.path)
        self._series: List[Bucket] = []
        self._cycle_lock = asyncio.Lock()
        self.last_cycle_at: Optional[datetime] = None

    # =========================================================================
    # 生命周期
    # =========================================================================

    def start(self):
        """加载历史并生成初始聚合序列"""
        self.store.load()
        self._refresh_series(datetime.now(timezone.utc))
        logger.info(
            f"Monitor started: {len(self.store)} samples, "
            f"retention={self.config.history.retention_hours}h, "
            f"buckets={self.config.aggregation.bucket_count}x{self.config.aggregation.bucket_minutes}min"
        )

    async def shutdown(self):
        """等待进行中的周期结束"""
        async with self._cycle_lock:
            logger.info("Monitor shut down")

    # =========================================================================
    # 记录周期
    # =========================================================================

    async def run_cycle(self) -> Sample:
        """
        执行一次完整记录周期

        同一时刻只运行一个周期，后到的调用排队等待。
        写盘失败只记录日志，不中断周期。
        """
        async with self._cycle_lock:
            sample = await self.sampler.sample()
            self.store.append(sample)

            now = datetime.now(timezone.utc)
            removed = self.store.prune(now, self.config.history.retention)
            self._refresh_series(now)
            self.last_cycle_at = now

            logger.info(
                f"Recorded sample cpu={sample.cpu}% ram={sample.ram}% ping={sample.ping}ms "
                f"(retained={len(self.store)}, pruned={removed})"
            )
            return sample

    def _refresh_series(self, now: datetime):
        self._series = aggregate(
            self.store.samples,
            now,
            bucket_count=self.config.aggregation.bucket_count,
            bucket_width=self.config.aggregation.bucket_width,
        )

    # =========================================================================
    # 查询
    # =========================================================================

    def get_series(self) -> List[Bucket]:
        """缓存的聚合序列（最旧在前）"""
        return list(self._series)

    async def get_current_stats(self) -> StatsResponse:
        """
        实时采样并附带缓存的聚合序列

        超过 api.stats_timeout 时返回占位数据（N/A / 0），不抛出异常。
        """
        timeout = self.config.api.stats_timeout
        try:
            measurement = await asyncio.wait_for(self.sampler.measure(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Current stats timed out after {timeout}s, returning placeholder")
            return StatsResponse(cpu="N/A", ram="N/A", ping=0, performance_data=self.get_series())

        sample = measurement.sample
        return StatsResponse(
            cpu=format_percent(sample.cpu),
            ram=f"{format_bytes(measurement.ram_used_bytes)} / {format_bytes(measurement.ram_total_bytes)}",
            ping=sample.ping if sample.ping is not None else 0,
            performance_data=self.get_series(),
        )
