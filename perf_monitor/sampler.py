"""
采样器

组合 CPU、内存、网络延迟采集器，生成一个 Sample。
任何子项失败都降级为默认值，不向调用方抛出异常。
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from .collectors import get_cpu_percent, get_memory_usage, get_ping
from .config import SamplerConfig
from .models import Measurement, Sample

logger = logging.getLogger(__name__)


class Sampler:
    """主机性能采样器"""

    def __init__(self, config: Optional[SamplerConfig] = None):
        self.config = config or SamplerConfig()

    async def measure(self) -> Measurement:
        """
        执行一次完整测量

        CPU 采样（固定等待 cpu_interval）与 ping 探测并发进行，
        总耗时约为 max(cpu_interval, ping 耗时)。
        """
        timestamp = datetime.now(timezone.utc)
        memory = get_memory_usage()

        results = await asyncio.gather(
            get_cpu_percent(self.config.cpu_interval),
            get_ping(self.config.ping_host, self.config.ping_timeout),
            return_exceptions=True
        )

        cpu_pct = results[0] if not isinstance(results[0], BaseException) else 0.0
        ping_ms = results[1] if not isinstance(results[1], BaseException) else None
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Collector failed: {result}")

        sample = Sample(
            time=timestamp,
            cpu=cpu_pct,
            ram=memory["used_pct"],
            ping=ping_ms,
        )
        logger.debug(f"Measured sample: {sample}")
        return Measurement(
            sample=sample,
            ram_used_bytes=memory["used_bytes"],
            ram_total_bytes=memory["total_bytes"],
        )

    async def sample(self) -> Sample:
        """采集一个 Sample"""
        measurement = await self.measure()
        return measurement.sample
