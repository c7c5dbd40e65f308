"""
定时记录任务

启动时立即执行一次记录周期，之后每 interval 秒执行一次。
周期串行执行，不补跑错过的 tick；收到停止信号后不再开始新周期。
"""

import asyncio
import logging
from typing import Optional

from .monitor import Monitor

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"


class Scheduler:
    """记录周期调度器"""

    def __init__(self, monitor: Monitor, interval: float):
        self.monitor = monitor
        self.interval = interval
        self.state = IDLE
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """在当前事件循环中启动调度任务"""
        if self._task is None or self._task.done():
            self._stop_event.clear()
            self._task = asyncio.create_task(self.run(), name="perf-monitor-scheduler")
        return self._task

    async def stop(self):
        """发出停止信号，等待当前周期结束"""
        self._stop_event.set()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run(self):
        """调度主循环"""
        logger.info(f"Starting scheduler (interval={self.interval:.0f}s)")

        while not self._stop_event.is_set():
            await self.run_once()

            # 等待下一个 tick，或提前收到停止信号
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        logger.info("Scheduler stopped")

    async def run_once(self):
        """执行一个周期，异常只记录日志"""
        self.state = RUNNING
        try:
            await self.monitor.run_cycle()
        except asyncio.CancelledError:
            logger.info("Scheduler cycle cancelled")
            raise
        except Exception as e:
            logger.error(f"Record cycle error: {e}", exc_info=True)
        finally:
            self.state = IDLE
