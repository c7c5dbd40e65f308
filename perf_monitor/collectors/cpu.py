"""
CPU 采集器

两次读取每个核心的时间计数器，按 delta 计算 CPU 使用率
"""

import asyncio
import logging
from typing import List, Sequence, Tuple

import psutil

logger = logging.getLogger(__name__)

# (busy_ticks, idle_ticks)，busy = user + nice + system + irq
CoreTimes = Tuple[float, float]


def read_cpu_times() -> List[CoreTimes]:
    """
    读取每个核心的时间计数器

    Returns:
        [(busy, idle), ...]，平台不提供的字段按 0 计
    """
    result = []
    for times in psutil.cpu_times(percpu=True):
        busy = (
            times.user
            + getattr(times, "nice", 0.0)
            + times.system
            + getattr(times, "irq", 0.0)
        )
        result.append((busy, times.idle))
    return result


def compute_cpu_percent(start: Sequence[CoreTimes], end: Sequence[CoreTimes]) -> float:
    """
    根据两次快照计算 CPU 使用率

    所有核心的 delta 求和后计算 100 - idle / total * 100。
    两次快照核心数不一致（热插拔）或 total 为 0 时返回 0.0。

    Returns:
        0~100 的浮点数，保留两位小数
    """
    if not start or len(start) != len(end):
        return 0.0

    total_idle = 0.0
    total_ticks = 0.0
    for (busy0, idle0), (busy1, idle1) in zip(start, end):
        idle = idle1 - idle0
        total_idle += idle
        total_ticks += (busy1 - busy0) + idle

    if total_ticks <= 0:
        return 0.0

    usage = 100.0 - (total_idle / total_ticks) * 100.0
    return round(min(max(usage, 0.0), 100.0), 2)


async def get_cpu_percent(interval: float = 1.0) -> float:
    """
    采集 CPU 使用率

    实现方式：读取计数器，等待 interval 秒后再读一次，计算 delta。
    调用耗时至少为 interval。

    Returns:
        0~100 的浮点数，采集失败返回 0.0
    """
    try:
        start = read_cpu_times()
        await asyncio.sleep(interval)
        end = read_cpu_times()
    except Exception as e:
        logger.warning(f"CPU sampling failed: {e}")
        return 0.0

    if len(start) != len(end):
        logger.warning(f"CPU core count changed during sampling ({len(start)} -> {len(end)})")

    return compute_cpu_percent(start, end)
