"""
时间桶聚合

把保留窗口内的采样点划分到固定数量、固定宽度的连续时间桶中，计算各桶平均值。
结果是纯投影，不持久化，每个周期整体重算。
"""

from datetime import datetime, timedelta, tzinfo
from typing import Iterable, List, Optional

from .models import Bucket, Sample
from .utils import round_half_up


def format_bucket_label(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    """桶标签：结束时刻的本地时间 HH:MM"""
    return moment.astimezone(tz).strftime("%H:%M")


def calculate_aggregation(samples: List[Sample]) -> dict:
    """
    计算一组采样点的平均值

    ping 只对有读数的采样点求平均，全部无读数时为 0。

    Returns:
        {"cpu": int, "ram": int, "ping": int}，空列表时全部为 0
    """
    if not samples:
        return {"cpu": 0, "ram": 0, "ping": 0}

    cpu_avg = sum(s.cpu for s in samples) / len(samples)
    ram_avg = sum(s.ram for s in samples) / len(samples)

    ping_values = [s.ping for s in samples if s.ping is not None]
    ping_avg = sum(ping_values) / len(ping_values) if ping_values else 0.0

    return {
        "cpu": round_half_up(cpu_avg),
        "ram": round_half_up(ram_avg),
        "ping": round_half_up(ping_avg),
    }


def aggregate(
    samples: Iterable[Sample],
    now: datetime,
    bucket_count: int = 6,
    bucket_width: timedelta = timedelta(hours=1),
    tz: Optional[tzinfo] = None,
) -> List[Bucket]:
    """
    将采样点重新划分到 bucket_count 个时间桶

    第 i 个桶（从最旧开始）覆盖 [now - (k+1)*width, now - k*width)，k = bucket_count-1-i。
    无论数据多稀疏都返回恰好 bucket_count 个桶，空桶各项为 0。

    Args:
        samples: 采样点
        now: 当前时间（带时区）
        bucket_count: 桶数量
        bucket_width: 桶宽度
        tz: 标签时区，默认系统本地时区

    Returns:
        按时间升序排列的桶列表
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")
    if bucket_width <= timedelta(0):
        raise ValueError(f"bucket_width must be positive, got {bucket_width}")

    samples = list(samples)
    buckets = []

    for i in range(bucket_count - 1, -1, -1):
        start = now - (i + 1) * bucket_width
        end = now - i * bucket_width
        selected = [s for s in samples if start <= s.time < end]
        buckets.append(Bucket(time=format_bucket_label(end, tz), **calculate_aggregation(selected)))

    return buckets
