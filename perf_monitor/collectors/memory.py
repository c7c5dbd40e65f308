"""
内存采集器
"""

import logging
from typing import Dict

import psutil

logger = logging.getLogger(__name__)


def get_memory_usage() -> Dict:
    """
    采集物理内存使用情况

    已用 = 总量 - 可用（available）

    Returns:
        {"used_bytes": ..., "total_bytes": ..., "used_pct": ...}，失败时全部为 0
    """
    try:
        vm = psutil.virtual_memory()
        total = int(vm.total)
        free = int(vm.available)
    except Exception as e:
        logger.warning(f"Memory sampling failed: {e}")
        return {"used_bytes": 0, "total_bytes": 0, "used_pct": 0.0}

    if total <= 0:
        return {"used_bytes": 0, "total_bytes": 0, "used_pct": 0.0}

    used = max(total - free, 0)
    return {
        "used_bytes": used,
        "total_bytes": total,
        "used_pct": round(used / total * 100, 2),
    }
