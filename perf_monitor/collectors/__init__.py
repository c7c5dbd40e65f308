"""
数据采集器模块

包含 CPU、内存、网络延迟采集器
"""

from .cpu import get_cpu_percent
from .memory import get_memory_usage
from .ping import get_ping

__all__ = [
    "get_cpu_percent",
    "get_memory_usage",
    "get_ping",
]
