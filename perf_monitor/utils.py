"""
工具函数模块
"""

import math

_SIZES = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: float) -> str:
    """
    字节数转为可读字符串（1024 进制，最多两位小数）

    Examples:
        >>> format_bytes(3447717232)
        '3.21GB'
        >>> format_bytes(0)
        '0B'
    """
    if num_bytes <= 0:
        return "0B"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_SIZES) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g}{_SIZES[i]}"


def format_percent(pct: float) -> str:
    """CPU 使用率展示字符串，如 42.3% / 100%"""
    return f"{round(pct, 2):g}% / 100%"


def round_half_up(value: float) -> int:
    """四舍五入到整数（.5 远离 0）"""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))
