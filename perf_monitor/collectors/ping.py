"""
网络延迟采集器

调用系统 ping 发送一个 ICMP 请求，解析往返时间
"""

import asyncio
import logging
import platform
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

_WINDOWS_PATTERN = re.compile(r"time[=<]([\d.]+)ms")
_POSIX_PATTERN = re.compile(r"time=([\d.]+) ms")


def _is_windows(system: Optional[str] = None) -> bool:
    return (system or platform.system()).lower().startswith("win")


def build_ping_command(host: str, system: Optional[str] = None) -> List[str]:
    """构造单次 ping 命令（Windows 用 -n，其他平台用 -c）"""
    count_flag = "-n" if _is_windows(system) else "-c"
    return ["ping", count_flag, "1", host]


def parse_ping_output(output: str, system: Optional[str] = None) -> Optional[float]:
    """
    从 ping 输出中解析往返时间

    Returns:
        延迟 ms，无法解析时返回 None
    """
    pattern = _WINDOWS_PATTERN if _is_windows(system) else _POSIX_PATTERN
    match = pattern.search(output)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


async def get_ping(
    host: str = "8.8.8.8",
    timeout: float = 3.0,
    command: Optional[List[str]] = None,
) -> Optional[float]:
    """
    采集到 host 的网络延迟

    Args:
        host: 探测目标
        timeout: 最长等待时间（秒），超时后终止 ping 进程
        command: 自定义探测命令（默认按平台构造 ping 命令）

    Returns:
        延迟 ms；退出码非 0、输出无法解析或超时均返回 None
    """
    cmd = command or build_ping_command(host)

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
    except (FileNotFoundError, PermissionError) as e:
        logger.warning(f"Ping command unavailable: {e}")
        return None

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Ping to {host} timed out after {timeout}s")
        _kill(proc)
        await proc.wait()
        return None
    except asyncio.CancelledError:
        _kill(proc)
        raise

    if proc.returncode != 0:
        logger.debug(f"Ping to {host} exited with code {proc.returncode}")
        return None

    latency = parse_ping_output(stdout.decode(errors="replace"))
    if latency is None:
        logger.debug(f"Could not parse ping output for {host}")
    return latency


def _kill(proc: asyncio.subprocess.Process):
    try:
        proc.kill()
    except ProcessLookupError:
        # 进程已退出
        pass
