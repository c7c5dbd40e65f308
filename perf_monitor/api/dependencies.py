"""
依赖注入模块

提供 FastAPI 依赖项。
"""

from fastapi import Request

from ..monitor import Monitor


async def get_monitor(request: Request) -> Monitor:
    """获取应用持有的 Monitor 实例"""
    return request.app.state.monitor
