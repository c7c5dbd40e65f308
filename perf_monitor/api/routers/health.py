"""
健康检查 API
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from ...models import HealthResponse
from ...monitor import Monitor
from ..dependencies import get_monitor

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
async def get_health(request: Request, monitor: Monitor = Depends(get_monitor)):
    """
    健康检查端点

    检查历史文件写入状态和最近一次记录周期
    """
    checks = {}
    details = {}
    overall_status = "ok"

    if monitor.store.last_save_ok:
        checks["history"] = "ok"
        details["history"] = f"{len(monitor.store)} samples retained"
    else:
        checks["history"] = "error"
        details["history"] = f"Last write to {monitor.store.path} failed"
        overall_status = "degraded"

    if monitor.last_cycle_at is not None:
        checks["scheduler"] = "ok"
        details["scheduler"] = f"Last cycle at {monitor.last_cycle_at.strftime('%Y-%m-%dT%H:%M:%SZ')}"
    else:
        checks["scheduler"] = "degraded"
        details["scheduler"] = "No cycle completed yet"
        overall_status = "degraded"

    # 未运行定时任务时为 disabled
    scheduler = getattr(request.app.state, "scheduler", None)
    checks["scheduler_state"] = scheduler.state if scheduler is not None else "disabled"
    details["scheduler_state"] = f"interval={scheduler.interval:.0f}s" if scheduler is not None else None

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
        details=details
    )
