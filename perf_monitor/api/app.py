"""
FastAPI 应用配置

配置 CORS、路由注册，并在启动/关闭时管理 Monitor 和定时任务。
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import AppConfig, get_config
from ..monitor import Monitor
from ..scheduler import Scheduler
from .routers import health, monitor as monitor_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    monitor: Optional[Monitor] = None,
    run_scheduler: bool = True,
) -> FastAPI:
    """
    创建 FastAPI 应用实例

    配置：
    - CORS 中间件
    - API 路由
    - 生命周期：启动时加载历史并开始定时记录，关闭时等待当前周期结束

    Args:
        config: 应用配置，默认使用全局配置
        monitor: Monitor 实例，默认按配置新建
        run_scheduler: 启动时是否运行定时记录任务
    """
    config = config or get_config()
    monitor = monitor or Monitor(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Perf Monitor starting up...")
        monitor.start()
        scheduler = None
        if run_scheduler:
            scheduler = Scheduler(monitor, config.scheduler.interval_seconds)
            scheduler.start()
        app.state.scheduler = scheduler
        try:
            yield
        finally:
            logger.info("Perf Monitor shutting down...")
            if scheduler is not None:
                await scheduler.stop()
            await monitor.shutdown()

    app = FastAPI(
        title="Perf Monitor",
        description="主机性能采样与小时聚合服务",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.monitor = monitor

    # CORS 中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # 注册路由
    app.include_router(monitor_router.router)
    app.include_router(health.router)

    return app
