"""
测试 REST API

覆盖 /api/monitor、/api/monitor/series、/api/health
"""

import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from perf_monitor.api.app import create_app
from perf_monitor.monitor import Monitor

from .conftest import FakeSampler


@pytest.fixture
def monitor(config, fake_sampler):
    return Monitor(config, sampler=fake_sampler)


@pytest.fixture
def client(config, monitor):
    """创建测试客户端（不运行定时任务）"""
    app = create_app(config, monitor=monitor, run_scheduler=False)
    with TestClient(app) as client:
        yield client


class TestMonitorAPI:
    """性能数据 API 测试"""

    def test_monitor_stats(self, client):
        response = client.get("/api/monitor")
        assert response.status_code == 200

        data = response.json()
        assert set(data) == {"cpu", "ram", "ping", "performanceData"}
        assert data["cpu"] == "42.3% / 100%"
        assert data["ram"] == "3.21GB / 16GB"
        assert data["ping"] == 5.0
        assert len(data["performanceData"]) == 6
        assert set(data["performanceData"][0]) == {"time", "cpu", "ram", "ping"}

    def test_monitor_placeholder_on_timeout(self, config):
        config.api.stats_timeout = 0.1
        monitor = Monitor(config, sampler=FakeSampler(delay=3))
        app = create_app(config, monitor=monitor, run_scheduler=False)

        with TestClient(app) as client:
            response = client.get("/api/monitor")

        assert response.status_code == 200
        data = response.json()
        assert data["cpu"] == "N/A"
        assert data["ram"] == "N/A"
        assert data["ping"] == 0

    def test_series(self, config, monitor):
        asyncio.run(monitor.run_cycle())
        app = create_app(config, monitor=monitor, run_scheduler=False)

        with TestClient(app) as client:
            response = client.get("/api/monitor/series")

        assert response.status_code == 200
        series = response.json()
        assert len(series) == 6
        assert series[-1]["cpu"] == 42
        assert all(b["cpu"] == 0 for b in series[:-1])


class TestHealthAPI:
    """健康检查测试"""

    def test_degraded_before_first_cycle(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["history"] == "ok"
        assert data["checks"]["scheduler"] == "degraded"
        assert data["checks"]["scheduler_state"] == "disabled"

    def test_ok_after_cycle(self, config, monitor):
        asyncio.run(monitor.run_cycle())
        app = create_app(config, monitor=monitor, run_scheduler=False)

        with TestClient(app) as client:
            data = client.get("/api/health").json()

        assert data["status"] == "ok"
        assert data["details"]["history"] == "1 samples retained"

    def test_reports_running_scheduler(self, config, monitor, fake_sampler):
        app = create_app(config, monitor=monitor, run_scheduler=True)

        with TestClient(app) as client:
            for _ in range(100):
                if monitor.last_cycle_at is not None:
                    break
                time.sleep(0.01)
            data = client.get("/api/health").json()

        assert fake_sampler.calls >= 1
        assert data["status"] == "ok"
        assert data["checks"]["scheduler_state"] in ("idle", "running")
        assert data["details"]["scheduler_state"] == "interval=3600s"
