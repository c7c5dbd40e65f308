"""
测试公共夹具
"""

import asyncio
import os
from datetime import datetime, timezone

import pytest

from perf_monitor.config import AppConfig, reset_config
from perf_monitor.models import Measurement, Sample
from perf_monitor.sampler import Sampler

GB = 1024 ** 3


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    """清除外部 PERF_MONITOR_* 环境变量，避免本地环境影响测试"""
    for key in list(os.environ):
        if key.startswith("PERF_MONITOR_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


class FakeSampler(Sampler):
    """返回固定值的采样器，可模拟耗时"""

    def __init__(self, cpu=42.3, ram=20.0, ping=5.0, delay=0.0,
                 used_bytes=3447717232, total_bytes=16 * GB):
        super().__init__()
        self.cpu = cpu
        self.ram = ram
        self.ping = ping
        self.delay = delay
        self.used_bytes = used_bytes
        self.total_bytes = total_bytes
        self.calls = 0
        self.active = 0
        self.max_active = 0

    async def measure(self) -> Measurement:
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            sample = Sample(time=datetime.now(timezone.utc), cpu=self.cpu, ram=self.ram, ping=self.ping)
            return Measurement(sample=sample, ram_used_bytes=self.used_bytes, ram_total_bytes=self.total_bytes)
        finally:
            self.active -= 1


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "performanceHistory.json"


@pytest.fixture
def config(history_path) -> AppConfig:
    return AppConfig(
        sampler={"cpu_interval": 0.01, "ping_timeout": 0.5},
        history={"path": str(history_path), "retention_hours": 6},
        scheduler={"interval_seconds": 3600},
        api={"stats_timeout": 2.0},
    )


@pytest.fixture
def fake_sampler() -> FakeSampler:
    return FakeSampler()
