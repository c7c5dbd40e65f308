"""
时间桶聚合测试
"""

from datetime import datetime, timedelta, timezone

import pytest

from perf_monitor.aggregator import aggregate, calculate_aggregation, format_bucket_label
from perf_monitor.models import Sample

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


def at(minutes_ago: float, cpu=0.0, ram=0.0, ping=0.0) -> Sample:
    return Sample(time=NOW - timedelta(minutes=minutes_ago), cpu=cpu, ram=ram, ping=ping)


class TestAggregate:
    """aggregate() 测试"""

    def test_two_hour_scenario(self):
        window = [at(30, cpu=10, ram=20, ping=5), at(90, cpu=50, ram=60, ping=15)]

        buckets = aggregate(window, NOW, bucket_count=6, bucket_width=HOUR, tz=timezone.utc)

        assert len(buckets) == 6
        assert (buckets[-1].cpu, buckets[-1].ram, buckets[-1].ping) == (10, 20, 5)
        assert (buckets[-2].cpu, buckets[-2].ram, buckets[-2].ping) == (50, 60, 15)
        for bucket in buckets[:4]:
            assert (bucket.cpu, bucket.ram, bucket.ping) == (0, 0, 0)

    @pytest.mark.parametrize("size", [0, 1, 5000])
    def test_always_bucket_count(self, size):
        window = [at(i * 0.1, cpu=50, ram=50, ping=10) for i in range(size)]
        for count in (1, 6, 24):
            assert len(aggregate(window, NOW, bucket_count=count, bucket_width=HOUR)) == count

    def test_empty_buckets_zero_filled(self):
        buckets = aggregate([], NOW, tz=timezone.utc)
        assert [(b.cpu, b.ram, b.ping) for b in buckets] == [(0, 0, 0)] * 6

    def test_labels_are_bucket_ends_oldest_first(self):
        buckets = aggregate([], NOW, tz=timezone.utc)
        assert [b.time for b in buckets] == ["07:00", "08:00", "09:00", "10:00", "11:00", "12:00"]

    def test_label_timezone(self):
        tz = timezone(timedelta(hours=3))
        assert format_bucket_label(NOW, tz) == "15:00"

    def test_half_open_boundaries(self):
        window = [
            at(0, cpu=90),    # now：不属于任何桶
            at(60, cpu=40),   # now-1h：属于 [now-2h, now-1h)
            at(360, cpu=70),  # now-6h：属于最旧的桶
            at(361, cpu=99),  # 超出覆盖范围
        ]
        buckets = aggregate(window, NOW, tz=timezone.utc)

        assert buckets[-1].cpu == 0
        assert buckets[-2].cpu == 40
        assert buckets[0].cpu == 70

    def test_mean_and_rounding(self):
        window = [at(10, cpu=10, ram=33.3, ping=2), at(20, cpu=11, ram=33.3, ping=3)]
        bucket = aggregate(window, NOW, tz=timezone.utc)[-1]
        assert bucket.cpu == 11   # 10.5 -> 11
        assert bucket.ram == 33
        assert bucket.ping == 3   # 2.5 -> 3

    def test_missing_ping_excluded_from_mean(self):
        window = [at(10, ping=None), at(20, ping=8.0)]
        assert aggregate(window, NOW, tz=timezone.utc)[-1].ping == 8

    def test_custom_width(self):
        window = [at(5, cpu=30), at(25, cpu=60)]
        buckets = aggregate(window, NOW, bucket_count=3, bucket_width=timedelta(minutes=10), tz=timezone.utc)
        assert [b.cpu for b in buckets] == [60, 0, 30]
        assert [b.time for b in buckets] == ["11:40", "11:50", "12:00"]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            aggregate([], NOW, bucket_count=0)
        with pytest.raises(ValueError):
            aggregate([], NOW, bucket_width=timedelta(0))


class TestCalculateAggregation:
    """calculate_aggregation() 测试"""

    def test_empty(self):
        assert calculate_aggregation([]) == {"cpu": 0, "ram": 0, "ping": 0}

    def test_all_ping_missing(self):
        result = calculate_aggregation([at(1, cpu=20, ram=30, ping=None)])
        assert result == {"cpu": 20, "ram": 30, "ping": 0}
