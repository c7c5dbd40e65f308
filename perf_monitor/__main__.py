"""
Perf Monitor 主程序入口

使用方式:
    python -m perf_monitor
    或
    perf-monitor
"""

from perf_monitor.main import cli


if __name__ == "__main__":
    cli()
