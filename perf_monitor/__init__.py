"""
Perf Monitor - 主机性能监控服务

负责：
- 定时采样 CPU / 内存 / 网络延迟
- 维护带保留窗口的历史文件
- 按固定时间桶计算平均值供前端绘图
- 提供 REST API
"""

__version__ = "1.0.0"
