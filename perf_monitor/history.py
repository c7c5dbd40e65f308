"""
历史记录存储

内存中维护按时间顺序排列的 Sample 列表，并以 JSON 数组完整镜像到磁盘。
每次追加/清理后整体重写文件（先写临时文件再替换），不做增量追加。
"""

import json
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import ValidationError

from .models import Sample

logger = logging.getLogger(__name__)


class HistoryStore:
    """历史记录存储类"""

    def __init__(self, path: Union[str, Path]):
        """
        Args:
            path: 历史文件路径
        """
        self.path = Path(path)
        self._samples: List[Sample] = []
        self.last_save_ok = True

    @property
    def samples(self) -> Tuple[Sample, ...]:
        """当前保留的采样点（只读副本，最旧在前）"""
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def load(self) -> Tuple[Sample, ...]:
        """
        从磁盘加载历史

        文件不存在时返回空历史；内容损坏时记录警告并返回空历史。
        """
        self._samples = []

        if not self.path.exists():
            logger.info(f"No history file at {self.path}, starting empty")
            return self.samples

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            self._samples = [Sample.model_validate(entry) for entry in raw]
        except (OSError, ValueError, RecursionError, ValidationError) as e:
            # json.JSONDecodeError 是 ValueError 的子类；嵌套过深时抛出 RecursionError
            logger.warning(f"Failed to parse performance history {self.path}: {e}")
            self._samples = []

        logger.info(f"Loaded {len(self._samples)} samples from {self.path}")
        return self.samples

    def save(self) -> bool:
        """
        将完整历史写入磁盘

        写入失败只记录错误，内存中的数据保留，下一次写入会重试。

        Returns:
            是否写入成功
        """
        payload = [sample.model_dump(mode="json") for sample in self._samples]
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save performance history {self.path}: {e}")
            try:
                tmp_path.unlink()
            except OSError:
                pass
            self.last_save_ok = False
            return False

        self.last_save_ok = True
        return True

    def append(self, sample: Sample) -> bool:
        """追加采样点并立即持久化"""
        self._samples.append(sample)
        return self.save()

    def prune(self, now: datetime, retention: timedelta) -> int:
        """
        删除早于保留窗口的采样点（now - time > retention）

        有删除时重新持久化。

        Returns:
            删除的数量
        """
        kept = [s for s in self._samples if now - s.time <= retention]
        removed = len(self._samples) - len(kept)
        if removed:
            self._samples = kept
            self.save()
            logger.debug(f"Pruned {removed} samples older than {retention}")
        return removed
