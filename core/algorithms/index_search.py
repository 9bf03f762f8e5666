"""
索引查找模块
在升序序列中查找第一个不小于查询值的位置，提供线性、二分和自适应三种策略

三种策略对任意输入返回完全相同的索引，只有遍历方式不同。
未找到时返回 None（查询值大于所有元素），需要边界形式时使用 search_clamped，
此时返回 len(seq)，即最后一个有效索引之后的位置。
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

import numpy as np
import torch

from core.base.constants import (
    SEARCH_STRATEGIES, DEFAULT_SEARCH_STRATEGY,
    ADAPTIVE_SEARCH_THRESHOLD, ADAPTIVE_THRESHOLD_RANGE
)
from core.base.exceptions import InvalidSearchStrategyError, ValidationError


SortedSequence = Union[Sequence[float], np.ndarray, torch.Tensor]


def linear_search(seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
    """
    线性查找，O(n)

    Args:
        seq: 升序序列
        val: 查询值
        lo: 起始位置，调用方保证 seq[:lo] 均小于 val

    Returns:
        满足 seq[i] >= val 的最小索引，不存在时返回 None
    """
    if val != val:  # NaN
        return None
    for i in range(lo, len(seq)):
        if seq[i] >= val:
            return i
    return None


def binary_search(seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
    """
    二分查找，O(log n)，相等元素取最左侧（lower bound）

    Args:
        seq: 升序序列
        val: 查询值
        lo: 起始位置，调用方保证 seq[:lo] 均小于 val

    Returns:
        满足 seq[i] >= val 的最小索引，不存在时返回 None
    """
    if val != val:
        return None
    n = len(seq)
    hi = n
    while lo < hi:
        mid = (lo + hi) // 2
        if seq[mid] < val:
            lo = mid + 1
        else:
            hi = mid
    return lo if lo < n else None


def adaptive_search(seq: SortedSequence, val: float, lo: int = 0,
                    threshold: int = ADAPTIVE_SEARCH_THRESHOLD) -> Optional[int]:
    """
    自适应查找：先二分缩小候选窗口，窗口宽度不超过 threshold 后改为线性扫描

    结果与 binary_search 完全一致，threshold 只影响性能。

    Args:
        seq: 升序序列
        val: 查询值
        lo: 起始位置，调用方保证 seq[:lo] 均小于 val
        threshold: 切换为线性扫描的窗口宽度

    Returns:
        满足 seq[i] >= val 的最小索引，不存在时返回 None
    """
    if val != val:
        return None
    n = len(seq)
    hi = n
    # 不变量: seq[:lo] < val <= seq[hi:]
    while hi - lo > threshold:
        mid = (lo + hi) // 2
        if seq[mid] < val:
            lo = mid + 1
        else:
            hi = mid
    for i in range(lo, hi):
        if seq[i] >= val:
            return i
    return hi if hi < n else None


def search_clamped(seq: SortedSequence, val: float, strategy: str = DEFAULT_SEARCH_STRATEGY) -> int:
    """查找并返回边界形式：未找到时返回 len(seq)"""
    idx = get_search_strategy(strategy).find(seq, val)
    return len(seq) if idx is None else idx


class IndexSearchStrategy(ABC):
    """索引查找策略抽象基类"""

    name: str = ''

    @abstractmethod
    def find(self, seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
        """查找第一个不小于 val 的索引"""

    def parallel_find(self, seq: SortedSequence, values: torch.Tensor) -> torch.Tensor:
        """（并行）批量查找，未找到的位置返回 len(seq)"""
        if isinstance(seq, torch.Tensor):
            sorted_seq = seq
        else:
            sorted_seq = torch.from_numpy(np.asarray(seq, dtype=np.float64))
        values = torch.as_tensor(values, dtype=sorted_seq.dtype)
        return torch.searchsorted(sorted_seq, values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LinearSearch(IndexSearchStrategy):
    """线性查找策略"""

    name = 'linear'

    def find(self, seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
        return linear_search(seq, val, lo)


class BinarySearch(IndexSearchStrategy):
    """二分查找策略"""

    name = 'binary'

    def find(self, seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
        return binary_search(seq, val, lo)


class AdaptiveSearch(IndexSearchStrategy):
    """自适应查找策略"""

    name = 'adaptive'

    def __init__(self, threshold: int = ADAPTIVE_SEARCH_THRESHOLD):
        min_threshold, max_threshold = ADAPTIVE_THRESHOLD_RANGE
        if not (min_threshold <= threshold <= max_threshold):
            raise ValidationError(
                f"自适应查找阈值无效: {threshold}, 应在 {min_threshold}-{max_threshold} 之间",
                "INVALID_ADAPTIVE_THRESHOLD",
                {'threshold': threshold}
            )
        self.threshold = threshold

    def find(self, seq: SortedSequence, val: float, lo: int = 0) -> Optional[int]:
        return adaptive_search(seq, val, lo, self.threshold)

    def __repr__(self) -> str:
        return f"AdaptiveSearch(threshold={self.threshold})"


SEARCH_STRATEGIES_MAP = {
    'linear': LinearSearch,
    'binary': BinarySearch,
    'adaptive': AdaptiveSearch
}


def get_search_strategy(name: str = DEFAULT_SEARCH_STRATEGY,
                        threshold: Optional[int] = None) -> IndexSearchStrategy:
    """根据名称创建查找策略"""
    if name not in SEARCH_STRATEGIES_MAP:
        raise InvalidSearchStrategyError(name, SEARCH_STRATEGIES)
    if name == 'adaptive' and threshold is not None:
        return AdaptiveSearch(threshold)
    return SEARCH_STRATEGIES_MAP[name]()
