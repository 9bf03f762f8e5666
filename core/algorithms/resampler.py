"""
重采样模块
将任意升序采样点 (x, y) 线性插值到查找表的规则网格上
"""

from typing import List, Sequence, Union

import numpy as np
import torch

from core.base.constants import DEFAULT_SEARCH_STRATEGY
from core.base.exceptions import InvalidInputError, validate_samples
from core.algorithms.index_search import IndexSearchStrategy, get_search_strategy


SampleArray = Union[Sequence[float], np.ndarray, torch.Tensor]


def as_sample_list(values: SampleArray, name: str = 'x') -> List[float]:
    """将采样数组转换为一维浮点列表"""
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    try:
        array = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} 无法转换为浮点数组: {e}")
    if array.ndim != 1:
        raise InvalidInputError(f"{name} 必须是一维数组", shape=tuple(array.shape))
    return array.tolist()


def resample(x: SampleArray, y: SampleArray, x_min: float, x_step: float, row_count: int,
             strategy: Union[str, IndexSearchStrategy] = DEFAULT_SEARCH_STRATEGY,
             dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """
    将采样点线性插值到规则网格 x_min + k * x_step (k = 0..row_count-1)

    网格点落在采样范围之外时取最近端点的值，不做外推。

    Args:
        x: 严格递增的采样横坐标，至少2个点
        y: 与 x 等长的采样纵坐标
        x_min: 网格起点
        x_step: 网格步长
        row_count: 网格点数
        strategy: 定位采样区间使用的查找策略
        dtype: 输出张量类型

    Returns:
        长度为 row_count 的一维张量

    Raises:
        InvalidInputError: 采样数据无效时抛出
    """
    xs = as_sample_list(x, 'x')
    ys = as_sample_list(y, 'y')
    validate_samples(xs, ys)

    finder = strategy if isinstance(strategy, IndexSearchStrategy) else get_search_strategy(strategy)
    m = len(xs)
    out = [0.0] * row_count

    # 网格点递增，每次从上一个区间继续查找
    lo = 0
    for k in range(row_count):
        g = x_min + k * x_step
        i = finder.find(xs, g, lo)
        if i is None:
            out[k] = ys[-1]
            lo = m
            continue
        lo = i
        if i == 0 or xs[i] == g:
            out[k] = ys[i]
        else:
            x0, x1 = xs[i - 1], xs[i]
            y0, y1 = ys[i - 1], ys[i]
            out[k] = y0 + (y1 - y0) * (g - x0) / (x1 - x0)

    return torch.tensor(out, dtype=dtype)


class Resampler:
    """绑定固定网格的重采样器"""

    def __init__(self, x_min: float, x_step: float, row_count: int,
                 strategy: Union[str, IndexSearchStrategy] = DEFAULT_SEARCH_STRATEGY,
                 dtype: torch.dtype = torch.float64):
        self.x_min = x_min
        self.x_step = x_step
        self.row_count = row_count
        self.dtype = dtype
        self.strategy = strategy if isinstance(strategy, IndexSearchStrategy) else get_search_strategy(strategy)

    def __call__(self, x: SampleArray, y: SampleArray) -> torch.Tensor:
        return resample(x, y, self.x_min, self.x_step, self.row_count, self.strategy, self.dtype)

    def grid(self) -> torch.Tensor:
        """网格横坐标"""
        k = torch.arange(self.row_count, dtype=self.dtype)
        return self.x_min + k * self.x_step

    def __repr__(self) -> str:
        return (f"Resampler(x_min={self.x_min}, x_step={self.x_step}, "
                f"row_count={self.row_count}, strategy={self.strategy!r})")
