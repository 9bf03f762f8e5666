"""
查找表实现模块
规则网格上的一维多列查找表，用线性插值代替昂贵的函数计算

数据同时按列和按行各存一份：
- values_by_column (col_count, row_count)：单列跨多个查询点、构建列时连续访问
- values_by_row (row_count, col_count)：同一查询点插值所有列时连续访问
两份数据始终互为转置。每次修改都在新张量上完成，再整体替换存储记录，
读者持有的旧记录不会看到只更新了一半的状态。

越界策略：查询坐标小于 x_min 或大于 x_max 时静默截断到边界区间，不报错也不外推。
需要严格边界检查的调用方应自行比较 [x_min, x_max]。
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
import torch

from core.base.constants import TABLE_LAYOUTS, DEFAULT_LAYOUT, BUILTIN_FUNCTIONS
from core.base.exceptions import (
    InvalidInputError, ValidationError,
    is_valid_step, validate_domain, validate_column_count, validate_column_index
)
from core.base.logs import get_logger, get_performance_logger, log_execution_time
from core.algorithms.index_search import get_search_strategy
from core.algorithms.resampler import SampleArray, resample
from config.config import LookupTableConfig


@dataclass(frozen=True)
class TableLocation:
    """
    查询坐标在网格上的定位结果

    只包含区间下标和区间内的归一化偏移，不引用任何查找表。
    只能用于解析它的那张表（或网格完全相同的表）。
    """
    lower_index: int  # [0, row_count-2]
    fraction: float   # [0, 1]


@dataclass(frozen=True)
class _TableStorage:
    """两种布局的数据，作为整体发布"""
    by_column: torch.Tensor
    by_row: torch.Tensor


def _row_major(by_column: torch.Tensor) -> torch.Tensor:
    # 单列时 t() 已经是连续的，contiguous() 会返回共享内存的视图
    return by_column.t().clone(memory_format=torch.contiguous_format)


class LookupTable:
    """规则网格查找表"""

    def __init__(self, x_min: float, x_max: float, row_count: int, col_count: int = 0,
                 config: Optional[LookupTableConfig] = None):
        validate_domain(x_min, x_max, row_count)
        validate_column_count(col_count)

        self.config = config or LookupTableConfig()
        self.dtype: torch.dtype = self.config.dtype
        self.search_strategy = get_search_strategy(self.config.search_strategy,
                                                   self.config.adaptive_threshold)

        self.row_count = int(row_count)
        self.x_min = float(x_min)
        self.x_max = float(x_max)
        self.x_step = (self.x_max - self.x_min) / (self.row_count - 1)
        self.inv_step = 1.0 / self.x_step

        by_column = torch.zeros((col_count, self.row_count), dtype=self.dtype)
        self._storage = _TableStorage(by_column, _row_major(by_column))

        get_logger().debug(f"创建查找表: [{self.x_min}, {self.x_max}], 行数: {self.row_count}, 列数: {col_count}")

    @classmethod
    def create(cls, x_min: float, x_max: float, row_count: int, col_count: int = 0,
               config: Optional[LookupTableConfig] = None) -> 'LookupTable':
        return cls(x_min, x_max, row_count, col_count, config)

    @classmethod
    def from_raw_data(cls, x_min: float, x_step: float, data: Union[np.ndarray, torch.Tensor],
                      layout: str = 'row', config: Optional[LookupTableConfig] = None) -> 'LookupTable':
        """
        由已在网格上的数据直接重建查找表，不做重采样

        Args:
            x_min: 网格起点
            x_step: 网格步长
            data: 二维数据，layout='row' 时形状为 (row_count, col_count)，
                  layout='column' 时形状为 (col_count, row_count)
            layout: 数据布局
            config: 查找表配置
        """
        if layout not in TABLE_LAYOUTS:
            raise ValidationError(f"不支持的数据布局: {layout}, 支持: {TABLE_LAYOUTS}", "INVALID_LAYOUT")

        if isinstance(data, torch.Tensor):
            values = data.detach().cpu()
        else:
            values = torch.from_numpy(np.array(data, dtype=np.float64))
        if values.dim() != 2:
            raise InvalidInputError("网格数据必须是二维", shape=tuple(values.shape))
        by_column = values if layout == 'column' else values.t()
        col_count, row_count = by_column.shape

        if not torch.isfinite(by_column).all():
            raise InvalidInputError("网格数据必须为有限数")
        if not is_valid_step(x_step):
            raise ValidationError(f"网格步长无效: {x_step}", "INVALID_STEP", {'x_step': x_step})
        x_max = x_min + x_step * (row_count - 1)

        table = cls(x_min, x_max, row_count, 0, config)
        # 保留原始步长，避免 (x_max - x_min) / (row_count - 1) 的舍入误差
        table.x_step = float(x_step)
        table.inv_step = 1.0 / table.x_step
        by_column = by_column.to(table.dtype).contiguous().clone()
        table._publish(by_column, _row_major(by_column))
        return table

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------

    @property
    def col_count(self) -> int:
        return self._storage.by_column.shape[0]

    @property
    def values_by_column(self) -> torch.Tensor:
        """
        按列存储的网格 (col_count, row_count)

        返回内部张量本身，只读。原地修改会破坏两种布局互为转置的关系，
        需要修改时先 clone()，或使用 set_column / set_column_values。
        """
        return self._storage.by_column

    @property
    def values_by_row(self) -> torch.Tensor:
        """按行存储的网格 (row_count, col_count)，只读，与 values_by_column 不共享内存"""
        return self._storage.by_row

    def __repr__(self) -> str:
        return (f"LookupTable(x_min={self.x_min}, x_max={self.x_max}, "
                f"row_count={self.row_count}, col_count={self.col_count})")

    # ------------------------------------------------------------------
    # 修改
    # ------------------------------------------------------------------

    def _publish(self, by_column: torch.Tensor, by_row: torch.Tensor) -> None:
        """整体替换存储记录"""
        self._storage = _TableStorage(by_column, by_row)

    def add_column(self) -> int:
        """追加一列（初始为0），返回新列索引"""
        storage = self._storage
        new_column = torch.zeros((1, self.row_count), dtype=self.dtype)
        by_column = torch.cat([storage.by_column, new_column], dim=0)
        self._publish(by_column, _row_major(by_column))
        index = by_column.shape[0] - 1
        get_logger().debug(f"追加列: {index}")
        return index

    @log_execution_time("LookupTable.set_column")
    def set_column(self, index: int, x: SampleArray, y: SampleArray) -> None:
        """
        将采样点重采样到网格后写入指定列

        Raises:
            IndexOutOfRangeError: index 不是已有列
            InvalidInputError: 采样数据无效
        """
        validate_column_index(index, self.col_count)
        values = resample(x, y, self.x_min, self.x_step, self.row_count,
                          self.search_strategy, self.dtype)
        self._write_column(index, values)

    def set_column_values(self, index: int, values: SampleArray) -> None:
        """直接写入已在网格上的一列数据"""
        validate_column_index(index, self.col_count)
        column = torch.as_tensor(values, dtype=self.dtype)
        if column.shape != (self.row_count,):
            raise InvalidInputError(f"列数据长度必须为 {self.row_count}", shape=tuple(column.shape))
        if not torch.isfinite(column).all():
            raise InvalidInputError("列数据必须为有限数")
        self._write_column(index, column)

    def _write_column(self, index: int, values: torch.Tensor) -> None:
        storage = self._storage
        by_column = storage.by_column.clone()
        by_row = storage.by_row.clone()
        by_column[index] = values
        by_row[:, index] = values
        self._publish(by_column, by_row)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def resolve_location(self, x: float) -> TableLocation:
        """
        将查询坐标解析为 (区间下标, 区间内偏移)

        越界坐标截断到边界区间，不抛出异常。

        Raises:
            InvalidInputError: x 为 NaN
        """
        if x != x:
            raise InvalidInputError("查询坐标不能为 NaN")
        last = self.row_count - 2
        if x <= self.x_min:
            return TableLocation(0, 0.0)
        if x >= self.x_max:
            return TableLocation(last, 1.0)

        k = (x - self.x_min) * self.inv_step
        lower = min(max(math.floor(k), 0), last)
        fraction = min(max(k - lower, 0.0), 1.0)
        return TableLocation(lower, fraction)

    def get_column_at_location(self, column_index: int, location: TableLocation) -> float:
        """
        用已解析的定位结果插值单列

        Args:
            column_index: 列索引
            location: resolve_location 的返回值

        Returns:
            插值结果

        Raises:
            IndexOutOfRangeError: column_index 不是已有列
        """
        validate_column_index(column_index, self.col_count)
        i, f = location.lower_index, location.fraction
        pair = self._storage.by_column[column_index, i:i + 2]
        return (pair[0] * (1.0 - f) + pair[1] * f).item()

    def get_all_columns_at_location(self, location: TableLocation) -> torch.Tensor:
        """用已解析的定位结果插值所有列，返回长度为 col_count 的张量"""
        i, f = location.lower_index, location.fraction
        rows = self._storage.by_row[i:i + 2]
        return rows[0] * (1.0 - f) + rows[1] * f

    def get_column(self, column_index: int, x: float) -> float:
        """单列插值"""
        return self.get_column_at_location(column_index, self.resolve_location(x))

    def get_all_columns(self, x: float) -> torch.Tensor:
        """所有列插值，只解析一次坐标并使用按行布局"""
        return self.get_all_columns_at_location(self.resolve_location(x))

    def get_column_batch(self, column_index: int, xs: Union[Sequence[float], torch.Tensor]) -> torch.Tensor:
        """（并行）对一批查询坐标插值单列，越界策略与 get_column 相同"""
        validate_column_index(column_index, self.col_count)
        xs = torch.as_tensor(xs, dtype=self.dtype)
        if torch.isnan(xs).any():
            raise InvalidInputError("查询坐标不能为 NaN")

        last = self.row_count - 2
        k = (xs - self.x_min) * self.inv_step
        lower = torch.floor(k).clamp(0, last)
        fraction = (k - lower).clamp(0.0, 1.0)
        lower = lower.long()

        upper_edge = xs >= self.x_max
        lower = torch.where(upper_edge, torch.full_like(lower, last), lower)
        fraction = torch.where(upper_edge, torch.ones_like(fraction), fraction)
        fraction = torch.where(xs <= self.x_min, torch.zeros_like(fraction), fraction)

        column = self._storage.by_column[column_index]
        return column[lower] * (1.0 - fraction) + column[lower + 1] * fraction

    def find_row(self, x: float) -> Optional[int]:
        """精确网格查找：第一个坐标不小于 x 的网格行，超出 x_max 时返回 None"""
        return self.search_strategy.find(self.get_x_values().tolist(), x)

    def get_x_values(self) -> torch.Tensor:
        """网格横坐标 x_min + k * x_step，按需生成"""
        k = torch.arange(self.row_count, dtype=self.dtype)
        return self.x_min + k * self.x_step

    def get_raw_data(self, layout: str = DEFAULT_LAYOUT) -> np.ndarray:
        """
        返回完整网格的只读视图

        Args:
            layout: 'column' 返回 (col_count, row_count)，'row' 返回 (row_count, col_count)
        """
        if layout not in TABLE_LAYOUTS:
            raise ValidationError(f"不支持的数据布局: {layout}, 支持: {TABLE_LAYOUTS}", "INVALID_LAYOUT")
        storage = self._storage
        tensor = storage.by_column if layout == 'column' else storage.by_row
        view = tensor.numpy()
        view.flags.writeable = False
        return view


# 快捷函数

def create_table(x_min: float, x_max: float, row_count: int, col_count: int = 0,
                 config: Optional[LookupTableConfig] = None) -> LookupTable:
    """创建空查找表"""
    return LookupTable.create(x_min, x_max, row_count, col_count, config)


def build_table_from_function(functions: Union[Callable[[torch.Tensor], torch.Tensor],
                                               List[Callable[[torch.Tensor], torch.Tensor]]],
                              x_min: float, x_max: float, row_count: int,
                              config: Optional[LookupTableConfig] = None) -> LookupTable:
    """在网格上对函数采样构建查找表，每个函数一列"""
    if callable(functions):
        functions = [functions]

    start_time = time.perf_counter()
    table = LookupTable(x_min, x_max, row_count, len(functions), config)
    grid = table.get_x_values()
    for index, func in enumerate(functions):
        table.set_column_values(index, func(grid))

    get_performance_logger().log_table_build(table.row_count, table.col_count,
                                             time.perf_counter() - start_time)
    return table


def create_function_table(name: str, x_min: float, x_max: float, row_count: int,
                          config: Optional[LookupTableConfig] = None) -> LookupTable:
    """按名称创建内置函数查找表"""
    if name not in BUILTIN_FUNCTIONS:
        raise ValidationError(f"不支持的函数: {name}, 支持: {list(BUILTIN_FUNCTIONS)}", "UNSUPPORTED_FUNCTION")
    return build_table_from_function(BUILTIN_FUNCTIONS[name], x_min, x_max, row_count, config)
