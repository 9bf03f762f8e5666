"""
查找表持久化模块
保存和加载查找表的头部字段与网格数据，支持 JSON 和 torch (.pt) 两种格式

加载时直接用网格数据重建查找表，不重新重采样。
"""

import json
import math
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import torch

from core.base.constants import FILE_EXTENSIONS, TABLE_FORMAT_VERSION, SUPPORTED_DTYPES
from core.base.exceptions import (
    FileNotFoundError, FileOperationError, TableFormatError, LookupTableError, ValidationError,
    is_valid_step
)
from core.base.logs import get_logger
from core.algorithms.lookup_table import LookupTable
from config.config import LookupTableConfig


HEADER_FIELDS = ('row_count', 'col_count', 'x_min', 'x_step')


@dataclass
class TableSnapshot:
    """查找表快照：头部字段在前，网格按行存储"""
    row_count: int
    col_count: int
    x_min: float
    x_step: float
    dtype: str
    values: List[List[float]]  # (row_count, col_count)
    version: int = TABLE_FORMAT_VERSION

    @classmethod
    def from_table(cls, table: LookupTable) -> 'TableSnapshot':
        return cls(
            row_count=table.row_count,
            col_count=table.col_count,
            x_min=table.x_min,
            x_step=table.x_step,
            dtype=table.config.dtype_str,
            values=table.get_raw_data('row').tolist()
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = '<memory>') -> 'TableSnapshot':
        """从字典恢复并校验快照"""
        if not isinstance(data, dict):
            raise TableFormatError(source, "顶层必须是对象")
        missing = [name for name in HEADER_FIELDS + ('values',) if name not in data]
        if missing:
            raise TableFormatError(source, f"缺少字段: {missing}")

        version = data.get('version', TABLE_FORMAT_VERSION)
        if version != TABLE_FORMAT_VERSION:
            raise TableFormatError(source, f"不支持的格式版本: {version}")

        dtype = data.get('dtype', 'float64')
        if dtype not in SUPPORTED_DTYPES:
            raise TableFormatError(source, f"不支持的数据类型: {dtype}")

        values = data['values']
        if isinstance(values, torch.Tensor):
            values = values.tolist()

        snapshot = cls(
            row_count=int(data['row_count']),
            col_count=int(data['col_count']),
            x_min=float(data['x_min']),
            x_step=float(data['x_step']),
            dtype=dtype,
            values=values,
            version=version
        )
        snapshot.validate(source)
        return snapshot

    def validate(self, source: str = '<memory>') -> None:
        if self.row_count < 2:
            raise TableFormatError(source, f"行数无效: {self.row_count}")
        if self.col_count < 0:
            raise TableFormatError(source, f"列数无效: {self.col_count}")
        if not (math.isfinite(self.x_min) and is_valid_step(self.x_step)):
            raise TableFormatError(source, f"网格参数无效: x_min={self.x_min}, x_step={self.x_step}")
        if len(self.values) != self.row_count:
            raise TableFormatError(source, f"网格行数 {len(self.values)} 与头部 {self.row_count} 不一致")
        for i, row in enumerate(self.values):
            if len(row) != self.col_count:
                raise TableFormatError(source, f"第 {i} 行列数 {len(row)} 与头部 {self.col_count} 不一致")
            if not all(math.isfinite(v) for v in row):
                raise TableFormatError(source, f"第 {i} 行包含非有限值")

    def to_table(self, config: Optional[LookupTableConfig] = None) -> LookupTable:
        """由快照重建查找表"""
        config = config or LookupTableConfig(dtype_str=self.dtype)
        dtype = config.dtype
        if self.col_count == 0:
            data = torch.zeros((self.row_count, 0), dtype=dtype)
        else:
            data = torch.tensor(self.values, dtype=dtype)
        return LookupTable.from_raw_data(self.x_min, self.x_step, data, layout='row', config=config)


def save_table(table: LookupTable, filepath: Union[str, Path]) -> str:
    """
    保存查找表

    Args:
        table: 查找表
        filepath: 目标路径，扩展名 .json 保存为 JSON，.pt 保存为 torch 文件

    Returns:
        实际写入的路径
    """
    path = Path(filepath)
    snapshot = TableSnapshot.from_table(table)

    try:
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix == FILE_EXTENSIONS['tensor']:
            data = snapshot.to_dict()
            data['values'] = torch.tensor(snapshot.values, dtype=table.dtype).reshape(
                snapshot.row_count, snapshot.col_count)
            torch.save(data, path)
        elif path.suffix == FILE_EXTENSIONS['json']:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(snapshot.to_dict(), f, indent=2)
        else:
            raise FileOperationError(f"不支持的文件扩展名: {path.suffix}", "UNSUPPORTED_EXTENSION",
                                     {'file_path': str(path)})
    except OSError as e:
        raise FileOperationError(f"保存查找表失败: {e}", "SAVE_FAILED", {'file_path': str(path)})

    get_logger().info(f"查找表已保存: {path}")
    return str(path)


def load_snapshot(filepath: Union[str, Path]) -> TableSnapshot:
    """读取查找表快照"""
    path = Path(filepath)
    if not os.path.exists(path):
        raise FileNotFoundError(str(path))

    if path.suffix == FILE_EXTENSIONS['tensor']:
        try:
            data = torch.load(path, weights_only=True)
        except (RuntimeError, EOFError, OSError) as e:
            raise TableFormatError(str(path), f"torch 文件读取失败: {e}")
    elif path.suffix == FILE_EXTENSIONS['json']:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise TableFormatError(str(path), f"JSON 解析错误: {e}")
    else:
        raise FileOperationError(f"不支持的文件扩展名: {path.suffix}", "UNSUPPORTED_EXTENSION",
                                 {'file_path': str(path)})

    try:
        return TableSnapshot.from_dict(data, str(path))
    except (TypeError, ValueError) as e:
        raise TableFormatError(str(path), f"字段类型错误: {e}")


def load_table(filepath: Union[str, Path], config: Optional[LookupTableConfig] = None) -> LookupTable:
    """加载查找表"""
    snapshot = load_snapshot(filepath)
    try:
        table = snapshot.to_table(config)
    except (LookupTableError, ValidationError) as e:
        raise TableFormatError(str(filepath), str(e))
    get_logger().info(f"查找表已加载: {filepath}, 行数: {table.row_count}, 列数: {table.col_count}")
    return table
