"""
工具模块
提供查找表的持久化功能
"""

from .table_io import (
    TableSnapshot,
    save_table,
    load_snapshot,
    load_table
)

__all__ = [
    'TableSnapshot', 'save_table', 'load_snapshot', 'load_table'
]
