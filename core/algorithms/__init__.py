"""
算法模块
提供索引查找、重采样和规则网格查找表
"""

from .index_search import (
    linear_search,
    binary_search,
    adaptive_search,
    search_clamped,
    IndexSearchStrategy,
    LinearSearch,
    BinarySearch,
    AdaptiveSearch,
    SEARCH_STRATEGIES_MAP,
    get_search_strategy
)

from .resampler import (
    Resampler,
    resample,
    as_sample_list
)

from .lookup_table import (
    TableLocation,
    LookupTable,
    create_table,
    build_table_from_function,
    create_function_table
)

__all__ = [
    # 索引查找
    'linear_search', 'binary_search', 'adaptive_search', 'search_clamped',
    'IndexSearchStrategy', 'LinearSearch', 'BinarySearch', 'AdaptiveSearch',
    'SEARCH_STRATEGIES_MAP', 'get_search_strategy',

    # 重采样
    'Resampler', 'resample', 'as_sample_list',

    # 查找表
    'TableLocation', 'LookupTable', 'create_table',
    'build_table_from_function', 'create_function_table'
]
