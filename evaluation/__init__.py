"""
评估模块
提供索引查找和查找表插值的性能基准测试功能
"""

from .benchmark import (
    BenchmarkResult,
    BenchmarkRunner,
    results_to_dataframe,
    save_benchmark_report
)

__all__ = [
    'BenchmarkResult', 'BenchmarkRunner', 'results_to_dataframe',
    'save_benchmark_report'
]
