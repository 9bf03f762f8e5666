"""
性能基准测试模块
比较三种索引查找策略，以及查找表的单列与整行插值路径
"""

import gc
import json
import time
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd
import psutil
import torch

from core.base.constants import SEARCH_STRATEGIES, FILE_EXTENSIONS
from core.base.exceptions import BenchmarkError
from core.base.logs import get_logger, get_performance_logger
from core.algorithms.index_search import get_search_strategy
from core.algorithms.lookup_table import LookupTable
from config.config import BenchmarkConfig, LookupTableConfig


@dataclass
class BenchmarkResult:
    """基准测试结果"""
    test_name: str
    variant: str
    size: int
    execution_times: List[float] = field(default_factory=list)
    average_time: float = 0.0
    min_time: float = 0.0
    max_time: float = 0.0
    std_time: float = 0.0
    throughput: float = 0.0  # 每秒查询次数
    memory_usage: int = 0
    success: bool = True
    error_message: Optional[str] = None


class BenchmarkRunner:
    """基准测试运行器"""

    def __init__(self, config: Optional[BenchmarkConfig] = None,
                 table_config: Optional[LookupTableConfig] = None):
        self.config = config or BenchmarkConfig()
        self.table_config = table_config or LookupTableConfig()
        self.logger = get_logger()
        self.performance_logger = get_performance_logger()
        self.rng = np.random.default_rng(self.config.random_seed)

    def _time_runs(self, function: Callable[[], Any]) -> List[float]:
        """预热后多次测量"""
        for _ in range(self.config.warmup_runs):
            function()

        execution_times = []
        for _ in range(self.config.measurement_runs):
            start_time = time.perf_counter()
            function()
            execution_times.append(time.perf_counter() - start_time)
        return execution_times

    def _measure_memory_usage(self, function: Callable[[], Any]) -> int:
        process = psutil.Process()
        gc.collect()
        start_memory = process.memory_info().rss
        function()
        return process.memory_info().rss - start_memory

    def _build_result(self, test_name: str, variant: str, size: int,
                      function: Callable[[], Any], operations: int) -> BenchmarkResult:
        execution_times = self._time_runs(function)
        average = float(np.mean(execution_times))
        result = BenchmarkResult(
            test_name=test_name,
            variant=variant,
            size=size,
            execution_times=execution_times,
            average_time=average,
            min_time=float(np.min(execution_times)),
            max_time=float(np.max(execution_times)),
            std_time=float(np.std(execution_times)),
            throughput=operations / average if average > 0 else 0.0,
            memory_usage=self._measure_memory_usage(function)
        )
        self.performance_logger.log_memory_usage(result.memory_usage, psutil.Process().memory_info().rss)
        return result

    def benchmark_search_strategies(self) -> List[BenchmarkResult]:
        """对每个序列长度比较三种查找策略，并校验结果一致"""
        results = []
        for length in self.config.sequence_lengths:
            seq = np.sort(self.rng.uniform(0.0, 1.0, length)).tolist()
            # 查询值覆盖序列两端之外
            queries = self.rng.uniform(-0.1, 1.1, self.config.query_count).tolist()

            answers: Dict[str, List[Optional[int]]] = {}
            for name in SEARCH_STRATEGIES:
                strategy = get_search_strategy(name)
                answers[name] = [strategy.find(seq, q) for q in queries]

                def run(strategy=strategy):
                    for q in queries:
                        strategy.find(seq, q)

                result = self._build_result('index_search', name, length, run, len(queries))
                self.performance_logger.log_search_benchmark(name, length, result.average_time, result.throughput)
                results.append(result)

            reference = answers[SEARCH_STRATEGIES[0]]
            for name, found in answers.items():
                if found != reference:
                    raise BenchmarkError('index_search', f"策略 {name} 与 {SEARCH_STRATEGIES[0]} 结果不一致 (长度 {length})")

        return results

    def benchmark_table_lookups(self, row_count: Optional[int] = None) -> List[BenchmarkResult]:
        """比较逐列插值、整行插值和批量插值"""
        row_count = max(row_count or max(self.config.sequence_lengths), 2)
        col_count = self.config.column_count
        data = torch.from_numpy(self.rng.standard_normal((row_count, col_count)))
        table = LookupTable.from_raw_data(0.0, 1.0 / (row_count - 1), data, 'row', self.table_config)
        queries = self.rng.uniform(0.0, 1.0, self.config.query_count).tolist()
        query_tensor = torch.tensor(queries, dtype=table.dtype)

        def per_column():
            for q in queries:
                location = table.resolve_location(q)
                for c in range(col_count):
                    table.get_column_at_location(c, location)

        def all_columns():
            for q in queries:
                table.get_all_columns(q)

        def batch():
            for c in range(col_count):
                table.get_column_batch(c, query_tensor)

        return [
            self._build_result('table_lookup', 'per_column', row_count, per_column, len(queries)),
            self._build_result('table_lookup', 'all_columns', row_count, all_columns, len(queries)),
            self._build_result('table_lookup', 'batch', row_count, batch, len(queries)),
        ]

    def run_all(self) -> List[BenchmarkResult]:
        self.logger.info(f"开始基准测试: 序列长度 {self.config.sequence_lengths}, 查询数 {self.config.query_count}")
        results = self.benchmark_search_strategies() + self.benchmark_table_lookups()
        self.logger.info(f"基准测试完成: 共 {len(results)} 项")
        return results


def results_to_dataframe(results: List[BenchmarkResult]) -> pd.DataFrame:
    """将结果转换为表格（不含逐次耗时）"""
    rows = []
    for result in results:
        row = asdict(result)
        row.pop('execution_times')
        rows.append(row)
    return pd.DataFrame(rows)


def save_benchmark_report(results: List[BenchmarkResult], output_dir: str) -> Dict[str, str]:
    """保存 CSV 汇总和 JSON 明细，返回文件路径"""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    csv_path = directory / f"benchmark{FILE_EXTENSIONS['csv']}"
    json_path = directory / f"benchmark{FILE_EXTENSIONS['json']}"

    results_to_dataframe(results).to_csv(csv_path, index=False)
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump([asdict(r) for r in results], f, indent=2, ensure_ascii=False)

    get_logger().info(f"基准测试报告已保存: {csv_path}, {json_path}")
    return {'csv': str(csv_path), 'json': str(json_path)}
