"""
基准测试模块测试
"""

import json

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import BenchmarkConfig
from evaluation.benchmark import BenchmarkRunner, results_to_dataframe, save_benchmark_report


class TestBenchmark:
    """基准测试类"""

    def setup_method(self):
        """测试前准备"""
        self.config = BenchmarkConfig(
            warmup_runs=0,
            measurement_runs=1,
            sequence_lengths=[4, 32],
            query_count=50,
            column_count=3
        )
        self.runner = BenchmarkRunner(self.config)

    def test_search_strategies(self):
        """测试每个序列长度覆盖三种策略"""
        results = self.runner.benchmark_search_strategies()
        assert len(results) == 6
        assert {r.variant for r in results} == {'linear', 'binary', 'adaptive'}
        assert {r.size for r in results} == {4, 32}
        assert all(r.success and len(r.execution_times) == 1 for r in results)

    def test_table_lookups(self):
        """测试查找表插值路径"""
        results = self.runner.benchmark_table_lookups(row_count=1)
        assert [r.variant for r in results] == ['per_column', 'all_columns', 'batch']
        assert all(r.size == 2 for r in results)

    def test_run_all_and_report(self, tmp_path):
        """测试完整运行并保存报告"""
        results = self.runner.run_all()
        assert len(results) == 9

        frame = results_to_dataframe(results)
        assert 'execution_times' not in frame.columns
        assert {'test_name', 'variant', 'size', 'average_time', 'throughput'} <= set(frame.columns)

        paths = save_benchmark_report(results, str(tmp_path / "report"))
        assert Path(paths['csv']).exists()
        with open(paths['json'], 'r', encoding='utf-8') as f:
            assert len(json.load(f)) == 9


if __name__ == '__main__':
    pytest.main([__file__])
