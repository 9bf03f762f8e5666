"""
RegLUT 规则网格查找表主程序
支持命令行接口，提供查找表构建、查询和基准测试功能
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from core.base.constants import BUILTIN_FUNCTIONS, SEARCH_STRATEGIES, SUPPORTED_DTYPES, DEFAULT_ROW_COUNT
from core.base.exceptions import RegLUTBaseException, handle_exception
from core.base.logs import RegLUTLogger, setup_logging, get_logger
from core.algorithms import LookupTable, create_function_table
from evaluation import BenchmarkRunner, save_benchmark_report
from config import ConfigManager, LookupTableConfig
from utils import save_table, load_table


class RegLUTMain:
    """RegLUT 主程序类"""

    def __init__(self, config_file: Optional[str] = None):
        self.logger: RegLUTLogger = get_logger()
        self.config_manager = ConfigManager(config_file, create_if_missing=False)
        self.config = self.config_manager.get_config()

    def table_config(self, strategy: Optional[str] = None, dtype: Optional[str] = None) -> LookupTableConfig:
        base = self.config.lookup_table
        return LookupTableConfig(
            dtype_str=dtype or base.dtype_str,
            search_strategy=strategy or base.search_strategy,
            adaptive_threshold=base.adaptive_threshold
        )

    def run_build(self, function: str, x_min: float, x_max: float, rows: int,
                  output: Optional[str], **kwargs) -> Dict[str, Any]:
        """对内置函数采样构建查找表并保存"""
        self.logger.info(f"构建查找表: {function}, 区间 [{x_min}, {x_max}], 行数 {rows}")
        table = create_function_table(function, x_min, x_max, rows, self.table_config(**kwargs))
        result = {'table': repr(table)}
        if output:
            result['output'] = save_table(table, output)
        return result

    def run_query(self, queries: List[float], column: int, input_file: Optional[str],
                  function: str, x_min: float, x_max: float, rows: int, **kwargs) -> Dict[str, Any]:
        """查询查找表，未给出文件时按函数现场构建"""
        if input_file:
            table: LookupTable = load_table(input_file, self.table_config(**kwargs))
        else:
            table = create_function_table(function, x_min, x_max, rows, self.table_config(**kwargs))

        values = {}
        for x in queries:
            if column < 0:
                values[x] = table.get_all_columns(x).tolist()
            else:
                values[x] = table.get_column(column, x)
            self.logger.info(f"x = {x}: {values[x]}")
        return {'table': repr(table), 'values': values}

    def run_benchmark(self, output_dir: Optional[str], **kwargs) -> Dict[str, Any]:
        """运行基准测试"""
        runner = BenchmarkRunner(self.config.benchmark, self.table_config(**kwargs))
        results = runner.run_all()
        for result in results:
            self.logger.info(f"{result.test_name}/{result.variant} (n={result.size}): "
                             f"平均 {result.average_time:.6f}s, 吞吐 {result.throughput:.1f} 次/s")
        report = {'results': len(results)}
        if output_dir:
            report.update(save_benchmark_report(results, output_dir))
        return report


def create_argument_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description='RegLUT 规则网格查找表',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  python main.py --mode build --function sin --x_min 0 --x_max 3.1416 --rows 257 --output tables/sin.json
  python main.py --mode query --input tables/sin.json --query 0.5 1.0 1.5
  python main.py --mode benchmark --output_dir results
        """
    )

    parser.add_argument('--mode', choices=['build', 'query', 'benchmark'],
                        default='query', help='运行模式')

    # 查找表参数
    parser.add_argument('--function', choices=list(BUILTIN_FUNCTIONS),
                        default='sin', help='采样的内置函数')
    parser.add_argument('--x_min', type=float, default=0.0, help='网格起点')
    parser.add_argument('--x_max', type=float, default=1.0, help='网格终点')
    parser.add_argument('--rows', type=int, default=DEFAULT_ROW_COUNT, help='网格点数')
    parser.add_argument('--strategy', choices=SEARCH_STRATEGIES, default=None,
                        help='索引查找策略')
    parser.add_argument('--dtype', choices=SUPPORTED_DTYPES, default=None,
                        help='数据类型')

    # 查询参数
    parser.add_argument('--query', type=float, nargs='+', default=[0.5],
                        help='查询坐标列表')
    parser.add_argument('--column', type=int, default=0,
                        help='查询列，负数表示查询所有列')

    # 输入输出参数
    parser.add_argument('--input', type=str, default=None, help='查找表文件 (.json / .pt)')
    parser.add_argument('--output', type=str, default=None, help='查找表保存路径')
    parser.add_argument('--output_dir', type=str, default=None, help='基准测试报告目录')
    parser.add_argument('--config', type=str, default='config.json', help='配置文件路径')

    # 日志参数
    parser.add_argument('--log_level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='日志级别')
    parser.add_argument('--verbose', '-v', action='store_true', help='详细输出')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    log_level = 'DEBUG' if args.verbose else args.log_level
    setup_logging(level=log_level)
    logger = get_logger()
    logger.info(f"RegLUT 启动, 运行模式: {args.mode}")

    table_kwargs = {'strategy': args.strategy, 'dtype': args.dtype}

    try:
        app = RegLUTMain(args.config)
        if args.mode == 'build':
            app.run_build(args.function, args.x_min, args.x_max, args.rows, args.output, **table_kwargs)
        elif args.mode == 'query':
            app.run_query(args.query, args.column, args.input, args.function,
                          args.x_min, args.x_max, args.rows, **table_kwargs)
        else:
            app.run_benchmark(args.output_dir, **table_kwargs)
    except KeyboardInterrupt:
        logger.info("程序被用户中断")
        return 1
    except RegLUTBaseException as e:
        logger.error(handle_exception(e, args.mode))
        return 1

    logger.info("程序执行完成")
    return 0


if __name__ == '__main__':
    sys.exit(main())
