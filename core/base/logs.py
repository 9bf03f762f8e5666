"""
日志配置模块
统一管理项目中的日志记录功能
"""

import logging
import sys
import time
import functools
from datetime import datetime
from typing import Optional, Dict, Any
from pathlib import Path

from .constants import LOG_LEVELS, DEFAULT_LOG_LEVEL, LOG_FORMAT, LOG_DATE_FORMAT, OUTPUT_DIRS


class ColoredFormatter(logging.Formatter):
    """彩色日志格式化器"""

    # 颜色代码
    COLORS = {
        'DEBUG': '\033[36m',      # 青色
        'INFO': '\033[32m',       # 绿色
        'WARNING': '\033[33m',    # 黄色
        'ERROR': '\033[31m',      # 红色
        'CRITICAL': '\033[35m',   # 紫色
        'RESET': '\033[0m'        # 重置
    }

    def format(self, record: logging.LogRecord) -> str:
        """格式化日志记录"""
        original_format = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color:
            return f"{color}{original_format}{self.COLORS['RESET']}"
        return original_format


class RegLUTLogger:
    """RegLUT项目专用日志器"""

    def __init__(self, name: str = "RegLUT", level: str = DEFAULT_LOG_LEVEL,
                 log_to_file: bool = False, log_dir: Optional[str] = None):
        self.name = name
        self.level = level.upper()
        self.log_to_file = log_to_file
        self.log_dir = Path(log_dir or OUTPUT_DIRS['logs'])
        self.logger = logging.getLogger(name)
        self._current_log_file: Optional[Path] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """设置日志器"""
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        self.logger.setLevel(getattr(logging, self.level))
        # 防止重复日志
        self.logger.propagate = False

        self._add_console_handler()
        if self.log_to_file:
            self._add_file_handler()

    def _add_console_handler(self) -> None:
        """添加控制台处理器"""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, self.level))
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        self.logger.addHandler(console_handler)

    def _add_file_handler(self) -> None:
        """添加按日期命名的文件处理器"""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d")
        self._current_log_file = self.log_dir / f"reglut_{timestamp}.log"

        file_handler = logging.FileHandler(self._current_log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # 文件记录所有级别
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self.logger.critical(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """异常日志（包含堆栈跟踪）"""
        self.logger.exception(message, **kwargs)

    def is_enabled_for(self, level: str) -> bool:
        return self.logger.isEnabledFor(getattr(logging, level.upper()))

    def set_level(self, level: str) -> None:
        """设置日志级别"""
        if level.upper() not in LOG_LEVELS:
            raise ValueError(f"无效的日志级别: {level}, 支持: {LOG_LEVELS}")

        self.level = level.upper()
        self.logger.setLevel(getattr(logging, self.level))

        # 只更新控制台处理器级别，文件始终记录全部
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(getattr(logging, self.level))

    def enable_file_logging(self, log_dir: Optional[str] = None) -> Path:
        """开启文件日志，返回日志文件路径"""
        if log_dir is not None:
            self.log_dir = Path(log_dir)
        if not self.log_to_file:
            self.log_to_file = True
            self._add_file_handler()
        return self._current_log_file

    def add_handler(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)

    def get_log_file_info(self) -> Dict[str, Any]:
        """获取日志文件信息"""
        if not self.log_dir.exists():
            return {"total_files": 0, "total_size": 0, "files": []}

        files_info = []
        for log_file in sorted(self.log_dir.glob("reglut_*.log"), reverse=True):
            stat = log_file.stat()
            files_info.append({
                "name": log_file.name,
                "size": stat.st_size,
                "modified": datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S"),
            })

        return {
            "total_files": len(files_info),
            "total_size": sum(f["size"] for f in files_info),
            "files": files_info
        }


class PerformanceLogger:
    """性能专用日志器"""

    def __init__(self, logger: RegLUTLogger):
        self.logger = logger

    def log_table_build(self, row_count: int, col_count: int, build_time: float) -> None:
        """记录查找表构建信息"""
        message = (f"查找表构建: 行数: {row_count}, "
                   f"列数: {col_count}, "
                   f"耗时: {build_time:.6f}s")
        self.logger.info(message)

    def log_search_benchmark(self, strategy: str, length: int,
                             average_time: float, throughput: float) -> None:
        """记录索引查找基准信息"""
        message = (f"查找基准: 策略: {strategy}, "
                   f"序列长度: {length}, "
                   f"平均耗时: {average_time:.6f}s, "
                   f"吞吐: {throughput:.1f} 次/s")
        self.logger.info(message)

    def log_memory_usage(self, memory_usage: int, peak_memory: int) -> None:
        message = (f"内存使用: 当前 {memory_usage / 1024 / 1024:.2f}MB, "
                   f"峰值 {peak_memory / 1024 / 1024:.2f}MB")
        self.logger.debug(message)


# 全局日志器实例
_global_logger: Optional[RegLUTLogger] = None
_performance_logger: Optional[PerformanceLogger] = None


def get_logger(name: str = "RegLUT", level: str = DEFAULT_LOG_LEVEL) -> RegLUTLogger:
    """获取日志器实例"""
    global _global_logger
    if _global_logger is None:
        _global_logger = RegLUTLogger(name, level)
    return _global_logger


def get_performance_logger() -> PerformanceLogger:
    """获取性能日志器实例"""
    global _performance_logger
    if _performance_logger is None:
        _performance_logger = PerformanceLogger(get_logger())
    return _performance_logger


def setup_logging(level: str = DEFAULT_LOG_LEVEL,
                  log_file: Optional[str] = None,
                  log_to_file: bool = False) -> RegLUTLogger:
    """设置项目日志"""
    logger = get_logger()
    logger.set_level(level)

    if log_to_file:
        logger.enable_file_logging()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logger.add_handler(file_handler)

    return logger


def log_execution_time(func_name: str):
    """执行时间记录装饰器"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.perf_counter() - start_time
                logger.error(f"执行失败: {func_name}, 耗时: {execution_time:.6f}s, 错误: {str(e)}")
                raise
            execution_time = time.perf_counter() - start_time
            logger.debug(f"执行完成: {func_name}, 耗时: {execution_time:.6f}s")
            return result
        return wrapper
    return decorator
