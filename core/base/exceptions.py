"""
异常定义模块
定义项目中使用的所有自定义异常类
"""

import math
import numbers
from typing import Optional, Any, Sequence

from .constants import MIN_ROW_COUNT


class RegLUTBaseException(Exception):
    """RegLUT项目基础异常类"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(RegLUTBaseException):
    """配置相关异常"""
    pass


class ValidationError(RegLUTBaseException):
    """数据验证异常"""
    pass


class LookupTableError(RegLUTBaseException):
    """查找表相关异常"""
    pass


class SearchError(RegLUTBaseException):
    """索引查找相关异常"""
    pass


class FileOperationError(RegLUTBaseException):
    """文件操作异常"""
    pass


class PerformanceError(RegLUTBaseException):
    """性能相关异常"""
    pass


# 具体的异常类定义

class InvalidDomainError(LookupTableError):
    """网格定义域无效异常"""

    def __init__(self, x_min: float, x_max: float, row_count: int):
        message = f"网格定义无效: x_min={x_min}, x_max={x_max}, row_count={row_count} (要求 x_max > x_min 且 row_count >= 2)"
        super().__init__(message, "INVALID_DOMAIN", {
            'x_min': x_min,
            'x_max': x_max,
            'row_count': row_count
        })


class InvalidSizeError(LookupTableError):
    """列数无效异常"""

    def __init__(self, col_count: int):
        message = f"列数不能为负数: {col_count}"
        super().__init__(message, "INVALID_SIZE", {'col_count': col_count})


class IndexOutOfRangeError(LookupTableError):
    """列索引越界异常"""

    def __init__(self, index: int, col_count: int):
        message = f"列索引越界: {index}, 有效范围 [0, {col_count})"
        super().__init__(message, "INDEX_OUT_OF_RANGE", {
            'index': index,
            'col_count': col_count
        })


class InvalidInputError(ValidationError):
    """采样数据无效异常"""

    def __init__(self, reason: str, **details):
        message = f"采样数据无效: {reason}"
        super().__init__(message, "INVALID_INPUT", {'reason': reason, **details})


class InvalidSearchStrategyError(SearchError):
    """无效查找策略异常"""

    def __init__(self, strategy: str, supported_strategies: list):
        message = f"不支持的查找策略: {strategy}, 支持的策略: {supported_strategies}"
        super().__init__(message, "INVALID_SEARCH_STRATEGY", {
            'strategy': strategy,
            'supported_strategies': supported_strategies
        })


class TableFormatError(FileOperationError):
    """查找表文件格式异常"""

    def __init__(self, file_path: str, reason: str):
        message = f"查找表文件格式错误: {file_path}, 原因: {reason}"
        super().__init__(message, "TABLE_FORMAT_ERROR", {
            'file_path': file_path,
            'reason': reason
        })


class FileNotFoundError(FileOperationError):
    """文件不存在异常"""

    def __init__(self, file_path: str):
        message = f"文件不存在: {file_path}"
        super().__init__(message, "FILE_NOT_FOUND", {'file_path': file_path})


class ConfigParseError(ConfigurationError):
    """配置文件解析异常"""

    def __init__(self, config_file: str, parse_error: str):
        message = f"配置文件解析失败: {config_file}, 错误: {parse_error}"
        super().__init__(message, "CONFIG_PARSE_ERROR", {
            'config_file': config_file,
            'parse_error': parse_error
        })


class BenchmarkError(PerformanceError):
    """基准测试异常"""

    def __init__(self, test_name: str, error_message: str):
        message = f"基准测试失败: {test_name}, 错误: {error_message}"
        super().__init__(message, "BENCHMARK_ERROR", {
            'test_name': test_name,
            'error_message': error_message
        })


# 异常处理工具函数

def handle_exception(exception: Exception, context: str = "") -> str:
    """
    统一异常处理函数

    Args:
        exception: 异常对象
        context: 异常上下文信息

    Returns:
        格式化的错误消息
    """
    if isinstance(exception, RegLUTBaseException):
        error_msg = str(exception)
    else:
        error_msg = f"未处理的异常: {type(exception).__name__}: {str(exception)}"
    if context:
        error_msg = f"[{context}] {error_msg}"
    return error_msg


def is_valid_step(x_step: float) -> bool:
    """网格步长及其倒数均为有限正数"""
    return math.isfinite(x_step) and x_step > 0 and math.isfinite(1.0 / x_step)


def validate_domain(x_min: float, x_max: float, row_count: int) -> None:
    """
    验证网格定义域

    Args:
        x_min: 网格起点
        x_max: 网格终点
        row_count: 网格点数

    Raises:
        InvalidDomainError: 边界非有限、x_max <= x_min、点数不足，
            或步长 (x_max - x_min) / (row_count - 1) 下溢为0、上溢为无穷时抛出
    """
    if not (math.isfinite(x_min) and math.isfinite(x_max)):
        raise InvalidDomainError(x_min, x_max, row_count)
    if x_max <= x_min or row_count < MIN_ROW_COUNT:
        raise InvalidDomainError(x_min, x_max, row_count)
    if not is_valid_step((x_max - x_min) / (row_count - 1)):
        raise InvalidDomainError(x_min, x_max, row_count)


def validate_column_count(col_count: int) -> None:
    """
    验证列数

    Raises:
        InvalidSizeError: 列数为负时抛出
    """
    if col_count < 0:
        raise InvalidSizeError(col_count)


def validate_column_index(index: int, col_count: int) -> None:
    """
    验证列索引

    Raises:
        IndexOutOfRangeError: 索引不是已有列时抛出
    """
    if isinstance(index, bool) or not isinstance(index, numbers.Integral) or not (0 <= index < col_count):
        raise IndexOutOfRangeError(index, col_count)


def validate_samples(x: Sequence[float], y: Sequence[float]) -> None:
    """
    验证采样点

    Args:
        x: 采样横坐标，必须严格递增
        y: 采样纵坐标，长度与 x 相同

    Raises:
        InvalidInputError: 长度不一致、点数少于2、存在非有限值或 x 非严格递增时抛出
    """
    if len(x) != len(y):
        raise InvalidInputError("x 与 y 长度不一致", x_len=len(x), y_len=len(y))
    if len(x) < 2:
        raise InvalidInputError("至少需要2个采样点", count=len(x))
    for i, (xi, yi) in enumerate(zip(x, y)):
        if not (math.isfinite(xi) and math.isfinite(yi)):
            raise InvalidInputError("采样值必须为有限数", position=i)
        if i > 0 and not xi > x[i - 1]:
            raise InvalidInputError("x 必须严格递增", position=i)
