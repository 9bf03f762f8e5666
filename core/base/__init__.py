"""
基础模块
包含常量定义、异常处理和日志系统
"""

from .constants import (
    SUPPORTED_DTYPES,
    DEFAULT_DTYPE,
    DATA_TYPE_MAP,
    MIN_ROW_COUNT,
    DEFAULT_ROW_COUNT,
    TABLE_LAYOUTS,
    DEFAULT_LAYOUT,
    SEARCH_STRATEGIES,
    DEFAULT_SEARCH_STRATEGY,
    ADAPTIVE_SEARCH_THRESHOLD,
    ADAPTIVE_THRESHOLD_RANGE,
    BUILTIN_FUNCTIONS,
    OUTPUT_DIRS,
    FILE_EXTENSIONS,
    TABLE_FORMAT_VERSION,
    BENCHMARK_CONFIG,
    LOG_LEVELS,
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    VERSION_INFO
)

from .exceptions import (
    RegLUTBaseException,
    ConfigurationError,
    ValidationError,
    LookupTableError,
    SearchError,
    FileOperationError,
    PerformanceError,
    InvalidDomainError,
    InvalidSizeError,
    IndexOutOfRangeError,
    InvalidInputError,
    InvalidSearchStrategyError,
    TableFormatError,
    FileNotFoundError,
    ConfigParseError,
    BenchmarkError,
    handle_exception,
    is_valid_step,
    validate_domain,
    validate_column_count,
    validate_column_index,
    validate_samples
)

from .logs import (
    RegLUTLogger,
    PerformanceLogger,
    get_logger,
    get_performance_logger,
    setup_logging,
    log_execution_time
)

__all__ = [
    # 常量
    'SUPPORTED_DTYPES', 'DEFAULT_DTYPE', 'DATA_TYPE_MAP', 'MIN_ROW_COUNT',
    'DEFAULT_ROW_COUNT', 'TABLE_LAYOUTS', 'DEFAULT_LAYOUT', 'SEARCH_STRATEGIES',
    'DEFAULT_SEARCH_STRATEGY', 'ADAPTIVE_SEARCH_THRESHOLD', 'ADAPTIVE_THRESHOLD_RANGE',
    'BUILTIN_FUNCTIONS', 'OUTPUT_DIRS', 'FILE_EXTENSIONS', 'TABLE_FORMAT_VERSION',
    'BENCHMARK_CONFIG', 'LOG_LEVELS', 'DEFAULT_LOG_LEVEL',
    'LOG_FORMAT', 'LOG_DATE_FORMAT', 'VERSION_INFO',

    # 异常
    'RegLUTBaseException', 'ConfigurationError', 'ValidationError',
    'LookupTableError', 'SearchError', 'FileOperationError', 'PerformanceError',
    'InvalidDomainError', 'InvalidSizeError', 'IndexOutOfRangeError',
    'InvalidInputError', 'InvalidSearchStrategyError', 'TableFormatError',
    'FileNotFoundError', 'ConfigParseError', 'BenchmarkError',
    'handle_exception', 'is_valid_step', 'validate_domain', 'validate_column_count',
    'validate_column_index', 'validate_samples',

    # 日志
    'RegLUTLogger', 'PerformanceLogger', 'get_logger', 'get_performance_logger',
    'setup_logging', 'log_execution_time'
]
