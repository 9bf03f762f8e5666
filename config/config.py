"""
配置管理模块
提供项目配置的默认值和配置管理功能
"""

import json
import os
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict, field

from core.base.constants import (
    DATA_TYPE_MAP, SUPPORTED_DTYPES, DEFAULT_DTYPE, DEFAULT_SEARCH_STRATEGY, SEARCH_STRATEGIES,
    ADAPTIVE_SEARCH_THRESHOLD, ADAPTIVE_THRESHOLD_RANGE, BENCHMARK_CONFIG,
    DEFAULT_LOG_LEVEL, LOG_LEVELS, OUTPUT_DIRS
)
from core.base.exceptions import ConfigParseError, ConfigurationError, FileNotFoundError
from core.base.logs import get_logger


@dataclass
class LookupTableConfig:
    """查找表配置"""
    dtype_str: str = DEFAULT_DTYPE  # 存储数据类型，默认float64
    search_strategy: str = DEFAULT_SEARCH_STRATEGY  # 重采样与精确查找使用的索引查找策略
    adaptive_threshold: int = ADAPTIVE_SEARCH_THRESHOLD  # 自适应查找切换为线性扫描的窗口宽度

    def __post_init__(self):
        """初始化后处理，将json配置的字符串转换为dtype"""
        if self.dtype_str not in DATA_TYPE_MAP:
            raise ConfigurationError(f"不支持的数据类型: {self.dtype_str}, 支持: {SUPPORTED_DTYPES}",
                                     "UNSUPPORTED_DATA_TYPE")
        self.dtype = DATA_TYPE_MAP[self.dtype_str]


@dataclass
class BenchmarkConfig:
    """基准测试配置"""
    warmup_runs: int = BENCHMARK_CONFIG['warmup_runs']
    measurement_runs: int = BENCHMARK_CONFIG['measurement_runs']
    sequence_lengths: List[int] = field(default_factory=lambda: list(BENCHMARK_CONFIG['sequence_lengths']))
    query_count: int = BENCHMARK_CONFIG['query_count']
    column_count: int = BENCHMARK_CONFIG['column_count']
    random_seed: int = BENCHMARK_CONFIG['random_seed']


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = DEFAULT_LOG_LEVEL
    log_to_file: bool = False


@dataclass
class OutputConfig:
    """输出配置"""
    output_dir: str = OUTPUT_DIRS['results']
    table_dir: str = OUTPUT_DIRS['tables']


@dataclass
class ProjectConfig:
    """项目主配置"""
    project_name: str = "RegLUT"
    version: str = "1.0.0"
    description: str = "规则网格查找表与索引查找算法"

    # 子配置
    lookup_table: LookupTableConfig = None
    benchmark: BenchmarkConfig = None
    logging: LoggingConfig = None
    output: OutputConfig = None

    def __post_init__(self):
        """初始化后处理"""
        if self.lookup_table is None:
            self.lookup_table = LookupTableConfig()
        if self.benchmark is None:
            self.benchmark = BenchmarkConfig()
        if self.logging is None:
            self.logging = LoggingConfig()
        if self.output is None:
            self.output = OutputConfig()

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """从字典创建配置"""
        data = dict(data)
        if isinstance(data.get('lookup_table'), dict):
            data['lookup_table'] = LookupTableConfig(**data['lookup_table'])

        if isinstance(data.get('benchmark'), dict):
            data['benchmark'] = BenchmarkConfig(**data['benchmark'])

        if isinstance(data.get('logging'), dict):
            data['logging'] = LoggingConfig(**data['logging'])

        if isinstance(data.get('output'), dict):
            data['output'] = OutputConfig(**data['output'])

        return cls(**data)


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_file: Optional[str] = None, create_if_missing: bool = True):
        self.logger = get_logger()
        self.config_file = config_file or "config.json"
        self.create_if_missing = create_if_missing
        self.config: Optional[ProjectConfig] = None
        self._load_config()

    def _load_config(self) -> None:
        """加载配置，文件不存在时使用默认配置"""
        if os.path.exists(self.config_file):
            self.config = self._load_from_file(self.config_file)
            self.logger.info(f"从文件加载配置: {self.config_file}")
        else:
            self.config = ProjectConfig()
            if self.create_if_missing:
                self._save_to_file(self.config_file, self.config)
                self.logger.info(f"创建默认配置文件: {self.config_file}")

    def _load_from_file(self, filepath: str) -> ProjectConfig:
        """从文件加载配置"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigParseError(filepath, f"JSON 解析错误: {e}")
        except OSError as e:
            raise ConfigParseError(filepath, f"文件读取错误: {e}")

        if not isinstance(data, dict):
            raise ConfigParseError(filepath, "顶层必须是对象")
        try:
            return ProjectConfig.from_dict(data)
        except (TypeError, ConfigurationError) as e:
            raise ConfigParseError(filepath, f"配置字段错误: {e}")

    def _save_to_file(self, filepath: str, config: ProjectConfig) -> None:
        """保存配置到文件"""
        try:
            directory = os.path.dirname(filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigParseError(filepath, f"文件保存错误: {e}")

    def get_config(self) -> ProjectConfig:
        """获取当前配置"""
        if self.config is None:
            self.config = ProjectConfig()
        return self.config

    def update_config(self, updates: Dict[str, Any]) -> None:
        """递归更新配置"""
        merged = self.get_config().to_dict()
        self._update_nested_dict(merged, updates)
        self.config = ProjectConfig.from_dict(merged)
        self.logger.info("配置已更新")

    def _update_nested_dict(self, base_dict: Dict[str, Any],
                            updates: Dict[str, Any]) -> None:
        for key, value in updates.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._update_nested_dict(base_dict[key], value)
            else:
                base_dict[key] = value

    def save_config(self, filepath: Optional[str] = None) -> None:
        """保存配置"""
        save_path = filepath or self.config_file
        self._save_to_file(save_path, self.get_config())
        self.logger.info(f"配置已保存到: {save_path}")

    def validate_config(self) -> List[str]:
        """验证配置，返回错误信息列表"""
        errors = []
        config = self.get_config()

        # 查找表配置
        if config.lookup_table.search_strategy not in SEARCH_STRATEGIES:
            errors.append(f"查找策略必须是 {SEARCH_STRATEGIES} 之一")

        min_threshold, max_threshold = ADAPTIVE_THRESHOLD_RANGE
        if not (min_threshold <= config.lookup_table.adaptive_threshold <= max_threshold):
            errors.append(f"自适应查找阈值应在 {min_threshold}-{max_threshold} 之间")

        # 基准测试配置
        if config.benchmark.measurement_runs < 1:
            errors.append("测量次数必须大于 0")

        if config.benchmark.warmup_runs < 0:
            errors.append("预热次数不能为负数")

        if any(length < 1 for length in config.benchmark.sequence_lengths):
            errors.append("序列长度必须大于 0")

        # 日志配置
        if config.logging.level.upper() not in LOG_LEVELS:
            errors.append(f"日志级别必须是 {LOG_LEVELS} 之一")

        return errors


# 全局配置管理器
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigManager:
    """获取全局配置管理器"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def get_config() -> ProjectConfig:
    """获取当前配置便捷函数"""
    return get_config_manager().get_config()


def load_config(filepath: str) -> ProjectConfig:
    """加载配置文件便捷函数"""
    if not os.path.exists(filepath):
        raise FileNotFoundError(filepath)
    return ConfigManager(filepath, create_if_missing=False).get_config()


def save_config(config: ProjectConfig, filepath: str) -> None:
    """保存配置便捷函数"""
    manager = ConfigManager(filepath, create_if_missing=False)
    manager.config = config
    manager.save_config(filepath)
