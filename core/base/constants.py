"""
常量定义模块
统一管理项目中的所有常量，包括查找表默认参数和配置项
"""

import torch
from typing import Tuple, List, Dict, Any

# =============================================================================
# 数据类型
# =============================================================================

SUPPORTED_DTYPES: List[str] = ['float64', 'float32']
DEFAULT_DTYPE: str = 'float64'

# 数据映射(将str映射到dtype)
DATA_TYPE_MAP: Dict[str, torch.dtype] = {
    'float64': torch.float64,
    'float32': torch.float32,
}

# =============================================================================
# 查找表参数
# =============================================================================

MIN_ROW_COUNT: int = 2  # 网格至少包含两个点
DEFAULT_ROW_COUNT: int = 101

# 存储布局
TABLE_LAYOUTS: List[str] = ['column', 'row']
DEFAULT_LAYOUT: str = 'column'

# 索引查找策略
SEARCH_STRATEGIES: List[str] = ['linear', 'binary', 'adaptive']
DEFAULT_SEARCH_STRATEGY: str = 'adaptive'

# 自适应查找在候选窗口小于该值时切换为线性扫描，只影响性能不影响结果
ADAPTIVE_SEARCH_THRESHOLD: int = 8
ADAPTIVE_THRESHOLD_RANGE: Tuple[int, int] = (1, 1024)

# 内置的可采样函数（命令行使用）
BUILTIN_FUNCTIONS: Dict[str, Any] = {
    'sin': torch.sin,
    'cos': torch.cos,
    'exp': torch.exp,
    'tanh': torch.tanh,
    'sigmoid': torch.sigmoid,
}

# =============================================================================
# 文件路径常量
# =============================================================================

# 输出目录结构
OUTPUT_DIRS: Dict[str, str] = {
    'results': 'results',
    'tables': 'tables',
    'logs': 'logs'
}

# 文件扩展名
FILE_EXTENSIONS: Dict[str, str] = {
    'tensor': '.pt',
    'json': '.json',
    'csv': '.csv',
    'log': '.log',
    'config': '.json'
}

# 持久化格式版本
TABLE_FORMAT_VERSION: int = 1

# =============================================================================
# 基准测试参数
# =============================================================================

BENCHMARK_CONFIG: Dict[str, Any] = {
    'warmup_runs': 3,
    'measurement_runs': 10,
    'sequence_lengths': [8, 64, 512, 4096],
    'query_count': 1000,
    'random_seed': 0,
    'column_count': 16
}

# =============================================================================
# 日志配置
# =============================================================================

# 日志级别
LOG_LEVELS: List[str] = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
DEFAULT_LOG_LEVEL: str = 'INFO'

# 日志格式
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

# =============================================================================
# 版本信息
# =============================================================================

VERSION_INFO: Dict[str, str] = {
    'version': '1.0.0',
    'author': 'RegLUT Team',
    'description': '规则网格查找表与索引查找算法'
}
