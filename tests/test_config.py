"""
配置与日志测试模块
"""

import json
import logging

import pytest
import torch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config.config as config_module
from config.config import (
    ConfigManager, LookupTableConfig, ProjectConfig, get_config, get_config_manager,
    load_config, save_config
)
from core.base.exceptions import ConfigParseError, ConfigurationError, FileNotFoundError
from core.base.logs import RegLUTLogger, log_execution_time


class TestConfig:
    """配置测试类"""

    def test_defaults(self):
        """测试默认配置"""
        config = ProjectConfig()
        assert config.lookup_table.dtype == torch.float64
        assert config.lookup_table.search_strategy == 'adaptive'
        assert config.lookup_table.adaptive_threshold == 8
        assert config.benchmark.measurement_runs > 0

    def test_dict_round_trip(self):
        """测试字典转换"""
        config = ProjectConfig(lookup_table=LookupTableConfig(dtype_str='float32', search_strategy='binary'))
        restored = ProjectConfig.from_dict(config.to_dict())
        assert restored.lookup_table.dtype == torch.float32
        assert restored.lookup_table.search_strategy == 'binary'
        assert restored.to_dict() == config.to_dict()

    def test_unsupported_dtype(self):
        """测试不支持的数据类型"""
        with pytest.raises(ConfigurationError):
            LookupTableConfig(dtype_str='int8')

    def test_manager_creates_default_file(self, tmp_path):
        """测试配置文件不存在时创建默认文件"""
        path = tmp_path / "nested" / "config.json"
        manager = ConfigManager(str(path))
        assert path.exists()
        assert manager.get_config().to_dict() == ProjectConfig().to_dict()

    def test_manager_without_creating_file(self, tmp_path):
        """测试不创建默认文件"""
        path = tmp_path / "config.json"
        ConfigManager(str(path), create_if_missing=False)
        assert not path.exists()

    def test_update_and_save(self, tmp_path):
        """测试更新与保存"""
        path = tmp_path / "config.json"
        manager = ConfigManager(str(path))
        manager.update_config({'lookup_table': {'adaptive_threshold': 16}, 'logging': {'level': 'DEBUG'}})
        manager.save_config()

        loaded = load_config(str(path))
        assert loaded.lookup_table.adaptive_threshold == 16
        assert loaded.lookup_table.search_strategy == 'adaptive'
        assert loaded.logging.level == 'DEBUG'

    def test_save_config_helper(self, tmp_path):
        """测试保存配置便捷函数"""
        path = tmp_path / "saved.json"
        save_config(ProjectConfig(lookup_table=LookupTableConfig(search_strategy='linear')), str(path))
        with open(path, 'r', encoding='utf-8') as f:
            assert json.load(f)['lookup_table']['search_strategy'] == 'linear'

    def test_validate_config(self, tmp_path):
        """测试配置验证"""
        manager = ConfigManager(str(tmp_path / "config.json"), create_if_missing=False)
        assert manager.validate_config() == []

        manager.update_config({
            'lookup_table': {'search_strategy': 'hash', 'adaptive_threshold': 0},
            'benchmark': {'measurement_runs': 0},
            'logging': {'level': 'TRACE'}
        })
        errors = manager.validate_config()
        assert len(errors) == 4

    def test_invalid_json(self, tmp_path):
        """测试配置文件解析失败"""
        path = tmp_path / "config.json"
        path.write_text("[1, 2", encoding='utf-8')
        with pytest.raises(ConfigParseError):
            ConfigManager(str(path))

    def test_unknown_field(self, tmp_path):
        """测试未知配置字段"""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'lookup_table': {'bit_len': 12}}), encoding='utf-8')
        with pytest.raises(ConfigParseError):
            ConfigManager(str(path))

    def test_global_config_manager(self, tmp_path, monkeypatch):
        """测试全局配置管理器只创建一次"""
        monkeypatch.setattr(config_module, '_config_manager', None)
        path = tmp_path / "global.json"
        manager = get_config_manager(str(path))
        assert get_config_manager() is manager
        assert path.exists()
        assert get_config() is manager.get_config()

    def test_load_missing_file(self, tmp_path):
        """测试加载不存在的文件"""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.json"))


class TestLogging:
    """日志测试类"""

    def test_file_logging(self, tmp_path):
        """测试文件日志"""
        logger = RegLUTLogger("RegLUT-test", "INFO", log_to_file=True, log_dir=str(tmp_path))
        logger.info("查找表构建完成")
        for handler in logger.logger.handlers:
            handler.flush()

        info = logger.get_log_file_info()
        assert info['total_files'] == 1
        assert "查找表构建完成" in (tmp_path / info['files'][0]['name']).read_text(encoding='utf-8')

    def test_set_level(self):
        """测试设置日志级别"""
        logger = RegLUTLogger("RegLUT-level")
        logger.set_level('warning')
        assert logger.logger.level == logging.WARNING
        assert not logger.is_enabled_for('info')
        with pytest.raises(ValueError):
            logger.set_level('verbose')

    def test_log_execution_time_reraises(self):
        """测试计时装饰器保留异常"""
        @log_execution_time("failing")
        def failing():
            raise ConfigurationError("配置错误")

        with pytest.raises(ConfigurationError):
            failing()


if __name__ == '__main__':
    pytest.main([__file__])
