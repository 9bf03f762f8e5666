"""
查找表持久化测试模块
"""

import json

import pytest
import numpy as np
import torch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.algorithms.lookup_table import LookupTable
from core.base import exceptions
from config.config import LookupTableConfig
from utils.table_io import TableSnapshot, save_table, load_table, load_snapshot


class TestTableIO:
    """持久化测试类"""

    def setup_method(self):
        """测试前准备"""
        self.table = LookupTable.create(-2.0, 3.0, 7, 2)
        x = np.linspace(-2.0, 3.0, 13)
        self.table.set_column(0, x, np.tanh(x))
        self.table.set_column(1, [-2.0, 0.1, 3.0], [1.0, -4.0, 2.5])

    @pytest.mark.parametrize("suffix", [".json", ".pt"])
    def test_round_trip(self, tmp_path, suffix):
        """测试保存后加载得到完全相同的网格"""
        path = tmp_path / f"table{suffix}"
        save_table(self.table, path)
        loaded = load_table(path)

        assert loaded.row_count == self.table.row_count
        assert loaded.col_count == self.table.col_count
        assert loaded.x_min == self.table.x_min
        assert loaded.x_step == self.table.x_step
        assert torch.equal(loaded.values_by_column, self.table.values_by_column)
        assert torch.equal(loaded.values_by_row, self.table.values_by_row)
        for x in [-5.0, -2.0, -0.3, 1.7, 3.0]:
            assert torch.equal(loaded.get_all_columns(x), self.table.get_all_columns(x))

    def test_json_is_self_describing(self, tmp_path):
        """测试 JSON 文件包含头部字段和按行网格"""
        path = tmp_path / "table.json"
        save_table(self.table, path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        assert data['row_count'] == 7
        assert data['col_count'] == 2
        assert data['x_min'] == -2.0
        assert len(data['values']) == 7
        assert all(len(row) == 2 for row in data['values'])

    def test_empty_table(self, tmp_path):
        """测试零列表"""
        table = LookupTable.create(0.0, 1.0, 4)
        path = tmp_path / "empty.json"
        save_table(table, path)
        loaded = load_table(path)
        assert loaded.col_count == 0
        assert loaded.row_count == 4

    def test_float32_table(self, tmp_path):
        """测试 float32 查找表保存数据类型"""
        table = LookupTable.create(0.0, 1.0, 3, 1, LookupTableConfig(dtype_str='float32'))
        table.set_column(0, [0.0, 1.0], [0.25, 0.75])
        path = tmp_path / "f32.pt"
        save_table(table, path)
        loaded = load_table(path)
        assert loaded.dtype == torch.float32
        assert torch.equal(loaded.values_by_column, table.values_by_column)

    def test_missing_file(self, tmp_path):
        """测试文件不存在"""
        with pytest.raises(exceptions.FileNotFoundError):
            load_table(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        """测试 JSON 解析失败"""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(exceptions.TableFormatError):
            load_table(path)

    def test_header_mismatch(self, tmp_path):
        """测试头部与网格不一致"""
        path = tmp_path / "mismatch.json"
        snapshot = TableSnapshot.from_table(self.table).to_dict()
        snapshot['row_count'] = 8
        path.write_text(json.dumps(snapshot), encoding='utf-8')
        with pytest.raises(exceptions.TableFormatError):
            load_snapshot(path)

    @pytest.mark.parametrize("bad", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_json_values(self, tmp_path, bad):
        """测试 JSON 网格包含 NaN / Infinity"""
        path = tmp_path / "non_finite.json"
        data = TableSnapshot.from_table(self.table).to_dict()
        data['values'][3][1] = bad
        # json 默认写出 NaN / Infinity 字面量
        path.write_text(json.dumps(data), encoding='utf-8')
        with pytest.raises(exceptions.TableFormatError):
            load_table(path)

    def test_non_finite_tensor_values(self, tmp_path):
        """测试 .pt 网格包含非有限值"""
        path = tmp_path / "non_finite.pt"
        save_table(self.table, path)
        data = torch.load(path, weights_only=True)
        data['values'][0, 0] = float('inf')
        torch.save(data, path)
        with pytest.raises(exceptions.TableFormatError):
            load_table(path)

    def test_degenerate_step(self):
        """测试倒数上溢的网格步长"""
        snapshot = TableSnapshot.from_table(self.table).to_dict()
        snapshot['x_step'] = 5e-324
        with pytest.raises(exceptions.TableFormatError):
            TableSnapshot.from_dict(snapshot)

    def test_missing_fields(self):
        """测试缺少字段"""
        with pytest.raises(exceptions.TableFormatError):
            TableSnapshot.from_dict({'row_count': 3, 'values': []})

    def test_unsupported_extension(self, tmp_path):
        """测试不支持的扩展名"""
        with pytest.raises(exceptions.FileOperationError):
            save_table(self.table, tmp_path / "table.csv")


if __name__ == '__main__':
    pytest.main([__file__])
