"""
重采样测试模块
"""

import pytest
import numpy as np
import torch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.algorithms.resampler import Resampler, resample
from core.base.exceptions import InvalidInputError


class TestResample:
    """重采样测试类"""

    def test_interpolates_onto_grid(self):
        """测试线性插值到规则网格"""
        out = resample([0.0, 10.0], [0.0, 100.0], x_min=0.0, x_step=5.0, row_count=3)
        assert out.tolist() == [0.0, 50.0, 100.0]

    def test_piecewise_samples(self):
        """测试多段采样"""
        out = resample([0.0, 1.0, 3.0, 4.0], [0.0, 2.0, 2.0, 0.0], x_min=0.0, x_step=1.0, row_count=5)
        assert out.tolist() == [0.0, 2.0, 2.0, 2.0, 0.0]

    def test_clamps_outside_samples(self):
        """测试采样范围之外取端点值"""
        out = resample([1.0, 3.0], [10.0, 30.0], x_min=0.0, x_step=1.0, row_count=5)
        assert out.tolist() == [10.0, 10.0, 20.0, 30.0, 30.0]

    def test_irregular_samples(self):
        """测试非均匀采样与 numpy 参考一致"""
        x = np.array([0.0, 0.3, 0.35, 1.2, 2.0, 2.7, 4.0])
        y = np.sin(x)
        out = resample(x, y, x_min=0.0, x_step=0.25, row_count=17)
        grid = 0.0 + np.arange(17) * 0.25
        np.testing.assert_allclose(out.numpy(), np.interp(grid, x, y), rtol=1e-12, atol=1e-12)

    def test_strategies_give_identical_output(self):
        """测试不同查找策略结果完全一致"""
        x = np.cumsum(np.linspace(0.1, 1.0, 50))
        y = np.cos(x)
        outputs = [resample(x, y, 0.0, 0.37, 90, strategy=name) for name in ('linear', 'binary', 'adaptive')]
        assert torch.equal(outputs[0], outputs[1])
        assert torch.equal(outputs[1], outputs[2])

    def test_output_dtype(self):
        """测试输出类型"""
        out = resample([0.0, 1.0], [0.0, 1.0], 0.0, 0.5, 3, dtype=torch.float32)
        assert out.dtype == torch.float32
        assert out.shape == (3,)

    def test_tensor_inputs(self):
        """测试张量输入"""
        x = torch.tensor([0.0, 2.0])
        y = torch.tensor([4.0, 8.0])
        assert resample(x, y, 0.0, 1.0, 3).tolist() == [4.0, 6.0, 8.0]

    @pytest.mark.parametrize("x, y", [
        ([0.0, 1.0, 2.0], [0.0, 1.0]),          # 长度不一致
        ([0.0], [0.0]),                          # 点数不足
        ([], []),
        ([0.0, 2.0, 1.0], [0.0, 1.0, 2.0]),      # 非递增
        ([0.0, 1.0, 1.0], [0.0, 1.0, 2.0]),      # 非严格递增
        ([0.0, float('nan')], [0.0, 1.0]),
        ([0.0, 1.0], [0.0, float('inf')]),
        ([[0.0, 1.0]], [[0.0, 1.0]]),            # 非一维
        (["a", "b"], [0.0, 1.0]),
    ])
    def test_invalid_samples(self, x, y):
        """测试无效采样数据"""
        with pytest.raises(InvalidInputError):
            resample(x, y, 0.0, 1.0, 3)


class TestResampler:
    """绑定网格的重采样器测试类"""

    def test_call_and_grid(self):
        """测试重复使用同一网格"""
        resampler = Resampler(x_min=-1.0, x_step=0.5, row_count=5, strategy='binary')
        assert resampler.grid().tolist() == [-1.0, -0.5, 0.0, 0.5, 1.0]
        assert resampler([-1.0, 1.0], [0.0, 4.0]).tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert resampler([0.0, 1.0], [1.0, 1.0]).tolist() == [1.0] * 5


if __name__ == '__main__':
    pytest.main([__file__])
