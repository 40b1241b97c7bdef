import numpy as np
import pytest

from physarum.executor import InterpretedExecutor, KernelExecutor, NumbaExecutor
from physarum.kernels import diffuse_kernel


def test_interpreted_executor_runs_python_body():
    ex = InterpretedExecutor()
    assert ex.resolve(diffuse_kernel) is diffuse_kernel.py_func
    # plain callables pass through unchanged
    assert ex.resolve(len) is len


@pytest.mark.parametrize('executor', [NumbaExecutor(), InterpretedExecutor()])
def test_dispatch_runs_kernel_to_completion(executor):
    src = np.zeros((4, 4))
    src[1, 1] = 3.0
    dst = np.zeros_like(src)
    executor.dispatch(diffuse_kernel, src.size, src, dst, 1, 0, 1.0)
    assert np.allclose(dst[:, 1], [1.0, 1.0, 1.0, 0.0])


def test_negative_domain_rejected():
    with pytest.raises(ValueError):
        NumbaExecutor().dispatch(diffuse_kernel, -1)


def test_base_executor_is_abstract():
    with pytest.raises(NotImplementedError):
        KernelExecutor().dispatch(len, 0, [])
