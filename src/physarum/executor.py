"""Kernel executors.

The stepper never calls a kernel directly; it dispatches it through an
executor, which runs the kernel over its whole domain and returns only when
every worker has finished. That return is the barrier between passes.

- `NumbaExecutor` runs the compiled, multi-threaded kernel.
- `InterpretedExecutor` runs the kernel's plain-Python body (``py_func``),
  one element after another. It is slow; use it to debug a kernel or to
  cross-check the compiled results.
"""
import logging
import time

logger = logging.getLogger(__name__)


class KernelExecutor:
    """Runs a kernel over a domain of `domain_size` independent elements."""

    name = 'base'

    def dispatch(self, kernel, domain_size, *args):
        if domain_size < 0:
            raise ValueError(f'domain_size must be non-negative, got {domain_size}')
        fn = self.resolve(kernel)
        t0 = time.perf_counter()
        result = fn(*args)
        logger.debug('%s: %s over %d elements in %.3f ms', self.name,
                     getattr(kernel, '__name__', repr(kernel)), domain_size,
                     (time.perf_counter() - t0) * 1000.0)
        return result

    def resolve(self, kernel):
        raise NotImplementedError


class NumbaExecutor(KernelExecutor):
    name = 'numba'

    def resolve(self, kernel):
        return kernel


class InterpretedExecutor(KernelExecutor):
    name = 'interpreted'

    def resolve(self, kernel):
        return getattr(kernel, 'py_func', kernel)
