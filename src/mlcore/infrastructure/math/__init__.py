"""
Numeric kernel set.

Importing this package registers the CPU kernels as a side effect.
"""

from ._blas import BlasKernels, gemm, gemv, axpy, scal
from . import _blas_cpu  # noqa: F401  (registers CPU kernels)

__all__ = [
    BlasKernels.__name__,
    "gemm",
    "gemv",
    "axpy",
    "scal",
]
