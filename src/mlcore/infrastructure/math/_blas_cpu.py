"""
CPU kernel implementations (NumPy backend).

These kernels map the kernel-set contract onto NumPy using zero-copy matrix
views over the flat typed buffers handed in by operators. They are registered
for ``float32`` and ``float64`` on `CPUContext`.

Design notes
------------
- Matrix views are built from the flat buffers with the given leading
  dimension; with ``ld == cols`` this is a plain reshape (no copy).
- The destination is always written in place through its view.
- Extents that do not fit the buffers raise `BoundsError` instead of being
  clamped; such a mismatch means an upstream shape invariant was broken.
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import BoundsError, ShapeMismatchError
from ..device_context._cpu_context import CPUContext
from ._blas import BlasKernels


def _matrix(buf: np.ndarray, rows: int, cols: int, ld: int, name: str) -> np.ndarray:
    """
    Return a ``rows x cols`` row-major view of flat `buf` with row stride `ld`.
    """
    rows, cols, ld = int(rows), int(cols), int(ld)
    if rows < 0 or cols < 0:
        raise ShapeMismatchError(f"{name}: negative extent ({rows}, {cols})")
    if rows == 0 or cols == 0:
        return buf[:0].reshape(rows, cols)
    if ld < cols:
        raise ShapeMismatchError(f"{name}: leading dimension {ld} < {cols} columns")
    needed = (rows - 1) * ld + cols
    if buf.size < needed:
        raise BoundsError(
            f"{name}: buffer holds {buf.size} elements, {needed} required "
            f"for a {rows}x{cols} matrix with ld={ld}"
        )
    if ld == cols:
        return buf[: rows * cols].reshape(rows, cols)
    return np.lib.stride_tricks.as_strided(
        buf, shape=(rows, cols), strides=(ld * buf.strides[0], buf.strides[0])
    )


def _vector(buf: np.ndarray, size: int, name: str) -> np.ndarray:
    size = int(size)
    if size < 0:
        raise ShapeMismatchError(f"{name}: negative size {size}")
    if buf.size < size:
        raise BoundsError(f"{name}: buffer holds {buf.size} elements, {size} required")
    return buf[:size]


def _prepare_destination(dst: np.ndarray, beta: float) -> None:
    if beta == 0:
        dst[...] = 0
    elif beta != 1:
        dst *= beta


@BlasKernels.register_kernel("gemm", np.float32, CPUContext)
@BlasKernels.register_kernel("gemm", np.float64, CPUContext)
def gemm_cpu(
    trans_a: bool,
    trans_b: bool,
    m: int,
    n: int,
    k: int,
    alpha: float,
    a: np.ndarray,
    lda: int,
    b: np.ndarray,
    ldb: int,
    beta: float,
    c: np.ndarray,
    ldc: int,
) -> None:
    a_mat = _matrix(a, k, m, lda, "gemm.A") if trans_a else _matrix(a, m, k, lda, "gemm.A")
    b_mat = _matrix(b, n, k, ldb, "gemm.B") if trans_b else _matrix(b, k, n, ldb, "gemm.B")
    c_mat = _matrix(c, m, n, ldc, "gemm.C")

    _prepare_destination(c_mat, beta)
    if alpha == 0 or k == 0:
        return
    op_a = a_mat.T if trans_a else a_mat
    op_b = b_mat.T if trans_b else b_mat
    c_mat += alpha * (op_a @ op_b)


@BlasKernels.register_kernel("gemv", np.float32, CPUContext)
@BlasKernels.register_kernel("gemv", np.float64, CPUContext)
def gemv_cpu(
    trans_a: bool,
    m: int,
    n: int,
    alpha: float,
    a: np.ndarray,
    lda: int,
    b: np.ndarray,
    beta: float,
    c: np.ndarray,
    ldc: int,
) -> None:
    # ldc is the output increment in BLAS terms; only unit increments are used
    a_mat = _matrix(a, m, n, lda, "gemv.A")
    if trans_a:
        x_vec, y_vec = _vector(b, m, "gemv.x"), _vector(c, n, "gemv.y")
    else:
        x_vec, y_vec = _vector(b, n, "gemv.x"), _vector(c, m, "gemv.y")

    _prepare_destination(y_vec, beta)
    if alpha == 0:
        return
    op_a = a_mat.T if trans_a else a_mat
    y_vec += alpha * (op_a @ x_vec)


@BlasKernels.register_kernel("axpy", np.float32, CPUContext)
@BlasKernels.register_kernel("axpy", np.float64, CPUContext)
def axpy_cpu(size: int, alpha: float, x: np.ndarray, y: np.ndarray) -> None:
    y_vec = _vector(y, size, "axpy.y")
    y_vec += alpha * _vector(x, size, "axpy.x")


@BlasKernels.register_kernel("scal", np.float32, CPUContext)
@BlasKernels.register_kernel("scal", np.float64, CPUContext)
def scal_cpu(size: int, alpha: float, x: np.ndarray, y: np.ndarray) -> None:
    y_vec = _vector(y, size, "scal.y")
    if alpha == 0:
        y_vec[...] = 0
        return
    np.multiply(_vector(x, size, "scal.x"), alpha, out=y_vec)


__all__ = [
    "gemm_cpu",
    "gemv_cpu",
    "axpy_cpu",
    "scal_cpu",
]
