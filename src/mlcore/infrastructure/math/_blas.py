"""
Numeric kernel set: registry and dispatch.

Operators call four dense kernels, `gemm`, `gemv`, `axpy`, and `scal`,
without knowing which backend runs them. Each kernel is registered per
``(kernel name, element dtype, device-context class)`` and resolved at call
time from the dtype of the destination array and the context class the
caller passes in. A new backend supplies its own implementations through
`BlasKernels.register_kernel` and no operator code changes.

Conventions (all kernels)
-------------------------
- Arrays are flat, typed views over device buffers (what
  `TensorBlob.get_ptr_const` / `get_ptr_mutable` return).
- Matrices are row-major. ``lda``/``ldb``/``ldc`` are the row strides, in
  elements, of the matrices *as stored*.
- ``beta == 0`` clears the destination rather than multiplying it by zero,
  so non-finite values already in the destination never propagate.
- ``scal`` with ``alpha == 0`` writes zeros without reading ``x``.

Usage example
-------------
    gemm(False, True, m, n, k, 1.0, x, k, w, k, 0.0, y, n, context=CPUContext)
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Tuple

import numpy as np
from typing_extensions import ParamSpec, TypeVar

from ...domain._errors import DeviceNotSupportedError
from ..device_context._cpu_context import CPUContext

P = ParamSpec("P")
R = TypeVar("R")

KernelKey = Tuple[str, np.dtype, type]


class BlasKernels:
    """
    Registry of kernel implementations.

    Notes
    -----
    - Keys are ``(name, np.dtype, context class)``.
    - Registration keys must be unique unless explicitly overwritten.
    """

    KERNELS: ClassVar[Dict[KernelKey, Callable[..., None]]] = {}

    @classmethod
    def register_kernel(
        cls,
        name: str,
        dtype: Any,
        context_type: type,
        *,
        overwrite: bool = False,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Decorator to register a kernel implementation.

        Parameters
        ----------
        name:
            One of ``"gemm"``, ``"gemv"``, ``"axpy"``, ``"scal"``.
        dtype:
            Element dtype the implementation handles.
        context_type:
            Device-context class the implementation handles.
        overwrite:
            If False (default), raises if the key is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Kernel name must be a non-empty string")
        key = (name, np.dtype(dtype), context_type)

        def decorator(func: Callable[P, R]) -> Callable[P, R]:
            if not overwrite and key in cls.KERNELS:
                raise ValueError(f"Kernel already registered: {key!r}")
            cls.KERNELS[key] = func
            return func

        return decorator

    @classmethod
    def get(cls, name: str, dtype: Any, context_type: type) -> Callable[..., None]:
        """
        Resolve a kernel implementation.

        Raises
        ------
        DeviceNotSupportedError
            If nothing is registered for the key.
        """
        try:
            return cls.KERNELS[(name, np.dtype(dtype), context_type)]
        except KeyError:
            raise DeviceNotSupportedError(
                f"{name}<{np.dtype(dtype)}>",
                getattr(context_type, "__name__", str(context_type)),
            ) from None

    @classmethod
    def available(cls) -> tuple[KernelKey, ...]:
        return tuple(cls.KERNELS)


def gemm(
    trans_a: bool,
    trans_b: bool,
    m: int,
    n: int,
    k: int,
    alpha: float,
    a: Any,
    lda: int,
    b: Any,
    ldb: int,
    beta: float,
    c: Any,
    ldc: int,
    context: type = CPUContext,
) -> None:
    """
    ``C = alpha * op(A) @ op(B) + beta * C``.

    ``op(A)`` is ``m x k``, ``op(B)`` is ``k x n``, ``C`` is ``m x n``.
    """
    BlasKernels.get("gemm", c.dtype, context)(
        trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc
    )


def gemv(
    trans_a: bool,
    m: int,
    n: int,
    alpha: float,
    a: Any,
    lda: int,
    b: Any,
    beta: float,
    c: Any,
    ldc: int,
    context: type = CPUContext,
) -> None:
    """
    ``c = alpha * op(A) @ b + beta * c`` with ``A`` stored ``m x n``.

    Without transpose ``b`` has ``n`` and ``c`` has ``m`` elements; with
    transpose ``b`` has ``m`` and ``c`` has ``n`` elements.
    """
    BlasKernels.get("gemv", c.dtype, context)(
        trans_a, m, n, alpha, a, lda, b, beta, c, ldc
    )


def axpy(size: int, alpha: float, x: Any, y: Any, context: type = CPUContext) -> None:
    """``y[:size] += alpha * x[:size]``."""
    BlasKernels.get("axpy", y.dtype, context)(size, alpha, x, y)


def scal(size: int, alpha: float, x: Any, y: Any, context: type = CPUContext) -> None:
    """``y[:size] = alpha * x[:size]``; ``alpha == 0`` writes zeros."""
    BlasKernels.get("scal", y.dtype, context)(size, alpha, x, y)


__all__ = [
    BlasKernels.__name__,
    "gemm",
    "gemv",
    "axpy",
    "scal",
]
