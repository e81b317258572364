"""
Tensor container over a device context.

`TensorBlob` is a shape and an element type layered over exactly one device
context. It never touches backend memory itself: allocation, copies, and
typed views all go through the context, so the same class works for any
registered backend.

Shape conventions
-----------------
- The empty shape ``()`` has element count 0 and marks an *empty* tensor.
  Operators rely on this state during construction to decide whether they
  originate a tensor's shape or validate one fixed upstream.
- Whenever the tensor is non-empty the context holds exactly
  ``size() * dtype.itemsize`` bytes.

Reallocation policy
-------------------
`resize` reallocates only when the byte length changes (different element
count or element width); contents are undefined afterwards. When the byte
length is unchanged, the buffer and its contents are preserved and only the
dimension list is replaced. This is what lets an operator be rebuilt against
already-sized tensors without disturbing them.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

import numpy as np

from ...domain._errors import (
    AllocationError,
    BoundsError,
    DTypeMismatchError,
    ShapeMismatchError,
)
from ...domain._tensor import ITensor
from ...domain.device._device import Device
from ..device_context._registry import DeviceContextRegistry
from ..math._blas import scal
from ._dtypes import DEFAULT_DTYPE, resolve_dtype


class TensorBlob(ITensor):
    """
    Shaped, typed view over one device context.

    Parameters
    ----------
    shape : Sequence[int], optional
        Initial shape. Defaults to ``()`` (empty tensor, nothing allocated).
    dtype : dtype-like or element-type tag, optional
        Element type. Defaults to ``float32`` (tag ``"float"``).
    device : Device, optional
        Backend to allocate on. Defaults to ``Device("cpu")``.

    Notes
    -----
    The tensor exclusively owns its context. Operators hold non-owning
    references to tensors; several operators may reference the same tensor.
    """

    def __init__(
        self,
        shape: Sequence[int] = (),
        dtype: Any = None,
        device: Optional[Device] = None,
    ) -> None:
        self._device = device if device is not None else Device("cpu")
        context_type = DeviceContextRegistry.context_type_for(self._device)
        self._context = context_type()
        self._dtype: np.dtype = DEFAULT_DTYPE if dtype is None else resolve_dtype(dtype)
        self._shape: tuple[int, ...] = ()
        if len(tuple(shape)) > 0:
            self.resize(shape)

    def __repr__(self) -> str:
        return (
            f"TensorBlob(shape={self._shape}, dtype={self._dtype}, "
            f"device={self._device})"
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def device(self) -> Device:
        return self._device

    @property
    def context(self):
        return self._context

    @property
    def context_type(self) -> type:
        """Context class, used as the kernel dispatch key."""
        return type(self._context)

    def size(self) -> int:
        return math.prod(self._shape) if self._shape else 0

    def dims(self) -> int:
        return len(self._shape)

    def dim(self, i: int) -> int:
        if not 0 <= i < len(self._shape):
            raise BoundsError(
                f"Dimension index {i} out of range for shape {self._shape}"
            )
        return self._shape[i]

    def is_empty(self) -> bool:
        return self.size() == 0

    def compare_size_with(self, other: ITensor) -> bool:
        return self.size() == other.size()

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------
    def resize(self, shape: Sequence[int], dtype: Any = None) -> None:
        """
        Set a new shape (and optionally element type).

        Reallocates the context only if the byte length changes.

        Raises
        ------
        ValueError
            If any dimension is negative.
        AllocationError
            If the context cannot allocate the new buffer. The tensor is left
            empty.
        """
        new_shape = tuple(int(d) for d in shape)
        if any(d < 0 for d in new_shape):
            raise ValueError(f"Dimensions must be non-negative, got {new_shape}")
        new_dtype = self._dtype if dtype is None else resolve_dtype(dtype)

        new_size = math.prod(new_shape) if new_shape else 0
        nbytes = new_size * new_dtype.itemsize
        if nbytes != self._context.size():
            if new_size == 0:
                self._context.clear()
            else:
                try:
                    self._context.allocate(new_size, new_dtype.itemsize)
                except AllocationError:
                    # the context is empty after a failed allocation
                    self._shape = ()
                    self._dtype = new_dtype
                    raise
        # a zero-element shape is the empty state
        self._shape = new_shape if new_size > 0 else ()
        self._dtype = new_dtype

    def reshape_like(self, other: ITensor) -> None:
        """Resize to `other`'s shape and element type."""
        self.resize(other.shape, other.dtype)

    def clear(self) -> None:
        """Release the buffer; the tensor becomes empty."""
        self._context.clear()
        self._shape = ()

    # ------------------------------------------------------------------
    # Typed access
    # ------------------------------------------------------------------
    def _check_dtype(self, dtype: Any) -> None:
        requested = resolve_dtype(dtype)
        if requested != self._dtype:
            raise DTypeMismatchError(self._dtype, requested)

    def get_ptr_const(self, dtype: Any) -> np.ndarray:
        """
        Return a read-only flat view of ``size()`` elements.

        Raises
        ------
        DTypeMismatchError
            If `dtype` is not the stored element type.
        """
        view = self.get_ptr_mutable(dtype)
        view.flags.writeable = False
        return view

    def get_ptr_mutable(self, dtype: Any) -> np.ndarray:
        """
        Return a writable flat view of ``size()`` elements.

        Raises
        ------
        DTypeMismatchError
            If `dtype` is not the stored element type.
        """
        self._check_dtype(dtype)
        return self._context.typed_view(self._dtype)[: self.size()]

    def data(self) -> np.ndarray:
        """Writable view shaped like the tensor (no copy)."""
        return self.get_ptr_mutable(self._dtype).reshape(self._shape or (0,))

    def set_by_const(self, value: float) -> None:
        """Fill every element with `value`."""
        ptr = self.get_ptr_mutable(self._dtype)
        if value == 0:
            scal(ptr.size, 0, ptr, ptr, context=self.context_type)
        else:
            ptr.fill(value)

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def copy_from_numpy(self, arr: Any) -> None:
        """
        Copy host data into the tensor.

        If the tensor is empty it is first resized to ``arr.shape``.
        Values are cast to the tensor's element type.

        Raises
        ------
        ShapeMismatchError
            If the tensor is sized and the element counts differ.
        """
        src = np.ascontiguousarray(arr, dtype=self._dtype)
        if self.is_empty():
            self.resize(src.shape)
        if src.size != self.size():
            raise ShapeMismatchError(
                f"copy_from_numpy: array has {src.size} elements, "
                f"tensor {self._shape} has {self.size()}"
            )
        self._context.copy_from(0, src.size, self._dtype.itemsize, src)

    def to_numpy(self) -> np.ndarray:
        """Return a host copy shaped like the tensor."""
        out = np.empty(self._shape or (0,), dtype=self._dtype)
        self._context.copy_to(0, self.size(), self._dtype.itemsize, out)
        return out


__all__ = [TensorBlob.__name__]
