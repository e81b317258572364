"""
Tensor interface definitions.

This module defines the domain-level interface for the tensor container used
by operators. A tensor is a shape and an element-type tag layered over one
device context. Operators and the gradient checker type against `ITensor`
only, so any backend whose tensors satisfy this protocol can be driven by
the same operator code.

Notes
-----
An empty shape (element count 0) is a distinguished state: operators use it
during construction to decide whether they must originate a tensor's shape
or validate a shape fixed upstream.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from .device._device_context_protocol import DeviceContextLike


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    Notes
    -----
    - `get_ptr_const` / `get_ptr_mutable` return flat, typed views over the
      context buffer. The requested element type must match the stored one.
    - `compare_size_with` compares element counts only, which lets gradient
      tensors be validated without identical dimension lists.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """Current dimension sizes (``()`` when empty)."""
        ...

    @property
    def dtype(self) -> Any:
        """Stored element type."""
        ...

    @property
    def context(self) -> DeviceContextLike:
        """The device context owning this tensor's buffer."""
        ...

    def size(self) -> int:
        """Element count (product of dimensions, 0 when empty)."""
        ...

    def dims(self) -> int:
        """Number of dimensions."""
        ...

    def dim(self, i: int) -> int:
        """
        Return the size of dimension `i`.

        Raises
        ------
        BoundsError
            If `i` is out of range.
        """
        ...

    def is_empty(self) -> bool:
        """Return True if the element count is 0."""
        ...

    def resize(self, shape: Sequence[int], dtype: Any = None) -> None:
        """Set a new shape, reallocating only when the byte length changes."""
        ...

    def reshape_like(self, other: "ITensor") -> None:
        """Resize to `other`'s shape and element type."""
        ...

    def compare_size_with(self, other: "ITensor") -> bool:
        """Return True if both tensors hold the same number of elements."""
        ...

    def get_ptr_const(self, dtype: Any) -> Any:
        """Return a read-only typed view of the buffer."""
        ...

    def get_ptr_mutable(self, dtype: Any) -> Any:
        """Return a writable typed view of the buffer."""
        ...

    def set_by_const(self, value: float) -> None:
        """Fill every element with `value`."""
        ...
