"""
Host-memory device context.

`CPUContext` owns a single contiguous host buffer, stored as a flat NumPy
``uint8`` array so that element-typed views can be layered on top of it
without copying. It is the only backend implemented by mlcore; accelerator
backends plug in by providing another class that satisfies
`DeviceContextLike` and registering it for their device type.

Ownership and lifetime
----------------------
- A context starts empty (no buffer, size 0).
- `allocate` always clears first, so a prior buffer is released before the
  new one is acquired; nothing leaks and nothing is reused by accident.
- Each buffer is paired with a release action. `clear` runs it exactly once
  and then resets the context to the empty state.
- A context is owned by exactly one tensor. Callers that obtain the raw
  pointer or a typed view must not keep it beyond the next `allocate` /
  `clear`.

Memory is released eagerly and deterministically; there is no deferred
collection step between a `clear` and the next `allocate`.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from ...domain._errors import AllocationError, BoundsError
from ...domain.device._device import Device
from ..utils._logging import get_logger

logger = get_logger(__name__)


def _release_host_buffer(buf: np.ndarray) -> None:
    logger.debug("released %d bytes at 0x%x", buf.nbytes, buf.ctypes.data)


class CPUContext:
    """
    Device context backed by host memory.

    Attributes
    ----------
    device : Device
        Always ``Device("cpu")``.

    Notes
    -----
    All sizes passed to `allocate`, `copy_to`, and `copy_from` are expressed
    in elements together with an element width (`block_size`) in bytes.
    """

    device = Device("cpu")

    def __init__(self) -> None:
        self._ptr: Optional[np.ndarray] = None
        self._size: int = 0
        self._destructor: Optional[Callable[[np.ndarray], None]] = None

    def __repr__(self) -> str:
        ptr = self.get_device_ptr()
        where = "empty" if ptr is None else f"0x{ptr:x}"
        return f"CPUContext({where}, nbytes={self._size})"

    def size(self) -> int:
        """Return the allocated length in bytes (0 when empty)."""
        return self._size

    def get_device_ptr(self) -> Optional[int]:
        """
        Return the buffer's base address, or None if the context is empty.

        The address is valid until the next `allocate` or `clear`.
        """
        if self._ptr is None:
            return None
        return int(self._ptr.ctypes.data)

    def clear(self) -> None:
        """
        Release the buffer (running its release action) and reset to empty.

        Idempotent; always succeeds.
        """
        if self._ptr is not None and self._destructor is not None:
            self._destructor(self._ptr)
        self._size = 0
        self._ptr = None
        self._destructor = None

    def allocate(self, size: int, block_size: int) -> None:
        """
        Release any existing buffer, then allocate ``size * block_size`` bytes.

        Parameters
        ----------
        size : int
            Number of elements.
        block_size : int
            Element width in bytes.

        Raises
        ------
        AllocationError
            If the request is invalid or cannot be satisfied. The context is
            left empty.
        """
        self.clear()
        size, block_size = int(size), int(block_size)
        nbytes = size * block_size
        if size < 0 or block_size <= 0:
            raise AllocationError(
                nbytes, f"invalid request (size={size}, block_size={block_size})"
            )
        try:
            buf = np.empty(nbytes, dtype=np.uint8)
        except (MemoryError, OverflowError, ValueError) as e:
            raise AllocationError(nbytes, str(e)) from e

        self._ptr = buf
        self._size = nbytes
        self._destructor = _release_host_buffer
        logger.debug("allocated %d bytes at 0x%x", nbytes, buf.ctypes.data)

    def _check_extent(self, offset: int, size: int, block_size: int) -> tuple[int, int]:
        offset, size, block_size = int(offset), int(size), int(block_size)
        if offset < 0 or size < 0 or block_size <= 0:
            raise BoundsError(
                f"Invalid copy request (offset={offset}, size={size}, "
                f"block_size={block_size})."
            )
        if (offset + size) * block_size > self._size:
            raise BoundsError(
                f"Copy size is bigger than allocated device memory: "
                f"({offset} + {size}) * {block_size} > {self._size}."
            )
        return offset * block_size, size * block_size

    @staticmethod
    def _as_bytes(buf: Any, nbytes: int, *, writable: bool) -> np.ndarray:
        # bytearray/memoryview: share memory instead of copying
        arr = buf if isinstance(buf, np.ndarray) else np.frombuffer(buf, dtype=np.uint8)
        if writable and not arr.flags["C_CONTIGUOUS"]:
            raise ValueError("Destination buffer must be C-contiguous")
        if not arr.flags["C_CONTIGUOUS"]:
            arr = np.ascontiguousarray(arr)
        raw = arr.reshape(-1).view(np.uint8)
        if raw.nbytes < nbytes:
            raise BoundsError(
                f"External buffer holds {raw.nbytes} bytes, {nbytes} required."
            )
        return raw

    def copy_to(self, offset: int, size: int, block_size: int, to: Any) -> None:
        """
        Copy ``size`` elements starting at element ``offset`` into `to`.

        Parameters
        ----------
        to : numpy.ndarray or writable buffer
            Caller-owned destination; must be C-contiguous and hold at least
            ``size * block_size`` bytes.

        Raises
        ------
        BoundsError
            If ``(offset + size) * block_size`` exceeds the allocated length.
        """
        start, nbytes = self._check_extent(offset, size, block_size)
        if nbytes == 0:
            return
        dst = self._as_bytes(to, nbytes, writable=True)
        dst[:nbytes] = self._ptr[start : start + nbytes]

    def copy_from(self, offset: int, size: int, block_size: int, from_: Any) -> None:
        """
        Copy ``size`` elements from `from_` into the buffer at element ``offset``.

        Raises
        ------
        BoundsError
            If ``(offset + size) * block_size`` exceeds the allocated length.
        """
        start, nbytes = self._check_extent(offset, size, block_size)
        if nbytes == 0:
            return
        src = self._as_bytes(from_, nbytes, writable=False)
        self._ptr[start : start + nbytes] = src[:nbytes]

    def typed_view(self, dtype: Any) -> np.ndarray:
        """
        Return a flat, writable view of the buffer reinterpreted as `dtype`.

        An empty context yields an empty array.
        """
        dt = np.dtype(dtype)
        if self._ptr is None:
            return np.empty(0, dtype=dt)
        usable = self._size - (self._size % dt.itemsize)
        return self._ptr[:usable].view(dt)


__all__ = [CPUContext.__name__]
