"""
Device-context contract for mlcore.

A device context owns exactly one raw memory block for one backend. Tensors
build on top of a context and never touch backend memory directly, which is
what keeps tensor storage backend-agnostic.

This module defines the duck-typed `DeviceContextLike` protocol. Concrete
contexts (e.g. the host-memory `CPUContext`) satisfy it structurally, so
higher layers never depend on a concrete context class.

Contract summary
----------------
- The buffer is either absent (empty context) or exactly `size()` bytes.
- `allocate` releases any prior buffer before acquiring a new one.
- `clear` is idempotent and always succeeds.
- Copies are expressed in elements of a given width and are bounds-checked
  against the allocated byte length.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ._device import Device


@runtime_checkable
class DeviceContextLike(Protocol):
    """
    Structural contract for a device context.

    Notes
    -----
    `typed_view` is the single seam through which tensors and kernels read and
    write the buffer. It returns a backend-native flat array (a NumPy array on
    the host backend).
    """

    device: Device

    def allocate(self, size: int, block_size: int) -> None: ...
    def clear(self) -> None: ...
    def size(self) -> int: ...

    def copy_to(self, offset: int, size: int, block_size: int, to: Any) -> None: ...

    def copy_from(
        self, offset: int, size: int, block_size: int, from_: Any
    ) -> None: ...

    def get_device_ptr(self) -> Optional[int]: ...
    def typed_view(self, dtype: Any) -> Any: ...
