"""
Device descriptors.

This module defines lightweight, backend-free descriptors for the devices an
mlcore tensor may live on:

- `DeviceType`: an enumeration of device categories
- `Device`: a validated device descriptor parsed from strings such as
  ``"cpu"`` or ``"cuda:0"``

A descriptor does not allocate anything. It is used as a registry key when
looking up the device-context class and the operator implementations for a
given backend, which keeps operator code independent of the backend.
"""

from enum import Enum
import re


class DeviceType(Enum):
    """
    Enumeration of device categories.

    Attributes
    ----------
    CPU : DeviceType
        Host memory, single-threaded backend.
    CUDA : DeviceType
        Accelerator backend. Recognized by the descriptor, but no context
        implementation is registered for it.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Concrete device descriptor.

    Parameters
    ----------
    device : str
        Device identifier string. Must be either ``"cpu"`` or
        ``"cuda:<index>"`` where ``<index>`` is a non-negative integer.

    Raises
    ------
    ValueError
        If the device string does not match a supported format.
    """

    __slots__ = ("type", "index")

    _CUDA_PATTERN = re.compile(r"^cuda:(\d+)$")

    def __init__(self, device: str):
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index = None
        else:
            m = self._CUDA_PATTERN.match(device)
            if not m:
                raise ValueError(
                    f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
                )
            self.type = DeviceType.CUDA
            self.index = int(m.group(1))

    def __str__(self) -> str:
        return "cpu" if self.type is DeviceType.CPU else f"cuda:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return (self.type, self.index) == (other.type, other.index)

    def __hash__(self) -> int:
        return hash((self.type, self.index))
