"""
Device-type to device-context registry.

Tensors ask this registry which context class to instantiate for a device.
Only the host backend is registered here; an accelerator backend registers
its own context class under its `DeviceType` without touching tensor or
operator code:

    @DeviceContextRegistry.register_context(DeviceType.CUDA)
    class CUDAContext: ...
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, TypeVar

from ...domain._errors import DeviceNotSupportedError
from ...domain.device._device import Device, DeviceType
from ._cpu_context import CPUContext

C = TypeVar("C", bound=type)


class DeviceContextRegistry:
    """
    Class-level registry mapping `DeviceType` to a context class.
    """

    CONTEXTS: ClassVar[Dict[DeviceType, type]] = {}

    @classmethod
    def register_context(
        cls, device_type: DeviceType, *, overwrite: bool = False
    ) -> Callable[[C], C]:
        """
        Decorator registering a context class for `device_type`.

        Raises
        ------
        ValueError
            If `device_type` is already registered and `overwrite` is False.
        """

        def decorator(context_cls: C) -> C:
            if not overwrite and device_type in cls.CONTEXTS:
                raise ValueError(f"Context already registered: {device_type}")
            cls.CONTEXTS[device_type] = context_cls
            return context_cls

        return decorator

    @classmethod
    def context_type_for(cls, device: Device) -> type:
        """
        Return the context class for `device`.

        Raises
        ------
        DeviceNotSupportedError
            If no context class is registered for the device type.
        """
        try:
            return cls.CONTEXTS[device.type]
        except KeyError:
            raise DeviceNotSupportedError("device context", str(device)) from None


DeviceContextRegistry.register_context(DeviceType.CPU)(CPUContext)


__all__ = [DeviceContextRegistry.__name__]
