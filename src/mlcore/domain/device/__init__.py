from ._device import Device, DeviceType
from ._device_context_protocol import DeviceContextLike

__all__ = [
    Device.__name__,
    DeviceType.__name__,
    DeviceContextLike.__name__,
]
