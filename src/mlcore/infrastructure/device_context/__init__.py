from ._cpu_context import CPUContext
from ._registry import DeviceContextRegistry

__all__ = [
    CPUContext.__name__,
    DeviceContextRegistry.__name__,
]
