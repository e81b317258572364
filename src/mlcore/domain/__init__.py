"""
Backend-free contracts for mlcore.

Nothing in this layer imports NumPy or any backend. Infrastructure code
implements these contracts.
"""

from ._errors import (
    MlcoreError,
    AllocationError,
    BoundsError,
    ArityError,
    ShapeMismatchError,
    DTypeMismatchError,
    InvalidParameterError,
    UnknownOperatorError,
    DeviceNotSupportedError,
)
from ._operator import GradientIO, IOperator, OperatorState
from ._operator_io import OperatorIO, ParamDef, RECOGNIZED_PARAMS
from ._tensor import ITensor
from .device import Device, DeviceType, DeviceContextLike
from .types import ElementType

__all__ = [
    "MlcoreError",
    "AllocationError",
    "BoundsError",
    "ArityError",
    "ShapeMismatchError",
    "DTypeMismatchError",
    "InvalidParameterError",
    "UnknownOperatorError",
    "DeviceNotSupportedError",
    "GradientIO",
    "IOperator",
    "OperatorState",
    "OperatorIO",
    "ParamDef",
    "RECOGNIZED_PARAMS",
    "ITensor",
    "Device",
    "DeviceType",
    "DeviceContextLike",
    "ElementType",
]
