"""
mlcore: a minimal tensor-computation runtime.

Tensors live on pluggable device contexts, operators resolve their own
shapes at construction and compute in place, backward wiring is derived from
forward wiring by naming convention, and a finite-difference checker
validates analytic gradients.
"""

from .domain import (
    AllocationError,
    ArityError,
    BoundsError,
    Device,
    DeviceNotSupportedError,
    DeviceType,
    DTypeMismatchError,
    ElementType,
    GradientIO,
    InvalidParameterError,
    MlcoreError,
    OperatorIO,
    OperatorState,
    ParamDef,
    ShapeMismatchError,
    UnknownOperatorError,
)
from .infrastructure.device_context import CPUContext, DeviceContextRegistry
from .infrastructure.math import BlasKernels, axpy, gemm, gemv, scal
from .infrastructure.tensor import ItemHolder, TensorBlob
from .infrastructure.operators import (
    FCGradientIO,
    FullyConnectedGradientOp,
    FullyConnectedOp,
    GradientIORegistry,
    OneHotOp,
    Operator,
    OperatorRegistry,
    create_operator,
    derive_gradient_io,
)
from .infrastructure.utils import get_logger
from .infrastructure.utils._gradient_checker import GradientChecker

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "ArityError",
    "BoundsError",
    "Device",
    "DeviceNotSupportedError",
    "DeviceType",
    "DTypeMismatchError",
    "ElementType",
    "GradientIO",
    "InvalidParameterError",
    "MlcoreError",
    "OperatorIO",
    "OperatorState",
    "ParamDef",
    "ShapeMismatchError",
    "UnknownOperatorError",
    "CPUContext",
    "DeviceContextRegistry",
    "BlasKernels",
    "axpy",
    "gemm",
    "gemv",
    "scal",
    "ItemHolder",
    "TensorBlob",
    "FCGradientIO",
    "FullyConnectedGradientOp",
    "FullyConnectedOp",
    "GradientIORegistry",
    "OneHotOp",
    "Operator",
    "OperatorRegistry",
    "create_operator",
    "derive_gradient_io",
    "get_logger",
    "GradientChecker",
]
