"""
Operator implementations.

Importing this package registers the built-in operator kinds and their
gradient descriptors.
"""

from ._operator import Operator
from ._registry import OperatorRegistry, create_operator
from ._gradient_io import (
    GRAD_SUFFIX,
    GradientIORegistry,
    derive_gradient_io,
    grad_name,
    gradient_kind,
)
from ._fully_connected import (
    FCGradientIO,
    FullyConnectedGradientOp,
    FullyConnectedOp,
)
from ._one_hot import OneHotOp

__all__ = [
    Operator.__name__,
    OperatorRegistry.__name__,
    "create_operator",
    GradientIORegistry.__name__,
    "derive_gradient_io",
    "grad_name",
    "gradient_kind",
    "GRAD_SUFFIX",
    FullyConnectedOp.__name__,
    FullyConnectedGradientOp.__name__,
    FCGradientIO.__name__,
    OneHotOp.__name__,
]
