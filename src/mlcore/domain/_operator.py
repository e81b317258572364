"""
Operator and gradient-descriptor interface definitions.

This module defines the abstract contracts shared by every operator kind:

- `IOperator`: an object bound to resolved tensors that can `compute()`
  any number of times, writing its outputs in place.
- `GradientIO`: a pure transform from a forward wiring descriptor to the
  wiring descriptor of the matching backward operator.
- `OperatorState`: the lifecycle an operator moves through.

Lifecycle
---------
``(constructor) -> SHAPE_RESOLVED -> COMPUTED (self-loop) -> RELEASED``

Shapes are resolved exactly once, during construction, and stay frozen for
the lifetime of the operator. There is no transition back to
``SHAPE_RESOLVED``.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ._operator_io import OperatorIO


class OperatorState(Enum):
    """Lifecycle states of an operator."""

    SHAPE_RESOLVED = "shape_resolved"
    COMPUTED = "computed"
    RELEASED = "released"


class IOperator(ABC):
    """
    Abstract base class for executable operators.

    Notes
    -----
    - `compute` must be idempotent: calling it repeatedly against the same
      tensors, with only their values changing in between, must be safe.
      Optimization loops and the gradient checker rely on this.
    - `compute` never changes tensor shapes.
    """

    @abstractmethod
    def compute(self) -> None:
        """Read current inputs and overwrite outputs in place."""
        ...

    @abstractmethod
    def release(self) -> None:
        """Free operator-owned helper resources."""
        ...

    @property
    @abstractmethod
    def state(self) -> OperatorState:
        """Current lifecycle state."""
        ...


class GradientIO(ABC):
    """
    Abstract gradient-descriptor deriver.

    Subclasses are registered per forward operator kind and map a forward
    `OperatorIO` to the `OperatorIO` of its backward operator. The mapping
    must be pure: it reads only the forward descriptor and returns a new one.
    """

    @abstractmethod
    def get_gradient_io(self, opio: OperatorIO) -> OperatorIO:
        """
        Derive the backward wiring descriptor.

        Parameters
        ----------
        opio : OperatorIO
            Forward wiring descriptor.

        Returns
        -------
        OperatorIO
            Backward wiring descriptor.
        """
        ...
