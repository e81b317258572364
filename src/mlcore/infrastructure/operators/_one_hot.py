"""
One-hot encoding operator.

Input ``x`` holds ``batch`` class indices stored in the operator's floating
element type; output ``y`` has shape ``(batch, dim)`` with ``y[b, x[b]] = 1``
and zeros elsewhere.
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import ShapeMismatchError
from ..math._blas import scal
from ._operator import Operator
from ._registry import OperatorRegistry


@OperatorRegistry.register_operator("OneHot", data_types=("float", "double"))
class OneHotOp(Operator):
    """
    One-hot forward operator.

    Inputs are ``[x]``, outputs ``[y]``. Recognized parameter: ``Dim``
    (number of classes), used only when originating the shape of ``y``.

    Raises
    ------
    ShapeMismatchError
        From `compute()` if an index is not an integer in ``[0, dim)``.
        `y` has been zeroed but not otherwise written when this is raised.
    """

    OP_NAME = "OneHot Op"
    NUM_INPUTS = 1
    NUM_OUTPUTS = 1

    def _can_originate_shapes(self) -> bool:
        (x,) = self.inputs
        (y,) = self.outputs
        return self.param.has("Dim") and y.is_empty() and not x.is_empty()

    def _originate_shapes(self) -> None:
        (x,) = self.inputs
        (y,) = self.outputs
        y.resize((x.size(), self._param_int("Dim")), self.dtype)

    def _validate_shapes(self) -> None:
        (x,) = self.inputs
        (y,) = self.outputs
        self._require(y.dims() == 2, "y.dims() == 2")
        self._require(y.dim(0) == x.size(), "y.dim(0) == x.size()")

    def _prepare(self) -> None:
        (y,) = self.outputs
        self._batch = y.dim(0)
        self._dim = y.dim(1)

    def _compute(self) -> None:
        (x,) = self.inputs
        (y,) = self.outputs
        y_ptr = self._mutable(y)
        scal(y_ptr.size, 0, y_ptr, y_ptr, context=self.context_type)

        values = self._const(x)
        indices = values.astype(np.int64) if np.isfinite(values).all() else None
        if indices is None or (indices != values).any():
            raise ShapeMismatchError(
                f"[{self.OP_NAME}] x must hold integer class indices."
            )
        out_of_range = (indices < 0) | (indices >= self._dim)
        if out_of_range.any():
            b = int(np.flatnonzero(out_of_range)[0])
            raise ShapeMismatchError(
                f"[{self.OP_NAME}] 0 <= x[{b}] < {self._dim} (got {values[b]})."
            )
        y_ptr.reshape(self._batch, self._dim)[np.arange(self._batch), indices] = 1


__all__ = [OneHotOp.__name__]
