"""
Fully-connected (dense) operator and its gradient.

Forward
-------
Computes ``y = x @ w.T + b`` for a batch ``x`` of shape ``(batch, in)``,
weights ``w`` of shape ``(units, in)`` and bias ``b`` of shape ``(units,)``.
The bias is broadcast over the batch by a rank-1 update against an
operator-owned vector of ones, so the whole forward pass is two `gemm` calls.

Backward
--------
With upstream gradient ``dy`` of shape ``(batch, units)``:

- ``db = mean over batch of dy``
- ``dw = (dy.T @ x) / batch``
- ``dx = dy @ w``

The parameter gradients are batch-averaged; ``dx`` is not.

Shape origination
-----------------
When the descriptor carries ``Units`` and the dependent tensors are still
empty, the operator sizes them from ``x`` (lazy build); otherwise it
validates the shapes it finds.
"""

from __future__ import annotations

from ...domain._errors import ArityError
from ...domain._operator import GradientIO
from ...domain._operator_io import OperatorIO
from ..math._blas import gemm, gemv, scal
from ._gradient_io import GradientIORegistry, grad_name, gradient_kind
from ._operator import Operator
from ._registry import OperatorRegistry


@OperatorRegistry.register_operator("FC", data_types=("float", "double"))
class FullyConnectedOp(Operator):
    """
    Dense layer forward operator.

    Inputs are ``[x, w, b]``, outputs ``[y]``. Recognized parameter:
    ``Units`` (output width), used only when originating shapes.
    """

    OP_NAME = "Fully Connected Op"
    NUM_INPUTS = 3
    NUM_OUTPUTS = 1

    def _can_originate_shapes(self) -> bool:
        x, w, b = self.inputs
        (y,) = self.outputs
        return (
            self.param.has("Units")
            and w.is_empty()
            and b.is_empty()
            and y.is_empty()
            and not x.is_empty()
            and x.dims() == 2
        )

    def _originate_shapes(self) -> None:
        x, w, b = self.inputs
        (y,) = self.outputs
        units = self._param_int("Units")
        w.resize((units, x.dim(1)), self.dtype)
        b.resize((units,), self.dtype)
        y.resize((x.dim(0), units), self.dtype)

    def _validate_shapes(self) -> None:
        x, w, b = self.inputs
        (y,) = self.outputs
        self._require(x.dims() == 2, "x.dims() == 2")
        self._require(w.dims() == 2, "w.dims() == 2")
        self._require(y.dims() == 2, "y.dims() == 2")
        self._require(x.dim(0) == y.dim(0), "x.dim(0) == y.dim(0)")
        self._require(x.dim(1) == w.dim(1), "x.dim(1) == w.dim(1)")
        self._require(y.dim(1) == w.dim(0), "y.dim(1) == w.dim(0)")
        self._require(b.size() == w.dim(0), "b.size() == w.dim(0)")

    def _prepare(self) -> None:
        x, w, _ = self.inputs
        self._m = x.dim(0)
        self._n = w.dim(0)
        self._k = w.dim(1)
        self._bias_multiplier = self._make_helper((self._m,), 1)

    def _compute(self) -> None:
        x, w, b = self.inputs
        (y,) = self.outputs
        m, n, k = self._m, self._n, self._k
        ctx = self.context_type
        y_ptr = self._mutable(y)

        # y = x * w^T
        gemm(False, True, m, n, k, 1, self._const(x), k, self._const(w), k,
             0, y_ptr, n, context=ctx)
        # y += ones(m, 1) * b(1, n)
        gemm(False, False, m, n, 1, 1, self._const(self._bias_multiplier), 1,
             self._const(b), n, 1, y_ptr, n, context=ctx)


@OperatorRegistry.register_operator("FC_float_Gradient", data_types=("float",))
@OperatorRegistry.register_operator("FC_double_Gradient", data_types=("double",))
class FullyConnectedGradientOp(Operator):
    """
    Dense layer backward operator.

    Inputs are ``[x, w, dy]``, outputs ``[dw, db, dx]``.
    """

    OP_NAME = "Fully Connected Gradient Op"
    NUM_INPUTS = 3
    NUM_OUTPUTS = 3

    def _can_originate_shapes(self) -> bool:
        x, w, dy = self.inputs
        dw, db, dx = self.outputs
        return (
            self.param.has("Units")
            and dw.is_empty()
            and db.is_empty()
            and dx.is_empty()
            and not dy.is_empty()
            and not x.is_empty()
            and x.dims() == 2
            and w.dims() == 2
        )

    def _originate_shapes(self) -> None:
        x, w, _ = self.inputs
        dw, db, dx = self.outputs
        dw.reshape_like(w)
        db.resize((self._param_int("Units"),), self.dtype)
        dx.reshape_like(x)

    def _validate_shapes(self) -> None:
        x, w, dy = self.inputs
        dw, db, dx = self.outputs
        self._require(x.dims() == 2, "x.dims() == 2")
        self._require(w.dims() == 2, "w.dims() == 2")
        self._require(x.dim(1) == w.dim(1), "x.dim(1) == w.dim(1)")
        self._require(dw.compare_size_with(w), "dw.size() == w.size()")
        self._require(dx.compare_size_with(x), "dx.size() == x.size()")
        self._require(db.size() == w.dim(0), "db.size() == w.dim(0)")
        self._require(
            dy.size() == x.dim(0) * w.dim(0), "dy.size() == x.dim(0) * w.dim(0)"
        )

    def _prepare(self) -> None:
        x, w, _ = self.inputs
        self._m = x.dim(0)
        self._n = w.dim(0)
        self._k = w.dim(1)
        self._bias_multiplier = self._make_helper((self._m,), 1)

    def _compute(self) -> None:
        x, w, dy = self.inputs
        dw, db, dx = self.outputs
        m, n, k = self._m, self._n, self._k
        ctx = self.context_type
        dy_ptr = self._const(dy)
        dw_ptr = self._mutable(dw)
        db_ptr = self._mutable(db)

        # db = dy^T * ones(m)
        gemv(True, m, n, 1, dy_ptr, n, self._const(self._bias_multiplier),
             0, db_ptr, n, context=ctx)
        # dw = dy^T * x
        gemm(True, False, n, k, m, 1, dy_ptr, n, self._const(x), k,
             0, dw_ptr, k, context=ctx)
        # dx = dy * w
        gemm(False, False, m, k, n, 1, dy_ptr, n, self._const(w), k,
             0, self._mutable(dx), k, context=ctx)

        scal(db_ptr.size, 1.0 / m, db_ptr, db_ptr, context=ctx)
        scal(dw_ptr.size, 1.0 / m, dw_ptr, dw_ptr, context=ctx)


@GradientIORegistry.register_gradient_io("FC")
class FCGradientIO(GradientIO):
    """
    Backward wiring for ``FC``.

    ``inputs = [x, w, y_grad]`` and ``outputs = [w_grad, b_grad, x_grad]``;
    parameters carry over unchanged.
    """

    def get_gradient_io(self, opio: OperatorIO) -> OperatorIO:
        if len(opio.inputs) != 3:
            raise ArityError("FC Gradient IO", "inputs", 3, len(opio.inputs))
        if len(opio.outputs) != 1:
            raise ArityError("FC Gradient IO", "outputs", 1, len(opio.outputs))
        x, w, b = opio.inputs
        (y,) = opio.outputs
        return OperatorIO(
            type=gradient_kind(opio),
            data_type=opio.data_type,
            inputs=(x, w, grad_name(y)),
            outputs=(grad_name(w), grad_name(b), grad_name(x)),
            param=opio.param,
        )


__all__ = [
    FullyConnectedOp.__name__,
    FullyConnectedGradientOp.__name__,
    FCGradientIO.__name__,
]
