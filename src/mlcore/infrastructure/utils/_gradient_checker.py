"""
Finite-difference gradient checker.

`GradientChecker` drives an already-constructed operator with perturbed
parameter values and compares the resulting central-difference estimate to
the operator's analytic gradient. It never takes part in shape resolution;
the operator is only asked to `compute()` again.

For every position ``i`` of ``theta``::

    theta[i] = val + eps ; compute ; y_plus  = copy(y)
    theta[i] = val - eps ; compute ; y_minus = y
    numeric = sum((y_plus - y_minus) / (2 * eps)) / scaler
    result[i] = analytical_gradient[i] - numeric
    theta[i] = val

The returned tensor is shaped like ``theta`` and should be close to zero for
a correct analytic gradient. `scaler` undoes whatever reduction the analytic
gradient applies (e.g. the batch size for batch-averaged gradients).
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._operator import IOperator
from ..math._blas import axpy, scal
from ..tensor._tensor_blob import TensorBlob
from ._logging import get_logger

logger = get_logger(__name__)


class GradientChecker:
    """
    Central-difference validator for analytic gradients.

    Parameters
    ----------
    epsilon : float
        Perturbation step. Must be positive.
    """

    def __init__(self, epsilon: float) -> None:
        if not epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {epsilon!r}")
        self._epsilon = float(epsilon)

    @property
    def epsilon(self) -> float:
        return self._epsilon

    def run(
        self,
        op: IOperator,
        theta: TensorBlob,
        y: TensorBlob,
        analytical_gradient: TensorBlob,
        scaler: float,
    ) -> TensorBlob:
        """
        Return per-element ``analytical - numerical`` discrepancies.

        Parameters
        ----------
        op : IOperator
            Operator whose `compute()` writes `y` as a function of `theta`.
        theta : TensorBlob
            Parameter tensor to perturb. Restored element by element.
        y : TensorBlob
            Output tensor written by `op`.
        analytical_gradient : TensorBlob
            Gradient of ``sum(y)`` w.r.t. `theta` divided by `scaler`,
            already computed.
        scaler : float
            Reduction divisor applied to the summed numeric estimate.

        Raises
        ------
        ShapeMismatchError
            If `analytical_gradient` and `theta` differ in element count.
        """
        if not analytical_gradient.compare_size_with(theta):
            raise ShapeMismatchError(
                f"analytical gradient has {analytical_gradient.size()} elements, "
                f"theta has {theta.size()}"
            )
        dtype = theta.dtype
        ctx = theta.context_type
        eps = self._epsilon

        numerical = TensorBlob(device=y.device)
        numerical.reshape_like(y)
        result = TensorBlob(device=theta.device)
        result.reshape_like(theta)

        theta_ptr = theta.get_ptr_mutable(dtype)
        analytic_ptr = analytical_gradient.get_ptr_const(dtype)
        num_ptr = numerical.get_ptr_mutable(y.dtype)
        result_ptr = result.get_ptr_mutable(dtype)

        for i in range(theta_ptr.size):
            val = theta_ptr[i]
            theta_ptr[i] = val + eps
            op.compute()
            num_ptr[:] = y.get_ptr_const(y.dtype)

            theta_ptr[i] = val - eps
            op.compute()
            axpy(num_ptr.size, -1, y.get_ptr_const(y.dtype), num_ptr, context=ctx)
            scal(num_ptr.size, 1.0 / (2.0 * eps), num_ptr, num_ptr, context=ctx)

            estimate = num_ptr.sum() / scaler
            result_ptr[i] = analytic_ptr[i] - estimate
            theta_ptr[i] = val

        if result_ptr.size:
            logger.debug(
                "gradient check over %d elements: max |discrepancy| = %g",
                result_ptr.size,
                float(np.abs(result_ptr).max()),
            )
        return result


__all__ = [GradientChecker.__name__]
