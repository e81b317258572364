"""
Operator base class.

`Operator` implements the construction and execution contract shared by every
operator kind:

1. Resolve the wiring descriptor's input/output names to tensors through the
   tensor table, check the kind's fixed arity, and check that already-sized
   tensors store the descriptor's element type.
2. Resolve shapes, taking exactly one of two branches:

   - *originate*: the descriptor carries the shape-defining hyperparameter,
     the dependent tensors are still empty, and the driving input is already
     sized. The operator computes and allocates the dependent shapes.
   - *validate*: every tensor is treated as already sized and the algebraic
     shape relation of the kind is checked.

3. Cache integer dimensions and build operator-owned helper tensors once.
4. `compute()` any number of times, overwriting outputs in place.

Subclasses fill in the hooks (`_can_originate_shapes`, `_originate_shapes`,
`_validate_shapes`, `_prepare`, `_compute`). A failure in steps 1-3 raises
and no operator is returned; shapes are frozen once construction succeeds.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import ClassVar, List, Optional, Sequence

import numpy as np

from ...domain._errors import ArityError, DTypeMismatchError, ShapeMismatchError
from ...domain._operator import IOperator, OperatorState
from ...domain._operator_io import OperatorIO, ParamDef
from ..tensor._dtypes import resolve_dtype
from ..tensor._item_holder import ItemHolder
from ..tensor._tensor_blob import TensorBlob
from ..utils._logging import get_logger

logger = get_logger(__name__)


class Operator(IOperator):
    """
    Base class for executable operators.

    Parameters
    ----------
    opio : OperatorIO
        Wiring descriptor.
    item_holder : ItemHolder
        Tensor lookup table used to resolve the descriptor's names.

    Raises
    ------
    ArityError
        If the number of inputs or outputs does not match the kind.
    ShapeMismatchError
        If the validate branch finds a violated shape relation.
    DTypeMismatchError
        If a sized tensor does not store the descriptor's element type.

    Notes
    -----
    Inputs and outputs are non-owning references into the tensor table.
    Helper tensors created through `_make_helper` are owned by the operator
    and freed by `release()`.
    """

    OP_NAME: ClassVar[str] = "Operator"
    NUM_INPUTS: ClassVar[int]
    NUM_OUTPUTS: ClassVar[int]

    def __init__(self, opio: OperatorIO, item_holder: ItemHolder) -> None:
        self._state: Optional[OperatorState] = None
        self._opio = opio
        self._dtype: np.dtype = resolve_dtype(opio.data_type)
        self._device = item_holder.device
        self._helpers: List[TensorBlob] = []

        if len(opio.inputs) != self.NUM_INPUTS:
            raise ArityError(self.OP_NAME, "inputs", self.NUM_INPUTS, len(opio.inputs))
        if len(opio.outputs) != self.NUM_OUTPUTS:
            raise ArityError(
                self.OP_NAME, "outputs", self.NUM_OUTPUTS, len(opio.outputs)
            )
        self._inputs = tuple(item_holder.get(name) for name in opio.inputs)
        self._outputs = tuple(item_holder.get(name) for name in opio.outputs)

        # before any tensor is resized
        self._check_dtypes()
        if self._can_originate_shapes():
            logger.debug("[%s] originating shapes from %r", self.OP_NAME, opio.param)
            self._originate_shapes()
        else:
            logger.debug("[%s] validating upstream shapes", self.OP_NAME)
            self._validate_shapes()
        self._prepare()
        self._state = OperatorState.SHAPE_RESOLVED

    def __repr__(self) -> str:
        state = "unresolved" if self._state is None else self._state.value
        return (
            f"{type(self).__name__}(type={self._opio.type!r}, "
            f"data_type={self._opio.data_type!r}, state={state})"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def opio(self) -> OperatorIO:
        return self._opio

    @property
    def param(self) -> ParamDef:
        return self._opio.param

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def inputs(self) -> Sequence[TensorBlob]:
        return self._inputs

    @property
    def outputs(self) -> Sequence[TensorBlob]:
        return self._outputs

    @property
    def state(self) -> OperatorState:
        return self._state

    @property
    def context_type(self) -> type:
        """Context class of the operator's device (kernel dispatch key)."""
        return self._inputs[0].context_type

    def input(self, i: int) -> TensorBlob:
        return self._inputs[i]

    def output(self, i: int) -> TensorBlob:
        return self._outputs[i]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def compute(self) -> None:
        """
        Run the operator on the current input values.

        Raises
        ------
        RuntimeError
            If the operator has been released.
        """
        if self._state is OperatorState.RELEASED:
            raise RuntimeError(f"[{self.OP_NAME}] compute() called after release()")
        self._compute()
        self._state = OperatorState.COMPUTED

    def release(self) -> None:
        """Free operator-owned helper tensors. Idempotent."""
        for helper in self._helpers:
            helper.clear()
        self._helpers.clear()
        self._state = OperatorState.RELEASED

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------
    def _require(self, condition: bool, relation: str) -> None:
        if not condition:
            raise ShapeMismatchError(f"[{self.OP_NAME}] {relation}.")

    def _make_helper(self, shape: Sequence[int], fill: float) -> TensorBlob:
        helper = TensorBlob(shape, dtype=self._dtype, device=self._device)
        helper.set_by_const(fill)
        self._helpers.append(helper)
        return helper

    def _const(self, tensor: TensorBlob) -> np.ndarray:
        return tensor.get_ptr_const(self._dtype)

    def _mutable(self, tensor: TensorBlob) -> np.ndarray:
        return tensor.get_ptr_mutable(self._dtype)

    def _param_int(self, key: str) -> int:
        return self.param.get_param(key, int)

    def _check_dtypes(self) -> None:
        for tensor in (*self._inputs, *self._outputs):
            if not tensor.is_empty() and tensor.dtype != self._dtype:
                raise DTypeMismatchError(tensor.dtype, self._dtype)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _can_originate_shapes(self) -> bool:
        """Return True if the originate branch applies."""
        ...

    @abstractmethod
    def _originate_shapes(self) -> None:
        """Compute and allocate dependent tensor shapes."""
        ...

    @abstractmethod
    def _validate_shapes(self) -> None:
        """Check the kind's shape relation on already-sized tensors."""
        ...

    @abstractmethod
    def _prepare(self) -> None:
        """Cache dimensions and build helper tensors."""
        ...

    @abstractmethod
    def _compute(self) -> None:
        """Kernel calls for one forward/backward evaluation."""
        ...


__all__ = [Operator.__name__]
