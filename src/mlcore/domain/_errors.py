"""
Runtime exceptions for mlcore.

This module defines the error taxonomy shared by device contexts, tensors,
operators, and the numeric kernels. Every error derives from `MlcoreError`
and, in addition, from the closest builtin exception so that callers may
catch either the project-specific type or the generic one (e.g. a
`BoundsError` is also an `IndexError`).

All of these signal programming-contract violations. They are raised
synchronously at the point of violation and are never retried.
"""


class MlcoreError(Exception):
    """Base class for all mlcore errors."""


class AllocationError(MlcoreError, MemoryError):
    """
    Raised when a device context cannot satisfy a buffer request.

    The context is left in the empty state when this is raised.

    Attributes
    ----------
    nbytes : int
        Number of bytes that were requested.
    """

    def __init__(self, nbytes: int, reason: str = "") -> None:
        msg = f"Cannot allocate {nbytes} bytes"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.nbytes = nbytes


class BoundsError(MlcoreError, IndexError):
    """
    Raised when a copy or index request exceeds the allocated extent.
    """


class ArityError(MlcoreError, ValueError):
    """
    Raised when an operator receives the wrong number of inputs or outputs.

    Attributes
    ----------
    op : str
        Human-readable operator name.
    kind : str
        Either ``"inputs"`` or ``"outputs"``.
    expected : int
        Arity required by the operator kind.
    got : int
        Arity found on the wiring descriptor.
    """

    def __init__(self, op: str, kind: str, expected: int, got: int) -> None:
        super().__init__(f"[{op}] {kind}.size() == {expected} (got {got}).")
        self.op = op
        self.kind = kind
        self.expected = expected
        self.got = got


class ShapeMismatchError(MlcoreError, ValueError):
    """
    Raised when an algebraic shape relation is violated, or when an
    index-encoded value falls outside the range an operator accepts.
    """


class DTypeMismatchError(MlcoreError, TypeError):
    """
    Raised when a tensor is accessed with an element type different from
    the one it stores.
    """

    def __init__(self, expected: object, got: object) -> None:
        super().__init__(
            f"Typed access mismatch: tensor stores {expected}, requested {got}."
        )
        self.expected = expected
        self.got = got


class InvalidParameterError(MlcoreError, ValueError):
    """
    Raised when a recognized operator parameter carries an invalid value.
    """


class UnknownOperatorError(MlcoreError, KeyError):
    """
    Raised when a registry lookup does not find the requested key.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class DeviceNotSupportedError(MlcoreError, RuntimeError):
    """
    Raised when a device backend is requested that is not implemented.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted.
    device : str
        String representation of the requested device.
    """

    def __init__(self, op: str, device: str) -> None:
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device
