"""
Operator registry.

Operator classes register themselves under a kind name, the element-type tags
they support, and the device type they run on:

    @OperatorRegistry.register_operator("FC", data_types=("float", "double"))
    class FullyConnectedOp(Operator): ...

A graph executor (not part of this package) turns a wiring descriptor into an
operator instance with `create_operator`. The lookup key is
``(opio.type, opio.data_type, item_holder.device.type)``.
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, Iterable, Tuple, Type, TypeVar

from ...domain._errors import UnknownOperatorError
from ...domain._operator_io import OperatorIO
from ...domain.device._device import DeviceType
from ...domain.types._element_type import ElementType
from ..tensor._item_holder import ItemHolder
from ._operator import Operator

OperatorKey = Tuple[str, str, DeviceType]
O = TypeVar("O", bound=Type[Operator])


class OperatorRegistry:
    """
    Class-level registry of operator implementations.

    Notes
    -----
    - Registration keys must be unique unless explicitly overwritten.
    - One class may be registered under several keys (one per element type).
    """

    OPERATORS: ClassVar[Dict[OperatorKey, Type[Operator]]] = {}

    @classmethod
    def register_operator(
        cls,
        name: str,
        *,
        data_types: Iterable[str] = ("float", "double"),
        device_type: DeviceType = DeviceType.CPU,
        overwrite: bool = False,
    ) -> Callable[[O], O]:
        """
        Decorator to register an operator class.

        Parameters
        ----------
        name:
            Operator kind name as it appears in `OperatorIO.type`.
        data_types:
            Element-type tags the class handles.
        device_type:
            Device type the class runs on.
        overwrite:
            If False (default), raises if a key is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Operator name must be a non-empty string")
        keys = [
            (name, ElementType.parse(dt).value, device_type) for dt in data_types
        ]

        def decorator(op_cls: O) -> O:
            for key in keys:
                if not overwrite and key in cls.OPERATORS:
                    raise ValueError(f"Operator already registered: {key!r}")
            for key in keys:
                cls.OPERATORS[key] = op_cls
            return op_cls

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return registered keys as ``"<type>/<data_type>/<device>"`` (sorted)."""
        return tuple(sorted(f"{n}/{dt}/{dev.value}" for n, dt, dev in cls.OPERATORS))

    @classmethod
    def get(cls, name: str, data_type: str, device_type: DeviceType) -> Type[Operator]:
        """
        Return the class registered for the key.

        Raises
        ------
        UnknownOperatorError
            If nothing is registered for the key.
        """
        key = (name, ElementType.parse(data_type).value, device_type)
        try:
            return cls.OPERATORS[key]
        except KeyError:
            available = ", ".join(cls.available()) or "<none>"
            raise UnknownOperatorError(
                f"Unsupported operator: {name!r} ({data_type}, {device_type.value}). "
                f"Available: {available}"
            ) from None


def create_operator(opio: OperatorIO, item_holder: ItemHolder) -> Operator:
    """
    Construct the operator registered for `opio` on the table's device.

    Raises
    ------
    UnknownOperatorError
        If no operator matches the descriptor.
    """
    op_cls = OperatorRegistry.get(opio.type, opio.data_type, item_holder.device.type)
    return op_cls(opio, item_holder)


__all__ = [
    OperatorRegistry.__name__,
    "create_operator",
]
