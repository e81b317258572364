"""
Gradient-descriptor registry.

Each forward operator kind that has a backward counterpart registers a
`GradientIO` under its kind name. `derive_gradient_io` then turns any forward
wiring descriptor into the backward one without hand-written per-edge wiring.

Naming convention
-----------------
The gradient of a tensor named ``t`` is the tensor named ``t + "_grad"``.
A backward operator therefore reads the upstream loss gradient from
``<forward output>_grad`` and writes ``<forward input>_grad`` tensors, which
the next backward operator in turn reads. The suffix is the whole contract
between forward and backward subgraphs.
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, Type, TypeVar

from ...domain._errors import UnknownOperatorError
from ...domain._operator import GradientIO
from ...domain._operator_io import OperatorIO

GRAD_SUFFIX = "_grad"
GRADIENT_KIND_SUFFIX = "_Gradient"

G = TypeVar("G", bound=Type[GradientIO])


def grad_name(name: str) -> str:
    """Return the gradient tensor name for tensor `name`."""
    return name + GRAD_SUFFIX


def gradient_kind(opio: OperatorIO) -> str:
    """Return the backward kind name, ``<type>_<data_type>_Gradient``."""
    return f"{opio.type}_{opio.data_type}{GRADIENT_KIND_SUFFIX}"


class GradientIORegistry:
    """
    Class-level registry mapping forward kind names to `GradientIO` instances.
    """

    GRADIENT_IOS: ClassVar[Dict[str, GradientIO]] = {}

    @classmethod
    def register_gradient_io(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[G], G]:
        """
        Decorator registering a `GradientIO` subclass for forward kind `name`.

        The class is instantiated once at registration time.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Operator name must be a non-empty string")

        def decorator(gio_cls: G) -> G:
            if not overwrite and name in cls.GRADIENT_IOS:
                raise ValueError(f"GradientIO already registered: {name!r}")
            cls.GRADIENT_IOS[name] = gio_cls()
            return gio_cls

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        return tuple(sorted(cls.GRADIENT_IOS))

    @classmethod
    def get(cls, name: str) -> GradientIO:
        """
        Raises
        ------
        UnknownOperatorError
            If no `GradientIO` is registered for `name`.
        """
        try:
            return cls.GRADIENT_IOS[name]
        except KeyError:
            available = ", ".join(cls.available()) or "<none>"
            raise UnknownOperatorError(
                f"No gradient registered for operator {name!r}. Available: {available}"
            ) from None


def derive_gradient_io(opio: OperatorIO) -> OperatorIO:
    """Return the backward wiring descriptor for forward descriptor `opio`."""
    return GradientIORegistry.get(opio.type).get_gradient_io(opio)


__all__ = [
    GradientIORegistry.__name__,
    "derive_gradient_io",
    "grad_name",
    "gradient_kind",
    "GRAD_SUFFIX",
]
