"""
Wiring descriptors and operator parameters.

An `OperatorIO` is the declarative record that wires one operator into a
graph: the operator kind, its element-type tag, the logical names of its
input and output tensors, and a parameter bag. Names are resolved to actual
tensors later, through a tensor lookup table, when the operator is built.

The position of a name in `inputs` / `outputs` encodes its role for the
operator kind (for a fully-connected layer ``inputs[0]`` is the activation,
``inputs[1]`` the weight, ``inputs[2]`` the bias).

Parameter values are validated once, when the `ParamDef` is built, rather
than by every operator at construction time. Only the keys listed in
`RECOGNIZED_PARAMS` are checked; other keys are carried along untouched and
ignored by operators that do not understand them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from ._errors import InvalidParameterError
from .types._element_type import ElementType

V = TypeVar("V")


def _positive_int(key: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(
            f"Parameter {key!r} must be an int, got {type(value).__name__}"
        )
    if value <= 0:
        raise InvalidParameterError(
            f"Parameter {key!r} must be a positive integer, got {value}"
        )
    return value


RECOGNIZED_PARAMS: Dict[str, Callable[[str, Any], Any]] = {
    # output width of a fully-connected layer
    "Units": _positive_int,
    # class count of a one-hot encoder
    "Dim": _positive_int,
}


class ParamDef(Mapping[str, Any]):
    """
    Immutable, string-keyed parameter bag.

    Parameters
    ----------
    params : Mapping[str, Any], optional
        Initial key/value pairs.
    **kwargs : Any
        Additional key/value pairs (override `params`).

    Raises
    ------
    InvalidParameterError
        If a recognized key carries an invalid value.

    Examples
    --------
    >>> p = ParamDef(Units=4)
    >>> p.has("Units"), p.get_param("Units", int)
    (True, 4)
    """

    __slots__ = ("_params",)

    def __init__(self, params: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        merged: Dict[str, Any] = dict(params or {})
        merged.update(kwargs)
        for key, value in merged.items():
            if not isinstance(key, str) or not key:
                raise InvalidParameterError(
                    f"Parameter names must be non-empty strings, got {key!r}"
                )
            validator = RECOGNIZED_PARAMS.get(key)
            if validator is not None:
                merged[key] = validator(key, value)
        self._params = MappingProxyType(merged)

    def __getitem__(self, key: str) -> Any:
        return self._params[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._params.items())
        return f"ParamDef({inner})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParamDef):
            return dict(self._params) == dict(other._params)
        if isinstance(other, Mapping):
            return dict(self._params) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._params.items(), key=lambda kv: kv[0])))

    def has(self, key: str) -> bool:
        """Return True if `key` is present."""
        return key in self._params

    def get_param(self, key: str, expected_type: Type[V]) -> V:
        """
        Return the value for `key`, checking its type.

        Raises
        ------
        KeyError
            If `key` is missing.
        TypeError
            If the stored value is not an instance of `expected_type`.
        """
        value = self._params[key]
        if not isinstance(value, expected_type):
            raise TypeError(
                f"Parameter {key!r} is {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return value


@dataclass(frozen=True)
class OperatorIO:
    """
    Wiring descriptor for one operator.

    Attributes
    ----------
    type : str
        Operator kind name (e.g. ``"FC"`` or ``"FC_float_Gradient"``).
    data_type : str
        Element-type tag (``"float"`` or ``"double"``).
    inputs : tuple[str, ...]
        Ordered logical names of input tensors.
    outputs : tuple[str, ...]
        Ordered logical names of output tensors.
    param : ParamDef
        Parameter bag. Plain mappings are converted (and validated) on
        construction.

    Raises
    ------
    ValueError
        If `data_type` is not a known element-type tag.
    InvalidParameterError
        If a recognized parameter is invalid.
    """

    type: str
    data_type: str = ElementType.FLOAT.value
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()
    param: ParamDef = field(default_factory=ParamDef)

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(
            self, "data_type", ElementType.parse(self.data_type).value
        )
        object.__setattr__(self, "inputs", _as_names(self.inputs))
        object.__setattr__(self, "outputs", _as_names(self.outputs))
        if not isinstance(self.param, ParamDef):
            object.__setattr__(self, "param", ParamDef(self.param))

    @property
    def element_type(self) -> ElementType:
        return ElementType(self.data_type)


def _as_names(names: Sequence[str]) -> Tuple[str, ...]:
    if isinstance(names, str):
        raise TypeError("Tensor names must be a sequence of strings, not a str")
    out = tuple(names)
    for n in out:
        if not isinstance(n, str) or not n:
            raise TypeError(f"Tensor names must be non-empty strings, got {n!r}")
    return out
