"""
Mapping between element-type tags and NumPy dtypes.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...domain.types._element_type import ElementType

_TAG_TO_DTYPE = {
    ElementType.FLOAT: np.dtype(np.float32),
    ElementType.DOUBLE: np.dtype(np.float64),
}
_DTYPE_TO_TAG = {v: k for k, v in _TAG_TO_DTYPE.items()}
_TAG_VALUES = frozenset(m.value for m in ElementType)

DEFAULT_DTYPE = _TAG_TO_DTYPE[ElementType.FLOAT]


def resolve_dtype(tag: Any) -> np.dtype:
    """
    Resolve an element-type tag, `ElementType`, or dtype-like to a NumPy dtype.

    Raises
    ------
    ValueError
        If the value does not name a supported element type.
    """
    if isinstance(tag, ElementType) or tag in _TAG_VALUES:
        return _TAG_TO_DTYPE[ElementType.parse(tag)]
    try:
        dt = np.dtype(tag)
    except TypeError as e:
        raise ValueError(f"Unsupported element type {tag!r}") from e
    if dt not in _DTYPE_TO_TAG:
        supported = ", ".join(str(d) for d in _DTYPE_TO_TAG)
        raise ValueError(f"Unsupported dtype {dt}. Supported: {supported}")
    return dt


def element_type_of(dtype: Any) -> ElementType:
    """Return the `ElementType` tag for a supported dtype."""
    return _DTYPE_TO_TAG[resolve_dtype(dtype)]
