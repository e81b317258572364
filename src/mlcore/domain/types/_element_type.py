"""
Element-type tags.

Operator kinds are registered per element type using the short tags found in
kind names such as ``FC_float`` or ``FC_double_Gradient``. The domain layer
only knows the tags; the infrastructure layer maps them to concrete array
dtypes.
"""

from enum import Enum


class ElementType(Enum):
    """
    Supported element-type tags.

    Attributes
    ----------
    FLOAT : ElementType
        32-bit IEEE floating point (tag ``"float"``).
    DOUBLE : ElementType
        64-bit IEEE floating point (tag ``"double"``).
    """

    FLOAT = "float"
    DOUBLE = "double"

    @classmethod
    def parse(cls, tag: "str | ElementType") -> "ElementType":
        """
        Resolve a tag string (or an existing member) to an `ElementType`.

        Raises
        ------
        ValueError
            If `tag` is not a known element-type tag.
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError as e:
            known = ", ".join(repr(m.value) for m in cls)
            raise ValueError(
                f"Unknown element type {tag!r}. Expected one of: {known}"
            ) from e
