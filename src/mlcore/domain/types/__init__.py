from ._element_type import ElementType

__all__ = [ElementType.__name__]
