from ._dtypes import DEFAULT_DTYPE, element_type_of, resolve_dtype
from ._item_holder import ItemHolder
from ._tensor_blob import TensorBlob

__all__ = [
    TensorBlob.__name__,
    ItemHolder.__name__,
    "DEFAULT_DTYPE",
    "element_type_of",
    "resolve_dtype",
]
