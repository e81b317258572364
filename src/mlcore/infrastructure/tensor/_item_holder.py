"""
Tensor lookup table.

`ItemHolder` maps logical tensor names (as found on wiring descriptors) to
shared `TensorBlob` instances. The first reference to a name creates an empty
tensor; every later reference returns the same instance. This is how a
forward operator's output and a backward operator's input end up being the
same tensor without any hand-written wiring.

The table owns the tensors. Operators keep non-owning references and must
not assume exclusive access: several operators may read or write the same
tensor (fan-out / fan-in in the dataflow graph).
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from ...domain.device._device import Device
from ._tensor_blob import TensorBlob


class ItemHolder:
    """
    Name -> tensor table with create-on-first-reference semantics.

    Parameters
    ----------
    device : Device, optional
        Device for tensors created by this table. Defaults to CPU.
    """

    def __init__(self, device: Optional[Device] = None) -> None:
        self._device = device if device is not None else Device("cpu")
        self._items: Dict[str, TensorBlob] = {}

    @property
    def device(self) -> Device:
        return self._device

    def get(self, name: str) -> TensorBlob:
        """Return the tensor named `name`, creating an empty one if needed."""
        if name not in self._items:
            self._items[name] = TensorBlob(device=self._device)
        return self._items[name]

    def __getitem__(self, name: str) -> TensorBlob:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        """Release every tensor and forget all names."""
        for tensor in self._items.values():
            tensor.clear()
        self._items.clear()


__all__ = [ItemHolder.__name__]
