from collections.abc import Mapping
from typing import Any, Dict, Iterator


class ValueTree(Mapping):
    """
    Ordered name -> value mapping built by one traversal frame.

    The frame that creates a tree is the only writer. Once the frame has visited
    every property it freezes the tree and hands it to its parent, which stores it
    by value. Compares equal to any mapping with the same content.
    """

    def __init__(self, values: Dict[str, Any] = None):
        self._values: Dict[str, Any] = dict(values or {})
        self._frozen = False

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValueTree({self._values!r})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def set(self, name: str, value: Any) -> None:
        if self._frozen:
            raise TypeError(f"ValueTree is frozen; cannot set {name!r}")
        self._values[name] = value

    def discard(self, name: str) -> None:
        if self._frozen:
            raise TypeError(f"ValueTree is frozen; cannot remove {name!r}")
        self._values.pop(name, None)

    def freeze(self) -> "ValueTree":
        self._frozen = True
        return self

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to plain nested dicts and lists, ready for serialization.

        Returns:
            dict: Deep copy of the tree without any ValueTree instances.
        """
        return {k: _plain(v) for k, v in self._values.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, ValueTree):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    return value
