"""Attribute bag attached to every template instance."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any

# Keys the engine itself reads or that business templates commonly test.
RESERVED_DEFAULTS: dict[str, Any] = {
    "stamp": False,
    "signature": False,
}


class AttributeBag:
    """Key/value store for render-time parameters.

    Reading a key that was never set returns ``None`` so templates can test
    optional flags (``{% if template.stamp %}``) without declaring them.

    Usage:
        bag = AttributeBag()
        bag.set("stamp", True)
        bag.get("stamp")      # True
        bag.get("missing")    # None
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(RESERVED_DEFAULTS)
        if initial:
            self._data.update(initial)

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value

    def update(self, values: Mapping[str, Any]) -> None:
        self._data.update(values)

    def view(self) -> Mapping[str, Any]:
        """Return a read-only live view of the bag."""
        return MappingProxyType(self._data)

    @contextmanager
    def scope(self) -> Iterator["AttributeBag"]:
        """Restore the bag to its current contents when the block exits.

        Writes made inside the block (for example by a pre-render hook) are
        visible until the block ends, on both normal and error exits.
        """
        snapshot = dict(self._data)
        try:
            yield self
        finally:
            self._data = snapshot

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"AttributeBag({self._data!r})"
