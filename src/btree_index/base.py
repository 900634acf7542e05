from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator


class _Absent:
    """Marker returned by lookups for keys that are not stored."""
    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass
class Entry:
    """
    A key/value pair as handed out by traversal and iteration.

    Attributes:
        key: The stored key.
        value: The payload associated with ``key``.
    """
    __slots__ = ("key", "value")

    key: Any
    value: Any

    def short_key(self) -> str:
        """Create a short representation of the key for display purposes."""
        if isinstance(self.key, (bytes, bytearray)):
            s = self.key.hex()
        else:
            s = str(self.key)
        return s if len(s) <= 10 else f"{s[:3]}...{s[-3:]}"


class AbstractOrderedIndex(ABC):
    """
    Abstract base class for an in-memory ordered key/value index.
    """

    @abstractmethod
    def insert(self, key: Any, value: Any = True) -> bool:
        """
        Insert ``key`` with ``value``, overwriting the value of an existing key.

        Parameters:
            key: A totally orderable key.
            value: The payload to associate with ``key``.

        Returns:
            bool: True if a new key was added, False if an existing one was overwritten.
        """
        pass

    @abstractmethod
    def lookup(self, key: Any) -> Any:
        """
        Retrieve the value stored for ``key``.

        Parameters:
            key: The key to search for.

        Returns:
            The stored value, or ``ABSENT`` if the key is not present.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of distinct keys currently stored."""
        pass

    @abstractmethod
    def for_each(self, callback: Callable[[Entry, int, "AbstractOrderedIndex"], Any]) -> None:
        """Invoke ``callback(entry, rank, index)`` for every entry in ascending key order."""
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[Entry]:
        pass

    def get(self, key: Any, default: Any = None) -> Any:
        """Like :meth:`lookup`, but return ``default`` instead of ``ABSENT``."""
        value = self.lookup(key)
        return default if value is ABSENT else value

    def __contains__(self, key: Any) -> bool:
        return self.lookup(key) is not ABSENT

    def __len__(self) -> int:
        return self.count()

    def is_empty(self) -> bool:
        return self.count() == 0

    def keys(self) -> Iterator[Any]:
        """Yield all keys in ascending order."""
        for entry in self:
            yield entry.key

    def values(self) -> Iterator[Any]:
        """Yield all values in ascending key order."""
        for entry in self:
            yield entry.value
