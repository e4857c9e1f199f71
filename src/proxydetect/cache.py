from abc import abstractmethod
import threading
from typing import Callable, Generic, Literal, TypeVar, overload

K = TypeVar("K")
T = TypeVar("T")
R = TypeVar("R")


class Cache(Generic[K, T, R]):
    def __contains__(self, key):
        try:
            self[key]
            return True
        except KeyError:
            return False

    @abstractmethod
    def __setitem__(self, key: K, value: T) -> None:
        ...

    @abstractmethod
    def __getitem__(self, key: K) -> R:
        ...

    @overload
    def get(self, key: K) -> "R|None":
        ...

    @overload
    def get(self, key: K, default: Literal[None]) -> "R|None":
        ...

    def get(self, key: K, default: R = None):
        try:
            return self[key]
        except KeyError:
            return default


class Stamped(Generic[T]):
    __slots__ = ("mtime", "value")

    def __init__(self, mtime: int, value: T) -> None:
        self.mtime = mtime
        self.value = value


class MtimeCache(Cache[K, Stamped[T], T]):
    """Keeps the value built for one key while its source mtime is unchanged.

    Only the latest key is remembered; asking for another key, or the same
    key with a different mtime, rebuilds the value.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._key: "K|None" = None
        self._entry: "Stamped[T]|None" = None

    def __setitem__(self, key: K, value: "Stamped[T]"):
        with self._lock:
            self._key, self._entry = key, value

    def __getitem__(self, key: K) -> T:
        with self._lock:
            if self._entry is None or self._key != key:
                raise KeyError(key)
            return self._entry.value

    def stamp(self, key: K) -> "int|None":
        with self._lock:
            return self._entry.mtime if self._entry is not None and self._key == key else None

    def get_or_refresh(self, key: K, mtime: int, build: Callable[[], T]) -> T:
        with self._lock:
            if self._entry is not None and self._key == key and self._entry.mtime == mtime:
                return self._entry.value
            value = build()
            self[key] = Stamped(mtime, value)
            return value

    def clear(self):
        with self._lock:
            self._key = self._entry = None


PrefsCache = MtimeCache[tuple, "ProxyConfig|None"]
