from abc import ABC, abstractmethod
from typing import ClassVar
from ._models import ProxyConfig


class ProxyDetectError(Exception):
    pass


class NoUserContextError(ProxyDetectError):
    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"{source} proxy settings need an interactive user context")


class ProxyDetector(ABC):
    """A single proxy configuration source.

    ``detect`` returns ``None`` when the source holds no configuration, which
    is the common case and lets the next source in a chain be tried.
    """

    source: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.source:
            raise ValueError(f"Detector {cls.__qualname__} has no source tag")

    @abstractmethod
    def detect(self) -> "ProxyConfig|None":
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.source}>"
