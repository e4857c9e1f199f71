from ._models import DetectedProxy, ProxyConfig
from .detector import NoUserContextError, ProxyDetectError, ProxyDetector
from .chain import ProxyDetectorChain
from .discovery import DEFAULT_SOURCES, build_detectors


def detect_proxy(config: "dict|None" = None) -> "DetectedProxy|None":
    return ProxyDetectorChain(build_detectors(config)).detect()


__all__ = [
    "DEFAULT_SOURCES",
    "DetectedProxy",
    "NoUserContextError",
    "ProxyConfig",
    "ProxyDetectError",
    "ProxyDetector",
    "ProxyDetectorChain",
    "build_detectors",
    "detect_proxy",
]
