from typing import Iterable as _Iter, Sequence
from ._models import DetectedProxy
from .detector import NoUserContextError, ProxyDetector
from .discovery.ie import IEProxyDetector
from .utils import get_logger


def _family(detector: ProxyDetector) -> type:
    # detectors sharing the user context precondition are skipped together
    return IEProxyDetector if isinstance(detector, IEProxyDetector) else type(detector)


class ProxyDetectorChain:
    """Tries each detector in order, the first configuration found wins."""

    def __init__(self, detectors: "_Iter[ProxyDetector]") -> None:
        self.detectors: "Sequence[ProxyDetector]" = tuple(detectors)
        for detector in self.detectors:
            if not isinstance(detector, ProxyDetector):
                raise TypeError(f"Not a proxy detector: {detector!r}")
        self.logger = get_logger("chain")

    def __iter__(self):
        return iter(self.detectors)

    def __len__(self):
        return len(self.detectors)

    def detect(self) -> "DetectedProxy|None":
        logger = self.logger
        skipped: "set[type]" = set()
        for detector in self.detectors:
            family = _family(detector)
            if family in skipped:
                continue
            try:
                config = detector.detect()
            except NoUserContextError as e:
                logger.warn("Skipping {family} detectors: {e}", family=family.__name__, e=e)
                skipped.add(family)
                continue
            if config is None:
                logger.debug("No proxy configuration from {source}", source=detector.source)
                continue
            logger.info(
                "Proxy configuration from {source}: {mode}",
                source=detector.source,
                mode=config.mode,
            )
            return DetectedProxy(config, detector.source)

        logger.info("No proxy configuration detected")
        return None
