from typing import Callable, NamedTuple
from .._models import ProxyConfig
from ..detector import ProxyDetector
from ..utils import get_logger, join_bypass, parse_proxy_server

_log = get_logger("winhttp")

WINHTTP_ACCESS_TYPE_DEFAULT_PROXY = 0
WINHTTP_ACCESS_TYPE_NO_PROXY = 1
WINHTTP_ACCESS_TYPE_NAMED_PROXY = 3


class WinHttpDefaultProxy(NamedTuple):
    access_type: int
    proxy: "str|None"
    bypass: "str|None"


def _query_default_proxy():
    from .windows import default_proxy_configuration

    return default_proxy_configuration()


class DefaultProxyDetector(ProxyDetector):
    """Machine wide WinHTTP proxy, the one ``netsh winhttp set proxy`` writes."""

    source = "winhttp"

    def __init__(self, query: "Callable[[], WinHttpDefaultProxy|None]|None" = None) -> None:
        self._query = query or _query_default_proxy

    def detect(self):
        try:
            settings = self._query()
        except OSError as e:
            _log.debug("WinHTTP default proxy unavailable: {e}", e=e)
            return None
        if not settings or settings.access_type != WINHTTP_ACCESS_TYPE_NAMED_PROXY:
            return None
        servers = parse_proxy_server(settings.proxy)
        if not servers:
            return None
        http, https = servers
        return ProxyConfig(
            proxy_for_http=http,
            proxy_for_https=https,
            bypass_list=join_bypass(settings.bypass),
        )
