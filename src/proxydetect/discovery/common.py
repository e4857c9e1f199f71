import os
from typing import Mapping
from .._models import ProxyConfig
from ..detector import ProxyDetector
from ..utils import join_bypass, normalize_hostport


def _getenv(environ: "Mapping[str, str]", name: str) -> "str|None":
    value = environ.get(name.upper(), None)
    if not value:
        value = environ.get(name.lower())
    return value.strip() if value and value.strip() else None


class EnvProxyDetector(ProxyDetector):
    """``HTTP_PROXY``/``HTTPS_PROXY``/``NO_PROXY`` from the process environment."""

    source = "Environment"

    def __init__(self, environ: "Mapping[str, str]|None" = None) -> None:
        self._environ = environ

    def detect(self):
        environ = os.environ if self._environ is None else self._environ
        http = _getenv(environ, "http_proxy")
        https = _getenv(environ, "https_proxy")
        http = normalize_hostport(http) if http else None
        https = normalize_hostport(https) if https else None
        if not http and not https:
            return None
        return ProxyConfig(
            proxy_for_http=http or https,
            proxy_for_https=https or http,
            bypass_list=join_bypass(_getenv(environ, "no_proxy")),
        )
