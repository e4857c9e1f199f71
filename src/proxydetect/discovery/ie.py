from typing import Callable, NamedTuple
from .._models import ProxyConfig
from ..detector import NoUserContextError, ProxyDetector
from ..utils import get_logger, join_bypass, parse_proxy_server

_log = get_logger("ie")


class IEProxySettings(NamedTuple):
    auto_detect: bool
    auto_config_url: "str|None"
    proxy: "str|None"
    proxy_bypass: "str|None"


def _query_ie_settings():
    from .windows import ie_proxy_configuration

    return ie_proxy_configuration()


def _has_user_context():
    from .windows import has_user_context

    return has_user_context()


class IEProxyDetector(ProxyDetector):
    """Current user's WinINet settings.

    These only exist for an interactive user, so every detector of this
    family raises ``NoUserContextError`` when running as a service account.
    """

    source = "IE"

    def __init__(
        self,
        query: "Callable[[], IEProxySettings|None]|None" = None,
        has_user_context: "Callable[[], bool]|None" = None,
    ) -> None:
        self._query = query or _query_ie_settings
        self._has_user_context = has_user_context or _has_user_context

    def settings(self) -> "IEProxySettings|None":
        if not self._has_user_context():
            raise NoUserContextError(self.source)
        try:
            return self._query()
        except OSError as e:
            _log.debug("WinINet proxy settings unavailable: {e}", e=e)
            return None

    def _named(self, settings: IEProxySettings):
        servers = parse_proxy_server(settings.proxy)
        if not servers:
            return None
        http, https = servers
        return ProxyConfig(
            proxy_for_http=http,
            proxy_for_https=https,
            bypass_list=join_bypass(settings.proxy_bypass),
        )

    def detect(self):
        settings = self.settings()
        if not settings:
            return None
        named = self._named(settings) or ProxyConfig()
        config = named._replace(
            auto_detect=bool(settings.auto_detect),
            auto_config_url=settings.auto_config_url or None,
        )
        return None if config == ProxyConfig() else config


class IEWPADProxyDetector(IEProxyDetector):
    source = "IEWPAD"

    def detect(self):
        settings = self.settings()
        if not settings or not settings.auto_detect:
            return None
        return ProxyConfig(auto_detect=True)


class IEPACProxyDetector(IEProxyDetector):
    source = "IEPAC"

    def detect(self):
        settings = self.settings()
        if not settings or not settings.auto_config_url:
            return None
        return ProxyConfig(auto_config_url=settings.auto_config_url)


class IENamedProxyDetector(IEProxyDetector):
    source = "IENamed"

    def detect(self):
        settings = self.settings()
        if not settings:
            return None
        return self._named(settings)
