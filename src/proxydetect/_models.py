from typing import NamedTuple


class ProxyConfig(NamedTuple):
    auto_detect: bool = False
    auto_config_url: "str|None" = None
    proxy_for_http: "str|None" = None
    proxy_for_https: "str|None" = None
    bypass_list: "str|None" = None

    @classmethod
    def direct(cls):
        return cls()

    @classmethod
    def fixed(cls, http: str, https: "str|None" = None, bypass: "str|None" = None):
        return cls(
            proxy_for_http=http, proxy_for_https=https or http, bypass_list=bypass or None
        )

    @property
    def mode(self):
        if self.auto_detect:
            return "auto_detect"
        elif self.auto_config_url:
            return "pac_script"
        elif self.proxy_for_http or self.proxy_for_https:
            return "fixed_servers"
        else:
            return "direct"

    @property
    def is_direct(self):
        return self.mode == "direct"

    def proxies(self) -> "dict[str, str]":
        """Fixed servers in the shape returned by ``urllib.request.getproxies``."""
        proxies: "dict[str, str]" = {}
        for scheme, proxy in (("http", self.proxy_for_http), ("https", self.proxy_for_https)):
            if proxy:
                proxies[scheme] = proxy if "://" in proxy else f"http://{proxy}"
        if self.bypass_list:
            proxies["no"] = ",".join(
                _no.strip() for _no in self.bypass_list.replace(";", ",").split(",") if _no.strip()
            )
        return proxies


class DetectedProxy(NamedTuple):
    config: ProxyConfig
    source: str

    def __repr__(self) -> str:
        return f"{self.source} {self.config.mode}"
