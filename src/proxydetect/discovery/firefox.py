"""Proxy settings from the default Firefox profile's ``prefs.js``.

See http://kb.mozillazine.org/Network.proxy.type for the meaning of the
``network.proxy.*`` preferences.
"""
import configparser
import os
import sys
from enum import IntEnum
from pathlib import Path
from typing import NamedTuple
from .._models import ProxyConfig
from .._re import _ESCAPE_REGEX, _INTEGER_REGEX, _PLAIN_PREF_REGEX, _USER_PREF_REGEX
from ..cache import PrefsCache
from ..detector import ProxyDetector
from ..utils import as_str, build_proxy_string, get_logger, join_bypass

_log = get_logger("firefox")

PREFS_FILE = "prefs.js"
PROFILES_FILE = "profiles.ini"


class ProxyType(IntEnum):
    NO_PROXY = 0
    NAMED_PROXY = 1
    AUTO_CONFIG_URL = 2
    AUTO_DETECT = 4


_PREF_FIELDS = {
    "network.proxy.type": "proxy_type",
    "network.proxy.autoconfig_url": "config_url",
    "network.proxy.http": "http_host",
    "network.proxy.http_port": "http_port",
    "network.proxy.ssl": "ssl_host",
    "network.proxy.ssl_port": "ssl_port",
    "network.proxy.no_proxies_on": "no_proxies_on",
    "network.proxy.share_proxy_settings": "share_proxy_settings",
}


class FirefoxPrefs:
    __slots__ = tuple(_PREF_FIELDS.values())

    def __init__(self) -> None:
        for field in self.__slots__:
            setattr(self, field, None)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{field}={getattr(self, field)!r}"
            for field in self.__slots__
            if getattr(self, field) is not None
        )
        return f"FirefoxPrefs({fields})"


def parse_prefs_value(raw: str) -> "str|int|bool":
    if raw.startswith('"'):
        return _ESCAPE_REGEX.sub(r"\1", raw[1:-1])
    elif raw in ("true", "false"):
        return raw == "true"
    return int(raw)


def parse_prefs_line(line: "str|bytes", prefs: FirefoxPrefs) -> bool:
    """Stores the proxy preference held by ``line`` into ``prefs``.

    Understands ``user_pref("key", value);`` as written by Firefox and the
    shorter ``key: value;``. Returns whether the line set anything.
    """
    line = as_str(line)
    if "network.proxy." not in line:
        return False
    match = _USER_PREF_REGEX.match(line) or _PLAIN_PREF_REGEX.match(line)
    if not match:
        return False
    key, raw = match.groups()
    field = _PREF_FIELDS.get(key)
    if not field:
        return False
    setattr(prefs, field, parse_prefs_value(raw))
    return True


def _as_int(value: "str|int|bool|None") -> "int|None":
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    value = value.strip()
    return int(value) if _INTEGER_REGEX.fullmatch(value) else None


def _as_text(value: "str|int|bool|None") -> "str|None":
    if isinstance(value, bool) or value is None:
        return None
    value = str(value).strip()
    return value or None


def config_from_prefs(prefs: FirefoxPrefs) -> "ProxyConfig|None":
    proxy_type = _as_int(prefs.proxy_type)
    if proxy_type == ProxyType.NAMED_PROXY:
        http_host, http_port = _as_text(prefs.http_host), _as_text(prefs.http_port)
        if prefs.share_proxy_settings is True:
            ssl_host, ssl_port = http_host, http_port
        else:
            ssl_host, ssl_port = _as_text(prefs.ssl_host), _as_text(prefs.ssl_port)
        servers = build_proxy_string(http_host, http_port, ssl_host, ssl_port)
        if not servers:
            return None
        http, https = servers
        return ProxyConfig(
            proxy_for_http=http,
            proxy_for_https=https,
            bypass_list=join_bypass(_as_text(prefs.no_proxies_on)),
        )
    elif proxy_type == ProxyType.AUTO_CONFIG_URL:
        config_url = _as_text(prefs.config_url)
        return ProxyConfig(auto_config_url=config_url) if config_url else None
    elif proxy_type == ProxyType.AUTO_DETECT:
        return ProxyConfig(auto_detect=True)
    return None


def parse_prefs_file(path: "str|Path") -> "ProxyConfig|None":
    prefs = FirefoxPrefs()
    try:
        with Path(path).open("rb") as fh:
            for line in fh:
                parse_prefs_line(line, prefs)
    except OSError as e:
        _log.debug("Could not read {path}: {e}", path=path, e=e)
        return None
    _log.debug("Parsed {path}: {prefs}", path=path, prefs=prefs)
    return config_from_prefs(prefs)


class FirefoxProfile(NamedTuple):
    name: str
    prefs_path: Path


def default_firefox_root() -> Path:
    if os.name == "nt":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / "Mozilla" / "Firefox"
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Firefox"
    return Path.home() / ".mozilla" / "firefox"


class FirefoxProfileLocator:
    """Finds the profile Firefox starts with by reading ``profiles.ini``."""

    def __init__(self, root: "str|Path|None" = None) -> None:
        self.root = Path(root) if root else default_firefox_root()

    def _profile_path(self, section: "configparser.SectionProxy") -> "Path|None":
        path = section.get("Path")
        if not path:
            return None
        if section.get("IsRelative", "1").strip() == "1":
            return self.root / path
        return Path(path)

    def locate(self) -> "FirefoxProfile|None":
        ini = configparser.ConfigParser(interpolation=None, strict=False)
        try:
            with (self.root / PROFILES_FILE).open(encoding="utf-8", errors="replace") as fh:
                ini.read_file(fh)
        except (OSError, configparser.Error) as e:
            _log.debug("No firefox profiles under {root}: {e}", root=self.root, e=e)
            return None

        profiles = [ini[name] for name in ini.sections() if name.startswith("Profile")]
        profiles = [profile for profile in profiles if profile.get("Path")]
        if not profiles:
            return None

        chosen = None
        installs = [ini[name] for name in ini.sections() if name.startswith("Install")]
        for install in installs:
            default = install.get("Default")
            chosen = next((p for p in profiles if p.get("Path") == default), None)
            if chosen is not None:
                break
        if chosen is None:
            chosen = next((p for p in profiles if p.get("Default", "0").strip() == "1"), profiles[0])

        path = self._profile_path(chosen)
        return FirefoxProfile(chosen.get("Name", chosen.name), path / PREFS_FILE)


class FirefoxProxyDetector(ProxyDetector):
    """Proxy settings of the current user's default Firefox profile.

    The parsed result is kept until the profile changes or ``prefs.js`` gets
    a new modification time.
    """

    source = "Firefox"

    def __init__(
        self, locator: "FirefoxProfileLocator|None" = None, cache: "PrefsCache|None" = None
    ) -> None:
        self.locator = locator or FirefoxProfileLocator()
        self.cache: PrefsCache = cache if cache is not None else PrefsCache()

    def parse_prefs_file(self, path: Path) -> "ProxyConfig|None":
        return parse_prefs_file(path)

    def detect(self):
        profile = self.locator.locate()
        if not profile:
            return None
        name, path = profile
        try:
            mtime = os.stat(path).st_mtime_ns
        except OSError:
            self.cache.clear()
            return None
        return self.cache.get_or_refresh(
            (name, str(path)), mtime, lambda: self.parse_prefs_file(path)
        )
