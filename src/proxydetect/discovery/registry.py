import os
from abc import ABC, abstractmethod
from typing import Mapping
from .._models import ProxyConfig
from ..detector import ProxyDetector
from ..utils import get_logger, join_bypass, parse_proxy_server
from ..constants import (
    REG_PRODUCT_OVERRIDE_PATH,
    REG_UPDATE_DEV_PATH,
    REG_VALUE_AUTO_DETECT,
    REG_VALUE_PROXY_BYPASS,
    REG_VALUE_PROXY_PAC_URL,
    REG_VALUE_PROXY_SERVER,
)

_log = get_logger("registry")

_HIVE_ALIASES = {
    "HKEY_LOCAL_MACHINE": "HKLM",
    "HKEY_CURRENT_USER": "HKCU",
}


def split_reg_path(path: str) -> "tuple[str, str]":
    """Returns ``(hive, subkey)``, defaulting to HKLM when no hive is given."""
    path = path.replace("/", "\\").strip("\\")
    hive, _, subkey = path.partition("\\")
    hive = _HIVE_ALIASES.get(hive.upper(), hive.upper())
    if hive not in ("HKLM", "HKCU"):
        return "HKLM", path
    return hive, subkey


class RegistryReader(ABC):
    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def read(self, path: str, name: str) -> "str|int|None":
        ...


class MappingRegistryReader(RegistryReader):
    """Registry look alike backed by ``{path: {value_name: value}}``."""

    def __init__(self, keys: "Mapping[str, Mapping[str, str|int]]|None" = None) -> None:
        self._keys: "dict[tuple[str, str], dict[str, str|int]]" = {}
        for path, values in (keys or {}).items():
            self[path] = values

    @staticmethod
    def _key(path: str):
        hive, subkey = split_reg_path(path)
        return hive, subkey.lower()

    def __setitem__(self, path: str, values: "Mapping[str, str|int]"):
        self._keys[self._key(path)] = {name.lower(): val for name, val in values.items()}

    def exists(self, path: str) -> bool:
        return self._key(path) in self._keys

    def read(self, path: str, name: str):
        return self._keys.get(self._key(path), {}).get(name.lower())


def default_reader() -> RegistryReader:
    if os.name == "nt":
        from .windows import WinRegistryReader

        return WinRegistryReader()
    return MappingRegistryReader()


def _read_str(reader: RegistryReader, path: str, name: str) -> "str|None":
    try:
        value = reader.read(path, name)
    except OSError as e:
        _log.debug("Could not read {name} under {path}: {e}", name=name, path=path, e=e)
        return None
    if isinstance(value, str):
        return value.strip() or None
    return None


def _read_flag(reader: RegistryReader, path: str, name: str) -> bool:
    try:
        value = reader.read(path, name)
    except OSError:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


class RegistryOverrideProxyDetector(ProxyDetector):
    source = "RegistryOverride"

    def __init__(self, reg_path: str, reader: "RegistryReader|None" = None) -> None:
        if not reg_path:
            raise ValueError("A registry path is required")
        self.reg_path = reg_path
        self.reader = reader or default_reader()

    def detect(self):
        reader, path = self.reader, self.reg_path
        try:
            if not reader.exists(path):
                return None
        except OSError:
            return None

        auto_detect = _read_flag(reader, path, REG_VALUE_AUTO_DETECT)
        pac_url = _read_str(reader, path, REG_VALUE_PROXY_PAC_URL)
        servers = parse_proxy_server(_read_str(reader, path, REG_VALUE_PROXY_SERVER))
        if not (auto_detect or pac_url or servers):
            _log.debug("No proxy override under {path}", path=path)
            return None

        http, https = servers or (None, None)
        return ProxyConfig(
            auto_detect=auto_detect,
            auto_config_url=pac_url,
            proxy_for_http=http,
            proxy_for_https=https,
            bypass_list=join_bypass(_read_str(reader, path, REG_VALUE_PROXY_BYPASS)),
        )


class UpdateDevProxyDetector(RegistryOverrideProxyDetector):
    source = "UpdateDev"

    def __init__(self, reg_path: str = REG_UPDATE_DEV_PATH, reader: "RegistryReader|None" = None) -> None:
        super().__init__(reg_path, reader)


class ProductOverrideProxyDetector(RegistryOverrideProxyDetector):
    def __init__(self, reg_path: str = REG_PRODUCT_OVERRIDE_PATH, reader: "RegistryReader|None" = None) -> None:
        super().__init__(reg_path, reader)
