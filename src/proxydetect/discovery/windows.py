import ctypes
import ctypes.wintypes
import getpass
import os
import winreg as _reg
from ctypes import POINTER, Structure, byref, c_void_p, wstring_at
from .registry import RegistryReader, split_reg_path
from .winhttp import WinHttpDefaultProxy
from .ie import IEProxySettings

_HIVES = {"HKLM": _reg.HKEY_LOCAL_MACHINE, "HKCU": _reg.HKEY_CURRENT_USER}

# accounts that never carry an interactive user's internet settings
_SERVICE_ACCOUNTS = ("system", "local service", "network service")


class WinRegistryReader(RegistryReader):
    def _open(self, path: str):
        hive, subkey = split_reg_path(path)
        return _reg.OpenKey(_HIVES[hive], subkey, 0, _reg.KEY_READ)

    def exists(self, path: str) -> bool:
        try:
            with self._open(path):
                return True
        except FileNotFoundError:
            return False

    def read(self, path: str, name: str):
        try:
            with self._open(path) as key:
                value, type = _reg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        if type in (_reg.REG_SZ, _reg.REG_EXPAND_SZ, _reg.REG_DWORD, _reg.REG_QWORD):
            return value
        return None


class WINHTTP_PROXY_INFO(Structure):
    _fields_ = [
        ("dwAccessType", ctypes.wintypes.DWORD),
        ("lpszProxy", c_void_p),
        ("lpszProxyBypass", c_void_p),
    ]


class WINHTTP_CURRENT_USER_IE_PROXY_CONFIG(Structure):
    _fields_ = [
        ("fAutoDetect", ctypes.wintypes.BOOL),
        ("lpszAutoConfigUrl", c_void_p),
        ("lpszProxy", c_void_p),
        ("lpszProxyBypass", c_void_p),
    ]


def _winhttp():
    winhttp = ctypes.windll.winhttp
    winhttp.WinHttpGetDefaultProxyConfiguration.argtypes = [POINTER(WINHTTP_PROXY_INFO)]
    winhttp.WinHttpGetDefaultProxyConfiguration.restype = ctypes.wintypes.BOOL
    winhttp.WinHttpGetIEProxyConfigForCurrentUser.argtypes = [
        POINTER(WINHTTP_CURRENT_USER_IE_PROXY_CONFIG)
    ]
    winhttp.WinHttpGetIEProxyConfigForCurrentUser.restype = ctypes.wintypes.BOOL
    return winhttp


def _take_wstr(ptr: "int|None") -> "str|None":
    # WinHTTP allocates returned strings with GlobalAlloc
    if not ptr:
        return None
    try:
        return wstring_at(ptr)
    finally:
        ctypes.windll.kernel32.GlobalFree(c_void_p(ptr))


def default_proxy_configuration() -> "WinHttpDefaultProxy|None":
    info = WINHTTP_PROXY_INFO()
    if not _winhttp().WinHttpGetDefaultProxyConfiguration(byref(info)):
        return None
    return WinHttpDefaultProxy(
        info.dwAccessType, _take_wstr(info.lpszProxy), _take_wstr(info.lpszProxyBypass)
    )


def ie_proxy_configuration() -> "IEProxySettings|None":
    config = WINHTTP_CURRENT_USER_IE_PROXY_CONFIG()
    if not _winhttp().WinHttpGetIEProxyConfigForCurrentUser(byref(config)):
        return None
    return IEProxySettings(
        bool(config.fAutoDetect),
        _take_wstr(config.lpszAutoConfigUrl),
        _take_wstr(config.lpszProxy),
        _take_wstr(config.lpszProxyBypass),
    )


def has_user_context() -> bool:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        return False
    if user.endswith("$") or user.lower() in _SERVICE_ACCOUNTS:
        return False
    return bool(os.environ.get("USERPROFILE"))
