import json as _json
from pathlib import Path
from typing import Callable, NamedTuple
from .._models import ProxyConfig
from ..detector import ProxyDetector
from ..utils import get_logger, parse_proxy_server
from ..constants import (
    PROXY_MODE_AUTO_DETECT,
    PROXY_MODE_DIRECT,
    PROXY_MODE_FIXED_SERVERS,
    PROXY_MODE_PAC_SCRIPT,
    PROXY_MODE_SYSTEM,
    REG_GROUP_POLICY_PATH,
    REG_VALUE_PROXY_MODE,
    REG_VALUE_PROXY_PAC_URL,
    REG_VALUE_PROXY_SERVER,
)
from .registry import RegistryReader, default_reader

_log = get_logger("policy")


class PolicyAccessors(NamedTuple):
    is_managed: Callable[[], bool]
    get_mode: Callable[[], "str|None"]
    get_pac_url: Callable[[], "str|None"]
    get_server: Callable[[], "str|None"]


def _query(getter: Callable[[], "str|None"]) -> "str|None":
    try:
        value = getter()
    except (OSError, ValueError) as e:
        _log.debug("Policy value unavailable: {e}", e=e)
        return None
    return value.strip() if isinstance(value, str) and value.strip() else None


def detect_policy_proxy(accessors: PolicyAccessors) -> "ProxyConfig|None":
    """Resolves a proxy policy into a config.

    Nothing beyond ``is_managed`` is consulted on unmanaged machines. Unknown
    modes and ``system`` resolve to ``None`` so the next source is used.
    """
    try:
        if not accessors.is_managed():
            return None
    except OSError:
        return None

    mode = _query(accessors.get_mode)
    if mode == PROXY_MODE_DIRECT:
        return ProxyConfig.direct()
    elif mode == PROXY_MODE_AUTO_DETECT:
        return ProxyConfig(auto_detect=True)
    elif mode == PROXY_MODE_PAC_SCRIPT:
        pac_url = _query(accessors.get_pac_url)
        if not pac_url:
            _log.warn("Policy proxy mode is {mode} but no PAC url is set", mode=mode)
            return None
        return ProxyConfig(auto_config_url=pac_url)
    elif mode == PROXY_MODE_FIXED_SERVERS:
        servers = parse_proxy_server(_query(accessors.get_server))
        if not servers:
            _log.warn("Policy proxy mode is {mode} but no usable server is set", mode=mode)
            return None
        http, https = servers
        return ProxyConfig(proxy_for_http=http, proxy_for_https=https)
    elif mode == PROXY_MODE_SYSTEM:
        return None

    if mode:
        _log.debug("Ignoring unknown policy proxy mode: {mode}", mode=mode)
    return None


class PolicyProxyDetector(ProxyDetector):
    """Runs the policy algorithm over ``accessors``.

    ``accessors`` may also be a callable returning a fresh record, which is
    then invoked once per ``detect``.
    """

    source = "GroupPolicy"

    def __init__(
        self, source: str, accessors: "PolicyAccessors|Callable[[], PolicyAccessors]"
    ) -> None:
        if not source:
            raise ValueError("A source tag is required")
        self.source = source
        self.accessors = accessors

    def detect(self):
        accessors = self.accessors
        if not isinstance(accessors, PolicyAccessors):
            accessors = accessors()
        return detect_policy_proxy(accessors)


def group_policy_accessors(
    reader: "RegistryReader|None" = None, path: str = REG_GROUP_POLICY_PATH
) -> PolicyAccessors:
    reader = reader or default_reader()

    def value(name: str):
        def getter():
            value = reader.read(path, name)
            return value if isinstance(value, str) else None

        return getter

    return PolicyAccessors(
        is_managed=lambda: reader.exists(path),
        get_mode=value(REG_VALUE_PROXY_MODE),
        get_pac_url=value(REG_VALUE_PROXY_PAC_URL),
        get_server=value(REG_VALUE_PROXY_SERVER),
    )


class DevicePolicyStore:
    """Device management policies cached on disk as a JSON document."""

    def __init__(self, path: "str|Path") -> None:
        self.path = Path(path)

    def load(self) -> "dict[str, object]":
        try:
            with self.path.open("rb") as fh:
                policies = _json.load(fh)
        except OSError as e:
            _log.debug("No device policies at {path}: {e}", path=self.path, e=e)
            return {}
        except ValueError as e:
            _log.warn("Ignoring unreadable device policies at {path}: {e}", path=self.path, e=e)
            return {}
        return policies if isinstance(policies, dict) else {}

    def get(self, name: str, policies: "dict[str, object]|None" = None) -> "str|None":
        value = (self.load() if policies is None else policies).get(name)
        return value if isinstance(value, str) else None

    def is_managed(self) -> bool:
        return bool(self.get("dm_token"))

    def accessors(self) -> PolicyAccessors:
        """Accessors over a single read of the policy document."""
        policies = self.load()

        def value(name: str):
            return lambda: self.get(name, policies)

        return PolicyAccessors(
            is_managed=lambda: bool(self.get("dm_token", policies)),
            get_mode=value("proxy_mode"),
            get_pac_url=value("proxy_pac_url"),
            get_server=value("proxy_server"),
        )


def GroupPolicyProxyDetector(reader: "RegistryReader|None" = None, path: str = REG_GROUP_POLICY_PATH):
    return PolicyProxyDetector("GroupPolicy", group_policy_accessors(reader, path))


def DMProxyDetector(store: "DevicePolicyStore|str|Path"):
    if not isinstance(store, DevicePolicyStore):
        store = DevicePolicyStore(store)
    return PolicyProxyDetector("DeviceManagement", store.accessors)
