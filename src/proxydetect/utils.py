from typing import AnyStr, Iterable as _Iter
from twisted.logger import Logger
from ._re import _HOSTPORT_REGEX, _INTEGER_REGEX, _SERVER_DELIM_REGEX

PROXY_SCHEMES = ("http", "https")


def as_str(src: AnyStr, encoding: str = "utf-8"):
    return src.decode(encoding, "replace") if isinstance(src, bytes) else src


def get_logger(component: str) -> Logger:
    return Logger(namespace=f"proxydetect.{component}")


def parse_port(port: "str|int|None") -> "int|None":
    if isinstance(port, str):
        port = port.strip()
        if not _INTEGER_REGEX.fullmatch(port):
            return None
    if port is None or isinstance(port, bool):
        return None
    port = int(port)
    return port if 0 < port < 65536 else None


def join_hostport(host: "str|None", port: "str|int|None") -> "str|None":
    host = host.strip() if host else ""
    port = parse_port(port)
    if not host or port is None:
        return None
    return f"{host}:{port}"


def normalize_hostport(entry: str) -> "str|None":
    match = _HOSTPORT_REGEX.match(entry.strip())
    if not match:
        return None
    userinfo, host, port = match.groups()
    host = f"{userinfo}{host}" if userinfo else host
    if port is None:
        return host
    port = parse_port(port)
    return f"{host}:{port}" if port else None


def parse_proxy_server(server: "str|None") -> "tuple[str|None, str|None]|None":
    """Splits a proxy server string into its ``(http, https)`` pair.

    Accepts ``host:port`` for every scheme or the per scheme form
    ``http=host:port;https=host:port``. Entries for other schemes and
    malformed fragments are skipped.
    """
    if not server:
        return None
    plain: "str|None" = None
    schemes: "dict[str, str]" = {}
    for entry in _SERVER_DELIM_REGEX.split(server.strip()):
        if not entry:
            continue
        if "=" in entry:
            scheme, _, value = entry.partition("=")
            scheme = scheme.strip().lower()
            if scheme not in PROXY_SCHEMES or scheme in schemes:
                continue
            value = normalize_hostport(value) if value else None
            if value:
                schemes[scheme] = value
        elif plain is None:
            plain = normalize_hostport(entry)

    http = schemes.get("http") or plain
    https = schemes.get("https") or plain or http
    if not http and not https:
        return None
    return http, https


def build_proxy_string(
    http_host: "str|None",
    http_port: "str|int|None",
    ssl_host: "str|None" = None,
    ssl_port: "str|int|None" = None,
) -> "tuple[str, str]|None":
    http = join_hostport(http_host, http_port)
    if not http:
        return None
    return http, join_hostport(ssl_host, ssl_port) or http


def join_bypass(hosts: "_Iter[str]|str|None") -> "str|None":
    if not hosts:
        return None
    if isinstance(hosts, str):
        hosts = hosts.replace(",", ";").split(";")
    bypass = ";".join(host.strip() for host in hosts if host and host.strip())
    return bypass or None
