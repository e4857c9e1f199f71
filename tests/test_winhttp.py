import sys, pathlib

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).parent.parent.joinpath("src").resolve()))
from proxydetect import ProxyConfig
from proxydetect.discovery.common import EnvProxyDetector
from proxydetect.discovery.winhttp import (
    WINHTTP_ACCESS_TYPE_NAMED_PROXY,
    WINHTTP_ACCESS_TYPE_NO_PROXY,
    DefaultProxyDetector,
    WinHttpDefaultProxy,
)


def test_named_default_proxy():
    settings = WinHttpDefaultProxy(
        WINHTTP_ACCESS_TYPE_NAMED_PROXY, "http=10.0.0.1:80;https=10.0.0.1:443", "<local>;*.corp"
    )
    detector = DefaultProxyDetector(lambda: settings)
    assert detector.source == "winhttp"
    assert detector.detect() == ProxyConfig(
        proxy_for_http="10.0.0.1:80", proxy_for_https="10.0.0.1:443", bypass_list="<local>;*.corp"
    )
    assert detector.detect() == detector.detect()


@pytest.mark.parametrize(
    "settings",
    [
        None,
        WinHttpDefaultProxy(WINHTTP_ACCESS_TYPE_NO_PROXY, None, None),
        WinHttpDefaultProxy(WINHTTP_ACCESS_TYPE_NO_PROXY, "ignored:80", None),
        WinHttpDefaultProxy(WINHTTP_ACCESS_TYPE_NAMED_PROXY, None, None),
    ],
)
def test_no_default_proxy(settings):
    assert DefaultProxyDetector(lambda: settings).detect() is None


def test_query_failure_is_absence():
    def query():
        raise OSError("winhttp.dll")

    assert DefaultProxyDetector(query).detect() is None


def test_environment_proxies():
    detector = EnvProxyDetector(
        {"HTTP_PROXY": "http://proxy:3128", "https_proxy": "proxy:3129", "no_proxy": "localhost,.corp"}
    )
    assert detector.source == "Environment"
    assert detector.detect() == ProxyConfig(
        proxy_for_http="proxy:3128", proxy_for_https="proxy:3129", bypass_list="localhost;.corp"
    )


def test_environment_upper_case_wins():
    detector = EnvProxyDetector({"HTTPS_PROXY": "upper:1", "https_proxy": "lower:2"})
    assert detector.detect() == ProxyConfig.fixed("upper:1")


@pytest.mark.parametrize("environ", [{}, {"HTTP_PROXY": ""}, {"NO_PROXY": "localhost"}])
def test_environment_without_proxy(environ):
    assert EnvProxyDetector(environ).detect() is None


def test_environment_defaults_to_process(monkeypatch: pytest.MonkeyPatch):
    for name in ("HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy", "NO_PROXY", "no_proxy"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HTTP_PROXY", "envproxy:8080")
    assert EnvProxyDetector().detect() == ProxyConfig.fixed("envproxy:8080")


def test_default_proxy_keeps_credentials():
    settings = WinHttpDefaultProxy(WINHTTP_ACCESS_TYPE_NAMED_PROXY, "http=user:pw@10.0.0.1:80", None)
    assert DefaultProxyDetector(lambda: settings).detect() == ProxyConfig.fixed("user:pw@10.0.0.1:80")


def test_environment_keeps_credentials():
    detector = EnvProxyDetector({"HTTP_PROXY": "http://user:pw@proxy:3128"})
    assert detector.detect() == ProxyConfig.fixed("user:pw@proxy:3128")
