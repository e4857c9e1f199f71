import sys, pathlib, json

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).parent.parent.joinpath("src").resolve()))
from proxydetect import DEFAULT_SOURCES, ProxyConfig, build_detectors, detect_proxy
from proxydetect.__main__ import main
from proxydetect.config import load_config
from proxydetect.discovery import EnvProxyDetector, FirefoxProxyDetector, PolicyProxyDetector

CONFIG = r"""
detectors = ["UpdateDev", "GroupPolicy", "DeviceManagement", "RegistryOverride", "Environment", "Bogus"]

[registry]
override_path = 'HKLM\SOFTWARE\Vendor\Override'

[overrides.'HKLM\SOFTWARE\Vendor\Override']
ProxyServer = "http=10.0.0.1:3128;https=10.0.0.1:3129"
ProxyBypass = "localhost"
"""


@pytest.fixture
def config_file(tmp_path: pathlib.Path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    return path


@pytest.fixture(autouse=True)
def no_env_proxies(monkeypatch: pytest.MonkeyPatch):
    for name in ("HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy", "NO_PROXY", "no_proxy"):
        monkeypatch.delenv(name, raising=False)


def test_missing_config_is_empty(tmp_path: pathlib.Path):
    assert load_config(tmp_path / "missing.toml") == {}


def test_config_from_env(monkeypatch: pytest.MonkeyPatch, config_file: pathlib.Path):
    monkeypatch.setenv("PROXYDETECT_CONFIG", str(config_file))
    assert load_config()["registry"]["override_path"] == r"HKLM\SOFTWARE\Vendor\Override"


def test_broken_config_raises(tmp_path: pathlib.Path):
    path = tmp_path / "config.toml"
    path.write_text("detectors = [")
    with pytest.raises(Exception):
        load_config(path)


def test_build_detectors(config_file: pathlib.Path):
    detectors = build_detectors(load_config(config_file))
    assert [d.source for d in detectors] == ["UpdateDev", "GroupPolicy", "RegistryOverride", "Environment"]
    assert isinstance(detectors[1], PolicyProxyDetector)
    assert isinstance(detectors[3], EnvProxyDetector)


def test_detect_proxy_from_config(config_file: pathlib.Path):
    detected = detect_proxy(load_config(config_file))
    assert detected.source == "RegistryOverride"
    assert detected.config == ProxyConfig(
        proxy_for_http="10.0.0.1:3128", proxy_for_https="10.0.0.1:3129", bypass_list="localhost"
    )


def test_device_policy_is_added_when_configured(tmp_path: pathlib.Path):
    policies = tmp_path / "policies.json"
    policies.write_text(json.dumps({"dm_token": "t", "proxy_mode": "auto_detect"}))
    config = {"detectors": ["DeviceManagement", "Firefox"], "device_policy": str(policies), "firefox_root": str(tmp_path)}
    detectors = build_detectors(config)
    assert [d.source for d in detectors] == ["DeviceManagement", "Firefox"]
    assert isinstance(detectors[1], FirefoxProxyDetector)
    assert detect_proxy(config).config == ProxyConfig(auto_detect=True)


def test_default_sources_order():
    assert DEFAULT_SOURCES[0] == "UpdateDev"
    assert DEFAULT_SOURCES[-1] == "Firefox"
    assert DEFAULT_SOURCES.index("GroupPolicy") < DEFAULT_SOURCES.index("DeviceManagement")


def test_main_prints_detected(config_file: pathlib.Path, capsys: pytest.CaptureFixture):
    assert main(["-c", str(config_file)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "source: RegistryOverride",
        "proxy_for_http: 10.0.0.1:3128",
        "proxy_for_https: 10.0.0.1:3129",
        "bypass_list: localhost",
    ]


def test_main_nothing_detected(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture):
    path = tmp_path / "config.toml"
    path.write_text('detectors = ["Environment"]\n')
    assert main(["-c", str(path)]) == 0
    assert capsys.readouterr().out.strip() == "No proxy configuration detected"
