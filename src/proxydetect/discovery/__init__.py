import os
from typing import TYPE_CHECKING, Callable
from ..detector import ProxyDetector
from ..utils import get_logger
from .common import EnvProxyDetector
from .firefox import FirefoxProfileLocator, FirefoxProxyDetector
from .ie import IENamedProxyDetector, IEPACProxyDetector, IEProxyDetector, IEWPADProxyDetector
from .policy import DMProxyDetector, GroupPolicyProxyDetector, PolicyProxyDetector
from .registry import (
    MappingRegistryReader,
    ProductOverrideProxyDetector,
    RegistryOverrideProxyDetector,
    RegistryReader,
    UpdateDevProxyDetector,
    default_reader,
)
from .winhttp import DefaultProxyDetector

if TYPE_CHECKING:
    from ..config import ProxyDetectCfg

_log = get_logger("discovery")

if os.name == "nt":
    DEFAULT_SOURCES = (
        "UpdateDev",
        "GroupPolicy",
        "DeviceManagement",
        "RegistryOverride",
        "winhttp",
        "IEWPAD",
        "IEPAC",
        "IENamed",
        "Firefox",
    )
else:
    DEFAULT_SOURCES = (
        "UpdateDev",
        "GroupPolicy",
        "DeviceManagement",
        "RegistryOverride",
        "Environment",
        "Firefox",
    )


def _registry_reader(config: "ProxyDetectCfg") -> RegistryReader:
    overrides = config.get("overrides")
    if overrides:
        return MappingRegistryReader(overrides)
    return default_reader()


def build_detectors(config: "ProxyDetectCfg|None" = None) -> "list[ProxyDetector]":
    config = config if config is not None else {}
    reader = _registry_reader(config)
    paths = config.get("registry", {})
    factories: "dict[str, Callable[[], ProxyDetector|None]]" = {}

    def source(tag: str):
        def register(factory: "Callable[[], ProxyDetector|None]"):
            factories[tag] = factory
            return factory

        return register

    @source("UpdateDev")
    def _update_dev():
        if "update_dev_path" in paths:
            return UpdateDevProxyDetector(paths["update_dev_path"], reader)
        return UpdateDevProxyDetector(reader=reader)

    @source("GroupPolicy")
    def _group_policy():
        if "policy_path" in paths:
            return GroupPolicyProxyDetector(reader, paths["policy_path"])
        return GroupPolicyProxyDetector(reader)

    @source("DeviceManagement")
    def _device_management():
        device_policy = config.get("device_policy")
        return DMProxyDetector(device_policy) if device_policy else None

    @source("RegistryOverride")
    def _registry_override():
        if "override_path" in paths:
            return ProductOverrideProxyDetector(paths["override_path"], reader)
        return ProductOverrideProxyDetector(reader=reader)

    source("winhttp")(DefaultProxyDetector)
    source("Environment")(EnvProxyDetector)
    source("IEWPAD")(IEWPADProxyDetector)
    source("IEPAC")(IEPACProxyDetector)
    source("IENamed")(IENamedProxyDetector)

    @source("Firefox")
    def _firefox():
        return FirefoxProxyDetector(FirefoxProfileLocator(config.get("firefox_root")))

    detectors: "list[ProxyDetector]" = []
    for tag in config.get("detectors", DEFAULT_SOURCES):
        factory = factories.get(tag)
        if factory is None:
            _log.warn("Ignoring unknown proxy source: {tag}", tag=tag)
            continue
        detector = factory()
        if detector is None:
            _log.debug("Proxy source {tag} is not configured", tag=tag)
            continue
        detectors.append(detector)
    return detectors


__all__ = [
    "DEFAULT_SOURCES",
    "build_detectors",
    "DefaultProxyDetector",
    "DMProxyDetector",
    "EnvProxyDetector",
    "FirefoxProxyDetector",
    "GroupPolicyProxyDetector",
    "IENamedProxyDetector",
    "IEPACProxyDetector",
    "IEProxyDetector",
    "IEWPADProxyDetector",
    "PolicyProxyDetector",
    "ProductOverrideProxyDetector",
    "RegistryOverrideProxyDetector",
    "UpdateDevProxyDetector",
]
