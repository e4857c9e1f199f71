import os
import sys
from pathlib import Path
from typing import IO, TypedDict as _TypedDict
from typing_extensions import TypeAlias as _Alias
from twisted.logger import globalLogBeginner, textFileLogObserver
from .constants import CONFIG_ENV, DEFAULT_CONFIG
from .utils import get_logger

_log = get_logger("config")

RegistryValues: _Alias = "dict[str, str|int]"


class RegistryPathsCfg(_TypedDict, total=False):
    update_dev_path: str
    override_path: str
    policy_path: str


class ProxyDetectCfg(_TypedDict, total=False):
    detectors: "list[str]"
    registry: RegistryPathsCfg
    overrides: "dict[str, RegistryValues]"
    device_policy: "str|None"
    firefox_root: "str|None"
    logfile: "str|bool|None"


def config_path(path: "str|Path|None" = None) -> Path:
    return Path(path or os.environ.get(CONFIG_ENV, DEFAULT_CONFIG)).expanduser()


def load_config(path: "str|Path|None" = None) -> ProxyDetectCfg:
    path = config_path(path).resolve()
    if not path.exists():
        _log.info("No config at {path}, using defaults", path=path)
        return ProxyDetectCfg()
    try:
        _log.info("Loading config from: {path}", path=path)
        import tomli

        with path.open("rb") as config:
            return ProxyDetectCfg(**tomli.load(config))
    except Exception as e:
        _log.critical("Could not load config from path: {path}", path=path)
        raise e


def init_logging(log: "str|Path|IO|bool|None"):
    """Sends log events to stdout (``True``), a file path or an open stream."""
    if not log:
        return None
    if log is True:
        log = sys.stdout
    if isinstance(log, (str, Path)):
        log = Path(log).open("a")
    observer = textFileLogObserver(log)
    globalLogBeginner.beginLoggingTo([observer], redirectStandardIO=False)
    return observer
