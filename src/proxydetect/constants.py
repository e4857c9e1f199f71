import os
from pathlib import Path

USER_HOME = Path(os.environ.get("USER_HOME", Path.home()))
DEFAULT_HOME = USER_HOME / ".proxydetect"
DEFAULT_CONFIG = DEFAULT_HOME / "config.toml"
CONFIG_ENV = "PROXYDETECT_CONFIG"

REG_UPDATE_DEV_PATH = r"HKLM\SOFTWARE\ProxyDetect\UpdateDev"
REG_PRODUCT_OVERRIDE_PATH = r"HKLM\SOFTWARE\ProxyDetect\Update"
REG_GROUP_POLICY_PATH = r"HKLM\SOFTWARE\Policies\ProxyDetect\Update"

REG_VALUE_PROXY_SERVER = "ProxyServer"
REG_VALUE_PROXY_PAC_URL = "ProxyPacUrl"
REG_VALUE_AUTO_DETECT = "AutoDetect"
REG_VALUE_PROXY_BYPASS = "ProxyBypass"
REG_VALUE_PROXY_MODE = "ProxyMode"

# policy proxy modes
PROXY_MODE_DIRECT = "direct"
PROXY_MODE_AUTO_DETECT = "auto_detect"
PROXY_MODE_PAC_SCRIPT = "pac_script"
PROXY_MODE_FIXED_SERVERS = "fixed_servers"
PROXY_MODE_SYSTEM = "system"
