import re

SCHEME = r"[A-Za-z][A-Za-z0-9+.-]*"
HOST = r"\[[0-9A-Fa-f:.]+\]|[^\s:;=/@\[\]]+"
PORT = r"[0-9]{1,5}"
INTEGER = r"-?[0-9]+"

USERINFO = r"[^\s@/;]+@"
_HOSTPORT_REGEX = re.compile(rf"^(?:{SCHEME}://)?({USERINFO})?({HOST})(?::({PORT}))?/?$")
_SERVER_DELIM_REGEX = re.compile(r"[;\s]+")
_INTEGER_REGEX = re.compile(INTEGER)

PREF_KEY = r"[A-Za-z0-9_.\-]+"
PREF_VALUE = rf'"(?:[^"\\]|\\.)*"|{INTEGER}|true|false'
_USER_PREF_REGEX = re.compile(
    rf'^\s*(?:user_)?pref\(\s*"({PREF_KEY})"\s*,\s*({PREF_VALUE})\s*\)\s*;?\s*$'
)
_PLAIN_PREF_REGEX = re.compile(rf"^\s*({PREF_KEY})\s*:\s*({PREF_VALUE})\s*;?\s*$")
_ESCAPE_REGEX = re.compile(r"\\(.)")
