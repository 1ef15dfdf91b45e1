import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import validators

HTTP_DEFAULT_PORT = 80
HTTPS_DEFAULT_PORT = 443

KEYWORD_CHARSET = "0123456789abcdefghijklmnopqrstuvwxyz"
_KEYWORD_STRIP_RE = re.compile(r"[^0-9a-z-]")


def normalize_url(s: str) -> str:
    s = str(s)
    s = s.strip(" ")
    if not s:
        raise ValueError("empty url")

    if any(ch.isspace() for ch in s):
        raise ValueError("spaces in url")

    parts = urlsplit(s)
    scheme = parts.scheme.lower()

    if scheme:
        if scheme not in {"http", "https"}:
            raise ValueError("bad scheme")
    else:
        parts = urlsplit("http://" + s)
        scheme = "http"

    hostname = (parts.hostname or "").lower()
    port = parts.port
    if port and (
        (scheme == "http" and port == HTTP_DEFAULT_PORT) or (scheme == "https" and port == HTTPS_DEFAULT_PORT)
    ):
        netloc = hostname
    else:
        netloc = hostname if port is None else f"{hostname}:{port}"

    path = parts.path or ""

    if parts.query:
        q = parse_qsl(parts.query, keep_blank_values=True)
        q.sort()
        query = urlencode(q)
    else:
        query = ""

    # fragments are kept: anchors are meaningful for bookmarked pages
    return urlunsplit((scheme, netloc, path, query, parts.fragment))


def is_valid_url(s: str) -> bool:
    """True when `s` normalizes and passes `validators.url`."""
    try:
        norm = normalize_url(s)
    except ValueError:
        return False
    return validators.url(norm) is True


def sanitize_keyword(keyword: str | None) -> str:
    """Lowercase and drop anything outside [0-9a-z-]."""
    if not keyword:
        return ""
    return _KEYWORD_STRIP_RE.sub("", str(keyword).strip().lower())


def int_to_keyword(n: int) -> str:
    """Base-36 encoding used for auto-generated keywords."""
    if n < 0:
        raise ValueError("negative id")
    if n == 0:
        return KEYWORD_CHARSET[0]
    base = len(KEYWORD_CHARSET)
    out = []
    while n:
        n, rem = divmod(n, base)
        out.append(KEYWORD_CHARSET[rem])
    return "".join(reversed(out))
