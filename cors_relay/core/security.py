import re
from httpx import URL

# Header names (lowercase) that must be redacted in logs
_SENSITIVE_HEADER_PATTERNS = [
    "authorization",
    "x-api-key",
    "cookie",
    "set-cookie",
    "proxy-authorization",
]

_SENSITIVE_RE = re.compile(
    "|".join(re.escape(p) for p in _SENSITIVE_HEADER_PATTERNS),
    re.IGNORECASE,
)


_REDACT_PREFIX_LEN = 4


def _redact_value(value: str) -> str:
    """Keep first few chars of a secret for identification, mask the rest."""
    if len(value) <= _REDACT_PREFIX_LEN:
        return "[REDACTED]"
    return value[:_REDACT_PREFIX_LEN] + "...[REDACTED]"


def redact_headers(headers: dict) -> dict:
    """Return a copy of *headers* with credential values partially masked.

    Matching is case-insensitive against a known list of auth-related
    header names. The original dict is **never** mutated.
    """
    redacted = {}
    for key, value in headers.items():
        if _SENSITIVE_RE.fullmatch(key):
            redacted[key] = _redact_value(str(value))
        else:
            redacted[key] = value
    return redacted


def resolve_api_key(auth_header: str | None, fallback: str | None) -> str | None:
    """Pick the bearer token sent by the caller, else the server-side key."""
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            return token
    return fallback or None


def redact_url(url) -> str:
    """Scheme, host and path only: query strings and userinfo may carry credentials."""
    url = URL(str(url))
    port = f":{url.port}" if url.port else ""
    return f"{url.scheme}://{url.host}{port}{url.path}"
