"""Redaction of secrets in DEBUG log payloads.

Three things reach the DEBUG log as structured data: the login request
body (carries the password), the decoded login response (carries the
access and refresh tokens) and the per-device record dump after mapping.
All of them are JSON trees of mappings, lists and scalars.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

# Compared after lower-casing and dropping "_" and "-".
_SECRET_KEYS: frozenset[str] = frozenset({"password", "accesstoken", "refreshtoken", "token", "authorization", "cookie"})


def _is_secret(key: Any) -> bool:
    return str(key).lower().replace("_", "").replace("-", "") in _SECRET_KEYS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of the JSON tree *value* with secret values replaced.

    Long strings are truncated to *max_string* characters. Values that are
    not JSON types are logged by ``repr``.
    """
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if _is_secret(key) else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return repr(value)
