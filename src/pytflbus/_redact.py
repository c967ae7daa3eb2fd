"""Credential scrubbing for debug logs.

Every TfL request carries ``app_key`` (and sometimes ``app_id``) as a query
parameter, so the parameter mapping is scrubbed before it is logged.
"""

from __future__ import annotations

from collections.abc import Mapping

REDACTED = "<redacted>"

_CREDENTIAL_PARAMS: frozenset[str] = frozenset({"app_key", "app_id", "appkey", "api_key"})


def redact_params(params: Mapping[str, str]) -> dict[str, str]:
    """Copy *params* with credential values replaced by ``<redacted>``.

    Keys are matched case-insensitively; empty credentials stay empty so a
    missing key is still visible in the log.
    """
    return {
        key: REDACTED if key.lower() in _CREDENTIAL_PARAMS and value else value
        for key, value in params.items()
    }
