from __future__ import annotations

from pytflbus._redact import redact_params


def test_redact_params_hides_credentials() -> None:
    params = {"query": "oxford", "modes": "bus", "app_key": "0123456789abcdef", "App_Id": "my-app"}

    assert redact_params(params) == {
        "query": "oxford",
        "modes": "bus",
        "app_key": "<redacted>",
        "App_Id": "<redacted>",
    }
    # The caller's mapping is left alone.
    assert params["app_key"] == "0123456789abcdef"


def test_redact_params_keeps_empty_credentials_visible() -> None:
    assert redact_params({"app_key": ""}) == {"app_key": ""}
