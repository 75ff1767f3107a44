from __future__ import annotations

from safedrive._redact import mask_email, redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "action": "login",
        "data": {"email": "driver@example.com", "password": "pw"},
        "passwordHash": "pbkdf2_sha256$1$00$00",
        "password_hash": "pbkdf2_sha256$1$00$00",
        "nested": [{"token": "abc"}],
        "bpm": 72,
    }

    redacted = redact_for_log(payload)
    assert redacted["action"] == "login"
    assert redacted["data"]["email"] == "d***@example.com"
    assert redacted["data"]["password"] == "<redacted>"
    assert redacted["passwordHash"] == "<redacted>"
    assert redacted["password_hash"] == "<redacted>"
    assert redacted["nested"][0]["token"] == "<redacted>"
    assert redacted["bpm"] == 72


def test_redact_for_log_does_not_mutate_input() -> None:
    payload = {"data": {"password": "pw"}}
    redact_for_log(payload)
    assert payload == {"data": {"password": "pw"}}


def test_mask_email_without_local_part() -> None:
    assert mask_email("@example.com") == "<redacted>"
    assert mask_email("not-an-address") == "<redacted>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
