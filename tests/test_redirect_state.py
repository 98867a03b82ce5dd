from __future__ import annotations

from makeup_api.domain.services.redirect_state import DEFAULT_REDIRECT_PATH, resolve_redirect_target


def test_encoded_state_with_redirect_is_honored():
    target = resolve_redirect_target("%7B%22redirectTo%22%3A%22%2Fresults%22%7D")

    assert target.path == "/results"
    assert target.from_state is True


def test_already_decoded_state_is_honored():
    target = resolve_redirect_target('{"redirectTo": "/history?page=2"}')

    assert target.path == "/history?page=2"


def test_malformed_state_falls_back_with_reason():
    target = resolve_redirect_target("%7Bnot-json")

    assert target.path == DEFAULT_REDIRECT_PATH
    assert target.from_state is False
    assert target.reason == "state_not_json"


def test_missing_state_or_redirect_uses_default_silently():
    assert resolve_redirect_target(None).path == "/dashboard"
    assert resolve_redirect_target(None).reason is None
    assert resolve_redirect_target("%7B%7D").path == "/dashboard"
    assert resolve_redirect_target('{"redirectTo": ""}').reason is None


def test_non_object_state_falls_back():
    target = resolve_redirect_target("%5B1%2C2%5D")

    assert target.path == "/dashboard"
    assert target.reason == "state_not_object"


def test_foreign_destinations_fall_back():
    for redirect in ("https://evil.example/", "//evil.example", "@evil.example", "/\\evil.example"):
        target = resolve_redirect_target(f'{{"redirectTo": "{redirect}"}}'.replace("\\", "\\\\"))
        assert target.path == "/dashboard"
        assert target.reason == "redirect_not_local"
