from __future__ import annotations

import json
from dataclasses import dataclass
from urllib.parse import unquote


DEFAULT_REDIRECT_PATH = "/dashboard"


@dataclass(frozen=True)
class RedirectTarget:
    path: str
    from_state: bool
    reason: str | None = None


def _default(reason: str | None) -> RedirectTarget:
    return RedirectTarget(path=DEFAULT_REDIRECT_PATH, from_state=False, reason=reason)


def is_local_path(path: str) -> bool:
    return path.startswith("/") and not path.startswith("//") and "\\" not in path


def resolve_redirect_target(state: str | None) -> RedirectTarget:
    """Read the post-login destination carried in the OAuth ``state`` parameter.

    The payload is a URL-encoded JSON object with an optional ``redirectTo``.
    Anything unreadable yields the default target; ``reason`` says why so the
    caller can log it.
    """
    if not state:
        return _default(None)

    try:
        payload = json.loads(unquote(state))
    except ValueError:
        return _default("state_not_json")

    if not isinstance(payload, dict):
        return _default("state_not_object")

    redirect_to = payload.get("redirectTo")
    if not redirect_to:
        return _default(None)
    if not isinstance(redirect_to, str) or not is_local_path(redirect_to):
        return _default("redirect_not_local")

    return RedirectTarget(path=redirect_to, from_state=True)
