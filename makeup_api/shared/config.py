from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(name: str) -> list[str]:
    value = _env(name)
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: str
    stripe_webhook_secret: str
    stripe_checkout_locale: str
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    supabase_auth_cookie: str
    auth_cookie_secure: bool
    site_url: str
    cors_allow_origins: list[str]
    log_level: str


def get_settings() -> Settings:
    return Settings(
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET", ""),
        stripe_checkout_locale=_env("STRIPE_CHECKOUT_LOCALE", "ja"),
        supabase_url=_env("SUPABASE_URL", _env("NEXT_PUBLIC_SUPABASE_URL", "")),
        supabase_anon_key=_env("SUPABASE_ANON_KEY", _env("NEXT_PUBLIC_SUPABASE_ANON_KEY", "")),
        supabase_service_role_key=_env("SUPABASE_SERVICE_ROLE_KEY", ""),
        supabase_auth_cookie=_env("SUPABASE_AUTH_COOKIE", "sb-access-token"),
        auth_cookie_secure=_bool("AUTH_COOKIE_SECURE", False),
        site_url=_env("SITE_URL", _env("NEXT_PUBLIC_SITE_URL", "http://localhost:3000")),
        cors_allow_origins=_csv("CORS_ALLOW_ORIGINS"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
