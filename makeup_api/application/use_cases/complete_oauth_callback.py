from __future__ import annotations

import logging

from makeup_api.application.dto.auth import OAuthCallbackInput, OAuthCallbackOutput
from makeup_api.application.ports.auth_port import IdentityProviderPort
from makeup_api.domain.exceptions import IdentityProviderError
from makeup_api.domain.services.redirect_state import resolve_redirect_target


logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

AUTH_FAILED_MESSAGE = "認証に失敗しました。再度お試しください。"
UNEXPECTED_ERROR_MESSAGE = "予期しないエラーが発生しました。"
MISSING_PARAMETERS_MESSAGE = "認証パラメータが見つかりません。"


def _login_redirect(message: str) -> OAuthCallbackOutput:
    return OAuthCallbackOutput(redirect_path=LOGIN_PATH, error_message=message, session=None)


class CompleteOAuthCallbackUseCase:
    """Turn one OAuth redirect into the next redirect.

    Never raises: every outcome is a redirect, either to the post-login
    destination or to the login page with an ``error`` message.
    """

    def __init__(self, *, identity_provider: IdentityProviderPort | None):
        self._identity_provider = identity_provider

    def execute(self, command: OAuthCallbackInput) -> OAuthCallbackOutput:
        if command.error:
            logger.warning(
                "oauth_callback: provider_error error=%s description=%s",
                command.error,
                command.error_description,
            )
            return _login_redirect(command.error_description or command.error)

        if not command.code:
            return _login_redirect(MISSING_PARAMETERS_MESSAGE)

        if self._identity_provider is None:
            logger.error("oauth_callback: identity_provider_not_configured")
            return _login_redirect(AUTH_FAILED_MESSAGE)

        try:
            session = self._identity_provider.exchange_code_for_session(
                code=command.code,
                code_verifier=command.code_verifier,
            )
            target = resolve_redirect_target(command.state)
        except IdentityProviderError as exc:
            logger.warning("oauth_callback: exchange_failed detail=%s", exc)
            return _login_redirect(AUTH_FAILED_MESSAGE)
        except Exception:
            logger.exception("oauth_callback: unexpected_error")
            return _login_redirect(UNEXPECTED_ERROR_MESSAGE)

        if target.reason:
            logger.info(
                "oauth_callback: state_fallback reason=%s redirect=%s",
                target.reason,
                target.path,
            )
        return OAuthCallbackOutput(redirect_path=target.path, error_message=None, session=session)
