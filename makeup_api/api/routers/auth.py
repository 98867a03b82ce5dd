from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from makeup_api.api.deps import get_complete_oauth_callback_use_case
from makeup_api.api.session import read_code_verifier, set_session_cookies
from makeup_api.application.dto.auth import OAuthCallbackInput
from makeup_api.application.use_cases.complete_oauth_callback import CompleteOAuthCallbackUseCase
from makeup_api.shared.config import get_settings


router = APIRouter()


def _origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


@router.get("/auth/callback")
def auth_callback(
    request: Request,
    code: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    state: str | None = None,
    use_case: CompleteOAuthCallbackUseCase = Depends(get_complete_oauth_callback_use_case),
):
    settings = get_settings()
    output = use_case.execute(
        OAuthCallbackInput(
            code=code,
            error=error,
            error_description=error_description,
            state=state,
            code_verifier=read_code_verifier(request, settings=settings),
        )
    )

    location = f"{_origin(request)}{output.redirect_path}"
    if output.error_message:
        location = f"{location}?error={quote(output.error_message, safe='')}"

    response = RedirectResponse(url=location)
    if output.session is not None:
        set_session_cookies(response, output.session, settings=settings)
    return response
