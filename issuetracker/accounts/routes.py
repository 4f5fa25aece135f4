from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from .. import auth, views
from ..db import get_session
from ..exceptions import AuthenticationFailed
from ..models import RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account")


def clear_session(response: RedirectResponse) -> RedirectResponse:
    response.delete_cookie(auth.SESSION_COOKIE, path="/")
    return response


@router.get("/login", response_class=HTMLResponse)
async def login_form():
    return views.login_page()


@router.post("/login")
async def login(username: str = Form(""), password: str = Form("")):
    try:
        with get_session() as s:
            user = auth.authenticate_user(s, username, password)
    except AuthenticationFailed as e:
        # The form is shown again without a message
        logger.warning("Login failed for %r: %s", username, e.message)
        return RedirectResponse(url="/account/login", status_code=303)
    logger.info("Login: %s", user.username)
    response = RedirectResponse(url="/", status_code=303)
    response.set_cookie(
        auth.SESSION_COOKIE,
        auth.create_session_token(user),
        max_age=auth.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


@router.get("/logout")
async def logout(ctx: RequestContext = Depends(auth.require())):
    logger.info("Logout: %s", ctx.username)
    return clear_session(RedirectResponse(url="/account/login", status_code=303))
