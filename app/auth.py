import logging
import time
from urllib.parse import urlparse

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import RedirectResponse
from authlib.integrations.starlette_client import OAuth, OAuthError

from app.config import config

router = APIRouter()
oauth = OAuth()
oauth.register(
    name='google',
    client_id=config.GOOGLE_CLIENT_ID,
    client_secret=config.GOOGLE_CLIENT_SECRET,
    server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
    client_kwargs={'scope': 'openid email profile'},
)


def safe_next(target):
    # only same-site relative paths
    if not target:
        return "/"
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith("/"):
        return "/"
    return target


def session_user(token: dict, userinfo: dict) -> dict:
    expires_at = token.get("expires_at")
    if expires_at is None and token.get("expires_in"):
        expires_at = int(time.time()) + int(token["expires_in"])
    return {
        "id": userinfo.get("sub") or userinfo.get("id"),
        "name": userinfo.get("name") or userinfo.get("email") or "GoogleUser",
        "email": userinfo.get("email"),
        "expires_at": expires_at,
    }


@router.get("/login")
async def login(request: Request, next: str = "/"):
    request.session["next"] = safe_next(next)
    redirect_uri = request.url_for('auth_callback')
    return await oauth.google.authorize_redirect(request, str(redirect_uri))

@router.get("/auth", name="auth_callback")
async def auth(request: Request):
    logging.debug("Starting /auth callback")
    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as e:
        logging.exception("authorize_access_token() failed: %s", e)
        raise HTTPException(status_code=500, detail="OAuth token exchange failed; check server logs")

    userinfo = token.get("userinfo")
    if not userinfo:
        try:
            resp = await oauth.google.get("userinfo", token=token)
            userinfo = resp.json()
        except Exception as e:
            logging.exception("userinfo lookup failed: %s", e)
            raise HTTPException(status_code=500, detail="Authentication failed; check server logs")

    if not userinfo or not isinstance(userinfo, dict):
        raise HTTPException(status_code=500, detail="Authentication failed: invalid userinfo")

    request.session['user'] = session_user(token, dict(userinfo))
    return RedirectResponse(url=safe_next(request.session.pop("next", "/")))

@router.get("/logout")
def logout(request: Request):
    request.session.pop('user', None)
    return RedirectResponse(url="/")
